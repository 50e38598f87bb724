# statclust/core/interfaces.py

"""statclust core interfaces: plugin base classes and result containers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

# Observer hook: called as observer(event, payload) by the engines.
Observer = Callable[[str, Dict[str, Any]], None]


def notify(observer: Optional[Observer], event: str, **payload) -> None:
    """Forward an event to the observer, if any."""
    if observer is not None:
        observer(event, payload)


@dataclass
class AnalysisResult:
    """Outcome of one analysis run: named result structures or errors."""

    method: str
    tables: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether the analysis completed without reported errors."""
        return not self.errors


class IngestionPlugin(ABC):
    """Interface for ingestion plugins."""

    @abstractmethod
    def load(self) -> pd.DataFrame:
        """Load the raw case records as a DataFrame."""
        pass


class ClusteringPlugin(ABC):
    """Interface for clustering plugins."""

    @abstractmethod
    def analyze(self, data) -> AnalysisResult:
        """Run the analysis on prepared data and return its result."""
        pass
