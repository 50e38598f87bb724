# statclust/plugins/clustering/membership.py

"""Cluster membership from an agglomeration schedule (dendrogram cuts)."""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Sequence

from statclust.config.loader import number_parameter
from statclust.core.errors import ConfigurationError
from statclust.plugins.clustering.agglomeration import AgglomerationSchedule

import numpy as np

SOLUTION_TYPES = ('none', 'single', 'range', 'list')


@dataclass
class ClusterMembership:
    """Case → cluster assignment for one requested number of clusters."""

    num_clusters: int
    case_assignments: List[int]


@dataclass
class SolutionRequest:
    """Which cluster-count solutions to derive."""

    type: str = 'none'
    num_clusters: Optional[int] = None
    min_clusters: Optional[int] = None
    max_clusters: Optional[int] = None
    values: Optional[Sequence[int]] = None

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> 'SolutionRequest':
        """Build a request from its configuration mapping."""
        if not raw:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigurationError(f'solution must be a mapping, got {raw!r}')
        unknown = sorted(set(raw) - {f.name for f in fields(cls)})
        if unknown:
            raise ConfigurationError(f'Unknown solution keys: {", ".join(unknown)}')
        values = raw.get('values')
        if values is not None and (
                not isinstance(values, (list, tuple)) or any(v is None for v in values)):
            raise ConfigurationError(f'solution values must be a list of numbers, got {values!r}')
        return cls(
            type=raw.get('type', 'none'),
            num_clusters=number_parameter(raw, 'num_clusters'),
            min_clusters=number_parameter(raw, 'min_clusters'),
            max_clusters=number_parameter(raw, 'max_clusters'),
            values=None if values is None else [
                number_parameter({'values': v}, 'values') for v in values
            ],
        )

    def cluster_counts(self) -> List[int]:
        """Requested cluster counts, in increasing order for ranges."""
        if self.type not in SOLUTION_TYPES:
            raise ConfigurationError(f'Unknown solution type: {self.type}')
        if self.type == 'none':
            return []
        if self.type == 'single':
            if self.num_clusters is None:
                raise ConfigurationError('single solution requires num_clusters')
            return [int(self.num_clusters)]
        if self.type == 'list':
            return [int(v) for v in (self.values or [])]
        if self.min_clusters is None or self.max_clusters is None:
            raise ConfigurationError('range solution requires min_clusters and max_clusters')
        if self.min_clusters > self.max_clusters:
            raise ConfigurationError(
                f'min_clusters ({self.min_clusters}) exceeds max_clusters ({self.max_clusters})'
            )
        return list(range(int(self.min_clusters), int(self.max_clusters) + 1))


def _dense_labels(labels: np.ndarray) -> List[int]:
    """Renumber labels 1..k in order of first appearance."""
    mapping: Dict[int, int] = {}
    out = []
    for lab in labels:
        out.append(mapping.setdefault(int(lab), len(mapping) + 1))
    return out


def derive_membership(schedule: AgglomerationSchedule, num_clusters: int) -> ClusterMembership:
    """Cut the schedule where exactly `num_clusters` clusters remain.

    Every case starts as its own cluster; the first ``n - k`` stages are
    replayed, relabeling the second combined cluster with the first.
    """
    n = schedule.num_cases
    if num_clusters <= 0 or num_clusters > n:
        raise ConfigurationError(
            f'number of clusters must be between 1 and {n}, got {num_clusters}'
        )
    labels = np.arange(n)
    for stage in schedule.stages[:n - num_clusters]:
        first, second = (c - 1 for c in stage.clusters_combined)
        labels[labels == labels[second]] = labels[first]
    return ClusterMembership(num_clusters=num_clusters, case_assignments=_dense_labels(labels))


def derive_memberships(schedule: AgglomerationSchedule, request: SolutionRequest) -> List[ClusterMembership]:
    """Derive one membership per requested cluster count, independently."""
    return [derive_membership(schedule, k) for k in request.cluster_counts()]
