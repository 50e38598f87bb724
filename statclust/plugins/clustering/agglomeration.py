# statclust/plugins/clustering/agglomeration.py

"""Agglomeration schedule: merge the two closest clusters until one remains."""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from statclust.core.interfaces import Observer, notify
from statclust.plugins.clustering.state import ClusterState


@dataclass
class AgglomerationStage:
    """One completed merge of the agglomeration schedule."""

    stage: int
    clusters_combined: Tuple[int, int]
    coefficients: float
    cluster_first_appears: Tuple[int, int]
    next_stage: int = 0  # 0: the cluster formed here is never merged again


@dataclass
class AgglomerationSchedule:
    """Ordered list of merge stages for `num_cases` cases."""

    num_cases: int
    stages: List[AgglomerationStage] = field(default_factory=list)

    def __len__(self) -> int:
        """Number of stages."""
        return len(self.stages)

    def __iter__(self) -> Iterator[AgglomerationStage]:
        """Iterate over the stages in order."""
        return iter(self.stages)

    def __getitem__(self, idx) -> AgglomerationStage:
        """Return the stage at a 0-based position."""
        return self.stages[idx]

    @property
    def coefficients(self) -> List[float]:
        """Merge distances in stage order."""
        return [s.coefficients for s in self.stages]


def agglomerate(state: ClusterState, observer: Optional[Observer] = None) -> AgglomerationSchedule:
    """Build the full merge schedule from an initial cluster state.

    The state is consumed: on return it holds a single cluster.

    :param state: initial state with one singleton cluster per case
    :param observer: optional hook receiving a ``stage`` event per merge
    :return: schedule with ``num_cases - 1`` stages (none below two cases)
    """
    schedule = AgglomerationSchedule(num_cases=state.num_cases)
    # stage that last formed each slot, 0 while the slot is a singleton
    formed_at = [0] * state.num_cases

    while state.num_clusters > 1:
        i, j, coef = state.closest_pair()
        stage_no = len(schedule.stages) + 1
        for slot in (i, j):
            if formed_at[slot]:
                schedule.stages[formed_at[slot] - 1].next_stage = stage_no

        stage = AgglomerationStage(
            stage=stage_no,
            clusters_combined=(i + 1, j + 1),
            coefficients=coef,
            cluster_first_appears=(formed_at[i], formed_at[j]),
        )
        state.merge(i, j)
        formed_at[i] = stage_no
        formed_at[j] = 0
        schedule.stages.append(stage)
        notify(observer, 'stage', stage=stage_no, combined=(i + 1, j + 1),
               coefficient=coef, remaining=state.num_clusters)

    logging.info(
        'Agglomeration finished: %d cases, %d stages (%s linkage)',
        state.num_cases, len(schedule), state.method,
    )
    return schedule
