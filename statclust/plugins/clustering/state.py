# statclust/plugins/clustering/state.py

"""Mutable bookkeeping for agglomerative clustering.

The state uses a stable slot index space: slot ``i`` always holds the cluster
identified by ``i + 1`` in the agglomeration schedule. Merging slots ``i < j``
keeps the merged cluster in slot ``i`` and tombstones slot ``j``, so the live
clusters are always numbered by their lowest original case.
"""

from typing import FrozenSet, List, Optional, Sequence, Tuple

from statclust.core.errors import ConfigurationError

import numpy as np

LINKAGES = (
    'single',
    'complete',
    'average',
    'average_within',
    'centroid',
    'median',
    'ward',
)


def lance_williams(
    method: str,
    d_ik: np.ndarray,
    d_jk: np.ndarray,
    d_ij: float,
    n_i: int,
    n_j: int,
    n_k: np.ndarray,
) -> np.ndarray:
    """Distance from the union of clusters i and j to every cluster k.

    Vectorized over k. `average_within` is not a Lance-Williams method and is
    handled by ClusterState directly.
    """
    if method == 'single':
        return np.minimum(d_ik, d_jk)
    if method == 'complete':
        return np.maximum(d_ik, d_jk)
    if method == 'average':
        return (n_i * d_ik + n_j * d_jk) / (n_i + n_j)
    if method == 'centroid':
        n = n_i + n_j
        return (n_i * d_ik + n_j * d_jk) / n - (n_i * n_j * d_ij) / (n * n)
    if method == 'median':
        return 0.5 * d_ik + 0.5 * d_jk - 0.25 * d_ij
    if method == 'ward':
        total = n_i + n_j + n_k
        return ((n_i + n_k) * d_ik + (n_j + n_k) * d_jk - n_k * d_ij) / total
    raise ConfigurationError(f'Unknown linkage method: {method}')


class ClusterState:
    """Current partition of cases and the inter-cluster distance matrix."""

    def __init__(
        self,
        distances,
        case_labels: Optional[Sequence[str]] = None,
        variables: Optional[Sequence[str]] = None,
        method: str = 'average',
    ):
        """Create one singleton cluster per case from a proximity matrix."""
        if method not in LINKAGES:
            raise ConfigurationError(f'Unknown linkage method: {method}')
        dist = np.array(distances, dtype=float, copy=True)
        if dist.ndim != 2 or dist.shape[0] != dist.shape[1]:
            raise ConfigurationError('proximity matrix must be square')
        if not np.all(np.isfinite(dist)):
            raise ConfigurationError('proximity matrix contains non-finite values')
        if not np.allclose(dist, dist.T):
            raise ConfigurationError('proximity matrix must be symmetric')

        n = dist.shape[0]
        self.method = method
        self.case_labels = tuple(case_labels) if case_labels is not None else tuple(
            str(i + 1) for i in range(n))
        self.variables = tuple(variables or ())
        if len(self.case_labels) != n:
            raise ConfigurationError('one case label per case is required')

        self._dist = dist
        self._nonnegative = bool(n == 0 or dist.min() >= 0)
        self._active = np.ones(n, dtype=bool)
        self._members: List[Optional[set]] = [{i} for i in range(n)]
        self._sizes = np.ones(n, dtype=int)
        self._upper = np.triu(np.ones((n, n), dtype=bool), k=1)
        if method == 'average_within':
            self._pair_sums = dist.copy()
            self._within = np.zeros(n)

    @property
    def num_cases(self) -> int:
        """Number of cases the state was created with."""
        return self._dist.shape[0]

    @property
    def num_clusters(self) -> int:
        """Number of live clusters."""
        return int(self._active.sum())

    @property
    def ids(self) -> List[int]:
        """1-based identifiers of the live clusters, in slot order."""
        return [int(i) + 1 for i in np.flatnonzero(self._active)]

    @property
    def clusters(self) -> List[FrozenSet[int]]:
        """Live clusters as sets of 0-based case indices, in slot order."""
        return [frozenset(self._members[i]) for i in np.flatnonzero(self._active)]

    @property
    def distances(self) -> np.ndarray:
        """Copy of the live inter-cluster distance matrix."""
        live = np.flatnonzero(self._active)
        return self._dist[np.ix_(live, live)].copy()

    def size(self, slot: int) -> int:
        """Number of cases in the cluster held by a slot."""
        return int(self._sizes[slot])

    def closest_pair(self) -> Tuple[int, int, float]:
        """Return slots (i, j), i < j, of the two closest live clusters.

        Among equal distances the lexicographically smallest (i, j) wins.
        """
        if self.num_clusters < 2:
            raise ConfigurationError('at least two clusters are required to merge')
        mask = self._upper & np.outer(self._active, self._active)
        masked = np.where(mask, self._dist, np.inf)
        i, j = divmod(int(np.argmin(masked)), masked.shape[1])
        return i, j, float(self._dist[i, j])

    def merge(self, i: int, j: int) -> None:
        """Merge the cluster in slot j into slot i and update distances."""
        if i > j:
            i, j = j, i
        others = np.flatnonzero(self._active)
        others = others[(others != i) & (others != j)]
        n_i, n_j = int(self._sizes[i]), int(self._sizes[j])

        if others.size:
            if self.method == 'average_within':
                new_row = self._within_group_row(i, j, others)
            else:
                new_row = lance_williams(
                    self.method,
                    self._dist[i, others],
                    self._dist[j, others],
                    float(self._dist[i, j]),
                    n_i,
                    n_j,
                    self._sizes[others],
                )
            if self._nonnegative:
                # rounding in the centroid/median/ward updates can dip below zero
                new_row = np.maximum(new_row, 0.0)
            self._dist[i, others] = new_row
            self._dist[others, i] = new_row

        self._members[i] |= self._members[j]
        self._members[j] = None
        self._sizes[i] = n_i + n_j
        self._sizes[j] = 0
        self._active[j] = False

    def _within_group_row(self, i: int, j: int, others: np.ndarray) -> np.ndarray:
        """Average of all pairwise distances inside (i ∪ j ∪ k), for every k."""
        within = self._within[i] + self._within[j] + self._pair_sums[i, j]
        pair = self._pair_sums[i, others] + self._pair_sums[j, others]
        self._within[i] = within
        self._pair_sums[i, others] = pair
        self._pair_sums[others, i] = pair

        size = self._sizes[i] + self._sizes[j] + self._sizes[others]
        n_pairs = size * (size - 1) / 2.0
        return (within + self._within[others] + pair) / n_pairs
