"""Performance benchmark tests for the clustering engines."""

import importlib.util

from statclust.plugins.clustering.agglomeration import agglomerate
from statclust.plugins.clustering.distance import proximity_matrix
from statclust.plugins.clustering.kmeans import refine_centers
from statclust.plugins.clustering.seeding import seed_centers
from statclust.plugins.clustering.state import ClusterState

import numpy as np

import pytest

# Skip the whole module if pytest-benchmark isn't installed
_has_bench = importlib.util.find_spec('pytest_benchmark') is not None
pytestmark = pytest.mark.skipif(not _has_bench, reason='pytest-benchmark not installed')


def test_perf_agglomeration(benchmark, rng):
    """Benchmark a full average-linkage schedule on 200 cases."""
    prox = proximity_matrix(rng.normal(size=(200, 4)))

    def run():
        """Build the schedule from a fresh state."""
        return agglomerate(ClusterState(prox, method='average'))

    schedule = benchmark(run)
    assert len(schedule) == 199


def test_perf_kmeans(benchmark, rng):
    """Benchmark k-means seeding and refinement on 5000 cases."""
    data = rng.normal(size=(5000, 5))

    def run():
        """Seed and refine five centers."""
        return refine_centers(data, seed_centers(data, 5), max_iterations=20)

    result = benchmark(run)
    assert result.centers.shape == (5, 5)
