"""Fixtures for pytest."""

import pathlib

from statclust.core.instance import ProcessedData

import numpy as np

import pytest


@pytest.fixture(scope='session')
def rng_seed():
    """Fixture providing a fixed random seed for reproducible tests."""
    return 12345


@pytest.fixture
def rng(rng_seed):
    """Fixture returning a numpy Generator seeded with rng_seed."""
    return np.random.default_rng(rng_seed)


@pytest.fixture
def four_points():
    """Two well separated pairs of points: (0,0),(0,1) and (10,0),(10,1)."""
    return np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]])


@pytest.fixture
def four_points_data(four_points):
    """The four points as ProcessedData with letter labels."""
    return ProcessedData(
        data_matrix=four_points,
        variables=['x', 'y'],
        case_labels=['a', 'b', 'c', 'd'],
    )


@pytest.fixture
def tests_directory():
    """Get path of parent dir."""
    return pathlib.Path(__file__).resolve().parent


@pytest.fixture
def package_directory(tests_directory):
    """Get test parent dir."""
    return tests_directory.parent


@pytest.fixture
def tests_data_directory(tests_directory):
    """Check if data dir is in test dir."""
    return tests_directory / 'data'
