# statclust/plugins/clustering/builder.py

"""Clustering builder utilities for statclust."""

import logging
from typing import Optional

import numpy as np

from scipy.spatial.distance import pdist, squareform


def build_center_distance_matrix(centers: np.ndarray) -> np.ndarray:
    """Compute pairwise Euclidean distance matrix between cluster centers."""
    centers = np.asarray(centers, dtype=float)
    if centers.shape[0] < 2:
        return np.zeros((centers.shape[0], centers.shape[0]))
    return squareform(pdist(centers, 'euclidean'))


def min_center_distance(centers: np.ndarray) -> float:
    """Return the smallest distance between two distinct centers (0 if < 2)."""
    dist = build_center_distance_matrix(centers)
    if dist.shape[0] < 2:
        return 0.0
    return float(dist[np.triu_indices(dist.shape[0], k=1)].min())


def cluster_mean_profile(
    data: np.ndarray,
    labels: np.ndarray,
    k: int,
    previous: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Compute the mean profile of each cluster.

    :param data: cases × variables matrix
    :param labels: 0-based cluster index of every case
    :param k: number of clusters
    :param previous: centers to keep for clusters without any case
    :return: (k, p) matrix of cluster means
    """
    data = np.asarray(data, dtype=float)
    labels = np.asarray(labels, dtype=int)
    p = data.shape[1]
    sums = np.zeros((k, p))
    np.add.at(sums, labels, data)
    counts = np.bincount(labels, minlength=k).astype(float)

    if previous is None:
        profiles = np.zeros((k, p))
    else:
        profiles = np.array(previous, dtype=float, copy=True)
    filled = counts > 0
    profiles[filled] = sums[filled] / counts[filled, None]
    empty = np.flatnonzero(~filled)
    if empty.size:
        logging.debug('clusters without cases keep their center: %s', (empty + 1).tolist())
    return profiles


def dist_from_mean(data: np.ndarray, profiles: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """Return the distance from every case to its cluster mean profile."""
    data = np.asarray(data, dtype=float)
    profiles = np.asarray(profiles, dtype=float)
    return np.linalg.norm(data - profiles[np.asarray(labels, dtype=int)], axis=1)
