# statclust/plugins/clustering/seeding.py

"""Initial cluster centers for k-means."""

import logging
from typing import Optional

from statclust.core.errors import ConfigurationError, InsufficientDataError
from statclust.core.interfaces import Observer, notify
from statclust.plugins.clustering.builder import build_center_distance_matrix

import numpy as np


def _closest_center_pair(centers: np.ndarray):
    """Return (m, n, distance, matrix) for the two closest centers, m < n."""
    dist = build_center_distance_matrix(centers)
    masked = np.where(np.triu(np.ones_like(dist, dtype=bool), k=1), dist, np.inf)
    m, n = divmod(int(np.argmin(masked)), dist.shape[1])
    return m, n, float(dist[m, n]), dist


def seed_centers(
    data,
    k: int,
    read_initial: bool = False,
    observer: Optional[Observer] = None,
) -> np.ndarray:
    """Select k initial centers from the rows of the data matrix.

    With `read_initial` the first k cases are taken verbatim. Otherwise the
    first k cases are refined by a single deterministic pass over the
    remaining cases that swaps in cases improving center separation:

    * when a case is farther from its nearest center than the two closest
      centers are from each other, it replaces whichever of that pair is
      farther from it;
    * otherwise, when it is farther from its second-nearest center than the
      nearest center is from any other center, it replaces the nearest one.

    :param data: cases × variables matrix
    :param k: number of centers
    :param read_initial: take the first k cases without refinement
    :param observer: optional hook receiving a ``seed_replace`` event per swap
    :return: (k, p) array of centers
    """
    data = np.asarray(data, dtype=float)
    if k <= 0:
        raise ConfigurationError(f'number of clusters must be positive, got {k}')
    if data.shape[0] < k:
        raise InsufficientDataError(
            f'{data.shape[0]} cases available but {k} clusters requested'
        )

    centers = data[:k].copy()
    if read_initial or k < 2:
        return centers

    replaced = 0
    for case in range(k, data.shape[0]):
        x = data[case]
        d = np.linalg.norm(centers - x, axis=1)
        nearest, second = np.argsort(d, kind='stable')[:2]
        m, n, closest, dist = _closest_center_pair(centers)

        if d[nearest] > closest:
            target = m if d[m] >= d[n] else n
        else:
            others = np.delete(dist[nearest], nearest)
            if d[second] > others.min():
                target = nearest
            else:
                continue
        centers[target] = x
        replaced += 1
        notify(observer, 'seed_replace', case=case + 1, center=int(target) + 1)

    logging.debug('Initial center refinement replaced %d centers', replaced)
    return centers
