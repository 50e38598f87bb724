# statclust/plugins/clustering/distance.py

"""Dissimilarity measures between case vectors.

Three families are supported, matching the kinds of data a case can carry:

* interval measures on continuous values (``METRICS``);
* counts measures on frequency profiles (``COUNT_MEASURES``);
* binary measures on present/absent codes (``BINARY_MEASURES``).

Every measure returns a dissimilarity, so smaller always means closer.
"""

from statclust.core.errors import ConfigurationError

import numpy as np

from scipy.spatial.distance import cdist, pdist, squareform

METRICS = (
    'euclidean',
    'squared_euclidean',
    'block',
    'chebychev',
    'minkowski',
    'customized',
    'cosine',
    'pearson',
)

COUNT_MEASURES = (
    'chi_square',
    'phi_square',
)

BINARY_MEASURES = (
    'binary_euclidean',
    'binary_squared_euclidean',
    'size_difference',
    'pattern_difference',
    'binary_variance',
    'binary_lance_williams',
    'jaccard',
    'simple_matching',
)

MEASURES = METRICS + COUNT_MEASURES + BINARY_MEASURES

_PDIST_NAMES = {
    'euclidean': 'euclidean',
    'squared_euclidean': 'sqeuclidean',
    'block': 'cityblock',
    'chebychev': 'chebyshev',
    'minkowski': 'minkowski',
    'customized': 'minkowski',
    'cosine': 'cosine',
    'pearson': 'correlation',
}


def check_metric(metric: str, power: float = 2.0, root: float = 2.0) -> None:
    """Validate a measure name and its power/root arguments."""
    if metric not in MEASURES:
        raise ConfigurationError(f'Unknown distance metric: {metric}')
    if metric in ('minkowski', 'customized') and power <= 0:
        raise ConfigurationError('power must be positive')
    if metric == 'customized' and root <= 0:
        raise ConfigurationError('root must be positive')


def _interval_matrix(x: np.ndarray, metric: str, power: float, root: float) -> np.ndarray:
    """Interval measures through scipy's pdist."""
    kwargs = {'p': power} if metric in ('minkowski', 'customized') else {}
    with np.errstate(divide='ignore', invalid='ignore'):
        mat = squareform(pdist(x, _PDIST_NAMES[metric], **kwargs))
    if metric == 'customized':
        return mat ** (power / root)
    if metric in ('cosine', 'pearson'):
        # a zero (cosine) or constant (pearson) vector has no direction
        centred = x - x.mean(axis=1, keepdims=True) if metric == 'pearson' else x
        flat = np.linalg.norm(centred, axis=1) == 0
        mat = np.clip(np.nan_to_num(mat, nan=1.0), 0.0, 2.0)
        mat[flat, :] = 1.0
        mat[:, flat] = 1.0
        np.fill_diagonal(mat, 0.0)
    return mat


def _counts_matrix(x: np.ndarray, metric: str) -> np.ndarray:
    """Chi-square (or phi-square) measure between every pair of count profiles.

    Each pair forms a 2 x p contingency table; variables with a zero column
    total contribute nothing.
    """
    if np.any(x < 0):
        raise ConfigurationError('counts measures require non-negative values')
    n = x.shape[0]
    totals = x.sum(axis=1)
    mat = np.zeros((n, n))
    with np.errstate(divide='ignore', invalid='ignore'):
        for i in range(n - 1):
            others = x[i + 1:]
            grand = totals[i] + totals[i + 1:]
            col = x[i] + others
            exp_i = totals[i] * col / grand[:, None]
            exp_o = totals[i + 1:, None] * col / grand[:, None]
            chi2 = (
                np.where(exp_i > 0, (x[i] - exp_i) ** 2 / exp_i, 0.0).sum(axis=1)
                + np.where(exp_o > 0, (others - exp_o) ** 2 / exp_o, 0.0).sum(axis=1)
            )
            if metric == 'phi_square':
                chi2 = np.where(grand > 0, chi2 / grand, 0.0)
            row = np.sqrt(np.nan_to_num(chi2))
            mat[i, i + 1:] = row
            mat[i + 1:, i] = row
    return mat


def _binary_matrix(x: np.ndarray, metric: str, present: float, absent: float) -> np.ndarray:
    """Binary measures from the 2 x 2 match table of every pair of cases.

    Values equal to neither `present` nor `absent` are left out of the table.
    """
    pres = (x == present).astype(float)
    absn = (x == absent).astype(float)
    a = pres @ pres.T
    b = pres @ absn.T
    c = b.T
    d = absn @ absn.T
    total = a + b + c + d
    mismatch = b + c

    def ratio(num, den):
        return np.divide(num, den, out=np.zeros_like(num), where=den > 0)

    if metric == 'binary_euclidean':
        mat = np.sqrt(mismatch)
    elif metric == 'binary_squared_euclidean':
        mat = mismatch
    elif metric == 'size_difference':
        mat = ratio((b - c) ** 2, total ** 2)
    elif metric == 'pattern_difference':
        mat = ratio(b * c, total ** 2)
    elif metric == 'binary_variance':
        mat = ratio(mismatch, 4 * total)
    elif metric == 'binary_lance_williams':
        mat = ratio(mismatch, 2 * a + mismatch)
    elif metric == 'jaccard':
        mat = ratio(mismatch, a + mismatch)
    else:
        mat = ratio(mismatch, total)
    mat = np.array(mat, dtype=float)
    np.fill_diagonal(mat, 0.0)
    return mat


def proximity_matrix(data, metric: str = 'euclidean', power: float = 2.0,
                     root: float = 2.0, present: float = 1.0,
                     absent: float = 0.0) -> np.ndarray:
    """Compute the full symmetric dissimilarity matrix of the rows of data.

    :param data: cases x variables matrix
    :param metric: one of MEASURES
    :param power: exponent for the minkowski/customized measures
    :param root: root for the customized measure
    :param present: value coding "present" for binary measures
    :param absent: value coding "absent" for binary measures
    """
    check_metric(metric, power, root)
    x = np.asarray(data, dtype=float)
    n = x.shape[0]
    if n == 0:
        return np.zeros((0, 0))
    if x.ndim != 2 or x.shape[1] == 0:
        return np.zeros((n, n))

    if metric in COUNT_MEASURES:
        return _counts_matrix(x, metric)
    if metric in BINARY_MEASURES:
        return _binary_matrix(x, metric, present, absent)
    return _interval_matrix(x, metric, power, root)


def distance(a, b, metric: str = 'euclidean', power: float = 2.0, root: float = 2.0,
             present: float = 1.0, absent: float = 0.0) -> float:
    """Compute the dissimilarity between two equal-length vectors.

    :return: non-negative dissimilarity, 0 for empty vectors
    """
    check_metric(metric, power, root)
    a = np.asarray(a, dtype=float).ravel()
    b = np.asarray(b, dtype=float).ravel()
    if a.shape != b.shape:
        raise ConfigurationError(
            f'vectors have different lengths: {a.size} and {b.size}'
        )
    mat = proximity_matrix(np.vstack([a, b]), metric, power, root, present, absent)
    return float(mat[0, 1])


def transform_proximities(mat, absolute_values: bool = False, change_sign: bool = False,
                          rescale: bool = False) -> np.ndarray:
    """Post-process a proximity matrix.

    Transformations apply in order: absolute values, sign change, then a
    rescale of the off-diagonal values onto 0..1. The diagonal stays 0.
    """
    out = np.array(mat, dtype=float, copy=True)
    if absolute_values:
        out = np.abs(out)
    if change_sign:
        out = -out
    n = out.shape[0]
    if rescale and n > 1:
        off = ~np.eye(n, dtype=bool)
        lo, hi = out[off].min(), out[off].max()
        out[off] = (out[off] - lo) / (hi - lo) if hi > lo else 0.0
    np.fill_diagonal(out, 0.0)
    return out


def cross_distances(a, b) -> np.ndarray:
    """Euclidean distances between every row of a and every row of b."""
    return cdist(np.asarray(a, dtype=float), np.asarray(b, dtype=float), 'euclidean')
