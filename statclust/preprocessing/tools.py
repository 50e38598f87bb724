"""statclust preprocessing tools."""

import logging
from typing import List, Optional

from statclust.core.errors import ConfigurationError, InsufficientDataError
from statclust.core.instance import ProcessedData

import numpy as np

import pandas as pd

STANDARDIZE_METHODS = (
    'none',
    'z_scores',
    'range_neg1_1',
    'range_0_1',
    'max_magnitude_1',
    'mean_1',
    'std_1',
)

STANDARDIZE_BY = ('variable', 'case')


def exclude_missing_listwise(df: pd.DataFrame, variables: List[str]) -> pd.DataFrame:
    """Coerce the variables to numbers and drop cases with any missing value.

    The returned frame keeps the original (0-based) row positions in a
    `_case_number` column, converted to 1-based numbering.
    """
    missing = [v for v in variables if v not in df.columns]
    if missing:
        raise ConfigurationError(f'unknown variables: {", ".join(missing)}')

    out = df.copy()
    out['_case_number'] = np.arange(1, len(out) + 1)
    out[variables] = out[variables].apply(pd.to_numeric, errors='coerce')
    kept = out.dropna(subset=variables)
    dropped = len(out) - len(kept)
    if dropped:
        logging.info('%d cases excluded listwise for missing values', dropped)
    return kept


def standardize_matrix(mat: np.ndarray, method: str = 'none', by: str = 'variable') -> np.ndarray:
    """Standardize each variable (column), or each case (row), of the matrix.

    Values whose scale statistic is zero are left centred/unscaled rather
    than divided by zero.
    """
    if method not in STANDARDIZE_METHODS:
        raise ConfigurationError(f'Unknown standardization method: {method}')
    if by not in STANDARDIZE_BY:
        raise ConfigurationError(f'Unknown standardization direction: {by}')
    mat = np.asarray(mat, dtype=float)
    if by == 'case':
        return _standardize_columns(mat.T, method).T
    return _standardize_columns(mat, method)


def _standardize_columns(mat: np.ndarray, method: str) -> np.ndarray:
    if method == 'none' or mat.size == 0:
        return mat.copy()

    def _safe(scale):
        return np.where(scale == 0, 1.0, scale)

    if method == 'z_scores':
        std = mat.std(axis=0, ddof=1) if mat.shape[0] > 1 else np.zeros(mat.shape[1])
        return (mat - mat.mean(axis=0)) / _safe(std)
    if method == 'range_neg1_1':
        return mat / _safe(mat.max(axis=0) - mat.min(axis=0))
    if method == 'range_0_1':
        lo = mat.min(axis=0)
        return (mat - lo) / _safe(mat.max(axis=0) - lo)
    if method == 'max_magnitude_1':
        return mat / _safe(np.abs(mat).max(axis=0))
    if method == 'mean_1':
        return mat / _safe(mat.mean(axis=0))
    # std_1
    std = mat.std(axis=0, ddof=1) if mat.shape[0] > 1 else np.zeros(mat.shape[1])
    return mat / _safe(std)


def build_processed_data(
    df: pd.DataFrame,
    variables: List[str],
    label_field: Optional[str] = None,
    standardize: str = 'none',
    standardize_by: str = 'variable',
) -> ProcessedData:
    """Turn raw case records into the numeric matrix used by the engines."""
    if not variables:
        raise ConfigurationError('no variables selected for the analysis')
    if label_field is not None and label_field not in df.columns:
        raise ConfigurationError(f'unknown label field: {label_field}')

    kept = exclude_missing_listwise(df, variables)
    if kept.empty:
        raise InsufficientDataError('no valid cases remain after missing-value exclusion')

    mat = standardize_matrix(
        kept[variables].to_numpy(dtype=float), standardize, standardize_by
    )
    case_numbers = [int(c) for c in kept['_case_number']]
    if label_field is not None:
        labels = [str(v) for v in kept[label_field].fillna('')]
    else:
        labels = [str(c) for c in case_numbers]

    return ProcessedData(
        data_matrix=mat,
        variables=list(variables),
        case_numbers=case_numbers,
        case_labels=labels,
    )
