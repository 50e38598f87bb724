"""Evaluation utilities for statclust: cluster sizes and ANOVA."""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from scipy import stats


@dataclass(frozen=True)
class ClusterCaseCounts:
    """Number of cases in each cluster."""

    counts: List[int]
    valid: int
    missing: int = 0


@dataclass(frozen=True)
class AnovaRow:
    """One-way ANOVA of a variable across the final clusters."""

    variable: str
    mean_square: float
    df: int
    error_mean_square: float
    error_df: int
    f: float
    significance: float


def cluster_case_counts(assignments: Sequence[int], k: int, missing: int = 0) -> ClusterCaseCounts:
    """Count cases per cluster from 0-based assignments."""
    labels = np.asarray(assignments, dtype=int)
    counts = np.bincount(labels, minlength=k)[:k] if labels.size else np.zeros(k, dtype=int)
    return ClusterCaseCounts(
        counts=[int(c) for c in counts],
        valid=int(labels.size),
        missing=missing,
    )


def anova_table(data, assignments: Sequence[int], variables: Sequence[str], k: int) -> List[AnovaRow]:
    """Compare cluster means for every variable with a one-way ANOVA.

    The F tests are descriptive only: clusters were chosen to maximize the
    differences being tested.
    """
    data = np.asarray(data, dtype=float)
    labels = np.asarray(assignments, dtype=int)
    n = data.shape[0]
    df_between = k - 1
    df_error = n - k
    counts = np.bincount(labels, minlength=k).astype(float)
    sums = np.zeros((k, data.shape[1]))
    np.add.at(sums, labels, data)

    rows = []
    for j, var in enumerate(variables):
        col = data[:, j]
        grand = col.mean() if n else math.nan
        present = counts > 0
        means = np.zeros(k)
        means[present] = sums[present, j] / counts[present]
        ss_between = float(np.sum(counts[present] * (means[present] - grand) ** 2))
        ss_error = float(np.sum((col - means[labels]) ** 2))

        ms_between = ss_between / df_between if df_between > 0 else math.nan
        ms_error = ss_error / df_error if df_error > 0 else math.nan
        if df_between > 0 and df_error > 0 and ms_error > 0:
            f_value = ms_between / ms_error
            sig = float(stats.f.sf(f_value, df_between, df_error))
        else:
            f_value, sig = math.nan, math.nan
            logging.debug('ANOVA for %s is degenerate (F undefined)', var)
        rows.append(AnovaRow(
            variable=var,
            mean_square=ms_between,
            df=df_between,
            error_mean_square=ms_error,
            error_df=df_error,
            f=f_value,
            significance=sig,
        ))
    return rows
