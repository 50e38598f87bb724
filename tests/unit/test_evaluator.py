"""Unit tests for cluster evaluation utilities."""

import math

from statclust.evaluation.evaluator import anova_table, cluster_case_counts

import numpy as np

import pytest

from scipy import stats


def test_case_counts_include_empty_clusters():
    """Clusters without cases are counted as 0."""
    counts = cluster_case_counts([0, 0, 2], 4)
    assert counts.counts == [2, 0, 1, 0]
    assert counts.valid == 3
    assert counts.missing == 0


def test_anova_matches_scipy_oneway():
    """F and significance agree with scipy's one-way ANOVA."""
    data = np.array([[1.0], [2.0], [3.0], [7.0], [8.0], [10.0]])
    labels = [0, 0, 0, 1, 1, 1]
    (row,) = anova_table(data, labels, ['v'], 2)

    expected = stats.f_oneway([1.0, 2.0, 3.0], [7.0, 8.0, 10.0])
    assert row.df == 1
    assert row.error_df == 4
    assert row.f == pytest.approx(expected.statistic)
    assert row.significance == pytest.approx(expected.pvalue)


def test_anova_degenerate_cases():
    """No within-cluster variation or no error df: F is undefined."""
    (row,) = anova_table(np.array([[0.0], [0.0], [5.0], [5.0]]), [0, 0, 1, 1], ['v'], 2)
    assert math.isnan(row.f) and math.isnan(row.significance)

    (row,) = anova_table(np.array([[0.0], [5.0]]), [0, 1], ['v'], 2)
    assert row.error_df == 0
    assert math.isnan(row.error_mean_square)
