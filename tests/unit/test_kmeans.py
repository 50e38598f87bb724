"""Unit tests for k-means refinement, membership and the k-means plugin."""

import math

from statclust.core.errors import ConfigurationError
from statclust.core.instance import ProcessedData
from statclust.plugins.clustering.kmeans import (
    KMeansClustering,
    assign_cases,
    classify_cases,
    refine_centers,
)
from statclust.plugins.clustering.seeding import seed_centers

import numpy as np

import pytest


def test_two_natural_clusters(four_points):
    """Refined seeding converges to the two pair midpoints."""
    initial = seed_centers(four_points, 2)
    result = refine_centers(four_points, initial)

    assert np.allclose(result.centers, [[0.0, 0.5], [10.0, 0.5]])
    assert result.history.converged
    assert len(result.history.iterations) == 2
    rows = classify_cases(four_points, result.centers)
    assert [r.cluster for r in rows] == [1, 1, 2, 2]
    assert [r.distance for r in rows] == pytest.approx([0.5] * 4)


def test_first_k_seeding_is_deterministic(four_points):
    """Two identical runs produce identical centers and membership."""
    runs = []
    for _ in range(2):
        initial = seed_centers(four_points, 2, read_initial=True)
        result = refine_centers(four_points, initial, max_iterations=20)
        runs.append((result.centers, [r.cluster for r in classify_cases(four_points, result.centers)]))
    assert np.array_equal(runs[0][0], runs[1][0])
    assert runs[0][1] == runs[1][1]
    # Lloyd iterations from (0,0),(0,1) settle on the horizontal split
    assert np.allclose(runs[0][0], [[5.0, 0.0], [5.0, 1.0]])


def test_fixed_point_is_idempotent(rng):
    """An extra iteration after convergence does not move the centers."""
    data = np.vstack([rng.normal(0, 1, (20, 2)), rng.normal(8, 1, (20, 2))])
    result = refine_centers(data, seed_centers(data, 3), max_iterations=100)
    assert result.history.converged

    again = refine_centers(data, result.centers, max_iterations=1)
    assert np.array_equal(again.centers, result.centers)
    assert again.history.converged
    assert again.history.iterations[0].max_change == 0.0


def test_convergence_threshold_scales_with_initial_separation(four_points):
    """criterion × min initial distance: 0.1 × sqrt(101) > 0.5 stops after one pass."""
    initial = seed_centers(four_points, 2)
    result = refine_centers(four_points, initial, convergence_criterion=0.1)
    history = result.history

    assert history.min_initial_distance == pytest.approx(101 ** 0.5)
    assert history.threshold == pytest.approx(0.1 * 101 ** 0.5)
    assert len(history.iterations) == 1
    assert history.iterations[0].max_change == pytest.approx(0.5)
    assert history.iterations[0].changes == pytest.approx([0.5, 0.5])
    assert 'Convergence achieved' in history.convergence_note


def test_iteration_cap_is_not_an_error(four_points):
    """Stopping at the cap reports non-convergence."""
    initial = seed_centers(four_points, 2, read_initial=True)
    result = refine_centers(four_points, initial, max_iterations=1)
    assert not result.history.converged
    assert len(result.history.iterations) == 1
    assert 'maximum number of iterations' in result.history.convergence_note


def test_empty_cluster_keeps_its_center():
    """A center that attracts no case stays where it was."""
    data = np.array([[0.0], [1.0]])
    result = refine_centers(data, np.array([[0.5], [100.0]]), max_iterations=5)
    assert np.allclose(result.centers, [[0.5], [100.0]])
    assert result.history.converged


def test_running_means(four_points):
    """Online updates reach the same midpoints on separated pairs."""
    result = refine_centers(four_points, seed_centers(four_points, 2), running_means=True)
    assert np.allclose(result.centers, [[0.0, 0.5], [10.0, 0.5]])
    assert result.history.converged


def test_assignment_ties_go_to_lowest_center():
    """Equidistant case: first center wins."""
    labels, dist = assign_cases(np.array([[0.0]]), np.array([[-1.0], [1.0]]))
    assert labels.tolist() == [0]
    assert dist.tolist() == [1.0]


def test_identical_points():
    """Zero distances everywhere are valid."""
    data = np.ones((5, 2))
    result = refine_centers(data, seed_centers(data, 2))
    assert result.history.converged
    assert [r.distance for r in classify_cases(data, result.centers)] == [0.0] * 5


def test_invalid_refinement_parameters(four_points):
    """Nonsensical loop bounds are configuration errors."""
    with pytest.raises(ConfigurationError):
        refine_centers(four_points, four_points[:2], max_iterations=0)
    with pytest.raises(ConfigurationError):
        refine_centers(four_points, four_points[:2], convergence_criterion=-1)


def test_plugin_results(four_points_data):
    """The plugin packages every k-means table."""
    result = KMeansClustering({'nb_clusters': 2, 'anova': True}).analyze(four_points_data)

    assert result.ok
    t = result.tables
    assert np.array_equal(t['initial_centers'].centers, [[0.0, 0.0], [10.0, 1.0]])
    assert t['final_centers'].by_variable() == {'x': [0.0, 10.0], 'y': [0.5, 0.5]}
    assert [r.case_label for r in t['cluster_membership']] == ['a', 'b', 'c', 'd']
    assert [r.cluster for r in t['cluster_membership']] == [1, 1, 2, 2]
    assert np.allclose(t['distances_between_centers'], [[0.0, 10.0], [10.0, 0.0]])
    assert t['case_counts'].counts == [2, 2]
    assert t['iteration_history'].converged

    anova = {row.variable: row for row in t['anova']}
    assert anova['x'].mean_square == pytest.approx(100.0)
    assert math.isnan(anova['x'].f)
    assert anova['y'].f == pytest.approx(0.0)
    assert anova['y'].significance == pytest.approx(1.0)


def test_plugin_classify_only(four_points_data):
    """Classification against initial centers, no iteration history."""
    result = KMeansClustering({'nb_clusters': 2, 'method': 'classify'}).analyze(four_points_data)
    assert 'iteration_history' not in result.tables
    assert np.array_equal(result.tables['final_centers'].centers,
                          result.tables['initial_centers'].centers)
    assert 'anova' not in result.tables


@pytest.mark.parametrize('params', [
    {'nb_clusters': 0},
    {'nb_clusters': 5},
    {'nb_clusters': 2, 'method': 'online'},
    {'nb_clusters': 2, 'max_iterations': 0},
])
def test_plugin_reports_errors(four_points_data, params):
    """Expected failures come back as error strings, not exceptions."""
    result = KMeansClustering(params).analyze(four_points_data)
    assert not result.ok
    assert result.errors and isinstance(result.errors[0], str)
    assert result.tables == {}


def test_plugin_empty_data():
    """An empty matrix is a reported configuration error."""
    data = ProcessedData(data_matrix=np.zeros((0, 2)), variables=['x', 'y'])
    result = KMeansClustering({'nb_clusters': 2}).analyze(data)
    assert not result.ok


def test_plugin_numbers_given_as_strings(four_points_data):
    """Numeric parameters written as strings are read as numbers."""
    result = KMeansClustering({
        'nb_clusters': '2', 'max_iterations': '10', 'convergence_criterion': '0',
    }).analyze(four_points_data)
    assert result.ok
    assert [r.cluster for r in result.tables['cluster_membership']] == [1, 1, 2, 2]


@pytest.mark.parametrize('params', [
    {'nb_clusters': 'two'},
    {'nb_clusters': 2.5},
    {'nb_clusters': 2, 'max_iterations': [10]},
    {'nb_clusters': 2, 'convergence_criterion': 'tight'},
])
def test_plugin_reports_malformed_numbers(four_points_data, params):
    """Non-numeric parameters are reported, not raised."""
    result = KMeansClustering(params).analyze(four_points_data)
    assert not result.ok
    assert result.tables == {}


def test_initial_centers_from_file(four_points_data, tmp_path):
    """Centers read from a CSV replace the seeding step."""
    path = tmp_path / 'centers.csv'
    path.write_text('Cluster,x,y\n1,10,0\n2,0,0\n')
    result = KMeansClustering({
        'nb_clusters': 2, 'method': 'classify', 'initial_centers_file': str(path),
    }).analyze(four_points_data)
    assert result.ok
    assert np.array_equal(result.tables['initial_centers'].centers, [[10.0, 0.0], [0.0, 0.0]])
    assert [r.cluster for r in result.tables['cluster_membership']] == [2, 2, 1, 1]


@pytest.mark.parametrize('content', [
    'x,y\n0,0\n',
    'x,z\n0,0\n10,1\n',
    'x,y\n0,0\n10,n/a\n',
])
def test_bad_initial_centers_file(four_points_data, tmp_path, content):
    """Wrong center counts, missing variables or gaps are reported."""
    path = tmp_path / 'centers.csv'
    path.write_text(content)
    result = KMeansClustering({
        'nb_clusters': 2, 'initial_centers_file': str(path),
    }).analyze(four_points_data)
    assert not result.ok


def test_missing_initial_centers_file(four_points_data, tmp_path):
    """A missing file is reported."""
    result = KMeansClustering({
        'nb_clusters': 2, 'initial_centers_file': str(tmp_path / 'nope.csv'),
    }).analyze(four_points_data)
    assert 'not found' in result.errors[0]
