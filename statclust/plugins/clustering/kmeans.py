# statclust/plugins/clustering/kmeans.py

"""Clustering plugin: k-means with separation-scaled convergence."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from statclust.config.loader import number_parameter
from statclust.core.errors import ClusterAnalysisError, ConfigurationError
from statclust.core.instance import ProcessedData
from statclust.core.interfaces import AnalysisResult, ClusteringPlugin, Observer, notify
from statclust.evaluation.evaluator import anova_table, cluster_case_counts
from statclust.plugins.clustering.builder import (
    build_center_distance_matrix,
    cluster_mean_profile,
    min_center_distance,
)
from statclust.plugins.clustering.distance import cross_distances
from statclust.plugins.clustering.seeding import seed_centers
from statclust.plugins.ingestion.csv_reader import read_centers

import numpy as np

KMEANS_METHODS = ('iterate', 'classify')


@dataclass
class ClusterCenters:
    """Center coordinates: one row per cluster, one column per variable."""

    variables: List[str]
    centers: np.ndarray

    def by_variable(self) -> Dict[str, List[float]]:
        """Center values per variable, in cluster order."""
        return {v: self.centers[:, j].tolist() for j, v in enumerate(self.variables)}


@dataclass
class IterationRecord:
    """Change of every center during one refinement iteration."""

    iteration: int
    changes: List[float]
    max_change: float


@dataclass
class IterationHistory:
    """Refinement trace and how it stopped."""

    iterations: List[IterationRecord] = field(default_factory=list)
    converged: bool = False
    threshold: float = 0.0
    min_initial_distance: float = 0.0
    convergence_note: str = ''


@dataclass
class MembershipRow:
    """Final cluster of one case and its distance to the cluster center."""

    case_number: int
    case_label: str
    cluster: int
    distance: float


@dataclass
class RefinementResult:
    """Final centers and the history of the refinement loop."""

    centers: np.ndarray
    history: IterationHistory
    labels: np.ndarray


def assign_cases(data, centers) -> Tuple[np.ndarray, np.ndarray]:
    """Nearest center (0-based, lowest index on ties) and distance per case."""
    dist = cross_distances(data, centers)
    labels = np.argmin(dist, axis=1)
    return labels, dist[np.arange(dist.shape[0]), labels]


def _running_means_pass(data: np.ndarray, centers: np.ndarray):
    """Assign cases one by one, moving their center after each assignment."""
    running = centers.copy()
    counts = np.zeros(centers.shape[0], dtype=int)
    labels = np.empty(data.shape[0], dtype=int)
    for idx, x in enumerate(data):
        c = int(np.argmin(np.linalg.norm(running - x, axis=1)))
        counts[c] += 1
        running[c] += (x - running[c]) / counts[c]
        labels[idx] = c
    # centers without cases keep their previous position
    running[counts == 0] = centers[counts == 0]
    return running, labels


def _convergence_note(history: IterationHistory, last: IterationRecord) -> str:
    """Footnote explaining why refinement stopped."""
    if history.converged:
        reason = 'Convergence achieved due to no or small change in cluster centers.'
    else:
        reason = ('Iterations stopped because the maximum number of iterations '
                  'was performed. Iterations failed to converge.')
    return (
        f'{reason} The maximum absolute coordinate change for any center is '
        f'{last.max_change:.3f}. The current iteration is {last.iteration}. '
        f'The minimum distance between initial centers is '
        f'{history.min_initial_distance:.3f}.'
    )


def refine_centers(
    data,
    initial_centers,
    max_iterations: int = 10,
    convergence_criterion: float = 0.0,
    running_means: bool = False,
    observer: Optional[Observer] = None,
) -> RefinementResult:
    """Run Lloyd iterations until centers stop moving or the cap is hit.

    Refinement stops once the largest absolute coordinate change of any
    center is at most ``convergence_criterion`` times the minimum distance
    between the initial centers. Reaching `max_iterations` is not an error.
    """
    data = np.asarray(data, dtype=float)
    centers = np.array(initial_centers, dtype=float, copy=True)
    if max_iterations < 1:
        raise ConfigurationError(f'max_iterations must be at least 1, got {max_iterations}')
    if convergence_criterion < 0:
        raise ConfigurationError('convergence_criterion must not be negative')
    k = centers.shape[0]

    min_dist = min_center_distance(centers)
    history = IterationHistory(
        threshold=convergence_criterion * min_dist,
        min_initial_distance=min_dist,
    )
    labels = np.zeros(data.shape[0], dtype=int)

    for iteration in range(1, max_iterations + 1):
        if running_means:
            new_centers, labels = _running_means_pass(data, centers)
        else:
            labels, _ = assign_cases(data, centers)
            new_centers = cluster_mean_profile(data, labels, k, previous=centers)

        delta = new_centers - centers
        record = IterationRecord(
            iteration=iteration,
            changes=np.linalg.norm(delta, axis=1).tolist(),
            max_change=float(np.abs(delta).max()) if delta.size else 0.0,
        )
        history.iterations.append(record)
        centers = new_centers
        notify(observer, 'iteration', iteration=iteration, max_change=record.max_change)

        if record.max_change <= history.threshold:
            history.converged = True
            break

    history.convergence_note = _convergence_note(history, history.iterations[-1])
    logging.info(
        'k-means refinement stopped after %d iterations (converged=%s)',
        len(history.iterations), history.converged,
    )
    return RefinementResult(centers=centers, history=history, labels=labels)


def classify_cases(
    data,
    centers,
    case_numbers: Optional[Sequence[int]] = None,
    case_labels: Optional[Sequence[str]] = None,
) -> List[MembershipRow]:
    """Nearest final center (1-based) and its distance for every case."""
    data = np.asarray(data, dtype=float)
    n = data.shape[0]
    case_numbers = list(case_numbers) if case_numbers is not None else list(range(1, n + 1))
    case_labels = list(case_labels) if case_labels is not None else [str(c) for c in case_numbers]
    labels, dist = assign_cases(data, centers)
    return [
        MembershipRow(
            case_number=int(case_numbers[i]),
            case_label=case_labels[i],
            cluster=int(labels[i]) + 1,
            distance=float(dist[i]),
        )
        for i in range(n)
    ]


class KMeansClustering(ClusteringPlugin):
    """K-means plugin: seeding, refinement and final classification."""

    def __init__(self, parameters: Dict[str, Any], observer: Optional[Observer] = None):
        """Keep the parameters; they are checked by `validate` at analysis time."""
        self.parameters = dict(parameters)
        self.method = parameters.get('method', 'iterate')
        self.read_initial = parameters.get('read_initial', False)
        self.initial_centers_file = parameters.get('initial_centers_file')
        self.running_means = parameters.get('running_means', False)
        self.anova = parameters.get('anova', False)
        self.observer = observer

    def validate(self) -> None:
        """Parse and check the parameters before touching the data."""
        raw = self.parameters
        if self.method not in KMEANS_METHODS:
            raise ConfigurationError(f'Unknown k-means method: {self.method}')
        self.n_clusters = number_parameter(raw, 'nb_clusters', int, 2)
        self.max_iterations = number_parameter(raw, 'max_iterations', int, 10)
        self.convergence_criterion = number_parameter(raw, 'convergence_criterion', float, 0.0)
        if self.n_clusters <= 0:
            raise ConfigurationError(
                f'number of clusters must be positive, got {self.n_clusters}'
            )
        if self.method == 'iterate' and self.max_iterations < 1:
            raise ConfigurationError('max_iterations must be at least 1')
        if self.convergence_criterion < 0:
            raise ConfigurationError('convergence_criterion must not be negative')

    def _initial_centers(self, data: ProcessedData) -> np.ndarray:
        """Centers read from a file when one is configured, seeded otherwise."""
        if self.initial_centers_file:
            return read_centers(self.initial_centers_file, data.variables, self.n_clusters)
        return seed_centers(data.data_matrix, self.n_clusters, self.read_initial, self.observer)

    def analyze(self, data: ProcessedData) -> AnalysisResult:
        """Run the k-means analysis and collect its result structures."""
        result = AnalysisResult(method='kmeans')
        try:
            self.validate()
            data.require_cases(self.n_clusters)
            initial = self._initial_centers(data)
            history = None
            final = initial
            if self.method == 'iterate':
                refinement = refine_centers(
                    data.data_matrix,
                    initial,
                    self.max_iterations,
                    self.convergence_criterion,
                    self.running_means,
                    self.observer,
                )
                final, history = refinement.centers, refinement.history
            membership = classify_cases(
                data.data_matrix, final, data.case_numbers, data.case_labels
            )
        except ClusterAnalysisError as exc:
            logging.error('K-means cluster analysis failed: %s', exc)
            result.errors.append(str(exc))
            return result

        assignments = np.array([row.cluster - 1 for row in membership], dtype=int)
        result.tables['initial_centers'] = ClusterCenters(list(data.variables), initial)
        if history is not None:
            result.tables['iteration_history'] = history
        result.tables['cluster_membership'] = membership
        result.tables['final_centers'] = ClusterCenters(list(data.variables), final)
        result.tables['distances_between_centers'] = build_center_distance_matrix(final)
        result.tables['case_counts'] = cluster_case_counts(assignments, self.n_clusters)
        if self.anova:
            result.tables['anova'] = anova_table(
                data.data_matrix, assignments, data.variables, self.n_clusters
            )
        return result
