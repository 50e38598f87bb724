# statclust/plugins/clustering/hierarchical.py

"""Clustering plugin: agglomerative (hierarchical) clustering."""

import logging
from typing import Any, Dict, Optional

from statclust.config.loader import number_parameter
from statclust.core.errors import ClusterAnalysisError, ConfigurationError
from statclust.core.instance import ProcessedData
from statclust.core.interfaces import AnalysisResult, ClusteringPlugin, Observer
from statclust.plugins.clustering.agglomeration import agglomerate
from statclust.plugins.clustering.dendrogram import build_dendrogram
from statclust.plugins.clustering.distance import (
    BINARY_MEASURES,
    check_metric,
    proximity_matrix,
    transform_proximities,
)
from statclust.plugins.clustering.membership import SolutionRequest, derive_memberships
from statclust.plugins.clustering.state import ClusterState, LINKAGES

# Methods whose coefficients are only geometrically meaningful on squared
# Euclidean distances.
SQUARED_EUCLIDEAN_METHODS = ('centroid', 'median', 'ward')


class HierarchicalClustering(ClusteringPlugin):
    """Hierarchical clustering plugin: schedule, dendrogram and memberships."""

    def __init__(self, parameters: Dict[str, Any], observer: Optional[Observer] = None):
        """Keep the parameters; they are checked by `validate` at analysis time."""
        self.parameters = dict(parameters)
        self.linkage = parameters.get('linkage', 'average')
        self.metric = parameters.get('metric', 'euclidean')
        self.keep_proximity = parameters.get('proximity_matrix', False)
        self.absolute_values = parameters.get('absolute_values', False)
        self.change_sign = parameters.get('change_sign', False)
        self.rescale_range = parameters.get('rescale_range', False)
        self.observer = observer

    def validate(self) -> None:
        """Parse and check the parameters before touching the data."""
        raw = self.parameters
        if self.linkage not in LINKAGES:
            raise ConfigurationError(f'Unknown linkage method: {self.linkage}')
        self.power = number_parameter(raw, 'power', float, 2.0)
        self.root = number_parameter(raw, 'root', float, 2.0)
        self.present = number_parameter(raw, 'present', float, 1.0)
        self.absent = number_parameter(raw, 'absent', float, 0.0)
        check_metric(self.metric, self.power, self.root)
        if self.metric in BINARY_MEASURES and self.present == self.absent:
            raise ConfigurationError('present and absent values must differ')
        self.solution = SolutionRequest.from_dict(raw.get('solution'))
        self.solution.cluster_counts()
        if self.linkage in SQUARED_EUCLIDEAN_METHODS and self.metric != 'squared_euclidean':
            logging.warning(
                '%s linkage is usually paired with squared_euclidean, got %s',
                self.linkage, self.metric,
            )

    def _proximities(self, data: ProcessedData):
        """Proximity matrix after the requested transformations."""
        prox = proximity_matrix(
            data.data_matrix, self.metric, self.power, self.root, self.present, self.absent
        )
        return transform_proximities(
            prox, self.absolute_values, self.change_sign, self.rescale_range
        )

    def analyze(self, data: ProcessedData) -> AnalysisResult:
        """Run the hierarchical analysis and collect its result structures."""
        result = AnalysisResult(method='hierarchical')
        try:
            self.validate()
            data.require_cases(1)
            prox = self._proximities(data)
            state = ClusterState(
                prox,
                case_labels=data.case_labels,
                variables=data.variables,
                method=self.linkage,
            )
            schedule = agglomerate(state, observer=self.observer)
            dendrogram = build_dendrogram(schedule, data.case_labels, data.case_numbers)
            memberships = derive_memberships(schedule, self.solution)
        except ClusterAnalysisError as exc:
            logging.error('Hierarchical cluster analysis failed: %s', exc)
            result.errors.append(str(exc))
            return result

        if self.keep_proximity:
            result.tables['proximity_matrix'] = prox
        result.tables['agglomeration_schedule'] = schedule
        result.tables['dendrogram'] = dendrogram
        result.tables['cluster_memberships'] = memberships
        result.tables['case_numbers'] = list(data.case_numbers)
        result.tables['case_labels'] = list(data.case_labels)
        logging.info(
            'Hierarchical clustering of %d cases produced %d membership solutions',
            data.num_cases, len(memberships),
        )
        return result
