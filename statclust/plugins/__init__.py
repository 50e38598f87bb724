"""statclust plugin package."""

from .clustering.hierarchical import HierarchicalClustering
from .clustering.kmeans import KMeansClustering
from .ingestion.csv_reader import CSVReader

from statclust.core.errors import ConfigurationError


class ClusteringFactory:
    """Factory for clustering plugins."""

    @staticmethod
    def create(cfg, observer=None):
        """Create and return a clustering plugin based on config."""
        m = cfg.method.lower()
        if m in ('kmeans', 'k_means'):
            return KMeansClustering(cfg.parameters, observer)
        if m == 'hierarchical':
            return HierarchicalClustering(cfg.parameters, observer)
        raise ConfigurationError(f'Unknown clustering method: {cfg.method}')


class IngestionFactory:
    """Factory for ingestion plugins."""

    @staticmethod
    def create(cfg):
        """Create and return an ingestion plugin based on config."""
        t = cfg.type.lower()
        if t == 'csv':
            return CSVReader(cfg.parameters)
        raise ConfigurationError(f'Unknown ingestion type: {cfg.type}')


__all__ = [
    'CSVReader',
    'ClusteringFactory',
    'HierarchicalClustering',
    'IngestionFactory',
    'KMeansClustering',
]
