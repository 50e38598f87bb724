# statclust/core/errors.py

"""statclust error taxonomy."""


class ClusterAnalysisError(ValueError):
    """Base class for errors reported back to the caller of an analysis."""


class ConfigurationError(ClusterAnalysisError):
    """Invalid analysis parameters (cluster counts, metrics, linkages...)."""


class InsufficientDataError(ClusterAnalysisError):
    """Not enough cases to honour the requested analysis."""


class ScheduleError(ClusterAnalysisError):
    """An agglomeration schedule that is incomplete or inconsistent."""
