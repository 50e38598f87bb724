"""Configuration loader for the statclust application."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from statclust.core.errors import ConfigurationError


@dataclass
class IngestionConfig:
    """Configuration for the ingestion plugin: type and its parameters."""

    type: str
    parameters: Dict[str, Any]


@dataclass
class ClusteringConfig:
    """Configuration for the clustering plugin: method name and its parameters."""

    method: str
    parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Configuration for application‑wide logging."""

    level: str = 'INFO'                   # e.g. "INFO" or "DEBUG"
    filename: Optional[str] = None        # if None, logs to stdout
    fmt: str = '%(asctime)s %(levelname)s: %(message)s'


@dataclass
class ReportingConfig:
    """Configuration for reporting: folders for result tables and plots."""

    results_folder: Path
    plots_folder: Optional[Path] = None
    final_centers_file: Optional[Path] = None  # k-means centers, reusable as initial centers


@dataclass
class AppConfig:
    """Top‑level application configuration, combining all sub‑configs."""

    variables: List[str]
    ingestion: IngestionConfig
    clustering: ClusteringConfig
    logging: LoggingConfig
    reporting: ReportingConfig
    label_field: Optional[str] = None
    standardize: str = 'none'
    standardize_by: str = 'variable'


def number_parameter(raw: Dict[str, Any], name: str, kind=int, default=None):
    """Read a numeric plugin parameter, accepting numbers written as strings.

    :param raw: plugin parameters mapping
    :param name: parameter key
    :param kind: int or float
    :param default: value used when the key is absent or null
    :raises ConfigurationError: if the value is not a number of the right kind
    """
    value = raw.get(name)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigurationError(f'{name} must be a number, got {value!r}')
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f'{name} must be a number, got {value!r}') from None
    if kind is int:
        if not num.is_integer():
            raise ConfigurationError(f'{name} must be an integer, got {value!r}')
        return int(num)
    return num


def load_config(path: Path) -> AppConfig:
    """
    Load JSON configuration from the given path into nested dataclasses.

    :param path: Path to the JSON config file.
    :return: An AppConfig instance populated from the file.
    """
    raw = json.loads(Path(path).read_text())
    return config_from_dict(raw)


def config_from_dict(raw: Dict[str, Any]) -> AppConfig:
    """Build an AppConfig from an already parsed mapping."""
    for key in ('variables', 'ingestion', 'clustering', 'reporting'):
        if key not in raw:
            raise ConfigurationError(f'missing configuration section: {key}')

    ingestion = IngestionConfig(**raw['ingestion'])
    clustering = ClusteringConfig(**raw['clustering'])
    logging_cfg = LoggingConfig(**raw.get('logging', {}))

    rpt = raw['reporting']
    plots = rpt.get('plots_folder')
    centers = rpt.get('final_centers_file')
    reporting = ReportingConfig(
        results_folder=Path(rpt['results_folder']),
        plots_folder=Path(plots) if plots else None,
        final_centers_file=Path(centers) if centers else None,
    )

    return AppConfig(
        variables=list(raw['variables']),
        ingestion=ingestion,
        clustering=clustering,
        logging=logging_cfg,
        reporting=reporting,
        label_field=raw.get('label_field'),
        standardize=raw.get('standardize', 'none'),
        standardize_by=raw.get('standardize_by', 'variable'),
    )
