"""CSV-based ingestion plugin for statclust."""

import logging
from pathlib import Path

from statclust.core.errors import ConfigurationError
from statclust.core.interfaces import IngestionPlugin

import numpy as np

import pandas as pd


class CSVReader(IngestionPlugin):
    """Ingestion plugin that reads case records from a CSV file."""

    def __init__(self, parameters: dict):
        """Initialize reader with file location and parsing options."""
        fname = parameters.get('file_name', 'data.csv')
        self.csv_path = Path(parameters.get('data_folder', '.')) / fname
        self.sep = parameters.get('sep', ',')

    def load(self) -> pd.DataFrame:
        """Read every record of the file, one case per row."""
        if not self.csv_path.exists():
            raise ConfigurationError(f'data file not found: {self.csv_path}')
        df = pd.read_csv(self.csv_path, sep=self.sep)
        logging.info('Loaded %d cases from %s', len(df), self.csv_path)
        return df


def read_centers(path, variables, k: int, sep: str = ',') -> np.ndarray:
    """Read k cluster centers, one row per cluster, from a CSV file.

    The file needs one column per analysis variable; other columns (such as
    a cluster number) are ignored and rows are taken in file order.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f'initial centers file not found: {p}')
    df = pd.read_csv(p, sep=sep)
    missing = [v for v in variables if v not in df.columns]
    if missing:
        raise ConfigurationError(
            f'initial centers file lacks variables: {", ".join(missing)}'
        )
    if len(df) != k:
        raise ConfigurationError(
            f'initial centers file has {len(df)} centers, {k} clusters requested'
        )
    values = df[list(variables)].apply(pd.to_numeric, errors='coerce')
    if values.isna().any().any():
        raise ConfigurationError('initial centers must be numeric and complete')
    logging.info('Read %d initial centers from %s', k, p)
    return values.to_numpy(dtype=float)
