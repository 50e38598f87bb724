# statclust/core/instance.py

"""statclust core data: the numeric case matrix handed to the engines."""

from dataclasses import dataclass, field
from typing import List, Optional

from statclust.core.errors import ConfigurationError, InsufficientDataError

import numpy as np


@dataclass
class ProcessedData:
    """Numeric case × variable matrix plus per-case identification.

    :param data_matrix: cases × variables array of floats
    :param variables: names of the active variables (matrix columns)
    :param case_numbers: 1-based original row number of each retained case
    :param case_labels: display label of each case
    """

    data_matrix: np.ndarray
    variables: List[str]
    case_numbers: Optional[List[int]] = None
    case_labels: Optional[List[str]] = field(default=None)

    def __post_init__(self):
        """Coerce the matrix and fill default case numbers and labels."""
        self.data_matrix = np.asarray(self.data_matrix, dtype=float)
        if self.data_matrix.ndim == 1 and self.data_matrix.size == 0:
            self.data_matrix = self.data_matrix.reshape(0, len(self.variables))
        if self.data_matrix.ndim != 2:
            raise ConfigurationError('data_matrix must be two-dimensional')
        if self.data_matrix.shape[1] != len(self.variables):
            raise ConfigurationError(
                f'data_matrix has {self.data_matrix.shape[1]} columns '
                f'but {len(self.variables)} variables were given'
            )
        n = self.data_matrix.shape[0]
        if self.case_numbers is None:
            self.case_numbers = list(range(1, n + 1))
        if self.case_labels is None:
            self.case_labels = [str(c) for c in self.case_numbers]
        if len(self.case_numbers) != n or len(self.case_labels) != n:
            raise ConfigurationError(
                'case_numbers and case_labels must have one entry per case'
            )

    @property
    def num_cases(self) -> int:
        """Number of cases (matrix rows)."""
        return self.data_matrix.shape[0]

    @property
    def num_variables(self) -> int:
        """Number of active variables (matrix columns)."""
        return self.data_matrix.shape[1]

    def require_cases(self, minimum: int = 1) -> None:
        """Raise if fewer than `minimum` cases are available."""
        if not self.variables:
            raise ConfigurationError('no variables selected for the analysis')
        if self.num_cases < minimum:
            raise InsufficientDataError(
                f'{self.num_cases} valid cases available, at least {minimum} required'
            )
