"""
Matrix and Region
=================

Matrix:
    One contiguous float32 buffer of shape (rows, cols), row-major. Row index
    is the time step, column index is the trace. Read-only once built.

Region:
    Half-open window [row_beg, row_end) x [col_beg, col_end) every analytic
    operation is restricted to. An upper bound of -1 means "unset" until it
    is resolved against the loaded matrix extent.
"""

from dataclasses import dataclass, replace
from typing import Tuple

import numpy as np

from tracecompare.errors import ConfigError


@dataclass(frozen=True)
class Region:
    """Half-open sub-rectangle of a matrix."""
    row_beg: int = 0
    row_end: int = -1
    col_beg: int = 0
    col_end: int = -1

    @property
    def n_rows(self) -> int:
        return self.row_end - self.row_beg

    @property
    def n_cols(self) -> int:
        return self.col_end - self.col_beg

    @property
    def shape(self) -> Tuple[int, int]:
        return self.n_rows, self.n_cols

    @property
    def rows(self) -> slice:
        return slice(self.row_beg, self.row_end)

    @property
    def cols(self) -> slice:
        return slice(self.col_beg, self.col_end)

    def resolve(self, rows: int, cols: int) -> 'Region':
        """
        Replace unset upper bounds with the matrix extent and check bounds.

        Raises:
            ConfigError: if the region doesn't fit in a (rows, cols) matrix
        """
        region = self
        if region.row_end < 0:
            region = replace(region, row_end=rows)
        if region.col_end < 0:
            region = replace(region, col_end=cols)
        region.check(rows, cols)
        return region

    def check(self, rows: int, cols: int) -> None:
        if not 0 <= self.row_beg < self.row_end <= rows:
            raise ConfigError(
                f"Row region [{self.row_beg}, {self.row_end}) is out of range "
                f"[0, {rows}]"
            )
        if not 0 <= self.col_beg < self.col_end <= cols:
            raise ConfigError(
                f"Column region [{self.col_beg}, {self.col_end}) is out of range "
                f"[0, {cols}]"
            )

    def __str__(self) -> str:
        return f"rows [{self.row_beg}, {self.row_end}) x cols [{self.col_beg}, {self.col_end})"


class Matrix:
    """
    Immutable float32 matrix.

    The buffer is a single C-contiguous numpy array flagged read-only, so
    element (i, j) lives at flat offset i*cols + j.
    """

    def __init__(self, values: np.ndarray):
        data = np.ascontiguousarray(values, dtype=np.float32)
        if data.ndim != 2:
            raise ValueError(f"Matrix needs a 2D array, got {data.ndim}D")
        data.flags.writeable = False
        self._data = data

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the whole buffer."""
        return self._data

    def region(self, region: Region) -> np.ndarray:
        """Read-only view of the region."""
        return self._data[region.rows, region.cols]

    def __getitem__(self, index):
        return self._data[index]

    def __repr__(self) -> str:
        return f"Matrix({self.rows}x{self.cols})"
