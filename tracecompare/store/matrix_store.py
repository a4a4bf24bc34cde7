"""
Matrix Store
============

Owns the two matrices of a comparison and their shared dimensions.

Loading rules:
    - rows = floor(byte_length(reference) / (4 * n_cols)); trailing bytes
      that don't make a complete row are ignored
    - rows < 1                                  -> FormatError
    - byte lengths of the two files differ      -> FormatError
    - either file missing or unreadable         -> DataIOError

Both matrices are fully materialized, reference first.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from tracecompare.errors import ConfigError, FormatError
from tracecompare.store.binary_io import FLOAT_SIZE, file_length, read_matrix
from tracecompare.store.matrix import Matrix, Region

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonPair:
    """Reference and candidate matrices of identical shape."""
    reference: Matrix
    candidate: Matrix
    reference_path: Path
    candidate_path: Path

    @property
    def rows(self) -> int:
        return self.reference.rows

    @property
    def cols(self) -> int:
        return self.reference.cols


class MatrixStore:
    """
    Loads and holds a ComparisonPair.

    Usage:
        store = MatrixStore.load('ref.bin', 'cand.bin', n_cols=101)
        region = store.resolve_region(Region(row_beg=0, row_end=-1, col_beg=0, col_end=101))
    """

    def __init__(self, pair: ComparisonPair):
        self.pair = pair

    @property
    def rows(self) -> int:
        return self.pair.rows

    @property
    def cols(self) -> int:
        return self.pair.cols

    @classmethod
    def load(
        cls,
        path_reference: Union[str, Path],
        path_candidate: Union[str, Path],
        n_cols: int,
    ) -> 'MatrixStore':
        """
        Read both files into memory.

        Args:
            path_reference: File with the reference data (dataset 0)
            path_candidate: File with the data to compare (dataset 1)
            n_cols: Number of columns (traces) per row

        Returns:
            MatrixStore holding the loaded pair
        """
        if n_cols <= 0:
            raise ConfigError(f"Number of columns of the data is wrong: {n_cols}")

        path_reference = Path(path_reference)
        path_candidate = Path(path_candidate)

        length_ref = file_length(path_reference)
        rows = length_ref // (FLOAT_SIZE * n_cols)
        logger.debug(f"n_rows = {rows}")

        if rows < 1:
            raise FormatError(f"The number of rows should be positive: {rows}")

        trailing = length_ref - rows * n_cols * FLOAT_SIZE
        if trailing:
            logger.debug(f"Ignoring {trailing} trailing bytes of {path_reference}")

        reference = Matrix(read_matrix(path_reference, rows, n_cols))

        length_cand = file_length(path_candidate)
        if length_ref != length_cand:
            raise FormatError(
                f"The given files have different length! "
                f"{path_reference}: {length_ref}, {path_candidate}: {length_cand}"
            )

        candidate = Matrix(read_matrix(path_candidate, rows, n_cols))

        logger.info(f"Loaded {rows}x{n_cols} matrices from {path_reference} and {path_candidate}")

        return cls(ComparisonPair(
            reference=reference,
            candidate=candidate,
            reference_path=path_reference,
            candidate_path=path_candidate,
        ))

    def resolve_region(self, region: Region) -> Region:
        """Resolve unset bounds to the loaded extent and validate the region."""
        return region.resolve(self.rows, self.cols)
