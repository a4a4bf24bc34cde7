"""Matrix storage and raw binary I/O."""

from tracecompare.store.matrix import Matrix, Region
from tracecompare.store.matrix_store import ComparisonPair, MatrixStore

__all__ = [
    'Matrix',
    'Region',
    'ComparisonPair',
    'MatrixStore',
]
