"""
Symmetry Engine.

Compares each column of the region with its mirror across the column range:
column col_beg + c against col_end - 1 - c, for c < (col_end - col_beg) // 2.

For every mirrored pair:

    e(i) = |v0 - v1| / |v0|   if |v0| > tol
           |v0 - v1|          otherwise
    diff = max over the region rows of e(i)

Diagnostic only: one value per pair, no aggregate.
"""

import numpy as np
import polars as pl

from tracecompare.engines.engine_base import EngineResult
from tracecompare.store.matrix import Matrix, Region

TOLERANCE = 1e-5

SCHEMA = {'label': pl.Utf8, 'col_a': pl.Int64, 'col_b': pl.Int64, 'diff': pl.Float64}


def columns_differ(matrix: Matrix, region: Region, col_a: int, col_b: int,
                   tol: float = TOLERANCE) -> float:
    """Largest (relative where possible) difference between two columns."""
    d0 = matrix[region.rows, col_a].astype(np.float64)
    d1 = matrix[region.rows, col_b].astype(np.float64)

    diff = np.abs(d0 - d1)
    scale = np.abs(d0)
    relative = scale > tol
    diff[relative] /= scale[relative]

    # NaN terms never replace the running maximum
    return float(np.fmax.reduce(diff, initial=0.0))


def mirrored_pairs(region: Region):
    for c in range(region.n_cols // 2):
        yield region.col_beg + c, region.col_end - 1 - c


def check(matrix: Matrix, region: Region, label: str) -> pl.DataFrame:
    """
    Mirror-symmetry differences of one matrix.

    Returns:
        DataFrame with columns label, col_a, col_b, diff (one row per pair)
    """
    rows = [
        {'label': label, 'col_a': a, 'col_b': b, 'diff': columns_differ(matrix, region, a, b)}
        for a, b in mirrored_pairs(region)
    ]
    return pl.DataFrame(rows, schema=SCHEMA)


def run_symmetry(matrix: Matrix, region: Region, label: str) -> EngineResult:
    result = EngineResult.start('symmetry', region=str(region), label=label)
    table = check(matrix, region, label)
    result.add_table('symmetry', table)
    return result.finish(n_pairs=len(table))
