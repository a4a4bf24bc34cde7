"""
Difference Engine.

L2 / L1 norms of both datasets and of their element-wise difference over
the region, and the difference matrix itself written as a raw file.

    l2_X = sqrt(sum(v^2)),  l1_X = sum(|v|),  d = reference - candidate
    l2_diff_rel = l2_diff_abs / l2_ref,  l1_diff_rel = l1_diff_abs / l1_ref

Relative values are NaN/Inf when the reference norm is zero.
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Union

import numpy as np
import polars as pl

from tracecompare.engines.engine_base import EngineResult
from tracecompare.store.binary_io import write_matrix
from tracecompare.store.matrix import Region
from tracecompare.store.matrix_store import ComparisonPair


@dataclass(frozen=True)
class L2L1Metrics:
    l2_ref: float
    l2_cand: float
    l2_diff_abs: float
    l2_diff_rel: float
    l1_ref: float
    l1_cand: float
    l1_diff_abs: float
    l1_diff_rel: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def difference(pair: ComparisonPair, region: Region) -> np.ndarray:
    """Element-wise reference - candidate over the region, in float32."""
    return pair.reference.region(region) - pair.candidate.region(region)


def l2l1(pair: ComparisonPair, region: Region) -> L2L1Metrics:
    """
    Compute L2 and L1 norms of both datasets and of their difference.

    Args:
        pair: Loaded reference/candidate matrices
        region: Resolved region

    Returns:
        L2L1Metrics
    """
    ref = pair.reference.region(region).astype(np.float64)
    cand = pair.candidate.region(region).astype(np.float64)
    diff = difference(pair, region).astype(np.float64)

    l2_ref = float(np.sqrt(np.sum(ref * ref)))
    l2_cand = float(np.sqrt(np.sum(cand * cand)))
    l2_diff = float(np.sqrt(np.sum(diff * diff)))

    l1_ref = float(np.sum(np.abs(ref)))
    l1_cand = float(np.sum(np.abs(cand)))
    l1_diff = float(np.sum(np.abs(diff)))

    with np.errstate(divide='ignore', invalid='ignore'):
        l2_rel = float(np.float64(l2_diff) / np.float64(l2_ref))
        l1_rel = float(np.float64(l1_diff) / np.float64(l1_ref))

    return L2L1Metrics(
        l2_ref=l2_ref,
        l2_cand=l2_cand,
        l2_diff_abs=l2_diff,
        l2_diff_rel=l2_rel,
        l1_ref=l1_ref,
        l1_cand=l1_cand,
        l1_diff_abs=l1_diff,
        l1_diff_rel=l1_rel,
    )


def diff_file(pair: ComparisonPair, region: Region, path: Union[str, Path]) -> Path:
    """
    Write reference - candidate over the region as a raw float32 matrix of
    shape (row_end - row_beg, col_end - col_beg).
    """
    path = Path(path)
    write_matrix(path, difference(pair, region))
    return path


# =============================================================================
# ENGINE WRAPPERS
# =============================================================================

def run_l2l1(pair: ComparisonPair, region: Region) -> EngineResult:
    result = EngineResult.start('l2l1', region=str(region))
    metrics = l2l1(pair, region)
    result.add_table('l2l1', pl.DataFrame([metrics.to_dict()]))
    return result.finish(**metrics.to_dict())


def run_diff_file(pair: ComparisonPair, region: Region, path: Union[str, Path]) -> EngineResult:
    result = EngineResult.start('diff_file', region=str(region), path=str(path))
    result.add_output(diff_file(pair, region, path))
    return result.finish(rows=region.n_rows, cols=region.n_cols)
