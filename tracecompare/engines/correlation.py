"""
Cross-Correlation Engine.

Normalized cross-correlation between reference and lagged candidate,
swept over every integer lag in [-lag_region, +lag_region].

For a set of N samples (one trace, or the whole flattened region):

    mu, sigma = mean and population std (sqrt(E[x^2] - E[x]^2)) of the
                unlagged data
    d1[i]     = candidate[i + lag] if i + lag is inside the region, else 0
    xcorr     = (1/N) * sum((ref[i] - mu0) * (d1[i] - mu1)) / (sigma0 * sigma1)

Out-of-range lagged samples are zero-padded (they still contribute a
(ref - mu0) * (-mu1) term). A zero sigma gives NaN/Inf.
"""

from enum import IntEnum
from typing import Union

import numpy as np
import polars as pl

from tracecompare.engines.engine_base import EngineResult
from tracecompare.errors import InvalidModeError
from tracecompare.store.matrix import Region
from tracecompare.store.matrix_store import ComparisonPair


class XCorrMode(IntEnum):
    NONE = 0
    BY_TRACES = 1
    WHOLE = 2


# =============================================================================
# HELPERS
# =============================================================================

def lagged(block: np.ndarray, lag: int) -> np.ndarray:
    """
    Rows of `block` shifted by `lag`: out[i] = block[i + lag], zero where
    i + lag falls outside [0, n_rows).
    """
    n = block.shape[0]
    out = np.zeros_like(block)
    if abs(lag) >= n:
        return out
    if lag >= 0:
        out[:n - lag] = block[lag:]
    else:
        out[-lag:] = block[:n + lag]
    return out


def moments(values: np.ndarray, axis=None):
    """Mean and population standard deviation, sqrt(E[x^2] - E[x]^2)."""
    mu = np.mean(values, axis=axis)
    second = np.mean(values * values, axis=axis)
    with np.errstate(invalid='ignore'):
        sigma = np.sqrt(second - mu * mu)
    return mu, sigma


def _region_blocks(pair: ComparisonPair, region: Region):
    ref = pair.reference.region(region).astype(np.float64)
    cand = pair.candidate.region(region).astype(np.float64)
    return ref, cand


# =============================================================================
# CORRELATION AT ONE LAG
# =============================================================================

def by_traces(pair: ComparisonPair, region: Region, lag: int) -> np.ndarray:
    """
    Normalized cross-correlation of every trace (column) at one lag.

    Returns:
        float64 array with one value per column of the region
    """
    ref, cand = _region_blocks(pair, region)
    mu0, sigma0 = moments(ref, axis=0)
    mu1, sigma1 = moments(cand, axis=0)

    covariance = np.mean((ref - mu0) * (lagged(cand, lag) - mu1), axis=0)

    with np.errstate(divide='ignore', invalid='ignore'):
        return covariance / (sigma0 * sigma1)


def whole(pair: ComparisonPair, region: Region, lag: int) -> float:
    """Normalized cross-correlation of the whole region at one lag."""
    ref, cand = _region_blocks(pair, region)
    mu0, sigma0 = moments(ref)
    mu1, sigma1 = moments(cand)

    covariance = np.mean((ref - mu0) * (lagged(cand, lag) - mu1))

    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(covariance) / (sigma0 * sigma1))


# =============================================================================
# LAG SWEEPS
# =============================================================================

def lags(lag_region: int) -> range:
    return range(-lag_region, lag_region + 1)


def sweep_by_traces(pair: ComparisonPair, region: Region, lag_region: int) -> pl.DataFrame:
    """
    Per-trace correlation at each lag, reduced to min and max over traces.

    Returns:
        DataFrame with columns lag, min, max
    """
    rows = []
    for lag in lags(lag_region):
        values = by_traces(pair, region, lag)
        rows.append({
            'lag': lag,
            'min': float(np.min(values)),
            'max': float(np.max(values)),
        })
    return pl.DataFrame(rows, schema={'lag': pl.Int64, 'min': pl.Float64, 'max': pl.Float64})


def sweep_whole(pair: ComparisonPair, region: Region, lag_region: int) -> pl.DataFrame:
    """
    Whole-region correlation at each lag.

    Returns:
        DataFrame with columns lag, value
    """
    rows = [{'lag': lag, 'value': whole(pair, region, lag)} for lag in lags(lag_region)]
    return pl.DataFrame(rows, schema={'lag': pl.Int64, 'value': pl.Float64})


# =============================================================================
# ENGINE WRAPPER
# =============================================================================

def run_xcorr(
    pair: ComparisonPair,
    region: Region,
    mode: Union[int, XCorrMode],
    lag_region: int,
) -> EngineResult:
    result = EngineResult.start('xcorr', region=str(region), mode=int(mode), lag_region=lag_region)

    if mode == XCorrMode.BY_TRACES:
        table = sweep_by_traces(pair, region, lag_region)
    elif mode == XCorrMode.WHOLE:
        table = sweep_whole(pair, region, lag_region)
    else:
        raise InvalidModeError('xcorrelation', mode, (int(XCorrMode.BY_TRACES), int(XCorrMode.WHOLE)))

    result.add_table('xcorr', table)
    return result.finish(n_lags=len(table))
