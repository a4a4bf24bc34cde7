"""
Scaling and Shifting Engine.

Derives a new candidate file that is closer to the reference:

scale:
    BY_RATIO  - ratio = max|reference| / max|candidate| over the region
    BY_FACTOR - ratio = externally supplied factor
    Writes ratio * candidate to <dir>/<stem>_scaled.bin.
    A zero candidate maximum gives a non-finite ratio; the file is still written.
    A zero ratio (zero reference maximum, or factor 0) is a ConfigError and
    nothing is written.

shift:
    Aligns the time step of the candidate's absolute maximum onto the
    reference's. Output row i takes candidate row
    clamp(i - shift_step, row_beg, row_end - 1), i.e. edge rows are repeated.
    Writes <dir>/<stem>_shifted.bin.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from tracecompare.engines.engine_base import EngineResult
from tracecompare.errors import ConfigError, InvalidModeError
from tracecompare.store.binary_io import write_matrix
from tracecompare.store.matrix import Region
from tracecompare.store.matrix_store import ComparisonPair
from tracecompare.store.paths import scaled_path, shifted_path

logger = logging.getLogger(__name__)


class ScaleMode(IntEnum):
    NONE = 0
    BY_RATIO = 1
    BY_FACTOR = 2


@dataclass(frozen=True)
class ScaleResult:
    ratio: float
    max_ref: Optional[float]
    max_cand: Optional[float]
    path: Optional[Path]


@dataclass(frozen=True)
class ShiftResult:
    timestep_ref: int
    timestep_cand: int
    shift_step: int
    path: Optional[Path]


# =============================================================================
# HELPERS
# =============================================================================

def abs_max(block: np.ndarray) -> float:
    """Largest absolute value of a region block."""
    return float(np.max(np.abs(block)))


def peak_timestep(block: np.ndarray, row_beg: int) -> int:
    """
    Row (absolute index) holding the largest absolute value of the block.

    Ties resolve to the first occurrence in row-major order.
    """
    flat_index = int(np.argmax(np.abs(block)))
    return row_beg + flat_index // block.shape[1]


def shift_source_rows(region: Region, shift_step: int) -> np.ndarray:
    """Candidate row feeding each output row, clamped to the region."""
    rows = np.arange(region.row_beg, region.row_end)
    return np.clip(rows - shift_step, region.row_beg, region.row_end - 1)


# =============================================================================
# SCALE
# =============================================================================

def scale_ratio(
    pair: ComparisonPair,
    region: Region,
    mode: Union[int, ScaleMode],
    factor: float = 0.0,
) -> Tuple[float, Optional[float], Optional[float]]:
    """
    Ratio the candidate gets multiplied by.

    Returns:
        (ratio, max_ref, max_cand); the maxima are None in BY_FACTOR mode
    """
    if mode == ScaleMode.BY_RATIO:
        max_ref = abs_max(pair.reference.region(region))
        max_cand = abs_max(pair.candidate.region(region))
        with np.errstate(divide='ignore', invalid='ignore'):
            ratio = float(np.float64(max_ref) / np.float64(max_cand))
    elif mode == ScaleMode.BY_FACTOR:
        ratio, max_ref, max_cand = float(factor), None, None
    else:
        raise InvalidModeError('scale', mode, (int(ScaleMode.BY_RATIO), int(ScaleMode.BY_FACTOR)))

    # NaN/Inf pass through; only an exact zero is rejected
    if ratio == 0.0:
        raise ConfigError("Ratio wasn't initialized: the scale ratio is zero")
    return ratio, max_ref, max_cand


def scaled_candidate(pair: ComparisonPair, region: Region, ratio: float) -> np.ndarray:
    with np.errstate(over='ignore', invalid='ignore'):
        return (ratio * pair.candidate.region(region).astype(np.float64)).astype(np.float32)


def scale(
    pair: ComparisonPair,
    region: Region,
    mode: Union[int, ScaleMode],
    factor: float = 0.0,
    path: Optional[Union[str, Path]] = None,
) -> ScaleResult:
    """
    Scale the candidate and write it next to the candidate file.

    Args:
        pair: Loaded reference/candidate matrices
        region: Resolved region
        mode: ScaleMode.BY_RATIO or ScaleMode.BY_FACTOR
        factor: Scale factor used in BY_FACTOR mode
        path: Output path (default: <dir>/<stem>_scaled.bin of the candidate)

    Returns:
        ScaleResult
    """
    ratio, max_ref, max_cand = scale_ratio(pair, region, mode, factor)
    if not np.isfinite(ratio):
        logger.warning(f"Scale ratio is not finite ({ratio}); candidate maximum is {max_cand}")

    path = Path(path) if path is not None else scaled_path(pair.candidate_path)
    write_matrix(path, scaled_candidate(pair, region, ratio))

    return ScaleResult(ratio=ratio, max_ref=max_ref, max_cand=max_cand, path=path)


# =============================================================================
# SHIFT
# =============================================================================

def shift_step(pair: ComparisonPair, region: Region) -> Tuple[int, int, int]:
    """
    Returns:
        (timestep_ref, timestep_cand, timestep_ref - timestep_cand)
    """
    timestep_ref = peak_timestep(pair.reference.region(region), region.row_beg)
    timestep_cand = peak_timestep(pair.candidate.region(region), region.row_beg)
    return timestep_ref, timestep_cand, timestep_ref - timestep_cand


def shifted_candidate(pair: ComparisonPair, region: Region, step: int) -> np.ndarray:
    source_rows = shift_source_rows(region, step)
    return pair.candidate[source_rows, region.col_beg:region.col_end]


def shift(
    pair: ComparisonPair,
    region: Region,
    path: Optional[Union[str, Path]] = None,
) -> ShiftResult:
    """
    Shift the candidate in time so its peak lines up with the reference's,
    and write it next to the candidate file.
    """
    timestep_ref, timestep_cand, step = shift_step(pair, region)

    path = Path(path) if path is not None else shifted_path(pair.candidate_path)
    write_matrix(path, shifted_candidate(pair, region, step))

    return ShiftResult(
        timestep_ref=timestep_ref,
        timestep_cand=timestep_cand,
        shift_step=step,
        path=path,
    )


# =============================================================================
# ENGINE WRAPPERS
# =============================================================================

def run_scale(
    pair: ComparisonPair,
    region: Region,
    mode: Union[int, ScaleMode],
    factor: float = 0.0,
) -> EngineResult:
    result = EngineResult.start('scale', region=str(region), mode=int(mode), factor=factor)
    scaled = scale(pair, region, mode, factor)
    result.add_output(scaled.path)
    if scaled.max_ref is None:
        return result.finish(ratio=scaled.ratio)
    return result.finish(ratio=scaled.ratio, max_ref=scaled.max_ref, max_cand=scaled.max_cand)


def run_shift(pair: ComparisonPair, region: Region) -> EngineResult:
    result = EngineResult.start('shift', region=str(region))
    shifted = shift(pair, region)
    result.add_output(shifted.path)
    return result.finish(
        timestep_ref=shifted.timestep_ref,
        timestep_cand=shifted.timestep_cand,
        shift_step=shifted.shift_step,
    )
