"""
RMS (Root Mean Square) Engine.

Per-trace RMS over the rows of the region.

    diff_files: RMS_ref[j]  = sqrt(mean_i ref(i,j)^2)
                RMS_cand[j] = sqrt(mean_i cand(i,j)^2)
                -> rms_<stem>.bin next to each input file
    amplitude:  RMS[j] = sqrt(mean_i (ref(i,j)^2 + cand(i,j)^2))
                (reference and candidate are the two components of a field)
                -> rms_<stem>_ampl.bin next to the reference file

Files hold (trace index, value) float32 pairs, one pair per trace.
"""

from enum import IntEnum
from typing import Tuple, Union

import numpy as np
import polars as pl

from tracecompare.engines.engine_base import EngineResult
from tracecompare.errors import InvalidModeError
from tracecompare.store.binary_io import write_trace_pairs
from tracecompare.store.matrix import Region
from tracecompare.store.matrix_store import ComparisonPair
from tracecompare.store.paths import rms_amplitude_path, rms_path


class RMSMode(IntEnum):
    NONE = 0
    DIFF_FILES = 1
    AMPLITUDE = 2


def trace_rms(block: np.ndarray) -> np.ndarray:
    """RMS of every column of a region block."""
    values = block.astype(np.float64)
    return np.sqrt(np.mean(values * values, axis=0))


def diff_files(pair: ComparisonPair, region: Region) -> Tuple[np.ndarray, np.ndarray]:
    """Per-trace RMS of the reference and of the candidate."""
    return (
        trace_rms(pair.reference.region(region)),
        trace_rms(pair.candidate.region(region)),
    )


def amplitude(pair: ComparisonPair, region: Region) -> np.ndarray:
    """Per-trace RMS of the amplitude of the two-component field."""
    ref = pair.reference.region(region).astype(np.float64)
    cand = pair.candidate.region(region).astype(np.float64)
    return np.sqrt(np.mean(ref * ref + cand * cand, axis=0))


def trace_indices(region: Region) -> np.ndarray:
    return np.arange(region.col_beg, region.col_end)


def rms_table(region: Region, **columns: np.ndarray) -> pl.DataFrame:
    """DataFrame with a trace column plus one column per RMS vector."""
    data = {'trace': trace_indices(region)}
    data.update({name: np.asarray(values, dtype=np.float64) for name, values in columns.items()})
    return pl.DataFrame(data)


def extrema(values: np.ndarray) -> Tuple[float, float]:
    return float(np.min(values)), float(np.max(values))


# =============================================================================
# ENGINE WRAPPER
# =============================================================================

def run_rms(
    pair: ComparisonPair,
    region: Region,
    mode: Union[int, RMSMode],
) -> EngineResult:
    result = EngineResult.start('rms', region=str(region), mode=int(mode))
    indices = trace_indices(region)

    if mode == RMSMode.DIFF_FILES:
        rms_ref, rms_cand = diff_files(pair, region)

        path_ref = rms_path(pair.reference_path)
        path_cand = rms_path(pair.candidate_path)
        write_trace_pairs(path_ref, indices, rms_ref)
        write_trace_pairs(path_cand, indices, rms_cand)
        result.add_output(path_ref)
        result.add_output(path_cand)

        result.add_table('rms', rms_table(region, rms_ref=rms_ref, rms_cand=rms_cand))
        ref_min, ref_max = extrema(rms_ref)
        cand_min, cand_max = extrema(rms_cand)
        return result.finish(
            rms_ref_min=ref_min, rms_ref_max=ref_max,
            rms_cand_min=cand_min, rms_cand_max=cand_max,
        )

    if mode == RMSMode.AMPLITUDE:
        rms = amplitude(pair, region)

        path = rms_amplitude_path(pair.reference_path)
        write_trace_pairs(path, indices, rms)
        result.add_output(path)

        result.add_table('rms', rms_table(region, rms_ampl=rms))
        rms_min, rms_max = extrema(rms)
        return result.finish(rms_min=rms_min, rms_max=rms_max)

    raise InvalidModeError('rms', mode, (int(RMSMode.DIFF_FILES), int(RMSMode.AMPLITUDE)))
