"""
Console Reports
===============

Prints engine results to stdout. Verbosity controls the detail:

    0 - bare numbers, one line per value set (easy to parse by scripts)
    1 - labelled key values
    2 - everything, including intermediate values and per-trace tables

Dataset 0 is the reference, dataset 1 the candidate.
"""

import sys
from typing import Callable, Dict, Optional, TextIO

from tracecompare.engines.engine_base import EngineResult


def _fmt(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


# =============================================================================
# PER-ENGINE REPORTS
# =============================================================================

def report_l2l1(result: EngineResult, verbose: int, out: TextIO) -> None:
    m = result.metrics
    l2_rel = m['l2_diff_rel']
    l1_rel = m['l1_diff_rel']
    if verbose > 1:
        print(f"\nL2_0        = {_fmt(m['l2_ref'])}", file=out)
        print(f"L2_1        = {_fmt(m['l2_cand'])}", file=out)
        print(f"L2_diff_abs = {_fmt(m['l2_diff_abs'])}", file=out)
        print(f"L2_diff_rel = {_fmt(l2_rel)} = {_fmt(l2_rel * 100)} %", file=out)
        print(f"L1_0        = {_fmt(m['l1_ref'])}", file=out)
        print(f"L1_1        = {_fmt(m['l1_cand'])}", file=out)
        print(f"L1_diff_abs = {_fmt(m['l1_diff_abs'])}", file=out)
        print(f"L1_diff_rel = {_fmt(l1_rel)} = {_fmt(l1_rel * 100)} %", file=out)
    elif verbose > 0:
        print(f"\nL2_diff_rel = {_fmt(l2_rel * 100)} %", file=out)
        print(f"L1_diff_rel = {_fmt(l1_rel * 100)} %", file=out)
    else:
        print(f"{_fmt(l2_rel * 100)} {_fmt(l1_rel * 100)}", file=out)


def report_diff_file(result: EngineResult, verbose: int, out: TextIO) -> None:
    if verbose > 1:
        print(f"Make a file of difference: {result.outputs[0]}", file=out)


def report_scale(result: EngineResult, verbose: int, out: TextIO) -> None:
    if verbose < 2:
        return
    m = result.metrics
    print("Make a scaled file 1", file=out)
    if m.get('max_ref') is not None:
        print(f"  max_value0 = {_fmt(m['max_ref'])}", file=out)
        print(f"  max_value1 = {_fmt(m['max_cand'])}", file=out)
    print(f"  ratio      = {_fmt(m['ratio'])}", file=out)
    print(f"  scaled file: {result.outputs[0]}", file=out)


def report_shift(result: EngineResult, verbose: int, out: TextIO) -> None:
    if verbose < 2:
        return
    m = result.metrics
    print("Make a shifted file 1", file=out)
    print(f"  time step of max: dataset 0 = {m['timestep_ref']}, "
          f"dataset 1 = {m['timestep_cand']}", file=out)
    print(f"  shift in timesteps = {m['shift_step']}", file=out)
    print(f"  shifted file: {result.outputs[0]}", file=out)


def report_xcorr(result: EngineResult, verbose: int, out: TextIO) -> None:
    table = result.tables['xcorr']
    if verbose > 0:
        print("Cross correlation:", file=out)

    by_traces = 'min' in table.columns
    for row in table.iter_rows(named=True):
        if by_traces:
            if verbose > 0:
                print(f"  lag = {row['lag']} min = {_fmt(row['min'])} max = {_fmt(row['max'])}", file=out)
            else:
                print(f"{_fmt(row['min'])} {_fmt(row['max'])}", file=out)
        else:
            if verbose > 0:
                print(f"  lag = {row['lag']} value = {_fmt(row['value'])}", file=out)
            else:
                print(_fmt(row['value']), file=out)


def report_rms(result: EngineResult, verbose: int, out: TextIO) -> None:
    table = result.tables['rms']
    m = result.metrics
    if verbose > 0:
        print("RMS computation", file=out)

    value_columns = [c for c in table.columns if c != 'trace']
    if verbose > 1:
        for row in table.iter_rows(named=True):
            values = "\t".join(f"{row[c]:.12e}" for c in value_columns)
            print(f"{row['trace']}\t{values}", file=out)

    if len(result.outputs) == 1:
        print(f"  resulting file: {result.outputs[0]}", file=out)
        print(f"RMS: min = {_fmt(m['rms_min'])} max {_fmt(m['rms_max'])}", file=out)
    else:
        print("  resulting files:", file=out)
        for path in result.outputs:
            print(f"  {path}", file=out)
        print(f"RMS_0: min = {_fmt(m['rms_ref_min'])} max {_fmt(m['rms_ref_max'])}", file=out)
        print(f"RMS_1: min = {_fmt(m['rms_cand_min'])} max {_fmt(m['rms_cand_max'])}", file=out)


def report_symmetry(result: EngineResult, verbose: int, out: TextIO) -> None:
    if verbose > 0:
        print("Check symmetry", file=out)
    for row in result.tables['symmetry'].iter_rows(named=True):
        print(f"  {row['label']}: diff {_fmt(row['diff'])} between columns "
              f"{row['col_a']} and {row['col_b']}", file=out)


REPORTERS: Dict[str, Callable[[EngineResult, int, TextIO], None]] = {
    'l2l1': report_l2l1,
    'diff_file': report_diff_file,
    'scale': report_scale,
    'shift': report_shift,
    'xcorr': report_xcorr,
    'rms': report_rms,
    'symmetry': report_symmetry,
}


def print_result(result: EngineResult, verbose: int, out: Optional[TextIO] = None) -> None:
    """Print one engine result at the given verbosity."""
    out = out or sys.stdout
    REPORTERS[result.engine_name](result, verbose, out)
