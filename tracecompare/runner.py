"""
Comparison Runner (Engine Driver)

Loads the matrix pair once and runs every enabled engine, strictly in this
order:

    1. l2l1        - norms of the difference        (l2l1 == 1)
    2. diff_file   - difference matrix file         (diff_file set)
    3. scale       - scaled candidate file          (scale_mode != 0)
    4. shift       - time-shifted candidate file    (shift)
    5. xcorr       - cross-correlation lag sweep    (xcor != 0)
    6. rms         - per-trace RMS files            (rms != 0)
    7. symmetry    - mirrored columns, dataset 0 then dataset 1 (check_symmetry)

Single-threaded. The first failing engine aborts the run; its exception
propagates to the caller.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple

import polars as pl

from tracecompare.config.parameters import Configuration
from tracecompare.engines.correlation import run_xcorr
from tracecompare.engines.difference import run_diff_file, run_l2l1
from tracecompare.engines.engine_base import EngineResult
from tracecompare.engines.rms import run_rms
from tracecompare.engines.scaling import run_scale, run_shift
from tracecompare.engines.symmetry import run_symmetry
from tracecompare.report import print_result
from tracecompare.store.binary_io import write_table
from tracecompare.store.matrix import Region
from tracecompare.store.matrix_store import MatrixStore
from tracecompare.utils.memory import RunTimer

logger = logging.getLogger(__name__)


class ComparisonRunner:
    """
    Runs a comparison described by a validated Configuration.

    Usage:
        runner = ComparisonRunner(config)
        summary = runner.run()
    """

    def __init__(self, config: Configuration, out: Optional[TextIO] = None):
        self.config = config
        self.out = out or sys.stdout
        self.store: Optional[MatrixStore] = None
        self.region: Optional[Region] = None
        self.results: List[EngineResult] = []

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> MatrixStore:
        """Load both files and resolve the analysis region."""
        config = self.config
        self.store = MatrixStore.load(config.file_0, config.file_1, config.n_cols)
        if config.verbose > 1:
            print(f"n_rows = {self.store.rows}", file=self.out)

        requested = Region(
            row_beg=config.row_beg,
            row_end=config.row_end,
            col_beg=config.col_beg,
            col_end=config.col_end,
        )
        self.region = self.store.resolve_region(requested)
        config.row_end = self.region.row_end
        config.col_end = self.region.col_end

        logger.info(f"Region: {self.region}")
        return self.store

    # -------------------------------------------------------------------------
    # Schedule
    # -------------------------------------------------------------------------

    def schedule(self) -> List[Tuple[str, Callable[[], EngineResult]]]:
        """Enabled engines in execution order."""
        config = self.config
        pair = self.store.pair
        region = self.region

        steps = []
        if config.l2l1:
            steps.append(('l2l1', lambda: run_l2l1(pair, region)))
        if config.wants_diff_file:
            steps.append(('diff_file', lambda: run_diff_file(pair, region, config.diff_file)))
        if config.scale_mode:
            steps.append(('scale', lambda: run_scale(pair, region, config.scale_mode, config.scale_factor)))
        if config.shift:
            steps.append(('shift', lambda: run_shift(pair, region)))
        if config.xcor:
            steps.append(('xcorr', lambda: run_xcorr(pair, region, config.xcor, config.lag_region)))
        if config.rms:
            steps.append(('rms', lambda: run_rms(pair, region, config.rms)))
        if config.check_symmetry:
            steps.append(('symmetry', lambda: run_symmetry(pair.reference, region, "dataset 0")))
            steps.append(('symmetry', lambda: run_symmetry(pair.candidate, region, "dataset 1")))
        return steps

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def run(self) -> Dict[str, Any]:
        """Load, run every enabled engine, report, and export result tables."""
        timer = RunTimer()

        if self.store is None:
            self.load()

        steps = self.schedule()
        if not steps:
            logger.warning("No comparison is enabled; nothing to do")

        for name, step in steps:
            logger.debug(f"Running {name}")
            result = step()
            self.results.append(result)
            logger.debug(result.summary())
            print_result(result, self.config.verbose, self.out)

        exported = []
        if self.config.results_dir:
            exported = self.export(self.config.results_dir)

        if self.config.verbose > 1:
            timer.log_usage("Comparison")

        return {
            'status': 'complete',
            'rows': self.store.rows,
            'cols': self.store.cols,
            'region': str(self.region),
            'results': self.results,
            'exported': exported,
        }

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def result_tables(self) -> Dict[str, pl.DataFrame]:
        """One table per engine; engines without tables contribute their metrics."""
        grouped: Dict[str, List[pl.DataFrame]] = {}
        for result in self.results:
            if result.tables:
                for name, df in result.tables.items():
                    grouped.setdefault(name, []).append(df)
            elif result.metrics:
                grouped.setdefault(result.engine_name, []).append(pl.DataFrame([result.metrics]))
        return {name: pl.concat(frames) for name, frames in grouped.items()}

    def export(self, results_dir) -> List[Path]:
        """Write every result table as <results_dir>/<name>.parquet."""
        results_dir = Path(results_dir)
        written = []
        for name, df in self.result_tables().items():
            path = results_dir / f"{name}.parquet"
            write_table(df, path)
            written.append(path)
            logger.info(f"Saved {name}: {df.shape} -> {path}")
        return written


def run_comparison(config: Configuration, out: Optional[TextIO] = None) -> Dict[str, Any]:
    """Validate `config` and run the comparison it describes."""
    config.resolve_columns()
    config.validate()
    return ComparisonRunner(config, out=out).run()
