"""
Tests for the comparison runner: region resolution, engine order, output
files and result export.
"""

import io

import numpy as np
import polars as pl
import pytest

from tracecompare.config.parameters import Configuration
from tracecompare.errors import ConfigError, FormatError
from tracecompare.runner import ComparisonRunner, run_comparison


@pytest.fixture
def config(write_bin):
    rng = np.random.default_rng(42)
    ref = rng.normal(size=(30, 6)).astype(np.float32)
    cand = (1.5 * ref).astype(np.float32)
    return Configuration(
        file_0=str(write_bin('ref.bin', ref)),
        file_1=str(write_bin('cand.bin', cand)),
        n_cols=6,
        col_end=6,
        verbose=0,
    )


def _run(config):
    out = io.StringIO()
    summary = ComparisonRunner(config, out=out).run()
    return summary, out.getvalue()


class TestRegion:

    def test_row_end_resolved_to_row_count(self, config):
        runner = ComparisonRunner(config)
        runner.load()

        assert config.row_end == 30
        assert runner.region.shape == (30, 6)

    def test_region_beyond_rows_rejected(self, config):
        config.row_end = 31

        with pytest.raises(ConfigError):
            ComparisonRunner(config).load()

    def test_length_mismatch_aborts(self, config, write_bin):
        config.file_1 = str(write_bin('short.bin', np.ones(12, dtype=np.float32)))

        with pytest.raises(FormatError):
            _run(config)


class TestSchedule:

    def test_nothing_enabled(self, config):
        summary, out = _run(config)

        assert summary['status'] == 'complete'
        assert summary['results'] == []
        assert out == ""

    def test_engines_run_in_fixed_order(self, config, tmp_path):
        config.check_symmetry = True
        config.rms = 1
        config.xcor = 1
        config.shift = True
        config.scale_mode = 1
        config.diff_file = str(tmp_path / 'diff.bin')
        config.l2l1 = 1

        summary, _ = _run(config)

        names = [r.engine_name for r in summary['results']]
        assert names == ['l2l1', 'diff_file', 'scale', 'shift', 'xcorr', 'rms',
                         'symmetry', 'symmetry']
        labels = [r.parameters['label'] for r in summary['results'][-2:]]
        assert labels == ['dataset 0', 'dataset 1']

    def test_output_files_next_to_candidate(self, config, tmp_path):
        config.scale_mode = 1
        config.shift = True
        config.rms = 2

        _run(config)

        assert (tmp_path / 'cand_scaled.bin').exists()
        assert (tmp_path / 'cand_shifted.bin').exists()
        assert (tmp_path / 'rms_ref_ampl.bin').exists()

    def test_scaling_undoes_gain(self, config):
        config.scale_mode = 1

        summary, _ = _run(config)

        assert summary['results'][0].metrics['ratio'] == pytest.approx(1 / 1.5, rel=1e-6)

    def test_full_report_starts_with_row_count(self, config):
        config.verbose = 2
        config.l2l1 = 1

        _, out = _run(config)
        lines = out.splitlines()

        assert lines[0] == "n_rows = 30"
        assert any(line.startswith("L2_0        = ") for line in lines)

    def test_terse_reports(self, config):
        config.l2l1 = 1
        config.xcor = 2

        _, out = _run(config)
        lines = out.strip().splitlines()

        assert len(lines) == 2
        l2_rel, l1_rel = (float(v) for v in lines[0].split())
        assert l2_rel == pytest.approx(100 * 0.5 / 1.0, rel=1e-5)
        assert float(lines[1]) == pytest.approx(1.0)


class TestExport:

    def test_tables_written_as_parquet(self, config, tmp_path):
        config.l2l1 = 1
        config.shift = True
        config.check_symmetry = True
        config.results_dir = str(tmp_path / 'results')

        summary, _ = _run(config)

        names = sorted(p.name for p in summary['exported'])
        assert names == ['l2l1.parquet', 'shift.parquet', 'symmetry.parquet']

        symmetry = pl.read_parquet(tmp_path / 'results' / 'symmetry.parquet')
        assert symmetry['label'].unique().sort().to_list() == ['dataset 0', 'dataset 1']
        shift = pl.read_parquet(tmp_path / 'results' / 'shift.parquet')
        assert shift['shift_step'].to_list() == [0]

    def test_run_comparison_validates(self, config):
        config.lag_region = -3
        config.xcor = 1

        with pytest.raises(ConfigError):
            run_comparison(config, out=io.StringIO())
