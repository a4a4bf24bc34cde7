"""
Tests for the command-line entry point: output, exit codes and the
--config / --results-dir extras.
"""

import numpy as np
import polars as pl
import pytest

from tracecompare import cli
from tracecompare.cli import build_configuration, main, split_extra_options
from tracecompare.errors import ConfigError, EXIT_INTERNAL_ERROR, EXIT_OK, EXIT_USER_ERROR

from conftest import read_raw


@pytest.fixture
def files(write_bin):
    rng = np.random.default_rng(0)
    ref = rng.normal(size=(20, 4)).astype(np.float32)
    return write_bin('ref.bin', ref), write_bin('cand.bin', ref)


def _base_args(files):
    ref, cand = files
    return ['-f0', str(ref), '-f1', str(cand), '-ncols', '4']


class TestMain:

    def test_help_without_arguments(self, capsys):
        assert main([]) == EXIT_OK
        assert "Available options" in capsys.readouterr().out

    def test_help_key(self, capsys):
        assert main(['-f0', 'x.bin', '-help']) == EXIT_OK
        out = capsys.readouterr().out
        assert "-ncols" in out
        assert "--results-dir" in out

    def test_terse_l2l1_of_identical_files(self, files, capsys):
        code = main(_base_args(files) + ['-v', '0', '-l2l1', '1'])

        assert code == EXIT_OK
        assert capsys.readouterr().out.strip() == "0 0"

    def test_verbose_run_prints_parameters(self, files, capsys):
        code = main(_base_args(files) + ['-l2l1', '1'])

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "-ncols" in out
        assert "L2_diff_rel = 0 = 0 %" in out

    def test_diff_file_is_written(self, files, tmp_path):
        target = tmp_path / 'diff.bin'

        code = main(_base_args(files) + ['-v', '0', '-df', str(target)])

        assert code == EXIT_OK
        np.testing.assert_array_equal(read_raw(target, 4), np.zeros((20, 4)))

    def test_missing_file_is_user_error(self, tmp_path, capsys):
        code = main(['-f0', str(tmp_path / 'nope.bin'), '-f1', str(tmp_path / 'nope.bin'),
                     '-ncols', '4', '-v', '0'])

        assert code == EXIT_USER_ERROR
        assert "can't be opened" in capsys.readouterr().err

    def test_invalid_parameter_is_user_error(self, files, capsys):
        code = main(_base_args(files) + ['-v', '0', '-xcor', '7'])

        assert code == EXIT_USER_ERROR
        assert capsys.readouterr().err.startswith("ERROR:")

    def test_factor_scaling_without_factor_is_user_error(self, files, tmp_path, capsys):
        code = main(_base_args(files) + ['-v', '0', '-sc1', '2'])

        assert code == EXIT_USER_ERROR
        assert "Ratio wasn't initialized" in capsys.readouterr().err
        assert not (tmp_path / 'cand_scaled.bin').exists()

    def test_odd_arguments_is_user_error(self, capsys):
        assert main(['-f0', 'a.bin', '-v']) == EXIT_USER_ERROR

    def test_unexpected_fault_is_internal_error(self, files, monkeypatch):
        def boom(self):
            raise RuntimeError("boom")

        monkeypatch.setattr(cli.ComparisonRunner, 'run', boom)

        assert main(_base_args(files) + ['-v', '0']) == EXIT_INTERNAL_ERROR


class TestExtraOptions:

    def test_split_extra_options(self):
        remaining, config_file, results_dir = split_extra_options(
            ['-f0', 'a.bin', '--config', 'c.yaml', '-o', 'out', '-v', '1']
        )

        assert remaining == ['-f0', 'a.bin', '-v', '1']
        assert config_file == 'c.yaml'
        assert results_dir == 'out'

    def test_extra_option_without_value(self):
        with pytest.raises(ConfigError, match="expected one argument"):
            split_extra_options(['-f0', 'a.bin', '--results-dir'])

    def test_negative_and_region_values_stay_in_order(self):
        remaining, _, _ = split_extra_options(
            ['-c1', '-1', '--results-dir=out', '-sf', '-0.5', '-r0', '2']
        )

        assert remaining == ['-c1', '-1', '-sf', '-0.5', '-r0', '2']

    def test_odd_registry_arguments_still_rejected(self):
        with pytest.raises(ConfigError, match="must be even"):
            build_configuration(['-o', 'out', '-f0', 'a.bin', '-ncols'])

    def test_config_file_and_results_dir(self, files, tmp_path):
        ref, cand = files
        config_path = tmp_path / 'compare.yaml'
        config_path.write_text(
            f"file_0: {ref}\nfile_1: {cand}\nn_cols: 4\nl2l1: 1\nxcor: 2\nlag_region: 1\n"
        )
        results = tmp_path / 'results'

        code = main(['--config', str(config_path), '-v', '0', '-o', str(results)])

        assert code == EXIT_OK
        l2l1 = pl.read_parquet(results / 'l2l1.parquet')
        xcorr = pl.read_parquet(results / 'xcorr.parquet')
        assert l2l1['l2_diff_rel'].to_list() == [0.0]
        assert xcorr['lag'].to_list() == [-1, 0, 1]
