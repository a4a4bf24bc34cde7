"""
Tests for loading comparison pairs from raw float32 files.

Row count comes from the reference byte length; incomplete trailing rows
are dropped silently, mismatched lengths and empty matrices are errors.
"""

import numpy as np
import pytest

from tracecompare.errors import ConfigError, DataIOError, FormatError
from tracecompare.store.matrix import Matrix, Region
from tracecompare.store.matrix_store import MatrixStore


# ─────────────────────────────────────────────────────────────────────
# Loading
# ─────────────────────────────────────────────────────────────────────

class TestLoad:

    def test_loads_both_matrices_row_major(self, write_bin):
        ref = np.arange(12, dtype=np.float32).reshape(4, 3)
        cand = -ref
        store = MatrixStore.load(write_bin('a.bin', ref), write_bin('b.bin', cand), 3)

        assert store.rows == 4
        assert store.cols == 3
        np.testing.assert_array_equal(store.pair.reference.values, ref)
        np.testing.assert_array_equal(store.pair.candidate.values, cand)
        assert store.pair.reference[2, 1] == 7.0

    def test_trailing_bytes_are_dropped(self, write_bin):
        # 7 values with 3 columns -> 2 complete rows
        values = np.arange(7, dtype=np.float32)
        store = MatrixStore.load(write_bin('a.bin', values), write_bin('b.bin', values), 3)

        assert store.rows == 2
        np.testing.assert_array_equal(store.pair.reference.values, [[0, 1, 2], [3, 4, 5]])

    def test_partial_float_is_dropped(self, tmp_path):
        path_a = tmp_path / 'a.bin'
        path_b = tmp_path / 'b.bin'
        payload = np.arange(4, dtype='<f4').tobytes() + b'\x01\x02'
        path_a.write_bytes(payload)
        path_b.write_bytes(payload)

        store = MatrixStore.load(path_a, path_b, 2)
        assert store.rows == 2

    def test_fewer_values_than_one_row_is_format_error(self, write_bin):
        values = np.ones(3, dtype=np.float32)
        with pytest.raises(FormatError, match="should be positive"):
            MatrixStore.load(write_bin('a.bin', values), write_bin('b.bin', values), 4)

    def test_different_lengths_is_format_error(self, write_bin):
        with pytest.raises(FormatError, match="different length"):
            MatrixStore.load(
                write_bin('a.bin', np.ones(6, dtype=np.float32)),
                write_bin('b.bin', np.ones(8, dtype=np.float32)),
                2,
            )

    def test_missing_reference_is_io_error(self, tmp_path, write_bin):
        with pytest.raises(DataIOError) as info:
            MatrixStore.load(tmp_path / 'missing.bin', write_bin('b.bin', np.ones(4)), 2)
        assert isinstance(info.value, OSError)
        assert 'missing.bin' in str(info.value)

    def test_missing_candidate_is_io_error(self, tmp_path, write_bin):
        with pytest.raises(DataIOError):
            MatrixStore.load(write_bin('a.bin', np.ones(4)), tmp_path / 'missing.bin', 2)

    def test_non_positive_columns_rejected(self, write_bin):
        path = write_bin('a.bin', np.ones(4))
        with pytest.raises(ConfigError):
            MatrixStore.load(path, path, 0)

    def test_loaded_matrices_are_read_only(self, make_store):
        store = make_store([[1, 2], [3, 4]], [[1, 2], [3, 4]])
        with pytest.raises(ValueError):
            store.pair.reference.values[0, 0] = 10.0


# ─────────────────────────────────────────────────────────────────────
# Regions
# ─────────────────────────────────────────────────────────────────────

class TestRegion:

    def test_unset_row_end_resolves_to_rows(self, make_store):
        store = make_store(np.zeros((5, 3)), np.zeros((5, 3)))
        region = store.resolve_region(Region(row_beg=1, row_end=-1, col_beg=0, col_end=3))

        assert region.row_end == 5
        assert region.shape == (4, 3)

    def test_unset_col_end_resolves_to_cols(self):
        region = Region(row_beg=0, row_end=2).resolve(rows=2, cols=7)
        assert region.col_end == 7

    @pytest.mark.parametrize('region', [
        Region(row_beg=0, row_end=6, col_beg=0, col_end=3),
        Region(row_beg=3, row_end=3, col_beg=0, col_end=3),
        Region(row_beg=0, row_end=5, col_beg=2, col_end=1),
        Region(row_beg=0, row_end=5, col_beg=0, col_end=4),
        Region(row_beg=-1, row_end=5, col_beg=0, col_end=3),
    ])
    def test_out_of_range_region_rejected(self, region):
        with pytest.raises(ConfigError):
            region.resolve(rows=5, cols=3)

    def test_region_view_selects_half_open_window(self):
        matrix = Matrix(np.arange(20, dtype=np.float32).reshape(4, 5))
        block = matrix.region(Region(row_beg=1, row_end=3, col_beg=2, col_end=4))

        np.testing.assert_array_equal(block, [[7, 8], [12, 13]])
