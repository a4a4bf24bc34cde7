"""
Tests for the mirror-symmetry check of region columns.
"""

import numpy as np
import pytest

from tracecompare.engines.symmetry import (
    check,
    columns_differ,
    mirrored_pairs,
    run_symmetry,
)
from tracecompare.store.matrix import Matrix, Region


def _full(matrix: Matrix) -> Region:
    return Region().resolve(matrix.rows, matrix.cols)


class TestMirroredPairs:

    def test_even_column_count(self):
        region = Region(row_beg=0, row_end=1, col_beg=2, col_end=6)
        assert list(mirrored_pairs(region)) == [(2, 5), (3, 4)]

    def test_odd_column_count_skips_middle(self):
        region = Region(row_beg=0, row_end=1, col_beg=0, col_end=5)
        assert list(mirrored_pairs(region)) == [(0, 4), (1, 3)]

    def test_single_column_has_no_pairs(self):
        region = Region(row_beg=0, row_end=1, col_beg=3, col_end=4)
        assert list(mirrored_pairs(region)) == []


class TestColumnsDiffer:

    def test_mirror_symmetric_matrix(self):
        matrix = Matrix(np.array([[1, 2, 2, 1], [-3, 5, 5, -3]], dtype=np.float32))

        table = check(matrix, _full(matrix), 'dataset 0')

        assert table['diff'].to_list() == [0.0, 0.0]

    def test_relative_difference(self):
        matrix = Matrix(np.array([[2.0, 2.5], [4.0, 4.0]], dtype=np.float32))

        assert columns_differ(matrix, _full(matrix), 0, 1) == pytest.approx(0.25)

    def test_absolute_difference_below_tolerance(self):
        matrix = Matrix(np.array([[0.0, 0.5]], dtype=np.float32))

        assert columns_differ(matrix, _full(matrix), 0, 1) == pytest.approx(0.5)

    def test_nan_samples_are_skipped(self):
        matrix = Matrix(np.array([[np.nan, 1.0], [2.0, 3.0]], dtype=np.float32))

        assert columns_differ(matrix, _full(matrix), 0, 1) == pytest.approx(0.5)

    def test_all_nan_column_is_zero(self):
        matrix = Matrix(np.array([[np.nan, 1.0], [np.nan, 3.0]], dtype=np.float32))

        assert columns_differ(matrix, _full(matrix), 0, 1) == 0.0

    def test_empty_row_range_is_zero(self):
        matrix = Matrix(np.array([[1.0, 2.0]], dtype=np.float32))
        region = Region(row_beg=0, row_end=0, col_beg=0, col_end=2)

        assert columns_differ(matrix, region, 0, 1) == 0.0


class TestRunSymmetry:

    def test_table_is_labelled(self):
        matrix = Matrix(np.arange(6, dtype=np.float32).reshape(2, 3) + 1.0)

        result = run_symmetry(matrix, _full(matrix), 'dataset 1')
        table = result.tables['symmetry']

        assert table.columns == ['label', 'col_a', 'col_b', 'diff']
        assert table['label'].to_list() == ['dataset 1']
        assert table.row(0, named=True)['col_b'] == 2
        assert result.metrics['n_pairs'] == 1
