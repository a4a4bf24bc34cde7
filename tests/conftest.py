"""
Shared fixtures: raw float32 files and loaded comparison pairs.
"""

import logging
from pathlib import Path

import numpy as np
import pytest

from tracecompare.store.matrix import Region
from tracecompare.store.matrix_store import MatrixStore


def write_raw(path: Path, values) -> Path:
    """Write values as raw little-endian float32 (row-major)."""
    np.asarray(values, dtype='<f4').tofile(path)
    return path


def read_raw(path: Path, cols: int) -> np.ndarray:
    return np.fromfile(path, dtype='<f4').reshape(-1, cols)


@pytest.fixture
def write_bin(tmp_path):
    """write_bin(name, values) -> path of a raw float32 file in tmp_path."""
    def _write(name, values):
        return write_raw(tmp_path / name, values)
    return _write


@pytest.fixture
def make_store(write_bin):
    """make_store(reference, candidate) -> MatrixStore loaded from tmp files."""
    def _make(reference, candidate, ref_name='reference.bin', cand_name='candidate.bin'):
        reference = np.asarray(reference, dtype=np.float32)
        candidate = np.asarray(candidate, dtype=np.float32)
        path_ref = write_bin(ref_name, reference)
        path_cand = write_bin(cand_name, candidate)
        return MatrixStore.load(path_ref, path_cand, reference.shape[1])
    return _make


@pytest.fixture
def make_pair(make_store):
    """make_pair(reference, candidate) -> (ComparisonPair, full Region)."""
    def _make(reference, candidate, **kwargs):
        store = make_store(reference, candidate, **kwargs)
        return store.pair, store.resolve_region(Region())
    return _make


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers main() attached, so they don't outlive captured streams."""
    yield
    logger = logging.getLogger('tracecompare')
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
