"""
Raw Binary I/O
==============

Reading and writing of headerless single-precision files.

Formats:
    matrix      - float32 values, row-major, no header; dimensions supplied
                  by the caller
    trace pairs - (index, value) float32 pairs, one per trace

Writes go to a temporary file in the target directory which is then renamed
over the target, so a failed write never leaves a truncated output behind.

Key Functions:
    file_length(path)               - byte length, DataIOError if unreadable
    read_matrix(path, rows, cols)   - load a (rows, cols) float32 matrix
    write_matrix(path, values)      - write values as raw float32
    write_trace_pairs(path, idx, v) - write interleaved (index, value) pairs
    write_table(df, path)           - write a result table as parquet
"""

import logging
import os
from pathlib import Path
from typing import Union

import numpy as np
import polars as pl

from tracecompare.errors import DataIOError

logger = logging.getLogger(__name__)

# Little-endian single precision
FLOAT_DTYPE = np.dtype('<f4')
FLOAT_SIZE = FLOAT_DTYPE.itemsize


# =============================================================================
# READING
# =============================================================================

def file_length(path: Union[str, Path]) -> int:
    """
    Byte length of a readable file.

    Raises:
        DataIOError: if the file doesn't exist or can't be opened
    """
    path = Path(path)
    try:
        with open(path, 'rb') as f:
            f.seek(0, os.SEEK_END)
            return f.tell()
    except OSError:
        raise DataIOError(path)


def read_matrix(path: Union[str, Path], rows: int, cols: int) -> np.ndarray:
    """
    Read the first rows*cols values of a raw float32 file.

    Args:
        path: Path to the binary file
        rows: Number of rows to read
        cols: Number of columns per row

    Returns:
        C-contiguous float32 array of shape (rows, cols)
    """
    path = Path(path)
    count = rows * cols
    try:
        with open(path, 'rb') as f:
            values = np.fromfile(f, dtype=FLOAT_DTYPE, count=count)
    except OSError:
        raise DataIOError(path)

    if values.size != count:
        raise DataIOError(path)

    return values.astype(np.float32, copy=False).reshape(rows, cols)


# =============================================================================
# WRITING
# =============================================================================

def _write_bytes_atomic(path: Path, payload: bytes) -> int:
    # Temp file in the same directory (for atomic rename)
    temp_path = path.with_name(f".{path.name}.tmp")

    try:
        with open(temp_path, 'wb') as f:
            f.write(payload)
        os.replace(temp_path, path)
    except OSError:
        if temp_path.exists():
            temp_path.unlink()
        raise DataIOError(path, action='write')

    return len(payload)


def write_matrix(path: Union[str, Path], values: np.ndarray) -> int:
    """
    Write a matrix as raw row-major float32.

    Returns:
        Number of bytes written
    """
    path = Path(path)
    data = np.ascontiguousarray(values, dtype=FLOAT_DTYPE)
    n_bytes = _write_bytes_atomic(path, data.tobytes())
    logger.debug(f"Wrote {data.shape} matrix to {path} ({n_bytes} bytes)")
    return n_bytes


def write_trace_pairs(
    path: Union[str, Path],
    indices: np.ndarray,
    values: np.ndarray,
) -> int:
    """
    Write (index, value) float32 pairs, one pair per trace.

    Returns:
        Number of bytes written
    """
    path = Path(path)
    pairs = np.empty((len(values), 2), dtype=FLOAT_DTYPE)
    pairs[:, 0] = indices
    pairs[:, 1] = values
    return _write_bytes_atomic(path, pairs.tobytes())


def read_trace_pairs(path: Union[str, Path]) -> np.ndarray:
    """Read a (index, value) file back as an (n, 2) float32 array."""
    path = Path(path)
    try:
        values = np.fromfile(path, dtype=FLOAT_DTYPE)
    except OSError:
        raise DataIOError(path)
    return values.reshape(-1, 2)


def write_table(df: pl.DataFrame, path: Union[str, Path]) -> int:
    """
    Atomically write a result table to parquet.

    Returns:
        Number of rows written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        raise DataIOError(path, action='write')

    temp_path = path.with_suffix(".parquet.tmp")
    try:
        df.write_parquet(temp_path)
        temp_path.replace(path)
        return len(df)
    except OSError:
        if temp_path.exists():
            temp_path.unlink()
        raise DataIOError(path, action='write')
