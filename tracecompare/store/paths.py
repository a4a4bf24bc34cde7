"""Derived output file names (next to the input they come from)."""

from pathlib import Path
from typing import Union

BINARY_EXTENSION = ".bin"


def derived_path(
    source: Union[str, Path],
    suffix: str = "",
    prefix: str = "",
    extension: str = BINARY_EXTENSION,
) -> Path:
    """
    Path in the directory of `source` named <prefix><stem><suffix><extension>.

    Example:
        >>> derived_path('out/seismo_x.bin', suffix='_scaled')
        PosixPath('out/seismo_x_scaled.bin')
        >>> derived_path('out/seismo_x.bin', prefix='rms_', suffix='_ampl')
        PosixPath('out/rms_seismo_x_ampl.bin')
    """
    source = Path(source)
    return source.parent / f"{prefix}{source.stem}{suffix}{extension}"


def scaled_path(candidate: Union[str, Path]) -> Path:
    return derived_path(candidate, suffix="_scaled")


def shifted_path(candidate: Union[str, Path]) -> Path:
    return derived_path(candidate, suffix="_shifted")


def rms_path(source: Union[str, Path]) -> Path:
    return derived_path(source, prefix="rms_")


def rms_amplitude_path(source: Union[str, Path]) -> Path:
    return derived_path(source, prefix="rms_", suffix="_ampl")
