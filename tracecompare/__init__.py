"""
tracecompare - Comparison of Paired Binary Datasets
===================================================

Compares two equal-shaped float32 matrices (rows = time steps, columns =
traces), e.g. seismograms of two simulations.

Architecture:
    - store/:    Matrix, Region, MatrixStore (raw binary loading and writing)
    - engines/:  difference, scaling, correlation, rms, symmetry
    - config/:   Configuration, option registry, YAML files
    - runner.py: ComparisonRunner (runs enabled engines in a fixed order)
    - report.py: console reports by verbosity
    - cli.py:    command line interface

Usage:
    # CLI
    tracecompare -f0 ref.bin -f1 cand.bin -ncols 101 -l2l1 1

    # Python
    from tracecompare.config import Configuration
    from tracecompare.runner import run_comparison

    config = Configuration(file_0='ref.bin', file_1='cand.bin', n_cols=101, l2l1=1)
    summary = run_comparison(config)
"""

__version__ = "1.0.0"

__all__ = ['runner', 'engines', 'store', 'config', '__version__']


def __getattr__(name):
    """Lazy import of submodules."""
    if name == 'runner':
        from . import runner
        return runner
    elif name == 'engines':
        from . import engines
        return engines
    elif name == 'store':
        from . import store
        return store
    elif name == 'config':
        from . import config
        return config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
