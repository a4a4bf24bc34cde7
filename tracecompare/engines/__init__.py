"""
tracecompare engines - comparison diagnostics over a ComparisonPair.

Each engine computes ONE family of diagnostics.
"""

from . import difference
from . import scaling
from . import correlation
from . import rms
from . import symmetry

from .engine_base import EngineResult
from .scaling import ScaleMode
from .correlation import XCorrMode
from .rms import RMSMode

__all__ = [
    'difference',
    'scaling',
    'correlation',
    'rms',
    'symmetry',
    'EngineResult',
    'ScaleMode',
    'XCorrMode',
    'RMSMode',
]
