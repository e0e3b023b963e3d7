# noqa: D400 D205
"""
Python interface to the PolyChord nested sampling engine

PolyChord calls back into plain C functions operating on double buffers.
This package provides those callbacks and marshals every call into the
Python likelihood and prior functions given by the user.
"""

from .errors import (
    PolyChordError, BridgeError, LengthMismatch, TypeConversionFailure,
    NotBound, AlreadyRunning, InvalidRunConfig, EngineNotFound)
from .settings import RunConfig
from .run import run_polychord, run, active_run


__version__ = '1.0.0'
