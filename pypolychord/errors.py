"""Exceptions raised when crossing the engine/Python boundary."""


class PolyChordError(Exception):
    """Base class of all pypolychord errors."""


class BridgeError(PolyChordError):
    """A value could not cross the engine boundary.

    These are fatal for the run: the engine has no channel
    through which a callback could report an error.
    """


class LengthMismatch(BridgeError, ValueError):
    """Buffer and container sizes disagree."""

    def __init__(self, message, expected=None, actual=None):
        """Remember the `expected` and `actual` lengths."""
        BridgeError.__init__(self, message)
        self.expected = expected
        self.actual = actual


class TypeConversionFailure(BridgeError, TypeError):
    """A returned value is not a float or a flat sequence of floats."""


class NotBound(PolyChordError, RuntimeError):
    """A callback was requested outside of an active run."""


class AlreadyRunning(PolyChordError, RuntimeError):
    """Another run is active in this process."""


class InvalidRunConfig(PolyChordError, ValueError):
    """The run settings are malformed."""


class EngineNotFound(PolyChordError, OSError):
    """The PolyChord shared library could not be located."""
