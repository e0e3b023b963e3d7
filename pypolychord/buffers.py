"""Conversion between native double buffers and numpy vectors.

A native buffer is anything holding contiguous doubles:

- a ``ctypes.POINTER(ctypes.c_double)``, as handed over by the engine,
- a ``ctypes.c_double * n`` array,
- a one-dimensional numpy array (or, for convenience, a list).

The Python side always sees a fresh one-dimensional float64 numpy array,
so user code can never hold on to engine-owned memory.
"""

import ctypes
import numpy as np

from .errors import LengthMismatch, TypeConversionFailure

__all__ = ['to_container', 'from_container']


def _native_view(buffer, length):
    """Return a writable numpy view of the first `length` entries of `buffer`.

    Returns None if `buffer` is a plain Python sequence, which has to
    be accessed item by item.
    """
    if isinstance(buffer, np.ndarray):
        if buffer.ndim != 1:
            raise TypeConversionFailure(
                "buffer must be one-dimensional, got shape %s" % (buffer.shape,))
        if buffer.size < length:
            raise LengthMismatch(
                "buffer holds %d values, expected at least %d" % (buffer.size, length),
                expected=length, actual=buffer.size)
        return buffer[:length]
    if isinstance(buffer, ctypes._Pointer):
        # a bare pointer carries no size: only NULL can be detected
        if not buffer:
            raise LengthMismatch(
                "NULL buffer, expected %d values" % length,
                expected=length, actual=0)
        return np.ctypeslib.as_array(buffer, shape=(length,))
    if isinstance(buffer, ctypes.Array):
        if len(buffer) < length:
            raise LengthMismatch(
                "buffer holds %d values, expected at least %d" % (len(buffer), length),
                expected=length, actual=len(buffer))
        return np.ctypeslib.as_array(buffer)[:length]
    if len(buffer) < length:
        raise LengthMismatch(
            "buffer holds %d values, expected at least %d" % (len(buffer), length),
            expected=length, actual=len(buffer))
    return None


def _check_length(length):
    if length < 0:
        raise LengthMismatch(
            "negative buffer length %d" % length, expected=length)


def to_container(buffer, length):
    """Copy the first `length` values of a native buffer.

    Parameters
    ----------
    buffer: native buffer
        source of the values; left untouched
    length: int
        number of values declared by the engine

    Returns
    -------
    values: array
        new float64 array of shape (`length`,)
    """
    _check_length(length)
    if length == 0:
        # the engine may hand over a dangling pointer for empty vectors
        return np.empty(0)
    view = _native_view(buffer, length)
    if view is None:
        return np.array([float(buffer[i]) for i in range(length)])
    return np.array(view, dtype=float)


def _decode(container):
    """Interpret a value returned by user code as a flat float vector."""
    try:
        values = np.asarray(container)
    except (TypeError, ValueError) as e:
        raise TypeConversionFailure(
            "cannot interpret %r as a sequence of floats: %s" % (container, e))
    if values.dtype.kind not in 'iuf':
        raise TypeConversionFailure(
            "expected a sequence of floats, got %r (dtype %s)" % (container, values.dtype))
    if values.ndim != 1:
        raise TypeConversionFailure(
            "expected a flat sequence of floats, got shape %s" % (values.shape,))
    return values.astype(float)


def from_container(container, buffer, length):
    """Write `container` into the first `length` entries of `buffer`.

    The container must hold exactly `length` numbers. Nothing is
    written if it does not, as the engine relies on exact-length arrays.

    Parameters
    ----------
    container: sequence of float
        values produced by user code
    buffer: native buffer
        destination; its ownership stays with the caller
    length: int
        number of values declared by the engine
    """
    _check_length(length)
    values = _decode(container)
    if values.size != length:
        raise LengthMismatch(
            "got %d values, expected %d" % (values.size, length),
            expected=length, actual=values.size)
    if length == 0:
        return
    view = _native_view(buffer, length)
    if view is None:
        for i in range(length):
            buffer[i] = float(values[i])
    else:
        view[:] = values
