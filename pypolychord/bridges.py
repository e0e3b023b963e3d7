"""Callbacks with the engine's native signatures.

:func:`make_loglikelihood_bridge` and :func:`make_prior_bridge` return
plain functions that the engine can call with raw double buffers.
They copy the inputs into numpy arrays, call the user functions bound
in a :class:`~pypolychord.registry.CallbackRegistry`, validate what
comes back and copy it into the engine's output buffers.

The bridges keep no state of their own, so they may be re-entered
from several engine workers at once.
"""

import numpy as np

from .buffers import to_container, from_container
from .errors import TypeConversionFailure

__all__ = ['make_loglikelihood_bridge', 'make_prior_bridge']


def _split_likelihood_result(result):
    """Split the user likelihood return value into ``(logL, phi)``."""
    try:
        logL, phi = result
    except (TypeError, ValueError):
        raise TypeConversionFailure(
            "loglikelihood must return a pair (logL, phi), got %r" % (result,))
    if isinstance(logL, (str, bytes, bool, np.bool_)):
        raise TypeConversionFailure(
            "loglikelihood value %r is not a float" % (logL,))
    try:
        logL = float(logL)
    except (TypeError, ValueError):
        raise TypeConversionFailure(
            "loglikelihood value %r is not a float" % (logL,))
    return logL, phi


def make_loglikelihood_bridge(registry):
    """Create the likelihood callback for the engine.

    Parameters
    ----------
    registry: CallbackRegistry
        run context providing the user likelihood.
        It is called as ``loglike(theta, phi)`` and must return
        ``(logL, phi)``, where `phi` holds the derived parameters.

    Returns
    -------
    loglikelihood: function
        ``loglikelihood(theta, nDims, phi, nDerived) -> float``.
        `theta` is only read; `phi` is overwritten in place.
    """
    def loglikelihood(theta, nDims, phi, nDerived):
        """Evaluate the bound likelihood on native buffers."""
        theta_list = to_container(theta, nDims)
        phi_list = to_container(phi, nDerived)
        with registry.acquire():
            result = registry.current_likelihood()(theta_list, phi_list)
        logL, phi_list = _split_likelihood_result(result)
        from_container(phi_list, phi, nDerived)
        return logL

    return loglikelihood


def make_prior_bridge(registry):
    """Create the prior callback for the engine.

    Parameters
    ----------
    registry: CallbackRegistry
        run context providing the user prior transform,
        called as ``prior(cube)`` and returning the physical parameters.

    Returns
    -------
    prior: function
        ``prior(cube, theta, nDims)``. `cube` is only read;
        `theta` is overwritten in place.
    """
    def prior(cube, theta, nDims):
        """Transform the unit cube point with the bound prior."""
        cube_list = to_container(cube, nDims)
        with registry.acquire():
            theta_list = registry.current_prior()(cube_list)
        from_container(theta_list, theta, nDims)

    return prior
