"""Run context holding the user likelihood and prior for one run.

The bridges do not look up module globals. Each run creates its own
:class:`CallbackRegistry` and the bridges capture it. The "one run
per process" rule is enforced separately by :data:`RUN_GUARD`.
"""

import threading
from contextlib import contextmanager

from .errors import AlreadyRunning, NotBound

__all__ = ['CallbackRegistry', 'RUN_GUARD']

# held for the whole duration of a run
RUN_GUARD = threading.Lock()


class CallbackRegistry(object):
    """Slots for the likelihood and prior callables of a run.

    Parameters
    ----------
    serialize: bool
        If true, bridge calls re-entering from several engine
        threads take turns (see :meth:`acquire`).
    """

    def __init__(self, serialize=True):
        self._likelihood = None
        self._prior = None
        self.serialize = serialize
        self._call_lock = threading.RLock()

    @property
    def bound(self):
        """Whether callables are currently installed."""
        return self._likelihood is not None

    def bind(self, likelihood, prior):
        """Install `likelihood` and `prior` for the upcoming run."""
        if self.bound:
            raise AlreadyRunning("callbacks are already bound to an active run")
        if not callable(likelihood):
            raise TypeError("loglikelihood must be callable, got %r" % (likelihood,))
        if not callable(prior):
            raise TypeError("prior must be callable, got %r" % (prior,))
        self._likelihood = likelihood
        self._prior = prior

    def release(self):
        """Drop the references to both callables."""
        self._likelihood = None
        self._prior = None

    def current_likelihood(self):
        likelihood = self._likelihood
        if likelihood is None:
            raise NotBound("loglikelihood requested outside of a run")
        return likelihood

    def current_prior(self):
        prior = self._prior
        if prior is None:
            raise NotBound("prior requested outside of a run")
        return prior

    @contextmanager
    def session(self, likelihood, prior):
        """Bind for the duration of a ``with`` block, releasing on any exit."""
        self.bind(likelihood, prior)
        try:
            yield self
        finally:
            self.release()

    @contextmanager
    def acquire(self):
        """Hold the per-call lock, if this registry serializes calls."""
        if not self.serialize:
            yield
            return
        with self._call_lock:
            yield
