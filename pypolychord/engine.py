"""Access to the PolyChord shared library through ctypes.

The library exposes one entry point::

    void polychord_c_interface(
        double (*loglikelihood)(double*, int, double*, int),
        void (*prior)(double*, double*, int),
        int nlive, int num_repeats, int do_clustering, int feedback,
        double precision_criterion, int max_ndead, double boost_posterior,
        int posteriors, int equals, int cluster_posteriors,
        int write_resume, int write_paramnames, int read_resume,
        int write_stats, int write_live, int write_dead, int update_files,
        int nDims, int nDerived, char* base_dir, char* file_root);

:class:`NativeEngine` wraps it into a Python callable taking the bridge
functions and :meth:`RunConfig.engine_args <pypolychord.settings.RunConfig.engine_args>`.
Any other callable with that signature can be used as an engine too.
"""

import ctypes
import ctypes.util
import os
import threading

from .errors import EngineNotFound
from .utils import create_logger

__all__ = ['LOGLIKELIHOOD_FUNC', 'PRIOR_FUNC', 'NativeEngine', 'find_library']

LOGLIKELIHOOD_FUNC = ctypes.CFUNCTYPE(
    ctypes.c_double,
    ctypes.POINTER(ctypes.c_double), ctypes.c_int,
    ctypes.POINTER(ctypes.c_double), ctypes.c_int)

PRIOR_FUNC = ctypes.CFUNCTYPE(
    None,
    ctypes.POINTER(ctypes.c_double), ctypes.POINTER(ctypes.c_double), ctypes.c_int)

ENGINE_ARGTYPES = [
    LOGLIKELIHOOD_FUNC, PRIOR_FUNC,
    ctypes.c_int,     # nlive
    ctypes.c_int,     # num_repeats
    ctypes.c_int,     # do_clustering
    ctypes.c_int,     # feedback
    ctypes.c_double,  # precision_criterion
    ctypes.c_int,     # max_ndead
    ctypes.c_double,  # boost_posterior
    ctypes.c_int,     # posteriors
    ctypes.c_int,     # equals
    ctypes.c_int,     # cluster_posteriors
    ctypes.c_int,     # write_resume
    ctypes.c_int,     # write_paramnames
    ctypes.c_int,     # read_resume
    ctypes.c_int,     # write_stats
    ctypes.c_int,     # write_live
    ctypes.c_int,     # write_dead
    ctypes.c_int,     # update_files
    ctypes.c_int,     # nDims
    ctypes.c_int,     # nDerived
    ctypes.c_char_p,  # base_dir
    ctypes.c_char_p,  # file_root
]

LIBRARY_ENV = 'POLYCHORD_LIBRARY'


def find_library(path=None):
    """Locate the PolyChord shared library.

    Parameters
    ----------
    path: str
        explicit location. If None, the environment variable
        ``POLYCHORD_LIBRARY`` is used, then the system search path
        for ``libchord``.

    Returns
    -------
    path: str
        something :class:`ctypes.CDLL` can load
    """
    if path is None:
        path = os.environ.get(LIBRARY_ENV) or ctypes.util.find_library('chord')
    if not path:
        raise EngineNotFound(
            "PolyChord library not found. Install libchord or set %s." % LIBRARY_ENV)
    if os.path.sep in path and not os.path.exists(path):
        raise EngineNotFound("PolyChord library '%s' does not exist" % path)
    return path


class NativeEngine(object):
    """PolyChord shared library, callable with Python bridge functions.

    Exceptions cannot travel through the native engine. When a bridge
    raises, the error is stored, logged and `abort_handler` is called.
    The default handler terminates the process, as the engine would
    otherwise continue on corrupted data. If a replacement handler
    returns, the error is re-raised once the engine call returns.

    Parameters
    ----------
    library: str or ctypes.CDLL
        path of the shared library, or the already loaded library.
        Located with :func:`find_library` if None.
    abort_handler: function
        called without arguments after a bridge failure.
    """

    def __init__(self, library=None, abort_handler=os.abort):
        if library is None or isinstance(library, str):
            library = ctypes.CDLL(find_library(library))
        self.function = library.polychord_c_interface
        self.function.argtypes = ENGINE_ARGTYPES
        self.function.restype = None
        self.abort_handler = abort_handler
        self.error = None
        self._error_lock = threading.Lock()
        self.logger = create_logger(__name__ + '.' + type(self).__name__)

    def _fail(self, kind, error):
        with self._error_lock:
            if self.error is None:
                self.error = error
        self.logger.critical(
            'Fatal error in %s callback, aborting run: %s', kind, error, exc_info=error)
        self.abort_handler()

    def wrap_loglikelihood(self, loglikelihood):
        """Turn a likelihood bridge into a C function pointer."""
        def trampoline(theta, nDims, phi, nDerived):
            try:
                return loglikelihood(theta, nDims, phi, nDerived)
            except Exception as e:
                self._fail('loglikelihood', e)
                return float('nan')
        return LOGLIKELIHOOD_FUNC(trampoline)

    def wrap_prior(self, prior):
        """Turn a prior bridge into a C function pointer."""
        def trampoline(cube, theta, nDims):
            try:
                prior(cube, theta, nDims)
            except Exception as e:
                self._fail('prior', e)
        return PRIOR_FUNC(trampoline)

    def __call__(self, loglikelihood, prior, *args):
        """Run the engine until completion."""
        self.error = None
        # the function pointers must stay referenced while the engine runs
        c_loglikelihood = self.wrap_loglikelihood(loglikelihood)
        c_prior = self.wrap_prior(prior)
        self.function(c_loglikelihood, c_prior, *args)
        error, self.error = self.error, None
        if error is not None:
            raise error
