"""Running PolyChord on Python likelihood and prior functions.

Example::

    import numpy as np
    from pypolychord import run_polychord

    def loglike(theta, phi):
        r2 = (theta**2).sum()
        return -0.5 * r2, [r2**0.5]

    def prior(cube):
        return 20 * cube - 10

    run_polychord(loglike, prior, nDims=3, nDerived=1, file_root='gauss')

"""

from .bridges import make_loglikelihood_bridge, make_prior_bridge
from .engine import NativeEngine
from .errors import AlreadyRunning
from .registry import CallbackRegistry, RUN_GUARD
from .settings import RunConfig
from .utils import create_logger

__all__ = ['run_polychord', 'run', 'active_run']


def active_run():
    """Whether a run is in progress in this process."""
    return RUN_GUARD.locked()


def run_polychord(loglikelihood, prior, settings=None, engine=None, serialize=True, **kwargs):
    """Run nested sampling with PolyChord.

    Parameters
    ----------
    loglikelihood: function
        called as ``loglikelihood(theta, phi)`` with arrays of length
        nDims and nDerived. Returns ``(logL, phi)``, where the new `phi`
        has length nDerived.
    prior: function
        called as ``prior(cube)`` with a point of the unit hypercube,
        returns the nDims physical parameters.
    settings: RunConfig
        run settings. If None, they are built from `kwargs`
        with :meth:`RunConfig.create`. Otherwise `kwargs` override
        individual fields.
    engine: callable
        called as ``engine(loglikelihood_bridge, prior_bridge, *settings.engine_args())``.
        By default, the PolyChord library is loaded with :class:`NativeEngine`.
    serialize: bool
        let concurrent engine callbacks take turns calling into Python.

    Returns
    -------
    success: bool
        True once the engine has completed. Failures are raised:
        InvalidRunConfig and AlreadyRunning before sampling starts,
        errors of the callbacks (including LengthMismatch and
        TypeConversionFailure) after the run was torn down.
    """
    if settings is None:
        settings = RunConfig.create(**kwargs)
    elif kwargs:
        settings = settings.replace(**kwargs)
    settings.validate()
    logger = create_logger('pypolychord', log_dir=settings.base_dir)

    if not RUN_GUARD.acquire(False):
        raise AlreadyRunning("another PolyChord run is active in this process")
    try:
        if engine is None:
            engine = NativeEngine()
        registry = CallbackRegistry(serialize=serialize)
        logger.debug('run: dims=%d+%d, nlive=%d, num_repeats=%d, base_dir=%s, file_root=%s',
                     settings.nDims, settings.nDerived, settings.nlive,
                     settings.num_repeats, settings.base_dir, settings.file_root)
        with registry.session(loglikelihood, prior):
            logger.info('Starting sampling ...')
            engine(
                make_loglikelihood_bridge(registry),
                make_prior_bridge(registry),
                *settings.engine_args())
        logger.info('Sampling finished.')
    except Exception as e:
        logger.error('Run failed: %s', e)
        raise
    finally:
        RUN_GUARD.release()
    return True


def run(loglikelihood, prior, nDims, nDerived, nlive, num_repeats, do_clustering,
        feedback, precision_criterion, max_ndead, boost_posterior, posteriors,
        equals, cluster_posteriors, write_resume, write_paramnames, read_resume,
        write_stats, write_live, write_dead, update_files, base_dir, file_root,
        engine=None):
    """Run PolyChord with every setting given positionally.

    Same as :func:`run_polychord`, with the argument order of the
    compiled PyPolyChord module.
    """
    settings = RunConfig(
        nDims, nDerived, nlive, num_repeats, do_clustering, feedback,
        precision_criterion, max_ndead, boost_posterior, posteriors, equals,
        cluster_posteriors, write_resume, write_paramnames, read_resume,
        write_stats, write_live, write_dead, update_files, base_dir, file_root)
    return run_polychord(loglikelihood, prior, settings=settings, engine=engine)
