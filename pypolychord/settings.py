"""Immutable run settings passed to PolyChord."""

import numbers
from collections import namedtuple

from .errors import InvalidRunConfig

__all__ = ['RunConfig', 'FIELDS']

FIELDS = (
    'nDims', 'nDerived', 'nlive', 'num_repeats', 'do_clustering', 'feedback',
    'precision_criterion', 'max_ndead', 'boost_posterior', 'posteriors',
    'equals', 'cluster_posteriors', 'write_resume', 'write_paramnames',
    'read_resume', 'write_stats', 'write_live', 'write_dead', 'update_files',
    'base_dir', 'file_root',
)

# positional order of polychord_c_interface after the two callbacks
ENGINE_ORDER = (
    'nlive', 'num_repeats', 'do_clustering', 'feedback',
    'precision_criterion', 'max_ndead', 'boost_posterior', 'posteriors',
    'equals', 'cluster_posteriors', 'write_resume', 'write_paramnames',
    'read_resume', 'write_stats', 'write_live', 'write_dead', 'update_files',
    'nDims', 'nDerived', 'base_dir', 'file_root',
)

_REAL_FIELDS = ('precision_criterion', 'boost_posterior')
_PATH_FIELDS = ('base_dir', 'file_root')


def _check_fields(kwargs):
    unknown = set(kwargs) - set(FIELDS)
    if unknown:
        raise TypeError("unknown settings: %s" % ', '.join(sorted(unknown)))


class RunConfig(namedtuple('RunConfig', FIELDS)):
    """Settings of one PolyChord run.

    Attributes
    ----------
    nDims: int
        number of sampled parameters
    nDerived: int
        number of derived parameters returned by the likelihood
    nlive: int
        number of live points
    num_repeats: int
        length of the slice sampling chains
    do_clustering: bool
        whether to search for clusters
    feedback: int
        verbosity of the engine
    precision_criterion: float
        stop when the live points hold this fraction of the evidence
    max_ndead: int
        stop after this many dead points (-1: no limit)
    boost_posterior: float
        increase the number of posterior samples by this factor
    posteriors, equals, cluster_posteriors: bool
        which posterior files to produce
    write_resume, write_paramnames, read_resume, write_stats, write_live, write_dead: bool
        output and resume toggles
    update_files: int
        how often (in dead points) the output files are updated
    base_dir: str
        output directory
    file_root: str
        prefix of all output files
    """

    __slots__ = ()

    @classmethod
    def create(cls, nDims, nDerived=0, **kwargs):
        """Fill in the settings not given with defaults scaled to `nDims`."""
        _check_fields(kwargs)
        nlive = kwargs.get('nlive', nDims * 25)
        values = dict(
            nDims=nDims,
            nDerived=nDerived,
            nlive=nlive,
            num_repeats=nDims * 5,
            do_clustering=True,
            feedback=1,
            precision_criterion=0.001,
            max_ndead=-1,
            boost_posterior=0.0,
            posteriors=True,
            equals=True,
            cluster_posteriors=True,
            write_resume=True,
            write_paramnames=False,
            read_resume=True,
            write_stats=True,
            write_live=True,
            write_dead=True,
            update_files=nlive,
            base_dir='chains',
            file_root='test',
        )
        values.update(kwargs)
        return cls(**values)

    def replace(self, **kwargs):
        """Copy of the settings with the given fields changed."""
        _check_fields(kwargs)
        return self._replace(**kwargs)

    def validate(self):
        """Check the settings, raising InvalidRunConfig on the first problem.

        Returns the settings, so that calls can be chained.
        """
        for name in ('nDims', 'nDerived'):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) or isinstance(value, bool):
                raise InvalidRunConfig("%s must be an integer, got %r" % (name, value))
            if value < 0:
                raise InvalidRunConfig("%s must be non-negative, got %d" % (name, value))
        for name in ('nlive', 'num_repeats'):
            if getattr(self, name) <= 0:
                raise InvalidRunConfig("%s must be positive, got %r" % (name, getattr(self, name)))
        if self.precision_criterion < 0:
            raise InvalidRunConfig(
                "precision_criterion must be non-negative, got %r" % (self.precision_criterion,))
        for name in _PATH_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) or value == '':
                raise InvalidRunConfig("%s must be a non-empty string, got %r" % (name, value))
        return self

    def engine_args(self):
        """Settings as C scalars, in the order the engine declares them."""
        args = []
        for name in ENGINE_ORDER:
            value = getattr(self, name)
            if name in _PATH_FIELDS:
                args.append(value.encode())
            elif name in _REAL_FIELDS:
                args.append(float(value))
            else:
                args.append(int(value))
        return tuple(args)
