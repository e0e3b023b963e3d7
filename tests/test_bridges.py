import ctypes
import numpy as np
import pytest
from numpy.testing import assert_array_equal
from pypolychord.registry import CallbackRegistry
from pypolychord.bridges import make_loglikelihood_bridge, make_prior_bridge
from pypolychord.errors import LengthMismatch, TypeConversionFailure, NotBound


def as_pointer(array):
    return ctypes.cast(array, ctypes.POINTER(ctypes.c_double))


def bound_registry(loglike, prior):
    registry = CallbackRegistry()
    registry.bind(loglike, prior)
    return registry


def gauss_loglike(theta, phi):
    r2 = (theta**2).sum()
    phi[0] = r2
    return -0.5 * r2, [r2, phi[1] + 1]


def times_ten(cube):
    return [c * 10 for c in cube]


def test_loglikelihood_bridge():
    loglikelihood = make_loglikelihood_bridge(bound_registry(gauss_loglike, times_ten))
    theta = (ctypes.c_double * 2)(1., 2.)
    phi = (ctypes.c_double * 2)(0., 41.)
    logL = loglikelihood(as_pointer(theta), 2, as_pointer(phi), 2)
    assert isinstance(logL, float)
    assert logL == -2.5
    assert list(phi) == [5., 42.]
    assert list(theta) == [1., 2.], "theta must not be modified"


def test_loglikelihood_bridge_idempotent():
    def loglike(theta, phi):
        return theta.sum(), theta[:1] * 3
    loglikelihood = make_loglikelihood_bridge(bound_registry(loglike, times_ten))
    theta = np.array([0.25, 0.5])
    results = []
    for i in range(5):
        phi = np.array([7.])
        results.append((loglikelihood(theta, 2, phi, 1), phi.tolist()))
    assert results == [(0.75, [0.75])] * 5
    assert_array_equal(theta, [0.25, 0.5])


def test_loglikelihood_bridge_receives_phi():
    seen = []

    def loglike(theta, phi):
        seen.append(phi.copy())
        return 0, phi
    loglikelihood = make_loglikelihood_bridge(bound_registry(loglike, times_ten))
    phi = np.array([3., 4.])
    loglikelihood(np.zeros(1), 1, phi, 2)
    assert_array_equal(seen[0], [3., 4.])
    assert_array_equal(phi, [3., 4.])


def test_loglikelihood_bridge_no_derived():
    loglikelihood = make_loglikelihood_bridge(
        bound_registry(lambda theta, phi: (np.float32(-1.5), []), times_ten))
    null = ctypes.POINTER(ctypes.c_double)()
    assert loglikelihood(np.zeros(3), 3, null, 0) == -1.5


def test_loglikelihood_short_derived_fails():
    def loglike(theta, phi):
        return 0., phi[:-1]
    loglikelihood = make_loglikelihood_bridge(bound_registry(loglike, times_ten))
    phi = np.array([1., 2., 3.])
    with pytest.raises(LengthMismatch):
        loglikelihood(np.zeros(2), 2, phi, 3)
    assert_array_equal(phi, [1., 2., 3.])


def test_loglikelihood_bad_results():
    phi = np.zeros(1)
    for result in [1.0, None, (1.0,), (1.0, [0.], 3), ('abc', [0.]), (None, [0.]), (0., 'x')]:
        loglikelihood = make_loglikelihood_bridge(
            bound_registry(lambda theta, phi, result=result: result, times_ten))
        with pytest.raises(TypeConversionFailure):
            loglikelihood(np.zeros(1), 1, phi, 1)
            assert False, ("should not accept", result)


def test_loglikelihood_user_error_propagates():
    def loglike(theta, phi):
        raise KeyError('oops')
    loglikelihood = make_loglikelihood_bridge(bound_registry(loglike, times_ten))
    with pytest.raises(KeyError):
        loglikelihood(np.zeros(1), 1, np.zeros(0), 0)


def test_loglikelihood_nan_is_passed_through():
    loglikelihood = make_loglikelihood_bridge(
        bound_registry(lambda theta, phi: (float('nan'), phi), times_ten))
    assert np.isnan(loglikelihood(np.zeros(1), 1, np.zeros(0), 0))


def test_prior_bridge():
    prior = make_prior_bridge(bound_registry(gauss_loglike, times_ten))
    cube = (ctypes.c_double * 2)(0.5, 0.5)
    theta = (ctypes.c_double * 2)()
    prior(as_pointer(cube), as_pointer(theta), 2)
    assert list(theta) == [5.0, 5.0]
    assert list(cube) == [0.5, 0.5]


def test_prior_bridge_does_not_alias_cube():
    def inplace(cube):
        cube *= 10
        return cube
    prior = make_prior_bridge(bound_registry(gauss_loglike, inplace))
    cube = np.array([0.5, 0.25])
    theta = np.zeros(2)
    prior(cube, theta, 2)
    assert_array_equal(theta, [5., 2.5])
    assert_array_equal(cube, [0.5, 0.25])


def test_prior_bridge_failures():
    theta = np.zeros(2)
    prior = make_prior_bridge(bound_registry(gauss_loglike, lambda cube: cube[:1]))
    with pytest.raises(LengthMismatch):
        prior(np.ones(2) * 0.5, theta, 2)
    prior = make_prior_bridge(bound_registry(gauss_loglike, lambda cube: None))
    with pytest.raises(TypeConversionFailure):
        prior(np.ones(2) * 0.5, theta, 2)
    prior = make_prior_bridge(bound_registry(gauss_loglike, lambda cube: ['a', 'b']))
    with pytest.raises(TypeConversionFailure):
        prior(np.ones(2) * 0.5, theta, 2)
    assert_array_equal(theta, [0, 0])


def test_bridges_unbound():
    registry = CallbackRegistry()
    loglikelihood = make_loglikelihood_bridge(registry)
    prior = make_prior_bridge(registry)
    with pytest.raises(NotBound):
        loglikelihood(np.zeros(1), 1, np.zeros(0), 0)
    with pytest.raises(NotBound):
        prior(np.zeros(1), np.zeros(1), 1)


def test_loglikelihood_rejects_non_numeric_scalars():
    phi = np.zeros(1)
    for value in ['1.5', b'1.5', True, np.bool_(False)]:
        loglikelihood = make_loglikelihood_bridge(
            bound_registry(lambda theta, phi, value=value: (value, [0.]), times_ten))
        with pytest.raises(TypeConversionFailure):
            loglikelihood(np.zeros(1), 1, phi, 1)
            assert False, ("should not accept", value)
    loglikelihood = make_loglikelihood_bridge(
        bound_registry(lambda theta, phi: (np.int64(-3), [0.]), times_ten))
    assert loglikelihood(np.zeros(1), 1, phi, 1) == -3.0
