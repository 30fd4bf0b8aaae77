import numpy as np
import pytest

from mcintegral import ConvergenceSweep, RandomPointSource, ScalarEstimator, VolumeEstimator


class CountingIntegrand:
    """Integrand wrapper that records how often it was evaluated."""
    def __init__(self, func=lambda x: 1.0):
        self.func = func
        self.calls = 0

    def __call__(self, x):
        self.calls += 1
        return self.func(x)


class FailingIntegrand:
    """Integrand that raises after a fixed number of evaluations."""
    def __init__(self, fail_after: int = 0):
        self.fail_after = fail_after
        self.calls = 0

    def __call__(self, x):
        if self.calls >= self.fail_after:
            raise ZeroDivisionError("integrand blew up")
        self.calls += 1
        return 1.0


@pytest.fixture(autouse=True)
def _stable_seed():
    # Nothing in the package may depend on the legacy global stream
    np.random.seed(12345)


@pytest.fixture
def source():
    """Provide a seeded random point source."""
    return RandomPointSource(seed=42)


@pytest.fixture
def scalar_estimator(source):
    """Provide a scalar estimator on a seeded source."""
    return ScalarEstimator(source)


@pytest.fixture
def volume_estimator(source):
    """Provide a volume estimator on a seeded source."""
    return VolumeEstimator(source)


@pytest.fixture
def sweep():
    """Provide a seeded convergence sweep with automatic estimator selection."""
    return ConvergenceSweep(seed=7)


@pytest.fixture
def counting_integrand():
    """Provide an integrand that counts its evaluations."""
    return CountingIntegrand()


@pytest.fixture
def failing_integrand():
    """Provide an integrand that fails on its third call."""
    return FailingIntegrand(fail_after=2)
