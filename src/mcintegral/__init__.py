"""mcintegral package public API."""

from .convergence import (
    ConvergencePoint,
    ConvergenceSeries,
    ConvergenceSweep,
    SweepConfig,
    estimator_for,
)
from .domain import Domain, Interval
from .estimators import MonteCarloEstimator, ScalarEstimator, VolumeEstimator
from .integrands import ExpressionIntegrand, resolve_integrand
from .result import IntegrationResult
from .sampling import RandomPointSource
from .utils import autocrit, t_crit, z_crit

__all__ = [
    "Interval",
    "Domain",
    "RandomPointSource",
    "MonteCarloEstimator",
    "ScalarEstimator",
    "VolumeEstimator",
    "IntegrationResult",
    "SweepConfig",
    "ConvergencePoint",
    "ConvergenceSeries",
    "ConvergenceSweep",
    "estimator_for",
    "ExpressionIntegrand",
    "resolve_integrand",
    "z_crit",
    "t_crit",
    "autocrit",
]

__version__ = "0.1.0"
