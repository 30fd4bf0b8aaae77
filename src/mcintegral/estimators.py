r"""
Monte Carlo estimators of definite integrals.

This module provides:

Classes
    :class:`MonteCarloEstimator` - abstract base with the shared sampling logic
    :class:`ScalarEstimator` - integrals over an interval :math:`[a, b]`
    :class:`VolumeEstimator` - integrals over a box :math:`\prod_d [a_d, b_d]`

Both estimators use the identity

.. math::
   \int_D f(x)\,dx = |D|\;\mathbb{E}[f(X)], \qquad X \sim \mathcal{U}(D),

and approximate the expectation by the sample mean of :math:`n` i.i.d. draws:

.. math::
   \widehat{I}_n = \frac{|D|}{n} \sum_{i=1}^{n} f(X_i).

Example
-------
>>> import math
>>> est = ScalarEstimator(seed=42)
>>> value = est.estimate((0.0, math.pi), 10_000, math.sin)
>>> abs(value - 2.0) < 0.05
True
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from .domain import Domain, Interval, as_domain, as_interval
from .result import IntegrationResult
from .sampling import RandomPointSource, SeedLike
from .utils import autocrit

logger = logging.getLogger(__name__)

__all__ = [
    "MonteCarloEstimator",
    "ScalarEstimator",
    "VolumeEstimator",
    "ScalarIntegrand",
    "VectorIntegrand",
    "check_n_points",
]

ScalarIntegrand = Callable[[float], float]
VectorIntegrand = Callable[[np.ndarray], float]


def check_n_points(n_points: Any) -> int:
    r"""
    Validate a sample count.

    Parameters
    ----------
    n_points : int
        Number of random draws; must be a positive integer.

    Returns
    -------
    int

    Raises
    ------
    TypeError
        If ``n_points`` is not an integer (``bool`` is rejected too).
    ValueError
        If ``n_points <= 0``.
    """
    if isinstance(n_points, (bool, np.bool_)) or not isinstance(n_points, (int, np.integer)):
        raise TypeError(f"n_points must be an integer, got {type(n_points).__name__}")
    if n_points <= 0:
        raise ValueError("n_points must be positive")
    return int(n_points)


class MonteCarloEstimator(ABC):
    r"""
    Abstract base class for Monte Carlo integral estimators.

    Subclasses define how a domain is coerced, measured and sampled, and how a
    single sampled point is handed to the integrand. The base class validates
    the sample count, handles degenerate domains, evaluates the integrand and
    forms the estimate.

    Parameters
    ----------
    source : RandomPointSource, optional
        Random stream to draw from. A new source seeded from ``seed`` is created
        when omitted.
    seed : int, SeedSequence, Generator or None
        Used only when ``source`` is ``None``.

    Notes
    -----
    **Validation order.** The sample count is checked before the domain is
    measured or any point is drawn, so an invalid call leaves the stream
    untouched and never calls the integrand.

    **Degenerate domains.** A domain of zero volume returns exactly ``0.0``
    without sampling, whatever the integrand would return (even ``nan``).

    **Vectorized integrands.** With ``vectorized=True`` the integrand is called
    once on the whole sample array and must return ``n_points`` values.
    """

    name: str = "Monte Carlo"

    def __init__(self, source: Optional[RandomPointSource] = None, *, seed: SeedLike = None):
        self.source = source if source is not None else RandomPointSource(seed)

    def set_seed(self, seed: SeedLike) -> None:
        """Reseed the underlying :class:`~mcintegral.sampling.RandomPointSource`."""
        self.source.set_seed(seed)

    @abstractmethod
    def _coerce(self, domain: Any) -> Union[Interval, Domain]:
        """Normalise the caller's domain argument."""

    @abstractmethod
    def _sample(self, domain: Any, n_points: int) -> np.ndarray:
        """Draw ``n_points`` uniform points from ``domain``."""

    @staticmethod
    def _volume(domain: Union[Interval, Domain]) -> float:
        return domain.length if isinstance(domain, Interval) else domain.volume

    @staticmethod
    def _ndim(domain: Union[Interval, Domain]) -> int:
        return 1 if isinstance(domain, Interval) else domain.ndim

    def _argument(self, point: Any) -> Any:
        """Convert one row of the sample array to the integrand's argument."""
        return point

    def _evaluate(self, points: np.ndarray, integrand: Callable, vectorized: bool) -> np.ndarray:
        n = points.shape[0]
        if vectorized:
            values = np.asarray(integrand(points), dtype=float)
            if values.shape != (n,):
                raise ValueError(
                    f"vectorized integrand returned shape {values.shape}, expected ({n},)"
                )
            return values
        values = np.empty(n, dtype=float)
        for i in range(n):
            values[i] = float(integrand(self._argument(points[i])))
        return values

    def estimate(self, domain: Any, n_points: int, integrand: Callable, *, vectorized: bool = False) -> float:
        r"""
        Estimate :math:`\int_D f`.

        Parameters
        ----------
        domain :
            Integration domain (see subclass).
        n_points : int
            Number of random points, ``>= 1``.
        integrand : callable
            Function to integrate.
        vectorized : bool, default ``False``
            Call ``integrand`` once on the full sample array.

        Returns
        -------
        float
            :math:`|D| \cdot \bar f`.

        Raises
        ------
        ValueError
            If ``n_points <= 0``.
        """
        n = check_n_points(n_points)
        box = self._coerce(domain)
        volume = self._volume(box)
        if volume == 0.0:
            logger.debug("Degenerate domain for %s estimator, returning 0.0", self.name)
            return 0.0
        logger.debug("Estimating %s integral with %d points (volume=%g)", self.name, n, volume)
        values = self._evaluate(self._sample(box, n), integrand, vectorized)
        return float(volume * np.mean(values))

    def integrate(
        self,
        domain: Any,
        n_points: int,
        integrand: Callable,
        *,
        vectorized: bool = False,
        confidence: float = 0.95,
        ci_method: str = "auto",
    ) -> IntegrationResult:
        r"""
        Estimate :math:`\int_D f` together with its standard error and CI.

        Parameters
        ----------
        domain, n_points, integrand, vectorized :
            As in :meth:`estimate`.
        confidence : float, default ``0.95``
            Confidence level in :math:`(0, 1)`.
        ci_method : {"auto", "z", "t"}, default ``"auto"``
            Critical value selection, see :func:`mcintegral.utils.autocrit`.

        Returns
        -------
        IntegrationResult
        """
        n = check_n_points(n_points)
        crit, kind = autocrit(confidence, n, ci_method)
        box = self._coerce(domain)
        volume = self._volume(box)
        t0 = time.time()
        if volume == 0.0:
            estimate, se = 0.0, 0.0
        else:
            values = self._evaluate(self._sample(box, n), integrand, vectorized)
            estimate = float(volume * np.mean(values))
            se = float(volume * np.std(values, ddof=1) / np.sqrt(n)) if n > 1 else 0.0
        exec_time = time.time() - t0

        seed_seq = self.source.seed_seq
        meta = {
            "estimator": self.name,
            "ndim": self._ndim(box),
            "seed_entropy": seed_seq.entropy if seed_seq is not None else None,
        }
        return IntegrationResult(
            estimate=estimate,
            n_points=n,
            volume=volume,
            std_error=se,
            confidence=confidence,
            ci=(estimate - crit * se, estimate + crit * se),
            ci_method=kind,
            execution_time=exec_time,
            metadata=meta,
        )


class ScalarEstimator(MonteCarloEstimator):
    r"""
    Monte Carlo estimate of a one-dimensional integral.

    .. math::
       \int_a^b f(x)\,dx \approx \frac{b - a}{n} \sum_{i=1}^n f(X_i),
       \qquad X_i \sim \mathcal{U}[a, b].

    The integrand receives a Python ``float`` per point, or a ``(n,)`` array
    when ``vectorized=True``.

    Examples
    --------
    >>> ScalarEstimator(seed=0).estimate((1.0, 1.0), 10, lambda x: 5.0)
    0.0
    """

    name = "scalar"

    def _coerce(self, domain: Union[Interval, Sequence[float]]) -> Interval:
        return as_interval(domain)

    def _sample(self, domain: Interval, n_points: int) -> np.ndarray:
        return self.source.draw_scalars(domain, n_points)

    def _argument(self, point: Any) -> float:
        return float(point)


class VolumeEstimator(MonteCarloEstimator):
    r"""
    Monte Carlo estimate of an :math:`N`-dimensional integral over a box.

    .. math::
       \int_D f(\mathbf x)\,d\mathbf x \approx \frac{V}{n} \sum_{i=1}^n f(\mathbf X_i),
       \qquad V = \prod_{d=1}^N (b_d - a_d).

    The integrand receives one point as a 1-D array of length ``ndim``, or the
    full ``(n, ndim)`` array when ``vectorized=True``. Matching the integrand's
    expected arity to the domain's dimension count is the caller's
    responsibility.

    Examples
    --------
    >>> VolumeEstimator(seed=0).estimate([(0, 1), (2, 2)], 10, lambda p: 1.0)
    0.0
    """

    name = "volume"

    def _coerce(self, domain: Union[Domain, Sequence[Sequence[float]]]) -> Domain:
        return as_domain(domain)

    def _sample(self, domain: Domain, n_points: int) -> np.ndarray:
        return self.source.draw_points(domain, n_points)
