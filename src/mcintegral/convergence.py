r"""
Convergence analysis of Monte Carlo estimators.

This module provides:

Classes
    :class:`SweepConfig` - sample-count schedule of a sweep
    :class:`ConvergencePoint` - one ``(n_points, error)`` pair
    :class:`ConvergenceSeries` - ordered error series
    :class:`ConvergenceSweep` - runs an estimator over the schedule

The schedule starts at :attr:`SweepConfig.floor` and grows by
``max(min_step, max_points // n_steps)`` while the count stays within
``max_points``. The series is always closed by a point at exactly
``max_points``. For a well-behaved integrand the error decays like
:math:`\mathcal{O}(n^{-1/2})`, but any single run fluctuates, so the errors are
not monotone.

Example
-------
>>> import math
>>> sweep = ConvergenceSweep(seed=1)
>>> series = sweep.run((0.0, math.pi), math.sin, max_points=2_000, reference=2.0)
>>> int(series.last.n_points)
2000
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Iterator, Optional, Sequence

import numpy as np

from .domain import Domain, Interval
from .estimators import MonteCarloEstimator, ScalarEstimator, VolumeEstimator, check_n_points
from .sampling import RandomPointSource, SeedLike

logger = logging.getLogger(__name__)

__all__ = [
    "SweepConfig",
    "ConvergencePoint",
    "ConvergenceSeries",
    "ConvergenceSweep",
    "estimator_for",
]


@dataclass(frozen=True)
class SweepConfig:
    r"""
    Sample-count schedule for :class:`ConvergenceSweep`.

    Attributes
    ----------
    floor : int, default 100
        First sample count of the sweep.
    n_steps : int, default 20
        The step is ``max_points // n_steps``.
    min_step : int, default 1
        Lower bound on the step so small ``max_points`` still make progress.
    n_trials : int, default 1
        Independent estimates per sample count; the recorded error is their
        mean absolute error. ``1`` records a single run.

    Examples
    --------
    >>> SweepConfig().step(1_000)
    50
    >>> SweepConfig().step(10)
    1
    """

    floor: int = 100
    n_steps: int = 20
    min_step: int = 1
    n_trials: int = 1

    def __post_init__(self) -> None:
        if self.floor < 1:
            raise ValueError("floor must be >= 1")
        if self.n_steps < 1:
            raise ValueError("n_steps must be >= 1")
        if self.min_step < 1:
            raise ValueError("min_step must be >= 1")
        if self.n_trials < 1:
            raise ValueError("n_trials must be >= 1")

    def step(self, max_points: int) -> int:
        """Increment between consecutive sample counts."""
        return max(self.min_step, max_points // self.n_steps)

    def schedule(self, max_points: int) -> list[int]:
        r"""
        Sample counts visited for ``max_points``.

        Parameters
        ----------
        max_points : int
            Largest sample count; must be positive.

        Returns
        -------
        list of int
            Strictly increasing, last element equal to ``max_points``. When
            ``max_points < floor`` this is ``[max_points]``.
        """
        max_points = check_n_points(max_points)
        step = self.step(max_points)
        counts = []
        n = self.floor
        while n <= max_points:
            counts.append(n)
            n += step
        if not counts or counts[-1] != max_points:
            counts.append(max_points)
        return counts


@dataclass(frozen=True)
class ConvergencePoint:
    """Absolute error of an estimate computed with ``n_points`` samples."""

    n_points: int
    error: float


@dataclass(frozen=True)
class ConvergenceSeries:
    r"""
    Ordered error-versus-sample-count series.

    Attributes
    ----------
    points : tuple of ConvergencePoint
        Strictly increasing in ``n_points``.
    reference : float
        Value the errors are measured against.
    estimator : str
        Name of the estimator that produced the series.
    """

    points: tuple[ConvergencePoint, ...]
    reference: float
    estimator: str = ""

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[ConvergencePoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> ConvergencePoint:
        return self.points[index]

    @property
    def last(self) -> ConvergencePoint:
        """Final point; its ``n_points`` is the sweep's ``max_points``."""
        return self.points[-1]

    @property
    def n_points(self) -> np.ndarray:
        """Sample counts as an integer array (the x values of a plot)."""
        return np.array([p.n_points for p in self.points], dtype=int)

    @property
    def errors(self) -> np.ndarray:
        """Absolute errors as a float array aligned with :attr:`n_points`."""
        return np.array([p.error for p in self.points], dtype=float)

    def fitted_rate(self) -> float:
        r"""
        Empirical convergence order.

        Least-squares slope :math:`\beta` of
        :math:`\log \varepsilon = \alpha + \beta \log n` over the points with a
        strictly positive error. Plain Monte Carlo gives :math:`\beta \approx -1/2`.

        Returns
        -------
        float
            ``nan`` when fewer than two points have a positive error.
        """
        n, err = self.n_points, self.errors
        mask = err > 0
        if np.count_nonzero(mask) < 2 or np.unique(n[mask]).size < 2:
            return float("nan")
        slope, _ = np.polyfit(np.log(n[mask]), np.log(err[mask]), 1)
        return float(slope)


def estimator_for(domain: Any, source: Optional[RandomPointSource] = None) -> MonteCarloEstimator:
    r"""
    Pick the estimator matching the shape of ``domain``.

    An :class:`~mcintegral.domain.Interval` or a flat pair of numbers (tuple,
    list or NumPy array) selects
    :class:`~mcintegral.estimators.ScalarEstimator`; a
    :class:`~mcintegral.domain.Domain` or a sequence of pairs selects
    :class:`~mcintegral.estimators.VolumeEstimator`.
    """
    if isinstance(domain, Interval):
        return ScalarEstimator(source)
    if isinstance(domain, Domain):
        return VolumeEstimator(source)
    if isinstance(domain, (Sequence, np.ndarray)) and len(domain) == 2 and all(isinstance(b, Real) for b in domain):
        return ScalarEstimator(source)
    return VolumeEstimator(source)


class ConvergenceSweep:
    r"""
    Measure estimator error at increasing sample counts.

    Parameters
    ----------
    estimator : MonteCarloEstimator, optional
        Estimator to sweep. When omitted, one is chosen per call by
        :func:`estimator_for` and draws from this sweep's :attr:`source`.
    config : SweepConfig, optional
        Schedule; defaults to ``SweepConfig()``.
    seed : int, SeedSequence, Generator or None
        Seed of :attr:`source` when no ``estimator`` is given.

    Notes
    -----
    Every sample count gets fresh draws; estimates are not reused between
    counts, so consecutive errors are independent.
    """

    def __init__(
        self,
        estimator: Optional[MonteCarloEstimator] = None,
        config: Optional[SweepConfig] = None,
        *,
        seed: SeedLike = None,
    ):
        self.estimator = estimator
        self.config = config or SweepConfig()
        self.source = estimator.source if estimator is not None else RandomPointSource(seed)

    def run(
        self,
        domain: Any,
        integrand: Callable,
        max_points: int,
        reference: float,
        *,
        vectorized: bool = False,
    ) -> ConvergenceSeries:
        r"""
        Build the convergence series for ``integrand`` on ``domain``.

        Parameters
        ----------
        domain :
            Interval (scalar case) or box (volume case).
        integrand : callable
            Function to integrate.
        max_points : int
            Largest sample count; the series ends exactly here.
        reference : float
            Reference value of the integral.
        vectorized : bool, default ``False``
            Forwarded to the estimator.

        Returns
        -------
        ConvergenceSeries

        Raises
        ------
        ValueError
            If ``max_points <= 0``.
        """
        schedule = self.config.schedule(max_points)
        estimator = self.estimator or estimator_for(domain, self.source)
        reference = float(reference)
        logger.info(
            "Running %s convergence sweep over %d sample counts (max %d, %d trial(s) each)...",
            estimator.name, len(schedule), max_points, self.config.n_trials,
        )
        points = []
        for n in schedule:
            errors = [
                abs(estimator.estimate(domain, n, integrand, vectorized=vectorized) - reference)
                for _ in range(self.config.n_trials)
            ]
            points.append(ConvergencePoint(n_points=n, error=float(np.mean(errors))))
        series = ConvergenceSeries(points=tuple(points), reference=reference, estimator=estimator.name)
        logger.info("Sweep finished: error %.3g at n=%d", series.last.error, series.last.n_points)
        return series
