r"""
Uniform random points inside integration domains.

This module provides:

Classes
    :class:`RandomPointSource` - owned, seedable random stream

A :class:`RandomPointSource` wraps a :class:`numpy.random.Generator` built from a
:class:`numpy.random.SeedSequence`. Every estimator draws through one of these
objects, so seeding and stream partitioning are controlled by the caller rather
than by hidden global state.

Example
-------
>>> src = RandomPointSource(seed=42)
>>> x = src.draw_scalar((0.0, 1.0))
>>> 0.0 <= x <= 1.0
True
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np

from .domain import Domain, Interval, as_domain, as_interval

__all__ = ["RandomPointSource", "SeedLike"]

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


class RandomPointSource:
    r"""
    Source of i.i.d. uniform points on intervals and boxes.

    Parameters
    ----------
    seed : int, SeedSequence, Generator or None
        ``None`` draws entropy from the OS. An existing
        :class:`~numpy.random.Generator` is used as-is (and shared).

    Attributes
    ----------
    seed_seq : SeedSequence or None
        Seed sequence behind :attr:`rng`; ``None`` when wrapping a caller's generator.
    rng : numpy.random.Generator
        The underlying stream. Each draw advances it.

    Notes
    -----
    For :math:`U \sim \mathcal{U}[0, 1)` a draw on :math:`[a, b]` is
    :math:`a + (b - a) U`. A degenerate interval (:math:`a = b`) therefore
    returns exactly :math:`a`; the source short-circuits that case so that no
    entries of the stream are consumed.
    """

    def __init__(self, seed: SeedLike = None):
        self.seed_seq: Optional[np.random.SeedSequence] = None
        self.rng: np.random.Generator
        self.set_seed(seed)

    def set_seed(self, seed: SeedLike) -> None:
        r"""
        Reset the stream from ``seed``.

        Parameters
        ----------
        seed : int, SeedSequence, Generator or None
            Same meaning as in the constructor.
        """
        if isinstance(seed, np.random.Generator):
            self.seed_seq = None
            self.rng = seed
            return
        if isinstance(seed, np.random.SeedSequence):
            self.seed_seq = seed
        else:
            self.seed_seq = np.random.SeedSequence(seed)
        self.rng = np.random.default_rng(self.seed_seq)

    def spawn(self, n: int) -> list["RandomPointSource"]:
        r"""
        Create ``n`` statistically independent child sources.

        Children are derived with :meth:`numpy.random.SeedSequence.spawn`, so a
        seeded parent yields the same children on every run.

        Parameters
        ----------
        n : int
            Number of children.

        Returns
        -------
        list of RandomPointSource
        """
        if n < 0:
            raise ValueError("n must be non-negative")
        if self.seed_seq is not None:
            children = self.seed_seq.spawn(n)
        else:
            entropy = self.rng.integers(0, 2**32, size=(n, 4))
            children = [np.random.SeedSequence([int(e) for e in row]) for row in entropy]
        return [RandomPointSource(child) for child in children]

    def draw_scalar(self, interval: Union[Interval, Sequence[float]]) -> float:
        """Return one uniform draw from ``interval``."""
        iv = as_interval(interval)
        if iv.is_degenerate:
            return iv.lower
        return float(self.rng.uniform(iv.lower, iv.upper))

    def draw_vector(self, domain: Union[Domain, Sequence[Sequence[float]]]) -> np.ndarray:
        """Return one point of shape ``(ndim,)``, each coordinate uniform on its own interval."""
        return self.draw_points(domain, 1)[0]

    def draw_scalars(self, interval: Union[Interval, Sequence[float]], n: int) -> np.ndarray:
        r"""
        Return ``n`` uniform draws from ``interval``.

        Parameters
        ----------
        interval : Interval or (lower, upper)
        n : int
            Number of draws.

        Returns
        -------
        ndarray
            Shape ``(n,)``.
        """
        iv = as_interval(interval)
        if iv.is_degenerate:
            return np.full(n, iv.lower, dtype=float)
        return self.rng.uniform(iv.lower, iv.upper, size=n)

    def draw_points(self, domain: Union[Domain, Sequence[Sequence[float]]], n: int) -> np.ndarray:
        r"""
        Return ``n`` uniform points in the box ``domain``.

        Coordinates are drawn independently per dimension. Degenerate
        dimensions are filled with their bound without consuming the stream.

        Parameters
        ----------
        domain : Domain or sequence of (lower, upper)
        n : int
            Number of points.

        Returns
        -------
        ndarray
            Shape ``(n, ndim)``.
        """
        box = as_domain(domain)
        lower, upper = box.lower, box.upper
        points = np.empty((n, box.ndim), dtype=float)
        free = lower != upper
        points[:, ~free] = lower[~free]
        if free.any():
            points[:, free] = self.rng.uniform(lower[free], upper[free], size=(n, int(free.sum())))
        return points
