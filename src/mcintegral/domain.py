r"""
Integration domains.

Classes
    :class:`Interval` - closed real interval :math:`[a, b]`
    :class:`Domain` - axis-aligned box :math:`\prod_d [a_d, b_d]`

Both are frozen value types. Bounds are validated once at construction so the
estimators never need to re-check them: ``lower > upper`` and non-finite bounds
raise :class:`ValueError`, while ``lower == upper`` is accepted and gives a
zero-measure (degenerate) domain.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

import numpy as np

__all__ = ["Interval", "Domain", "as_interval", "as_domain"]


@dataclass(frozen=True)
class Interval:
    r"""
    Closed interval :math:`[\text{lower}, \text{upper}]`.

    Attributes
    ----------
    lower : float
        Lower bound.
    upper : float
        Upper bound, ``upper >= lower``.

    Examples
    --------
    >>> Interval(0.0, 2.0).length
    2.0
    >>> Interval(1.0, 1.0).is_degenerate
    True
    """

    lower: float
    upper: float

    def __post_init__(self) -> None:
        lower = float(self.lower)
        upper = float(self.upper)
        if not (math.isfinite(lower) and math.isfinite(upper)):
            raise ValueError("interval bounds must be finite")
        if lower > upper:
            raise ValueError(f"lower bound {lower} is greater than upper bound {upper}")
        # normalise ints / numpy scalars to float on a frozen instance
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @property
    def length(self) -> float:
        """One-dimensional measure ``upper - lower``."""
        return self.upper - self.lower

    @property
    def is_degenerate(self) -> bool:
        """``True`` when the interval has zero length."""
        return self.lower == self.upper

    def __iter__(self):
        yield self.lower
        yield self.upper


@dataclass(frozen=True)
class Domain:
    r"""
    Axis-aligned box, one :class:`Interval` per dimension.

    The volume is

    .. math::
       V = \prod_{d=1}^{N} (b_d - a_d),

    which is exactly ``0.0`` as soon as one dimension is degenerate.

    Attributes
    ----------
    intervals : tuple of Interval
        Bounds of each dimension, in order.

    Examples
    --------
    >>> box = Domain.from_bounds([(0, 1), (0, 2)])
    >>> box.ndim, box.volume
    (2, 2.0)
    """

    intervals: tuple[Interval, ...]

    def __post_init__(self) -> None:
        intervals = tuple(as_interval(iv) for iv in self.intervals)
        if not intervals:
            raise ValueError("domain must have at least one dimension")
        object.__setattr__(self, "intervals", intervals)

    @classmethod
    def from_bounds(cls, bounds: Iterable[Union[Interval, Sequence[float]]]) -> "Domain":
        """Build a domain from ``(lower, upper)`` pairs."""
        return cls(tuple(bounds))

    @property
    def ndim(self) -> int:
        """Number of dimensions."""
        return len(self.intervals)

    @property
    def lower(self) -> np.ndarray:
        """Lower bounds as a float array of shape ``(ndim,)``."""
        return np.array([iv.lower for iv in self.intervals], dtype=float)

    @property
    def upper(self) -> np.ndarray:
        """Upper bounds as a float array of shape ``(ndim,)``."""
        return np.array([iv.upper for iv in self.intervals], dtype=float)

    @property
    def volume(self) -> float:
        """Product of the interval lengths."""
        if self.is_degenerate:
            return 0.0
        volume = 1.0
        for iv in self.intervals:
            volume *= iv.length
        return volume

    @property
    def is_degenerate(self) -> bool:
        """``True`` when any dimension has zero length."""
        return any(iv.is_degenerate for iv in self.intervals)

    def __len__(self) -> int:
        return self.ndim

    def __iter__(self):
        return iter(self.intervals)

    def __getitem__(self, index: int) -> Interval:
        return self.intervals[index]


def as_interval(value: Union[Interval, Sequence[float]]) -> Interval:
    """Coerce an :class:`Interval` or a ``(lower, upper)`` pair to an :class:`Interval`."""
    if isinstance(value, Interval):
        return value
    try:
        lower, upper = value
    except (TypeError, ValueError):
        raise TypeError(f"expected an Interval or a (lower, upper) pair, got {value!r}") from None
    return Interval(lower, upper)


def as_domain(value: Union[Domain, Iterable[Union[Interval, Sequence[float]]]]) -> Domain:
    """Coerce a :class:`Domain` or a sequence of ``(lower, upper)`` pairs to a :class:`Domain`."""
    if isinstance(value, Domain):
        return value
    return Domain.from_bounds(value)
