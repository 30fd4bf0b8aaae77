r"""
Result container for a single Monte Carlo integration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = ["IntegrationResult"]


@dataclass
class IntegrationResult:
    r"""
    Outcome of :meth:`~mcintegral.estimators.MonteCarloEstimator.integrate`.

    With :math:`V` the domain volume and :math:`f_i` the integrand values at the
    sampled points, the estimate and its standard error are

    .. math::
       \widehat{I} = V \bar f, \qquad
       SE = V \frac{s_f}{\sqrt{n}},

    and the interval is :math:`\widehat{I} \pm c \cdot SE` with :math:`c` a z or t
    critical value.

    Attributes
    ----------
    estimate : float
        Monte Carlo estimate of the integral.
    n_points : int
        Number of sampled points.
    volume : float
        Measure of the integration domain.
    std_error : float
        Standard error of :attr:`estimate` (``0.0`` for a single point or a
        degenerate domain).
    confidence : float
        Confidence level of :attr:`ci`.
    ci : tuple of float
        ``(low, high)`` confidence interval.
    ci_method : str
        ``"z"`` or ``"t"``.
    execution_time : float
        Wall-clock seconds.
    metadata : dict
        Freeform metadata, e.g. ``"estimator"``, ``"ndim"`` and ``"seed_entropy"``.
    """

    estimate: float
    n_points: int
    volume: float
    std_error: float
    confidence: float
    ci: tuple[float, float]
    ci_method: str
    execution_time: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def result_to_string(self) -> str:
        """Multiline, human-readable summary."""
        if estimator := self.metadata.get("estimator"):
            title = f"Integration result ({estimator}):"
        else:
            title = "Integration result:"
        lo, hi = self.ci
        lines = [
            "=" * 20 + " INTEGRAL " + "=" * 20,
            title,
            f"  Estimate: {self.estimate:.6f}   (SE: {self.std_error:.6f})",
            f"  {int(round(self.confidence * 100))}% {self.ci_method}-CI: [{lo:.6f}, {hi:.6f}]",
            f"  Number of points: {self.n_points}",
            f"  Domain volume: {self.volume:.6g}",
            f"  Execution time: {self.execution_time:.3f} seconds",
        ]
        if self.metadata:
            lines.append("Metadata:")
            for k, v in self.metadata.items():
                lines.append(f"    {k}: {v}")
        lines.append("=" * 20 + " END " + "=" * 20)
        return "\n".join(lines)
