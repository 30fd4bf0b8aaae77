r"""
Critical-value helpers for confidence intervals.

Functions
    :func:`z_crit` - two-sided normal critical value
    :func:`t_crit` - two-sided Student-t critical value
    :func:`autocrit` - pick z or t from the sample size
"""

from __future__ import annotations

from scipy.stats import norm
from scipy.stats import t as student_t

__all__ = ["CI_METHODS", "z_crit", "t_crit", "autocrit"]

CI_METHODS = ("auto", "z", "t")

# Below this many samples "auto" switches to Student-t
_T_THRESHOLD = 30


def _check_confidence(confidence: float) -> None:
    if not 0.0 < confidence < 1.0:
        raise ValueError("confidence must be in (0,1)")


def z_crit(confidence: float) -> float:
    r"""
    Two-sided normal critical value :math:`z_{1-\alpha/2}`.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.

    Returns
    -------
    float

    Examples
    --------
    >>> round(z_crit(0.95), 3)
    1.96
    """
    _check_confidence(confidence)
    return float(norm.ppf(0.5 + confidence / 2.0))


def t_crit(confidence: float, df: int) -> float:
    r"""
    Two-sided Student-t critical value :math:`t_{1-\alpha/2,\,\nu}`.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.
    df : int
        Degrees of freedom :math:`\nu \ge 1`.

    Returns
    -------
    float
    """
    _check_confidence(confidence)
    if df < 1:
        raise ValueError("df must be >= 1")
    return float(student_t.ppf(0.5 + confidence / 2.0, df))


def autocrit(confidence: float, n: int, method: str = "auto") -> tuple[float, str]:
    r"""
    Select a critical value for a confidence interval of the mean.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.
    n : int
        Sample size; the t path uses :math:`n - 1` degrees of freedom.
    method : {"auto", "z", "t"}, default ``"auto"``
        ``"auto"`` uses Student-t when ``n < 30`` and z otherwise.

    Returns
    -------
    tuple of (float, str)
        ``(crit, kind)`` where ``kind`` is ``"z"`` or ``"t"``.
    """
    if method not in CI_METHODS:
        raise ValueError(f"method must be one of 'auto', 'z', 't', got '{method}'")
    use_t = method == "t" or (method == "auto" and n < _T_THRESHOLD)
    if use_t:
        return t_crit(confidence, max(1, n - 1)), "t"
    return z_crit(confidence), "z"
