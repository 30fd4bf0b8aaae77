r"""
Plotting of convergence series.

:func:`plot_convergence` draws absolute error against sample count on log-log
axes, optionally with a :math:`C / \sqrt{n}` guide anchored at the first point.
matplotlib is imported lazily so the numerical core never depends on it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

from .convergence import ConvergenceSeries

if TYPE_CHECKING:
    from matplotlib.axes import Axes

__all__ = ["plot_convergence"]


def plot_convergence(
    series: ConvergenceSeries,
    *,
    title: Optional[str] = None,
    filename: Optional[str] = None,
    ax: Optional["Axes"] = None,
    show_reference_rate: bool = True,
) -> Optional["Axes"]:
    r"""
    Plot a convergence series.

    Parameters
    ----------
    series : ConvergenceSeries
        Output of :meth:`~mcintegral.convergence.ConvergenceSweep.run`.
    title : str, optional
        Axes title. Defaults to ``"Monte Carlo Integration Error vs. Points"``.
    filename : str, optional
        If given, the figure is saved there and closed, and ``None`` is returned.
    ax : matplotlib.axes.Axes, optional
        Axes to draw on; a new figure is created when omitted.
    show_reference_rate : bool, default ``True``
        Overlay :math:`\varepsilon_1 \sqrt{n_1 / n}`.

    Returns
    -------
    matplotlib.axes.Axes or None
    """
    import matplotlib.pyplot as plt  # pylint: disable=import-outside-toplevel

    n, err = series.n_points, series.errors
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 5))

    ax.plot(n, err, marker="o", markersize=3, linewidth=1.5, color="tab:blue", label="|estimate - reference|")
    positive = err > 0
    if show_reference_rate and positive.any():
        n0 = n[positive][0]
        e0 = err[positive][0]
        ax.plot(n, e0 * np.sqrt(n0 / n), linestyle="--", color="tab:red", alpha=0.7, label=r"$\propto 1/\sqrt{n}$")
    if positive.all():
        ax.set_xscale("log")
        ax.set_yscale("log")
    ax.set_xlabel("Number of points")
    ax.set_ylabel("Absolute error")
    ax.set_title(title or "Monte Carlo Integration Error vs. Points")
    ax.grid(True, alpha=0.3)
    ax.legend()

    if filename is not None:
        fig = ax.figure
        fig.tight_layout()
        fig.savefig(filename, dpi=150)
        plt.close(fig)
        return None
    return ax
