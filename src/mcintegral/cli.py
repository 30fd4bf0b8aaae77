"""Command-line front end: ``mcintegral scalar ...`` and ``mcintegral volume ...``."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from .convergence import ConvergenceSweep, SweepConfig
from .domain import Domain, Interval
from .estimators import ScalarEstimator, VolumeEstimator
from .integrands import ANTIDERIVATIVES, BUILTIN_FUNCTIONS, BUILTIN_VECTOR_FUNCTIONS, exact_integral, resolve_integrand
from .sampling import RandomPointSource
from .utils import CI_METHODS

logger = logging.getLogger(__name__)

__all__ = ["build_parser", "main"]


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--points", "-n", type=int, required=True, help="Number of random points")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run")
    parser.add_argument(
        "--reference",
        type=float,
        default=None,
        help="Reference value for the error sweep (default: closed form if known, else the estimate)",
    )
    parser.add_argument("--confidence", type=float, default=0.95, help="Confidence level of the interval")
    parser.add_argument(
        "--ci-method", choices=CI_METHODS, default="auto", help="Critical value: z, Student-t, or auto by sample size"
    )
    parser.add_argument("--no-sweep", action="store_true", help="Skip the convergence sweep")
    parser.add_argument("--floor", type=int, default=SweepConfig.floor, help="First sample count of the sweep")
    parser.add_argument("--trials", type=int, default=1, help="Estimates averaged per sweep point")
    parser.add_argument("--plot", metavar="FILE", default=None, help="Save the error plot to FILE")
    parser.add_argument("--show", action="store_true", help="Display the error plot in a window")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")


def build_parser() -> argparse.ArgumentParser:
    """Create the ``mcintegral`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="mcintegral",
        description="Monte Carlo integration with convergence analysis",
    )
    sub = parser.add_subparsers(dest="method", required=True)

    scalar = sub.add_parser("scalar", help="Integrate f(x) over [lower, upper]")
    scalar.add_argument(
        "--function",
        "-f",
        default="square",
        help=f"One of {sorted(BUILTIN_FUNCTIONS)} or a formula in x, e.g. 'x^2 + 3*x'",
    )
    scalar.add_argument("--lower", "-a", type=float, required=True, help="Lower limit")
    scalar.add_argument("--upper", "-b", type=float, required=True, help="Upper limit")
    _add_common_arguments(scalar)

    volume = sub.add_parser("volume", help="Integrate f(x0, ..., xN) over a box")
    volume.add_argument(
        "--function",
        "-f",
        default="sin-first",
        help=f"One of {sorted(BUILTIN_VECTOR_FUNCTIONS)} or a formula in x0, x1, ...",
    )
    volume.add_argument(
        "--bounds",
        nargs=2,
        type=float,
        action="append",
        required=True,
        metavar=("LOWER", "UPPER"),
        help="Limits of one dimension; repeat once per dimension",
    )
    _add_common_arguments(volume)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point of the ``mcintegral`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        if args.method == "scalar":
            domain = Interval(args.lower, args.upper)
            ndim = 1
        else:
            domain = Domain.from_bounds(args.bounds)
            ndim = domain.ndim
        integrand = resolve_integrand(args.function, ndim, vector=args.method == "volume")
        config = SweepConfig(floor=args.floor, n_trials=args.trials)
    except ValueError as e:
        parser.error(str(e))

    source = RandomPointSource(args.seed)
    estimator = ScalarEstimator(source) if args.method == "scalar" else VolumeEstimator(source)
    try:
        result = estimator.integrate(
            domain, args.points, integrand, vectorized=True, confidence=args.confidence, ci_method=args.ci_method
        )
    except ValueError as e:
        parser.error(str(e))
    print(result.result_to_string())

    if args.no_sweep:
        return 0

    reference = args.reference
    if reference is None:
        if args.method == "scalar" and args.function in ANTIDERIVATIVES:
            reference = exact_integral(args.function, domain.lower, domain.upper)
        else:
            reference = result.estimate
    logger.info("Using reference value %.6f", reference)

    series = ConvergenceSweep(estimator, config).run(domain, integrand, args.points, reference, vectorized=True)
    print(f"{'points':>10}  {'abs error':>12}")
    for p in series:
        print(f"{p.n_points:>10}  {p.error:>12.6g}")
    print(f"Fitted convergence rate: {series.fitted_rate():.3f} (Monte Carlo theory: -0.5)")

    if args.plot or args.show:
        from .plotting import plot_convergence  # pylint: disable=import-outside-toplevel

        title = "Monte Carlo Integration Error vs. Points"
        if args.method == "volume":
            title = "Multidimensional " + title
        if args.plot:
            plot_convergence(series, title=title, filename=args.plot)
            print(f"Saved: {args.plot}")
        if args.show:
            import matplotlib.pyplot as plt  # pylint: disable=import-outside-toplevel

            plot_convergence(series, title=title)
            plt.show()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
