r"""
Ready-made integrands.

Scalar built-ins
    :func:`square`, :func:`sine`, :func:`exponential` (registry
    :data:`BUILTIN_FUNCTIONS`, antiderivatives in :data:`ANTIDERIVATIVES`)

Vector built-ins
    :func:`constant_one`, :func:`product`, :func:`sine_first` (registry
    :data:`BUILTIN_VECTOR_FUNCTIONS`)

User expressions
    :class:`ExpressionIntegrand` parses a text formula such as
    ``"x^2 + 3*x"`` once with SymPy and evaluates it with NumPy.

All built-ins accept either a single argument or a batch of arguments, so they
can be passed to the estimators with or without ``vectorized=True``.
"""

from __future__ import annotations

from tokenize import TokenError
from typing import Any, Callable, Optional, Sequence

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import parse_expr

__all__ = [
    "square",
    "sine",
    "exponential",
    "constant_one",
    "product",
    "sine_first",
    "BUILTIN_FUNCTIONS",
    "BUILTIN_VECTOR_FUNCTIONS",
    "ANTIDERIVATIVES",
    "exact_integral",
    "ExpressionIntegrand",
    "resolve_integrand",
]


def square(x):
    r""":math:`f(x) = x^2`."""
    return x * x


def sine(x):
    r""":math:`f(x) = \sin x`."""
    return np.sin(x)


def exponential(x):
    r""":math:`f(x) = e^x`."""
    return np.exp(x)


def constant_one(point):
    r""":math:`f(\mathbf x) = 1`; integrates to the volume of the box."""
    arr = np.asarray(point, dtype=float)
    return np.ones(arr.shape[:-1]) if arr.ndim > 1 else 1.0


def product(point):
    r""":math:`f(\mathbf x) = \prod_d x_d`."""
    return np.prod(np.asarray(point, dtype=float), axis=-1)


def sine_first(point):
    r""":math:`f(\mathbf x) = \sin x_0`."""
    return np.sin(np.asarray(point, dtype=float)[..., 0])


BUILTIN_FUNCTIONS: dict[str, Callable] = {
    "square": square,
    "sin": sine,
    "exp": exponential,
}

BUILTIN_VECTOR_FUNCTIONS: dict[str, Callable] = {
    "one": constant_one,
    "product": product,
    "sin-first": sine_first,
}

ANTIDERIVATIVES: dict[str, Callable[[float], float]] = {
    "square": lambda x: x**3 / 3.0,
    "sin": lambda x: -np.cos(x),
    "exp": np.exp,
}


def exact_integral(name: str, lower: float, upper: float) -> float:
    r"""
    Closed-form :math:`\int_a^b f` for a scalar built-in.

    Examples
    --------
    >>> round(exact_integral("square", 0.0, 1.0), 6)
    0.333333
    """
    try:
        F = ANTIDERIVATIVES[name]
    except KeyError:
        raise ValueError(f"No closed form known for '{name}'") from None
    return float(F(upper) - F(lower))


# Names visible to user expressions
_NAMESPACE: dict[str, Any] = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "exp": sp.exp,
    "log": sp.log,
    "log10": lambda arg: sp.log(arg, 10),
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
    "Abs": sp.Abs,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "Heaviside": sp.Heaviside,
    "Piecewise": sp.Piecewise,
    "pi": sp.pi,
    "e": sp.E,
}

# Only the constructors the parser's transformations emit; unknown names become
# Symbol/Function objects and are rejected after parsing
_PARSER_GLOBALS: dict[str, Any] = {
    "Symbol": sp.Symbol,
    "Function": sp.Function,
    "Integer": sp.Integer,
    "Float": sp.Float,
    "Rational": sp.Rational,
    "factorial": sp.factorial,
}

_PARSE_ERRORS = (sp.SympifyError, SyntaxError, TokenError, NameError, TypeError, AttributeError, ValueError)


class ExpressionIntegrand:
    r"""
    Integrand compiled from a text formula.

    The formula is parsed with :func:`sympy.parsing.sympy_parser.parse_expr`
    and turned into a NumPy function with :func:`sympy.lambdify`. It may use
    the declared variables, the arithmetic operators (``^`` is read as a
    power), the functions and constants in the module namespace (``sin``,
    ``exp``, ``sqrt``, ``pi``, ...) and ``Heaviside``/``Piecewise`` for step
    functions. Anything that does not parse to a numeric expression in the
    declared variables (unknown names or functions, bare function names,
    relations, strings) is rejected at construction.

    Parameters
    ----------
    expression : str
        Formula, e.g. ``"x^2 + 3*x"`` or ``"x*y*z"``.
    variables : sequence of str, default ``("x",)``
        Variable names in dimension order.
    vector : bool, optional
        Whether the integrand is called with points rather than scalars.
        Defaults to ``len(variables) > 1``.

    Notes
    -----
    A scalar integrand is called with a number or an array of numbers. A
    vector integrand is called with a point of shape ``(ndim,)`` or a batch of
    shape ``(n, ndim)``; variable ``k`` is bound to ``point[..., k]``.

    Examples
    --------
    >>> f = ExpressionIntegrand("x^2 + 1")
    >>> f(2.0)
    5.0
    >>> g = ExpressionIntegrand("x*y", variables=("x", "y"))
    >>> float(g([2.0, 3.0]))
    6.0
    """

    def __init__(self, expression: str, variables: Sequence[str] = ("x",), vector: Optional[bool] = None):
        self.expression = expression
        self.variables = tuple(variables)
        if not self.variables:
            raise ValueError("at least one variable is required")
        clash = set(self.variables) & set(_NAMESPACE)
        if clash:
            raise ValueError(f"variable names shadow built-in names: {sorted(clash)}")
        self.vector = len(self.variables) > 1 if vector is None else bool(vector)
        self._symbols = tuple(sp.Symbol(name, real=True) for name in self.variables)
        self.expr = self._parse(expression.replace("^", "**"))
        self._func = sp.lambdify(self._symbols, self.expr, modules=["numpy"])

    def _parse(self, source: str) -> sp.Expr:
        local_dict = {**_NAMESPACE, **dict(zip(self.variables, self._symbols))}
        try:
            expr = parse_expr(source.strip(), local_dict=local_dict, global_dict=dict(_PARSER_GLOBALS))
        except _PARSE_ERRORS as e:
            raise ValueError(f"Invalid expression '{self.expression}': {e}") from None
        if not isinstance(expr, sp.Expr):
            raise ValueError(f"Expression '{self.expression}' is not a numeric formula")
        unknown = sorted(str(s) for s in expr.free_symbols - set(self._symbols))
        if unknown:
            raise ValueError(f"Unknown name '{unknown[0]}' in expression '{self.expression}'")
        undefined = sorted(str(f.func) for f in expr.atoms(AppliedUndef))
        if undefined:
            raise ValueError(f"Unknown function '{undefined[0]}' in expression '{self.expression}'")
        return expr

    def __call__(self, point):
        arr = np.asarray(point, dtype=float)
        if self.vector:
            value = self._func(*(arr[..., k] for k in range(len(self.variables))))
            shape = arr.shape[:-1]
        else:
            value = self._func(arr)
            shape = arr.shape
        value = np.asarray(value, dtype=float)
        if not shape:
            return float(value)
        # constant formulas evaluate to a scalar even on batches
        return np.broadcast_to(value, shape).copy()

    def __repr__(self) -> str:
        return f"ExpressionIntegrand({self.expression!r}, variables={self.variables!r})"


def resolve_integrand(name: str, ndim: int = 1, *, vector: Optional[bool] = None) -> Callable:
    r"""
    Turn a command-line function argument into an integrand.

    Parameters
    ----------
    name : str
        A built-in name (``"square"``, ``"sin"``, ``"exp"`` for scalar
        integrands; ``"one"``, ``"product"``, ``"sin-first"`` for point
        integrands of any dimension) or a formula.
    ndim : int, default 1
        Dimension count.
    vector : bool, optional
        Resolve a point integrand even when ``ndim == 1``, as the volume
        estimator needs. Defaults to ``ndim > 1``.

    Returns
    -------
    callable
        Scalar formulas use ``x``; point formulas use ``x0 .. x{ndim-1}``.
    """
    vector = ndim > 1 if vector is None else vector
    if not vector and name in BUILTIN_FUNCTIONS:
        return BUILTIN_FUNCTIONS[name]
    if name in BUILTIN_VECTOR_FUNCTIONS:
        return BUILTIN_VECTOR_FUNCTIONS[name]
    variables = tuple(f"x{d}" for d in range(ndim)) if vector else ("x",)
    return ExpressionIntegrand(name, variables=variables, vector=vector)
