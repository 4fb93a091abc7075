"""
Expression compilation and evaluation.

Text is parsed once with SymPy (implicit multiplication, ``^`` as power) and
lambdified onto NumPy; the resulting :class:`Expression` handle is cheap to
evaluate many times. Scalar evaluation raises :class:`EvalError`; the
``sample`` / ``sample_many`` forms return an explicit "unusable" marker
(``None`` / ``nan``) so scanners can skip points without exception handling.
"""
import logging
import re
from tokenize import TokenError

import numpy as np
from sympy import E, Abs, Expr, Function, Symbol, ceiling, floor, log, pi, sign
from sympy.core.function import AppliedUndef
from sympy.core.sympify import SympifyError
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations,
    implicit_multiplication, implicit_application, convert_xor
)
from sympy.utilities.lambdify import lambdify

from .errors import EvalError, ParseError

logger = logging.getLogger(__name__)

TRANSFORMS = standard_transformations + (
    implicit_multiplication,
    implicit_application,
    convert_xor,  # allow ^
)

# Identifiers that are never the free variable.
KNOWN_NAMES = frozenset([
    'sin', 'cos', 'tan', 'asin', 'acos', 'atan',
    'sqrt', 'log', 'ln', 'abs', 'exp', 'pi', 'e',
    'ceil', 'floor', 'round', 'sign',
])

DEFAULT_VARIABLE = 'x'

_IDENT = re.compile(r'[a-zA-Z_]+')

_round = Function('round')


def _round_half_away(v):
    v = np.asarray(v, dtype=float)
    return np.sign(v) * np.floor(np.abs(v) + 0.5)


_NUMPY_OVERRIDES = {'round': _round_half_away}


def detect_variable(text):
    """First identifier that is not a known function/constant name, else 'x'."""
    for name in _IDENT.findall(re.sub(r'\s+', '', text or '')):
        if name not in KNOWN_NAMES:
            return name
    return DEFAULT_VARIABLE


def _local_names(variable):
    names = {
        'e': E,
        'pi': pi,
        'ln': log,
        'log': log,
        'abs': Abs,
        'ceil': ceiling,
        'floor': floor,
        'round': _round,
        'sign': sign,
    }
    names[variable] = Symbol(variable)
    return names


class Expression:
    """A compiled expression in one free variable."""

    def __init__(self, text, variable, tree):
        self.text = text
        self.variable = variable
        self.tree = tree
        var = Symbol(variable)
        others = sorted((s for s in tree.free_symbols if s != var), key=lambda s: s.name)
        self.symbols = tuple(([var] if var in tree.free_symbols else []) + others)
        self._names = tuple(s.name for s in self.symbols)
        self._func = lambdify(self.symbols, tree, modules=[_NUMPY_OVERRIDES, 'numpy'])

    def __repr__(self):
        return f"Expression({self.text!r}, variable={self.variable!r})"

    @property
    def parameters(self):
        """Free names other than the variable."""
        return tuple(n for n in self._names if n != self.variable)

    def _args(self, binding):
        if not isinstance(binding, dict):
            binding = {self.variable: binding}
        missing = [n for n in self._names if n not in binding]
        if missing:
            raise EvalError(f"Unbound symbol(s): {', '.join(missing)}")
        return [binding[n] for n in self._names]

    def evaluate(self, binding):
        """
        Evaluate at a number (bound to the variable) or a {name: number} dict.
        Raises EvalError for undefined, complex or non-finite results.
        """
        try:
            args = [float(a) for a in self._args(binding)]
        except (TypeError, ValueError) as e:
            raise EvalError(f"Invalid binding: {e}") from e
        try:
            with np.errstate(all='ignore'):
                result = self._func(*args)
        except (ArithmeticError, ValueError, TypeError, NameError) as e:
            raise EvalError(str(e)) from e
        if np.iscomplexobj(result):
            if np.imag(result) != 0:
                raise EvalError("Complex result")
            result = np.real(result)
        try:
            value = float(result)
        except (TypeError, ValueError) as e:
            raise EvalError(f"Non-numeric result: {result!r}") from e
        if not np.isfinite(value):
            raise EvalError("Non-finite result")
        return value

    def sample(self, x):
        """Scalar sample: float, or None when unusable."""
        try:
            return self.evaluate({self.variable: x})
        except EvalError:
            return None

    def sample_many(self, xs):
        """Vectorized sample over xs; unusable points are nan."""
        xs = np.asarray(xs, dtype=float)
        try:
            with np.errstate(all='ignore'):
                args = [xs if n == self.variable else np.nan for n in self._names]
                res = np.asarray(self._func(*args))
            if np.iscomplexobj(res):
                res = np.where(np.imag(res) != 0, np.nan, np.real(res))
            res = np.broadcast_to(res.astype(float), xs.shape).copy()
        except (ArithmeticError, ValueError, TypeError, NameError):
            # some functions (e.g. via Python fallbacks) only take scalars
            res = np.full(xs.shape, np.nan)
            for i, x in np.ndenumerate(xs):
                v = self.sample(x)
                if v is not None:
                    res[i] = v
        res[~np.isfinite(res)] = np.nan
        return res


def compile_expression(text, variable=None):
    """
    Compile expression text into an Expression handle.
    Raises ParseError when the text cannot be parsed into a scalar expression.
    """
    if text is None or not str(text).strip():
        raise ParseError("Empty expression")
    text = str(text)
    variable = variable or detect_variable(text)
    if len(variable) > 1 and re.search(rf'\b{re.escape(variable)}\s*\(', text):
        raise ParseError(f"{variable!r} is called like a function but is not a known one")
    try:
        # unevaluated, so sqrt(x)^2 keeps its domain instead of folding to x
        tree = parse_expr(text, local_dict=_local_names(variable),
                          transformations=TRANSFORMS, evaluate=False)
    except (SympifyError, SyntaxError, TokenError, TypeError, ValueError,
            AttributeError, NameError) as e:
        logger.warning("Could not parse %r: %s", text, e)
        raise ParseError(f"Could not parse {text!r}") from e
    if not isinstance(tree, Expr):
        raise ParseError(f"Not a numeric expression: {text!r}")
    return Expression(text, variable, tree)


def compile_function(text, variable=None):
    """
    Compile a plotted function. The variable is `x` unless named, and any
    other free name (an unknown function, a parameter) is a ParseError.
    """
    expr = compile_expression(text, variable or DEFAULT_VARIABLE)
    unknown = list(expr.parameters)
    # undefined calls such as log10(x) resolve against numpy when lambdified
    unknown += sorted({f.func.__name__ for f in expr.tree.atoms(AppliedUndef)
                       if not hasattr(np, f.func.__name__)})
    if unknown:
        raise ParseError(f"Unknown name(s) in {text!r}: {', '.join(unknown)}")
    return expr
