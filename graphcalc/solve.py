"""
Equation solving: Newton's method from a fixed battery of seeds.
"""
import logging
import re
from dataclasses import dataclass, field

from . import config
from .errors import NoSolutionFound, ParseError
from .evaluator import compile_expression, detect_variable
from .formatting import format_root
from .newton import newton

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "cannot parse the expression"


@dataclass
class Solution:
    input: str
    variable: str
    roots: list = field(default_factory=list)
    error: str = None
    values: list = field(default_factory=list)  # raw floats behind `roots`

    def to_dict(self):
        d = {"input": self.input, "variable": self.variable, "roots": self.roots}
        if self.error:
            d["error"] = self.error
        return d


def split_equation(eq):
    """'lhs=rhs' -> (lhs, rhs); a bare expression is set equal to zero."""
    if '=' in eq:
        parts = eq.split('=')
        return parts[0], parts[1]
    return eq, '0'


def collect_roots(expr, seeds=config.SEEDS, tol=config.ROOT_DEDUPE_TOL):
    """Run Newton from every seed; keep distinct roots, ascending."""
    roots = []
    for x0 in seeds:
        r = newton(expr, x0)
        if r is None:
            continue
        if not any(abs(r - k) < tol for k in roots):
            roots.append(r)
    roots.sort()
    return roots


def solve_equation(equation):
    """
    Solve a one-variable equation numerically.
    Never raises for bad input: parse failures and empty results come back in
    Solution.error.
    """
    eq = re.sub(r'\s+', '', equation or '')
    variable = detect_variable(eq)
    lhs, rhs = split_equation(eq)
    try:
        expr = compile_expression(f"({lhs}) - ({rhs})", variable)
    except ParseError:
        return Solution(input=equation, variable=variable, error=PARSE_ERROR_MESSAGE)

    values = collect_roots(expr)
    if not values:
        logger.info("solve %r: no root from %d seeds", equation, len(config.SEEDS))
        return Solution(input=equation, variable=variable, error=NoSolutionFound().message)

    logger.info("solve %r: %d root(s) in %s", equation, len(values), variable)
    return Solution(input=equation, variable=variable,
                    roots=[format_root(r) for r in values], values=values)
