"""graphcalc: numeric equation solving and function analysis for a graphing calculator."""
from .analysis import FunctionEntry, GraphView, analyze_function, analyze_graph, update_tangents
from .antiderivative import build_antiderivative, can_integrate, origin_index, pixel_grid
from .domain import Domain
from .errors import DivergentIteration, EvalError, GraphCalcError, NoSolutionFound, ParseError
from .evaluator import Expression, compile_expression, compile_function, detect_variable
from .finite_diff import derivative, derivative_many
from .newton import newton
from .scan import Extremum, bisect_sign_change, find_extrema, find_roots, refine_extremum
from .solve import Solution, solve_equation
from .tangent import SnapTarget, Tangent, TangentBoard, tangent_at

__version__ = "1.0.0"
