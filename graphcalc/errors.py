class GraphCalcError(Exception):
    pass


class ParseError(GraphCalcError):
    """The expression text could not be compiled."""


class EvalError(GraphCalcError):
    """A compiled expression has no finite real value at a given binding."""


class DivergentIteration(GraphCalcError):
    """Newton iteration stalled (flat derivative) or stepped to a non-finite x."""


class NoSolutionFound(GraphCalcError):
    def __init__(self, message="no solution found"):
        super().__init__(message)
        self.message = message
