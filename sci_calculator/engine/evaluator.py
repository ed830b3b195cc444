"""Evaluate RPN token sequences against an evaluation context."""
from collections.abc import Callable as ABCCallable
import math
from typing import Callable, Dict, List

import numpy as np

from sci_calculator.common.errors import EvalError, EvalErrorKind
from sci_calculator.common.models import AngleMode, EvaluationContext
from sci_calculator.engine.tokens import FUNCTIONS, OPERATORS, UNARY_MINUS, Token, TokenKind


# Type alias for binary operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]

FACTORIAL_TOLERANCE = 1e-12
# Largest n whose factorial fits in a double
MAX_FACTORIAL = 170


def deg_to_rad(x: float) -> float:
    return x * math.pi / 180


def rad_to_deg(x: float) -> float:
    return x * 180 / math.pi


def percent(a: float, b: float) -> float:
    """Calculator percentage: ``a % b`` is ``b`` percent of ``a``, not a remainder."""
    return a * (b / 100)


def factorial(a: float) -> float:
    """
    Factorial of a non-negative integral value.

    :param float a: Operand, integral within ``FACTORIAL_TOLERANCE``

    :return: ``a!``, NaN outside the domain, infinity above ``MAX_FACTORIAL``
    :rtype: float
    """
    if not math.isfinite(a) or a < 0:
        return math.nan
    n = round(a)
    if abs(a - n) > FACTORIAL_TOLERANCE:
        return math.nan
    if n > MAX_FACTORIAL:
        return math.inf
    result = 1.0
    for i in range(2, n + 1):
        result *= i
    return result


BINARY_OPERATORS: Dict[str, OperatorFn] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "%": percent,
    "^": np.power,
}

# Functions whose result does not depend on the angle mode
PLAIN_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "log10": np.log10,
    "ln": np.log,
    "sqrt": np.sqrt,
    "reciprocal": np.reciprocal,
    "factorial": factorial,
}

TRIG_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
}

INVERSE_TRIG_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "asin": np.arcsin,
    "acos": np.arccos,
    "atan": np.arctan,
}


class RPNEvaluator:
    """
    Reduce an RPN sequence to a single float with a value stack.

    Arithmetic follows IEEE-754 doubles: division by zero, overflow and
    out-of-domain arguments give infinity or NaN instead of raising. Only
    structural problems (missing operands, leftover values, unknown tokens)
    raise ``EvalError``.
    """

    @staticmethod
    def _constant(name: str, context: EvaluationContext) -> float:
        if name == "pi":
            return math.pi
        if name == "e":
            return math.e
        if name == "ans":
            return context.last_answer
        raise EvalError(EvalErrorKind.MALFORMED_EXPRESSION, f"unknown constant {name}")

    @staticmethod
    def _apply_function(name: str, a: float, context: EvaluationContext) -> float:
        degrees = context.angle_mode is AngleMode.DEG
        if name in TRIG_FUNCTIONS:
            return TRIG_FUNCTIONS[name](deg_to_rad(a) if degrees else a)
        if name in INVERSE_TRIG_FUNCTIONS:
            result = INVERSE_TRIG_FUNCTIONS[name](a)
            return rad_to_deg(result) if degrees else result
        return PLAIN_FUNCTIONS[name](a)

    @staticmethod
    def evaluate(rpn: List[Token], context: EvaluationContext) -> float:
        """
        Evaluate an RPN sequence.

        :param List[Token] rpn: Tokens in RPN order
        :param EvaluationContext context: Angle mode and last answer, read only

        :return: Computed result (may be NaN or infinite)
        :rtype: float
        :raises EvalError: If the sequence does not reduce to exactly one value
        """
        stack: List[float] = []

        with np.errstate(all="ignore"):
            for token in rpn:
                if token.kind is TokenKind.NUMBER:
                    stack.append(np.float64(token.value))

                elif token.kind is TokenKind.CONSTANT:
                    stack.append(np.float64(RPNEvaluator._constant(token.value, context)))

                elif token.kind is TokenKind.OPERATOR:
                    spec = OPERATORS.get(token.value)
                    if spec is None:
                        raise EvalError(EvalErrorKind.UNKNOWN_OPERATOR, str(token.value))
                    if len(stack) < spec.arity:
                        raise EvalError(EvalErrorKind.STACK_UNDERFLOW, str(token.value))
                    if token.value == UNARY_MINUS:
                        stack.append(np.negative(stack.pop()))
                        continue
                    b = stack.pop()
                    a = stack.pop()
                    stack.append(np.float64(BINARY_OPERATORS[token.value](a, b)))

                elif token.kind is TokenKind.FUNCTION:
                    spec = FUNCTIONS.get(token.value)
                    if spec is None:
                        raise EvalError(EvalErrorKind.UNKNOWN_FUNCTION, str(token.value))
                    if len(stack) < spec.arity:
                        raise EvalError(EvalErrorKind.STACK_UNDERFLOW, str(token.value))
                    a = stack.pop()
                    stack.append(np.float64(RPNEvaluator._apply_function(token.value, float(a), context)))

                else:
                    # Parentheses never survive the parser
                    raise EvalError(EvalErrorKind.MALFORMED_EXPRESSION, f"unexpected {token}")

        if len(stack) != 1:
            raise EvalError(EvalErrorKind.MALFORMED_EXPRESSION, f"{len(stack)} values left on the stack")

        return float(stack[0])
