"""Token type and the static operator/function metadata tables."""
from enum import Enum
from typing import Dict, NamedTuple, Union

from pydantic import BaseModel, ConfigDict


class TokenKind(str, Enum):
    NUMBER = "number"
    CONSTANT = "constant"
    OPERATOR = "operator"
    FUNCTION = "function"
    PAREN_OPEN = "("
    PAREN_CLOSE = ")"


class OperatorSpec(NamedTuple):
    """Static metadata of an operator."""

    precedence: int
    right_assoc: bool
    arity: int


class FunctionSpec(NamedTuple):
    """Static metadata of a function: all take one argument, factorial is written after it."""

    arity: int
    postfix: bool


UNARY_MINUS = "u-"
FACTORIAL = "factorial"

# Higher precedence binds tighter
OPERATORS: Dict[str, OperatorSpec] = {
    "+": OperatorSpec(1, False, 2),
    "-": OperatorSpec(1, False, 2),
    "*": OperatorSpec(2, False, 2),
    "/": OperatorSpec(2, False, 2),
    "%": OperatorSpec(2, False, 2),
    UNARY_MINUS: OperatorSpec(3, True, 1),
    "^": OperatorSpec(4, True, 2),
}

FUNCTIONS: Dict[str, FunctionSpec] = {
    "sin": FunctionSpec(1, False),
    "cos": FunctionSpec(1, False),
    "tan": FunctionSpec(1, False),
    "asin": FunctionSpec(1, False),
    "acos": FunctionSpec(1, False),
    "atan": FunctionSpec(1, False),
    "log10": FunctionSpec(1, False),
    "ln": FunctionSpec(1, False),
    "sqrt": FunctionSpec(1, False),
    "reciprocal": FunctionSpec(1, False),
    FACTORIAL: FunctionSpec(1, True),
}

CONSTANTS = ("pi", "e", "ans")


class Token(BaseModel):
    """
    A lexical unit of an expression.

    ``value`` holds the float of a NUMBER, or the canonical name/symbol of a
    CONSTANT, OPERATOR or FUNCTION. Parentheses carry no value.
    """

    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    value: Union[float, str, None] = None

    @classmethod
    def number(cls, value: float) -> "Token":
        return cls(kind=TokenKind.NUMBER, value=float(value))

    @classmethod
    def constant(cls, name: str) -> "Token":
        return cls(kind=TokenKind.CONSTANT, value=name)

    @classmethod
    def operator(cls, symbol: str) -> "Token":
        return cls(kind=TokenKind.OPERATOR, value=symbol)

    @classmethod
    def function(cls, name: str) -> "Token":
        return cls(kind=TokenKind.FUNCTION, value=name)

    @classmethod
    def paren_open(cls) -> "Token":
        return cls(kind=TokenKind.PAREN_OPEN)

    @classmethod
    def paren_close(cls) -> "Token":
        return cls(kind=TokenKind.PAREN_CLOSE)

    @property
    def is_operand(self) -> bool:
        return self.kind in (TokenKind.NUMBER, TokenKind.CONSTANT)

    @property
    def is_prefix_function(self) -> bool:
        return self.kind is TokenKind.FUNCTION and not self.is_postfix_function

    @property
    def is_postfix_function(self) -> bool:
        spec = FUNCTIONS.get(self.value)
        return self.kind is TokenKind.FUNCTION and spec is not None and spec.postfix

    def __str__(self) -> str:
        if self.kind is TokenKind.NUMBER:
            return f"{self.value:g}"
        if self.kind in (TokenKind.PAREN_OPEN, TokenKind.PAREN_CLOSE):
            return self.kind.value
        return str(self.value)
