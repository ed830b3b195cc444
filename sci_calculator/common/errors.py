"""Structural errors raised by the expression engine.

Only syntax-level problems are typed here. Domain errors (``sqrt(-1)``,
``asin(2)``, non-integral factorial...) are not raised: they produce NaN or
infinity, which the display layer renders as ``"Error"``.
"""
from enum import Enum
from typing import Optional


class LexErrorKind(str, Enum):
    INVALID_NUMBER = "invalid_number"
    UNKNOWN_IDENTIFIER = "unknown_identifier"
    UNEXPECTED_CHAR = "unexpected_char"


class ParseErrorKind(str, Enum):
    MISMATCHED_PAREN = "mismatched_paren"


class EvalErrorKind(str, Enum):
    STACK_UNDERFLOW = "stack_underflow"
    MALFORMED_EXPRESSION = "malformed_expression"
    UNKNOWN_OPERATOR = "unknown_operator"
    UNKNOWN_FUNCTION = "unknown_function"


class EngineError(ValueError):
    """
    Base class for every failure of a single evaluation attempt.

    Subclasses ``ValueError`` so callers that only care about "invalid
    expression" can keep catching that.

    :ivar str stage: Pipeline stage the error originated from (``lex``, ``parse`` or ``eval``)
    """

    stage: str = "engine"

    def __init__(self, kind: Enum, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class LexError(EngineError):
    """Raised by the lexer on input it cannot turn into tokens."""

    stage = "lex"

    def __init__(self, kind: LexErrorKind, position: int, detail: Optional[str] = None) -> None:
        self.position = position
        self.detail = detail
        if kind is LexErrorKind.INVALID_NUMBER:
            message = f"Invalid number {detail!r} at position {position}"
        elif kind is LexErrorKind.UNKNOWN_IDENTIFIER:
            message = f"Unknown identifier: {detail}"
        else:
            message = f"Unexpected char {detail!r} at position {position}"
        super().__init__(kind, message)


class ParseError(EngineError):
    """Raised by the parser when the token stream is not well nested."""

    stage = "parse"

    def __init__(self, kind: ParseErrorKind = ParseErrorKind.MISMATCHED_PAREN) -> None:
        super().__init__(kind, "Mismatched parentheses")


class EvalError(EngineError):
    """Raised by the evaluator when a postfix sequence cannot be reduced to one value."""

    stage = "eval"

    def __init__(self, kind: EvalErrorKind, detail: Optional[str] = None) -> None:
        self.detail = detail
        if kind is EvalErrorKind.STACK_UNDERFLOW:
            message = f"Invalid expression (not enough operands for {detail})"
        elif kind is EvalErrorKind.MALFORMED_EXPRESSION:
            message = f"Invalid expression ({detail})"
        elif kind is EvalErrorKind.UNKNOWN_OPERATOR:
            message = f"Unknown operator: {detail}"
        else:
            message = f"Unknown function: {detail}"
        super().__init__(kind, message)
