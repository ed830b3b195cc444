"""Test class ExpressionParser."""

import pytest

from sci_calculator.common.errors import ParseError, ParseErrorKind
from sci_calculator.engine.lexer import ExpressionLexer
from sci_calculator.engine.parser import ExpressionParser
from sci_calculator.engine.tokens import Token, TokenKind


def _rpn(expr: str) -> str:
    return " ".join(str(t) for t in ExpressionParser.to_rpn(ExpressionLexer.tokenize(expr)))


def test_to_rpn_basic():
    """to_rpn converts tokens to correct Reverse Polish Notation."""
    tokens = [Token.number(3), Token.operator("+"), Token.number(4), Token.operator("*"), Token.number(2)]
    rpn = ExpressionParser.to_rpn(tokens)
    # Numbers in order, operators according to precedence
    assert [str(t) for t in rpn] == ["3", "4", "2", "*", "+"]


@pytest.mark.parametrize("expr,expected", [
    ("3 + 4", "3 4 +"),
    ("10 / 2 - 1", "10 2 / 1 -"),
    ("7 - 3 - 2", "7 3 - 2 -"),
    ("2^3^2", "2 3 2 ^ ^"),
    ("10%5%2", "10 5 % 2 %"),
    ("2*3%4", "2 3 * 4 %"),
    ("(1+2)*3", "1 2 + 3 *"),
])
def test_to_rpn_precedence_and_associativity(expr, expected):
    """Left-associative operators group left, ^ groups right."""
    assert _rpn(expr) == expected


@pytest.mark.parametrize("expr,expected", [
    ("-3^2", "3 2 ^ u-"),
    ("-2+3", "2 u- 3 +"),
    ("2^-3", "2 3 u- ^"),
    ("2*-3", "2 3 u- *"),
    ("--2", "2 u- u-"),
])
def test_to_rpn_unary_minus(expr, expected):
    """Unary minus binds looser than ^ and tighter than binary operators."""
    assert _rpn(expr) == expected


@pytest.mark.parametrize("expr,expected", [
    ("sin(30)+1", "30 sin 1 +"),
    ("2sin(30)", "2 30 sin *"),
    ("sqrt(9+16)", "9 16 + sqrt"),
    ("sin30+1", "30 sin 1 +"),
    ("log(sqrt(100))", "100 sqrt log10"),
])
def test_to_rpn_functions(expr, expected):
    """Prefix functions are released by their closing parenthesis or the next operator."""
    assert _rpn(expr) == expected


@pytest.mark.parametrize("expr,expected", [
    ("5!", "5 factorial"),
    ("(2+1)!", "2 1 + factorial"),
    ("2+3!", "2 3 factorial +"),
    ("-3!", "3 factorial u-"),
])
def test_to_rpn_postfix_factorial(expr, expected):
    """Factorial is emitted immediately and applies to the value before it."""
    assert _rpn(expr) == expected


@pytest.mark.parametrize("expr", ["(2+3", "2+3)", ")(", "((1)", "sin(30"])
def test_to_rpn_mismatched_parentheses(expr):
    """Unbalanced parentheses raise a ParseError."""
    with pytest.raises(ParseError) as exc_info:
        _rpn(expr)
    assert exc_info.value.kind is ParseErrorKind.MISMATCHED_PAREN
    assert exc_info.value.stage == "parse"


def test_to_rpn_drops_parentheses():
    """The output never contains parentheses."""
    rpn = ExpressionParser.to_rpn(ExpressionLexer.tokenize("((1+2)*(3-(4)))"))
    assert all(t.kind not in (TokenKind.PAREN_OPEN, TokenKind.PAREN_CLOSE) for t in rpn)
