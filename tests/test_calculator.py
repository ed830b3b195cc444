"""Test the evaluate() pipeline end to end."""
import logging
import math

import pytest

from sci_calculator.common.errors import EngineError, EvalError, EvalErrorKind, LexError, ParseError, ParseErrorKind
from sci_calculator.common.models import AngleMode, EvaluationContext
from sci_calculator.engine.calculator import evaluate
from sci_calculator.engine.formatting import format_number
from sci_calculator.engine.lexer import ExpressionLexer
from sci_calculator.engine.parser import ExpressionParser
from sci_calculator.engine.tokens import FUNCTIONS, OPERATORS, TokenKind


RAD = EvaluationContext(angle_mode=AngleMode.RAD)


@pytest.mark.parametrize("expr,expected", [
    ("3 + 4 * 2", 11.0),
    ("7 + 3 * 2 - 4 / 2", 11.0),
    ("-3^2", -9.0),
    ("2^3^2", 512.0),
    ("2^-3", 0.125),
    ("50%4", 2.0),
    ("2(3+4)", 14.0),
    ("(2)(3)", 6.0),
    ("-(-2)", 2.0),
    ("5!", 120.0),
    ("3!!", 720.0),
    ("2+3!", 8.0),
    ("0^0", 1.0),
    ("sqrt(16)", 4.0),
    ("inv(4)", 0.25),
    ("2 × 3 ÷ 4", 1.5),
    ("1.5.5", 0.75),
])
def test_evaluate_valid(expr, expected):
    """Evaluate returns correct result for valid expressions."""
    assert evaluate(expr) == pytest.approx(expected)


def test_implicit_multiplication_with_pi():
    """2pi, 2*pi and 2π are the same number."""
    assert evaluate("2pi") == evaluate("2*pi") == evaluate("2π") == pytest.approx(2 * math.pi)
    assert format_number(evaluate("2pi")) == "6.28318530718"


def test_percent_chains_left_to_right():
    """10%5%2 is (10%5)%2 with percent semantics, not a remainder."""
    assert evaluate("10%5%2") == pytest.approx(0.01)


def test_angle_mode():
    """sin(90) is 1 in degrees and sin of 90 radians otherwise."""
    assert evaluate("sin(90)") == pytest.approx(1.0)
    assert evaluate("sin(90)", RAD) == pytest.approx(0.8939966636)
    assert evaluate("acos(0)") == pytest.approx(90.0)
    assert evaluate("atan(1)", RAD) == pytest.approx(math.pi / 4)


def test_logarithms():
    assert evaluate("log(1000)") == pytest.approx(3.0)
    assert evaluate("ln(e)") == pytest.approx(1.0)


def test_last_answer():
    """ans reads the last answer of the context."""
    context = EvaluationContext(last_answer=10)
    assert evaluate("ans*2", context) == 20.0
    assert evaluate("2Ans", context) == 20.0
    # Never written by the engine
    assert context.last_answer == 10


@pytest.mark.parametrize("expr", ["3.5!", "sqrt(-1)", "asin(2)", "1/0", "(-1)!", "171!"])
def test_domain_errors_format_to_error(expr):
    """Out-of-domain math is not raised, it shows up as Error on display."""
    assert format_number(evaluate(expr)) == "Error"


def test_mismatched_parenthesis():
    with pytest.raises(ParseError) as exc_info:
        evaluate("(2+3")
    assert exc_info.value.kind is ParseErrorKind.MISMATCHED_PAREN


@pytest.mark.parametrize("expr,error,stage", [
    ("2 $ 3", LexError, "lex"),
    ("foo", LexError, "lex"),
    ("2+3)", ParseError, "parse"),
    ("", EvalError, "eval"),
    ("2+", EvalError, "eval"),
    ("+2", EvalError, "eval"),
    ("3!2", EvalError, "eval"),
])
def test_evaluate_invalid_expression(expr, error, stage):
    """Evaluate raises the error of the first failing stage."""
    with pytest.raises(error) as exc_info:
        evaluate(expr)
    assert isinstance(exc_info.value, EngineError)
    assert exc_info.value.stage == stage


def test_empty_expression_is_malformed():
    with pytest.raises(EvalError) as exc_info:
        evaluate("")
    assert exc_info.value.kind is EvalErrorKind.MALFORMED_EXPRESSION


@pytest.mark.parametrize("expr", [
    "1+2*3-4/5",
    "-3^2",
    "2^-3",
    "--2",
    "2pi(1+e)",
    "sin(30)cos(60)",
    "sqrt(log(100))!",
    "-(2+3)!%4",
    "ans^2^0.5",
    "2sin30+1",
    "((1))((2))",
    "50%4*-1",
])
def test_stack_depth_of_parser_output(expr):
    """RPN from accepted expressions never underflows and leaves exactly one value."""
    depth = 0
    for token in ExpressionParser.to_rpn(ExpressionLexer.tokenize(expr)):
        if token.kind is TokenKind.OPERATOR:
            depth -= OPERATORS[token.value].arity
        elif token.kind is TokenKind.FUNCTION:
            depth -= FUNCTIONS[token.value].arity
        assert depth >= 0
        depth += 1
    assert depth == 1


def test_tokens_and_rpn_are_logged(caplog):
    """Both the token list and the RPN are traced at debug level."""
    caplog.set_level(logging.DEBUG, logger="sci_calculator")
    evaluate("2pi")

    messages = [record.getMessage() for record in caplog.records]
    assert "'2pi' -> tokens: 2 * pi" in messages
    assert "'2pi' -> RPN: 2 pi *" in messages
