"""Evaluate calculator expressions: lexer, parser and evaluator chained together."""
from typing import List, Optional

from sci_calculator.common.logger import logger
from sci_calculator.common.models import EvaluationContext
from sci_calculator.engine.evaluator import RPNEvaluator
from sci_calculator.engine.lexer import ExpressionLexer
from sci_calculator.engine.parser import ExpressionParser
from sci_calculator.engine.tokens import Token


def evaluate(expr: str, context: Optional[EvaluationContext] = None) -> float:
    """
    Evaluate a calculator expression.

    The context is only read. Committing the result as the new last answer is
    up to the caller.

    :param str expr: Expression as typed by the user
    :param EvaluationContext context: Angle mode and last answer, defaults to DEG with ans = 0

    :return: Computed result, NaN or infinite for out-of-domain math
    :rtype: float
    :raises EngineError: LexError, ParseError or EvalError from the first failing stage
    """
    if context is None:
        context = EvaluationContext()

    tokens: List[Token] = ExpressionLexer.tokenize(expr)
    logger.debug("%r -> tokens: %s", expr, " ".join(map(str, tokens)))
    rpn: List[Token] = ExpressionParser.to_rpn(tokens)
    logger.debug("%r -> RPN: %s", expr, " ".join(map(str, rpn)))

    return RPNEvaluator.evaluate(rpn, context)
