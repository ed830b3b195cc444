"""Calculator session: angle mode, last answer and history around the engine."""
from typing import List, Optional

from pydantic import BaseModel, Field

from sci_calculator.common.errors import EngineError
from sci_calculator.common.logger import logger
from sci_calculator.common.models import AngleMode, EvaluationContext, HistoryEntry
from sci_calculator.engine.calculator import evaluate
from sci_calculator.engine.formatting import ERROR_TEXT, format_number


# An expression ending with one of these is still being typed
INCOMPLETE_SUFFIXES = "+-−*×/÷^%("


class CalculatorSession(BaseModel):
    """
    State a calculator front-end keeps between evaluations.

    The engine itself is stateless: the session supplies the evaluation
    context and is the only place where the last answer is committed, after a
    successful evaluation whose result is displayable.
    """

    context: EvaluationContext = Field(default_factory=EvaluationContext, description="Angle mode and last answer")
    history: List[HistoryEntry] = Field(default_factory=list, description="Past calculations, most recent first")
    max_history: int = Field(default=18, ge=1, description="Number of history entries kept")

    @property
    def answer(self) -> float:
        return self.context.last_answer

    @property
    def angle_mode(self) -> AngleMode:
        return self.context.angle_mode

    def set_angle_mode(self, mode: AngleMode) -> None:
        """Switch between degrees and radians."""
        self.context = self.context.model_copy(update={"angle_mode": AngleMode(mode)})
        logger.info("Angle mode set to %s", self.context.angle_mode.value)

    def clear_answer(self) -> None:
        """Reset the last answer to 0."""
        self.context = self.context.model_copy(update={"last_answer": 0.0})

    def clear_history(self) -> None:
        self.history = []

    def submit(self, expr: str) -> str:
        """
        Evaluate an expression the way the "=" key does.

        On a displayable result, the value becomes the new last answer and the
        calculation is added to the history. Failures leave the session untouched.

        :param str expr: Expression as typed by the user

        :return: Formatted result, ``"Error"`` on failure, ``"0"`` for a blank expression
        :rtype: str
        """
        if not expr.strip():
            return "0"

        try:
            value: float = evaluate(expr, self.context)
        except EngineError as exc:
            logger.warning("Could not evaluate %r (%s): %s", expr, exc.stage, exc)
            return ERROR_TEXT

        return self.commit(expr, value)

    def commit(self, expr: str, value: float) -> str:
        """
        Record a successfully evaluated expression.

        Non-finite values format to ``"Error"`` and are not committed.

        :param str expr: Expression as typed by the user
        :param float value: Its evaluated value

        :return: Formatted result
        :rtype: str
        """
        formatted: str = format_number(value)
        if formatted != ERROR_TEXT:
            self.context = self.context.model_copy(update={"last_answer": value})
            self.history.insert(0, HistoryEntry(source_expression=expr, formatted_result=formatted))
            del self.history[self.max_history:]
            logger.debug("%r = %s", expr, formatted)
        return formatted

    def preview(self, expr: str) -> Optional[str]:
        """
        Compute the live preview shown while typing.

        :param str expr: Expression typed so far

        :return: Formatted result, or None when there is nothing sensible to show
        :rtype: Optional[str]
        """
        text = expr.strip()
        if not text:
            return "0"
        if text[-1] in INCOMPLETE_SUFFIXES:
            return None

        try:
            formatted = format_number(evaluate(text, self.context))
        except EngineError:
            return None
        return None if formatted == ERROR_TEXT else formatted
