"""Evaluate a list of expressions in order and write the results to a file."""
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from sci_calculator.common.errors import EngineError
from sci_calculator.common.logger import logger
from sci_calculator.common.models import AngleMode, EvaluationContext, OperationResult
from sci_calculator.engine.calculator import evaluate
from sci_calculator.engine.formatting import ERROR_TEXT
from sci_calculator.session.session import CalculatorSession


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations.7z
    output: resources/operations_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    name = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    return input_path.with_name(f"{name}{suffix_safe}_results.txt")


class BatchRunner(BaseModel):
    """
    Evaluate expressions one after another in a single calculator session.

    Lines share the session, so ``ans`` in a line refers to the last
    displayable result of a previous line.
    """

    model_config = ConfigDict(frozen=True)

    output_file: Path = Field(..., description="Path to write computation results")
    angle_mode: AngleMode = Field(default=AngleMode.DEG, description="Angle mode of the session")

    def _evaluate_line(self, session: CalculatorSession, expr: str) -> OperationResult:
        """
        Evaluate one line and commit its result to the session.

        :param CalculatorSession session: Session the line is evaluated in
        :param str expr: Expression

        :return: Outcome of the line
        :rtype: OperationResult
        """
        try:
            value = evaluate(expr, session.context)
        except EngineError as exc:
            return OperationResult(expression=expr, formatted=ERROR_TEXT, error=str(exc))

        formatted = session.commit(expr, value)
        return OperationResult(expression=expr, result=value, formatted=formatted)

    def run(self, expressions: List[str]) -> List[OperationResult]:
        """
        Evaluate all expressions and write one result line per expression.

        :param List[str] expressions: Expressions, in order

        :return: Outcome of each expression
        :rtype: List[OperationResult]
        """
        session = CalculatorSession(context=EvaluationContext(angle_mode=self.angle_mode))
        results: List[OperationResult] = []

        logger.info("Evaluating %d expressions into %s", len(expressions), self.output_file)
        with self.output_file.open("w", encoding="utf-8") as f_out:
            for line_number, expr in enumerate(expressions, start=1):
                result = self._evaluate_line(session, expr)
                results.append(result)

                if result.error is None:
                    f_out.write(f"{result.expression} = {result.formatted}\n")
                else:
                    logger.error("Line %d: %s", line_number, result.error)
                    f_out.write(f"{result.expression} -> ERROR: {result.error}\n")
                # Keep progress on disk if interrupted
                f_out.flush()

        logger.info("Batch finished")
        return results
