"""Pydantic models shared by the engine, the session and the batch runner."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AngleMode(str, Enum):
    """Unit used by trigonometric functions."""

    DEG = "DEG"
    RAD = "RAD"


class EvaluationContext(BaseModel):
    """
    Read-only inputs of an evaluation besides the expression itself.

    The engine never writes to it: committing a new last answer means building
    a new context, which only the caller does after a successful evaluation.
    """

    model_config = ConfigDict(frozen=True)

    angle_mode: AngleMode = Field(default=AngleMode.DEG, description="Angle unit for trigonometric functions")
    last_answer: float = Field(default=0.0, description="Value substituted for the 'ans' constant")


class HistoryEntry(BaseModel):
    """One successful calculation, as shown in the history list."""

    model_config = ConfigDict(frozen=True)

    source_expression: str = Field(..., description="Expression as typed by the user")
    formatted_result: str = Field(..., description="Result rendered by format_number")


class OperationResult(BaseModel):
    """Outcome of one line of a batch run."""

    expression: str = Field(..., description="Original expression")
    result: Optional[float] = Field(default=None, description="Numeric result, None on engine error")
    formatted: str = Field(..., description="Displayed result ('Error' for failures and non-finite values)")
    error: Optional[str] = Field(default=None, description="Engine error message, if any")
