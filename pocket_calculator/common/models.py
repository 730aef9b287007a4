"""Pydantic models for tokens and evaluation results."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pocket_calculator.common.errors import ErrorKind


class TokenKind(str, Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"


class Token(BaseModel):
    """A single unit of an arithmetic expression."""

    model_config = ConfigDict(frozen=True)

    kind: TokenKind = Field(..., description="Category of the token")
    text: str = Field(..., min_length=1, description="Source text of the token")
    position: int = Field(default=0, ge=0, description="0-based index of the token in the expression")

    def __str__(self) -> str:
        return self.text


class EvaluationResult(BaseModel):
    """
    Outcome of evaluating one expression.

    Exactly one of ``value`` and ``error`` is set.
    """

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Original arithmetic expression")
    value: Optional[float] = Field(default=None, description="Evaluated numeric result")
    error: Optional[ErrorKind] = Field(default=None, description="Reason the evaluation failed")
    message: Optional[str] = Field(default=None, description="Details about the failure")

    @model_validator(mode="after")
    def value_xor_error(self) -> "EvaluationResult":
        """Ensure a result is either a success or a failure, never both."""
        if (self.value is None) == (self.error is None):
            raise ValueError("Exactly one of 'value' and 'error' must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None
