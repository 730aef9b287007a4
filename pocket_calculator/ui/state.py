"""Immutable state of the calculator display."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pocket_calculator.common.formatting import format_number

# Glyphs used on the display instead of the ASCII operators
DISPLAY_GLYPHS: dict[str, str] = {"*": "×", "/": "÷"}


class CalculatorUiState(BaseModel):
    """
    Everything the calculator screen renders.

    The state is frozen; handlers build a new one with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    input: str = Field(default="", description="Number currently being typed, or the last result")
    expression: str = Field(default="", description="Expression line shown above the input")
    ans: Optional[float] = Field(default=None, description="Last successfully computed result")
    error: Optional[str] = Field(default=None, description="Error message, None when there is no error")

    @property
    def finished(self) -> bool:
        """True once '=' was pressed and the expression line holds a completed calculation."""
        return "=" in self.expression

    @property
    def display_expression(self) -> str:
        text = self.expression
        for symbol, glyph in DISPLAY_GLYPHS.items():
            text = text.replace(symbol, glyph)
        return text

    def display_value(self, max_fraction_digits: int = 10) -> str:
        """Input buffer, else the last answer, else zero."""
        if self.input:
            return self.input
        if self.ans is not None:
            return f"(ANS) {format_number(self.ans, max_fraction_digits)}"
        return "0"
