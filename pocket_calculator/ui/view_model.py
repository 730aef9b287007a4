"""Keypad logic of the calculator, independent of any GUI toolkit."""
from typing import Callable, Optional

from pocket_calculator.common.config import CalculatorSettings
from pocket_calculator.common.errors import ERROR_MESSAGES
from pocket_calculator.common.formatting import format_number
from pocket_calculator.common.logger import logger
from pocket_calculator.common.parser import OPERATORS, evaluate
from pocket_calculator.ui.state import CalculatorUiState

DIGITS = "0123456789"

# Display glyphs accepted by press() in addition to the ASCII operators
KEY_ALIASES: dict[str, str] = {"×": "*", "÷": "/", "−": "-"}


class CalculatorViewModel:
    """
    Hold the calculator state and update it in response to key presses.

    Every handler replaces ``state`` with an updated copy; the previous state is never mutated.
    A failed calculation only sets ``state.error`` and leaves the expression, input and ANS untouched.
    """

    def __init__(self, settings: Optional[CalculatorSettings] = None) -> None:
        self.settings = settings or CalculatorSettings()
        self.state = CalculatorUiState()

    # Key handlers

    def on_digit(self, ch: str) -> None:
        if len(ch) != 1 or ch not in DIGITS:
            logger.warning(f"⌨️ Ignoring non-digit key {ch!r}")
            return
        self._reset_if_finished()
        self._update_input(self.state.input + ch)

    def on_dot(self) -> None:
        self._reset_if_finished()
        if "." not in self.state.input:
            self._update_input(self.state.input + "." if self.state.input else "0.")

    def on_operator(self, op: str) -> None:
        """Move the input into the expression and append the operator."""
        if op not in OPERATORS:
            logger.warning(f"⌨️ Ignoring unknown operator {op!r}")
            return

        expression = self.state.expression
        if self.state.finished:
            # Continue calculating with the previous result
            expression = self.state.input
        elif self.state.input:
            expression += self.state.input

        if not expression:
            return

        self._set(expression=expression + op, input="", error=None)

    def on_open_paren(self) -> None:
        expression = "" if self.state.finished else self.state.expression
        self._set(expression=expression + "(", error=None)

    def on_close_paren(self) -> None:
        expression, input_ = self.state.expression, self.state.input
        if self.state.finished:
            expression, input_ = "", ""
        expression += input_
        self._set(expression=expression + ")", input="", error=None)

    def on_equals(self) -> None:
        """Evaluate the pending expression and show the result."""
        if self.state.finished:
            return

        expression = self.state.expression + self.state.input
        if not expression:
            return

        result = evaluate(expression, self.settings)
        if not result.ok:
            self._set(error=f"Error: {ERROR_MESSAGES[result.error]}")
            return

        self._set(
            expression=f"{expression} =",
            input=self._format(result.value),
            ans=result.value,
            error=None,
        )

    def on_ans(self) -> None:
        """Reuse the last result as input."""
        if self.state.ans is None:
            return
        self._reset_if_finished()
        self._update_input(self._format(self.state.ans))

    def on_clear(self) -> None:
        self._set(input="", expression="", error=None)

    def press(self, key: str) -> None:
        """
        Dispatch a key label to its handler.

        :param str key: Label of the pressed key ("7", ".", "+", "×", "(", "=", "C", "ANS", ...)

        :raises ValueError: If the label matches no key
        """
        key = KEY_ALIASES.get(key, key)
        handlers: dict[str, Callable[[], None]] = {
            ".": self.on_dot,
            "(": self.on_open_paren,
            ")": self.on_close_paren,
            "=": self.on_equals,
            "C": self.on_clear,
            "ANS": self.on_ans,
        }

        if len(key) == 1 and key in DIGITS:
            self.on_digit(key)
        elif key in OPERATORS:
            self.on_operator(key)
        elif key.upper() in handlers:
            handlers[key.upper()]()
        else:
            raise ValueError(f"Unknown key: {key!r}")

    # Display

    @property
    def display_expression(self) -> str:
        return self.state.display_expression

    @property
    def display_value(self) -> str:
        return self.state.display_value(self.settings.max_fraction_digits)

    # Helpers

    def _set(self, **changes) -> None:
        self.state = self.state.model_copy(update=changes)

    def _reset_if_finished(self) -> None:
        if self.state.finished:
            self._set(expression="", input="")

    def _update_input(self, value: str) -> None:
        # Keep the input short enough to fit the display
        self._set(input=value[: self.settings.max_input_length], error=None)

    def _format(self, value: float) -> str:
        return format_number(value, self.settings.max_fraction_digits)
