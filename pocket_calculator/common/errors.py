"""Error kinds and exceptions raised while evaluating an expression."""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of reasons an evaluation can fail."""

    INVALID_CHARACTER = "InvalidCharacter"
    UNBALANCED_PARENTHESES = "UnbalancedParentheses"
    MALFORMED_EXPRESSION = "MalformedExpression"
    DIVISION_BY_ZERO = "DivisionByZero"


# Short texts shown to the user for each kind
ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_CHARACTER: "Invalid character",
    ErrorKind.UNBALANCED_PARENTHESES: "Unbalanced parentheses",
    ErrorKind.MALFORMED_EXPRESSION: "Malformed expression",
    ErrorKind.DIVISION_BY_ZERO: "Division by zero",
}


class CalculatorError(ValueError):
    """
    Base class of every evaluation error.

    :param str message: Human-readable description of the failure
    :param int position: 0-based index of the offending character, if known
    """

    kind: ErrorKind = ErrorKind.MALFORMED_EXPRESSION

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position


class InvalidCharacterError(CalculatorError):
    kind = ErrorKind.INVALID_CHARACTER


class UnbalancedParenthesesError(CalculatorError):
    kind = ErrorKind.UNBALANCED_PARENTHESES


class MalformedExpressionError(CalculatorError):
    kind = ErrorKind.MALFORMED_EXPRESSION


class DivisionByZeroError(CalculatorError):
    kind = ErrorKind.DIVISION_BY_ZERO
