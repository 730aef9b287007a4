"""Parse and evaluate arithmetic expressions safely."""
import operator
import string
from typing import Callable, Iterator, List, Optional, Tuple

from pocket_calculator.common.config import CalculatorSettings
from pocket_calculator.common.errors import (
    CalculatorError,
    DivisionByZeroError,
    InvalidCharacterError,
    MalformedExpressionError,
    UnbalancedParenthesesError,
)
from pocket_calculator.common.logger import logger
from pocket_calculator.common.models import EvaluationResult, Token, TokenKind


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn = Callable[[float, float], float]

# Mapping of operator symbols to (precedence, function)
OPERATORS: dict[str, Tuple[int, OperatorFn]] = {
    "+": (1, operator.add),
    "-": (1, operator.sub),
    "*": (2, operator.mul),
    "/": (2, operator.truediv),
}

NUMBER_CHARS = frozenset(string.digits + ".")

PARENTHESES: dict[str, TokenKind] = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
}


class ExpressionParser:
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Safe, deterministic computation

    Algorithm:
        1. Tokenize character by character (numbers, operators, parentheses)
        2. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        3. Evaluate RPN using a stack

    The Shunting-yard algorithm converts an infix expression into Reverse Polish Notation (RPN), allowing safe, stack-based evaluation without parentheses.
    It handles operator precedence by temporarily storing operators on a stack and outputting them in the correct order.
    Parentheses are pushed on the same stack and act as a barrier until the matching ')' is read.

    Examples:
        - Infix expression (standard notation): (3 + 4) * 2
        - Corresponding Reverse Polish Notation (RPN): 3 4 + 2 *

    """

    @staticmethod
    def iter_tokens(expr: str, strict_numbers: bool = False) -> Iterator[Token]:
        """
        Lazily split an arithmetic expression into tokens.

        Whitespace is optional and skipped ("3+4*2" and "3 + 4 * 2" give the same tokens).
        Digits and decimal points are read greedily into one number token; unless
        ``strict_numbers`` is set, a run such as "1.2.3" is left for the evaluator to reject.

        :param str expr: Arithmetic expression as a string
        :param bool strict_numbers: Reject a second decimal point inside one number

        :return: Iterator over tokens, left to right
        :rtype: Iterator[Token]
        :raises InvalidCharacterError: On any unsupported character
        """
        i = 0
        length = len(expr)
        while i < length:
            char = expr[i]

            if char in NUMBER_CHARS:
                start = i
                while i < length and expr[i] in NUMBER_CHARS:
                    if strict_numbers and expr[i] == "." and "." in expr[start:i]:
                        raise InvalidCharacterError(
                            f"Unexpected second decimal point at position {i}", position=i
                        )
                    i += 1
                yield Token(kind=TokenKind.NUMBER, text=expr[start:i], position=start)

            elif char in OPERATORS:
                yield Token(kind=TokenKind.OPERATOR, text=char, position=i)
                i += 1

            elif char in PARENTHESES:
                yield Token(kind=PARENTHESES[char], text=char, position=i)
                i += 1

            elif char.isspace():
                i += 1

            else:
                raise InvalidCharacterError(f"Invalid character {char!r} at position {i}", position=i)

    @staticmethod
    def tokenize(expr: str, strict_numbers: bool = False) -> List[Token]:
        """
        Split an arithmetic expression into a list of tokens.

        :param str expr: Arithmetic expression as a string
        :param bool strict_numbers: Reject a second decimal point inside one number

        :return: List of tokens
        :rtype: List[Token]
        """
        return list(ExpressionParser.iter_tokens(expr, strict_numbers=strict_numbers))

    @staticmethod
    def _parse_number(token: Token) -> float:
        """
        Convert a number token into a float.

        :param Token token: Token of kind NUMBER

        :return: Parsed value
        :rtype: float
        :raises MalformedExpressionError: If the literal is not a valid number (e.g. "1.2.3" or ".")
        """
        try:
            return float(token.text)
        except ValueError:
            raise MalformedExpressionError(
                f"Invalid number {token.text!r} at position {token.position}", position=token.position
            ) from None

    @staticmethod
    def to_rpn(tokens: List[Token]) -> List[Token]:
        """
        Convert a list of tokens into Reverse Polish Notation (RPN) using the Shunting-yard algorithm.

        :param List[Token] tokens: List of arithmetic tokens

        :return: List of tokens in RPN order
        :rtype: List[Token]
        :raises UnbalancedParenthesesError: If a ')' has no matching '(' or a '(' is never closed
        """
        output: List[Token] = []
        stack: List[Token] = []

        for token in tokens:
            if token.kind is TokenKind.NUMBER:
                # Numbers are added directly to the output
                output.append(token)

            elif token.kind is TokenKind.OPERATOR:
                # Pop operators with higher or equal precedence, stopping at '('
                prec = OPERATORS[token.text][0]
                while (
                    stack
                    and stack[-1].kind is TokenKind.OPERATOR
                    and OPERATORS[stack[-1].text][0] >= prec
                ):
                    output.append(stack.pop())
                stack.append(token)

            elif token.kind is TokenKind.LEFT_PAREN:
                stack.append(token)

            else:
                while stack and stack[-1].kind is not TokenKind.LEFT_PAREN:
                    output.append(stack.pop())
                if not stack:
                    raise UnbalancedParenthesesError(
                        f"Unmatched ')' at position {token.position}", position=token.position
                    )
                # Discard the matching '('
                stack.pop()

        # Append remaining operators in reverse order (stack top first)
        while stack:
            token = stack.pop()
            if token.kind is TokenKind.LEFT_PAREN:
                raise UnbalancedParenthesesError(
                    f"Unmatched '(' at position {token.position}", position=token.position
                )
            output.append(token)

        return output

    @staticmethod
    def evaluate_rpn(rpn: List[Token]) -> float:
        """
        Evaluate a token list in Reverse Polish Notation using a stack.

        :param List[Token] rpn: Tokens in RPN order

        :return: Computed result as float
        :rtype: float
        :raises MalformedExpressionError: On missing or remaining operands, or an invalid number
        :raises DivisionByZeroError: If a divisor is exactly zero
        """
        stack: List[float] = []
        for token in rpn:
            if token.kind is TokenKind.NUMBER:
                stack.append(ExpressionParser._parse_number(token))
                continue

            # Operator requires two operands
            if len(stack) < 2:
                raise MalformedExpressionError(
                    f"Not enough operands for {token.text!r} at position {token.position}",
                    position=token.position,
                )
            b: float = stack.pop()
            a: float = stack.pop()
            if token.text == "/" and b == 0.0:
                raise DivisionByZeroError(
                    f"Division by zero at position {token.position}", position=token.position
                )
            stack.append(OPERATORS[token.text][1](a, b))

        if not stack:
            raise MalformedExpressionError("Empty expression")
        if len(stack) != 1:
            raise MalformedExpressionError(f"Invalid expression ({len(stack) - 1} remaining operands)")

        return stack[0]

    @staticmethod
    def evaluate(expr: str, strict_numbers: bool = False) -> float:
        """
        Evaluate an arithmetic expression safely.

        :param str expr: Arithmetic expression string
        :param bool strict_numbers: Reject a second decimal point inside one number

        :return: Computed result as float
        :rtype: float
        :raises CalculatorError: If the expression is invalid or malformed
        """
        # Tokenize the expression
        tokens: List[Token] = ExpressionParser.tokenize(expr, strict_numbers=strict_numbers)

        # Convert to RPN
        rpn: List[Token] = ExpressionParser.to_rpn(tokens)

        # Missing and remaining operands are detected while reducing the stack
        return ExpressionParser.evaluate_rpn(rpn)


def evaluate(expr: str, settings: Optional[CalculatorSettings] = None) -> EvaluationResult:
    """
    Evaluate an expression and report the outcome as a result instead of raising.

    :param str expr: Arithmetic expression string
    :param CalculatorSettings settings: Optional settings, defaults are used when omitted

    :return: Successful result holding the value, or failed result holding the error kind
    :rtype: EvaluationResult
    """
    settings = settings or CalculatorSettings()
    try:
        value = ExpressionParser.evaluate(expr, strict_numbers=settings.strict_numbers)
    except CalculatorError as exc:
        logger.info(f"🧮❌ Could not evaluate {expr!r}: {exc.kind.value}: {exc.message}")
        return EvaluationResult(expression=expr, error=exc.kind, message=exc.message)

    logger.debug(f"🧮✅ {expr!r} = {value}")
    return EvaluationResult(expression=expr, value=value)
