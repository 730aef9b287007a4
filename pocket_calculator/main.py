"""
Command-line entrypoint of the calculator.

Subcommands:
- eval: evaluate expressions given as arguments
- batch: evaluate an operations file (plain text or archive) and write a results file
- keys: replay key presses on the calculator keypad and print the display
"""

import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError

from pocket_calculator.batch.runner import BatchRunner
from pocket_calculator.common.config import CalculatorSettings
from pocket_calculator.common.formatting import format_number
from pocket_calculator.common.logger import configure_logging
from pocket_calculator.common.parser import evaluate
from pocket_calculator.ui.view_model import CalculatorViewModel


class EvalArgs(BaseModel):
    """Validated arguments of the ``eval`` subcommand."""

    expressions: List[str] = Field(..., min_length=1)


class BatchArgs(BaseModel):
    """
    Validated arguments of the ``batch`` subcommand.

    Attributes
    ----------
    file_path : FilePath
        Path to the file containing arithmetic operations.
    output : Path, optional
        Where results are written, next to the input file by default.
    """

    file_path: FilePath
    output: Optional[Path] = None


class KeysArgs(BaseModel):
    """Validated arguments of the ``keys`` subcommand."""

    keys: List[str] = Field(..., min_length=1)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser with its subcommands.

    :return: Configured parser
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="pocket-calculator",
        description="Evaluate arithmetic expressions with + - * / and parentheses",
    )
    parser.add_argument("--max-input-length", type=int, default=24, help="Maximum characters of the input buffer")
    parser.add_argument("--precision", type=int, default=10, help="Maximum fraction digits displayed")
    parser.add_argument(
        "--strict-numbers",
        action="store_true",
        help="Reject numbers with more than one decimal point while tokenizing",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    eval_parser = subparsers.add_parser("eval", help="Evaluate one or more expressions")
    eval_parser.add_argument("expressions", nargs="+", help="Arithmetic expressions, e.g. '(2+3)*4'")

    batch_parser = subparsers.add_parser("batch", help="Evaluate a file of expressions, one per line")
    batch_parser.add_argument("file_path", help="Path to a .txt, .zip, .tar.xz or .7z file")
    batch_parser.add_argument("-o", "--output", help="Path of the results file")

    keys_parser = subparsers.add_parser("keys", help="Replay key presses, e.g. '7 × ( 1 + 2 ) ='")
    keys_parser.add_argument("keys", help="Whitespace-separated key labels")

    return parser


def parse_settings(parser: argparse.ArgumentParser, args: argparse.Namespace) -> CalculatorSettings:
    """
    Validate the global options.

    :return: Validated settings
    :rtype: CalculatorSettings
    """
    try:
        return CalculatorSettings(
            max_input_length=args.max_input_length,
            max_fraction_digits=args.precision,
            strict_numbers=args.strict_numbers,
            log_level=args.log_level,
        )
    except ValidationError as exc:
        parser.error(str(exc))


def run_eval(args: EvalArgs, settings: CalculatorSettings) -> int:
    exit_code = 0
    for expr in args.expressions:
        result = evaluate(expr, settings)
        if result.ok:
            print(f"{expr} = {format_number(result.value, settings.max_fraction_digits)}")
        else:
            print(f"{expr} -> ERROR: {result.error.value}: {result.message}")
            exit_code = 1
    return exit_code


def run_batch(args: BatchArgs, settings: CalculatorSettings) -> int:
    output_path = BatchRunner(settings=settings).run(args.file_path, args.output)
    print(output_path)
    return 0


def run_keys(args: KeysArgs, settings: CalculatorSettings) -> int:
    """Press every key in order, then print the expression line, the value and any error."""
    view_model = CalculatorViewModel(settings)
    for key in args.keys:
        view_model.press(key)

    print(view_model.display_expression)
    print(view_model.display_value)
    if view_model.state.error:
        print(view_model.state.error)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the ``pocket-calculator`` command.

    :param argv: Arguments to parse, ``sys.argv[1:]`` when omitted
    :return: Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = parse_settings(parser, args)
    configure_logging(settings.log_level)

    try:
        if args.command == "eval":
            return run_eval(EvalArgs(expressions=args.expressions), settings)
        if args.command == "batch":
            return run_batch(BatchArgs(file_path=args.file_path, output=args.output), settings)
        return run_keys(KeysArgs(keys=args.keys.split()), settings)
    except ValueError as exc:
        # Pydantic validation errors, unknown key labels, unsupported or corrupt archives
        parser.error(str(exc))


if __name__ == "__main__":
    raise SystemExit(main())
