"""
Command-line entrypoint, also used as the container entrypoint.

Usage:
    calc add 2 3
    calc divide 10 4
    calc eval "7 + 3 * (2 - 4) / 2"
    calc repl < operations.txt
    calc file operations.7z -o results.txt

Results are printed to stdout. Errors are printed to stderr and the process
exits with status 1 (calculation error) or 2 (usage error).
"""

import argparse
from pathlib import Path
import sys
from typing import List, Optional, TextIO

from pydantic import BaseModel, Field, FilePath, ValidationError

from distroless_calculator.batch import evaluate_file
from distroless_calculator.common.errors import CalculatorError
from distroless_calculator.common.logger import logger, set_level
from distroless_calculator.common.operations import Operation, OperationRequest, format_number
from distroless_calculator.common.parser import ExpressionParser
from distroless_calculator.common.settings import Settings
from distroless_calculator.engine import evaluate_request


EXIT_OK = 0
EXIT_CALCULATION_ERROR = 1

QUIT_COMMANDS = {"quit", "exit"}


class ExpressionArgs(BaseModel):
    """Validated arguments of the eval command."""

    expression: str = Field(..., min_length=1, description="Infix arithmetic expression")


class FileArgs(BaseModel):
    """
    Pydantic model used to validate the file command arguments.

    Attributes
    ----------
    file_path : FilePath
        Path to the file containing arithmetic operations.
    output : Path, optional
        Where results are written.
    """

    file_path: FilePath
    output: Optional[Path] = None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for every command."""
    parser = argparse.ArgumentParser(
        prog="calc",
        description="Evaluate arithmetic operations and expressions",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logger level (default: $CALCULATOR_LOG_LEVEL or WARNING)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for operation in Operation:
        sub = commands.add_parser(
            operation.value,
            help=f"Compute A {operation.symbol} B",
        )
        sub.add_argument("left", metavar="A", help="Left operand")
        sub.add_argument("right", metavar="B", help="Right operand")

    sub = commands.add_parser("eval", help="Evaluate an infix expression")
    sub.add_argument("expression", help='Expression, e.g. "3 + 4 * 2"')

    commands.add_parser("repl", help="Evaluate expressions read line by line from stdin")

    sub = commands.add_parser("file", help="Evaluate a file or archive of expressions")
    sub.add_argument("file_path", help="Path to a .txt, .zip, .tar.xz or .7z file")
    sub.add_argument("-o", "--output", default=None, help="Output file (default: next to the input)")

    return parser


def configure_logging(parser: argparse.ArgumentParser, level: Optional[str]) -> None:
    """Apply the log level from the command line, falling back to the environment."""
    try:
        settings = Settings.from_env() if level is None else Settings(log_level=level)
    except ValidationError as exc:
        parser.error(str(exc))
    set_level(settings.log_level)


def run_operation(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        request = OperationRequest(operation=args.command, left=args.left, right=args.right)
    except ValidationError as exc:
        parser.error(str(exc))
    result = evaluate_request(request)
    print(format_number(result.result))
    return EXIT_OK


def run_expression(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        cli_args = ExpressionArgs(expression=args.expression)
    except ValidationError as exc:
        parser.error(str(exc))
    print(format_number(ExpressionParser.evaluate(cli_args.expression)))
    return EXIT_OK


def run_repl(stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    """
    Evaluate one expression per input line until EOF or a quit command.

    Errors are reported per line and do not stop the loop.

    :return: 0 when every line succeeded, 1 otherwise
    :rtype: int
    """
    interactive = stdin.isatty()
    status = EXIT_OK
    while True:
        if interactive:
            stdout.write("> ")
            stdout.flush()
        line = stdin.readline()
        if not line:
            break
        expr = line.strip()
        if not expr:
            continue
        if expr.lower() in QUIT_COMMANDS:
            break
        try:
            stdout.write(f"{format_number(ExpressionParser.evaluate(expr))}\n")
        except CalculatorError as exc:
            logger.info("Rejected %r: %s", expr, exc)
            stderr.write(f"Error: {exc}\n")
            status = EXIT_CALCULATION_ERROR
    return status


def run_file(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        cli_args = FileArgs(file_path=args.file_path, output=args.output)
    except ValidationError as exc:
        parser.error(str(exc))
    try:
        summary = evaluate_file(Path(cli_args.file_path), cli_args.output)
    except (ValueError, OSError) as exc:
        # unreadable input, corrupt archive or unwritable output
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CALCULATION_ERROR
    print(f"{summary.evaluated} evaluated, {summary.failed} failed -> {summary.output_file}")
    return EXIT_OK if summary.failed == 0 else EXIT_CALCULATION_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function executed from the console script or the container entrypoint.

    :param argv: Arguments without the program name; defaults to sys.argv[1:]
    :return: Process exit status
    :rtype: int
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(parser, args.log_level)

    try:
        if args.command == "eval":
            return run_expression(parser, args)
        if args.command == "repl":
            return run_repl(sys.stdin, sys.stdout, sys.stderr)
        if args.command == "file":
            return run_file(parser, args)
        return run_operation(parser, args)
    except CalculatorError as exc:
        logger.info("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CALCULATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
