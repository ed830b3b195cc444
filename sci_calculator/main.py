"""
Command-line entrypoint.

This script either:
- evaluates an operations file (plain text or archive) line by line and
  writes a results file next to it, or
- runs an interactive prompt when no file is given.

Both share one calculator session, so ``ans`` refers to the last result.
"""

import argparse
from pathlib import Path
import sys
from typing import List, Optional, TextIO

from pydantic import BaseModel, FilePath, ValidationError

from sci_calculator.batch.reader import load_expressions
from sci_calculator.batch.runner import BatchRunner, build_output_path
from sci_calculator.common.logger import logger, set_verbose
from sci_calculator.common.models import AngleMode, EvaluationContext
from sci_calculator.session.session import CalculatorSession


PROMPT = "> "


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : Optional[FilePath]
        Path to the file containing expressions, None for the interactive prompt.
    mode : AngleMode
        Angle mode the session starts in.
    verbose : bool
        Log debug messages.
    """

    file_path: Optional[FilePath] = None
    mode: AngleMode = AngleMode.DEG
    verbose: bool = False


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(description="Scientific calculator")

    parser.add_argument(
        "file_path",
        nargs="?",
        help="File with one expression per line (.txt, .zip, .tar.xz or .7z); interactive prompt if omitted",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AngleMode],
        default=AngleMode.DEG.value,
        help="Angle mode for trigonometric functions",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")

    args = parser.parse_args(argv)

    try:
        return CliArgs(file_path=args.file_path, mode=args.mode, verbose=args.verbose)
    except ValidationError as exc:
        parser.error(str(exc))


def run_file(input_path: Path, mode: AngleMode) -> Path:
    """
    Evaluate every expression of a file and write the results next to it.

    :param Path input_path: Operations file
    :param AngleMode mode: Angle mode of the session

    :return: Path of the results file
    :rtype: Path
    """
    output_path = build_output_path(input_path)
    expressions = load_expressions(input_path)
    BatchRunner(output_file=output_path, angle_mode=mode).run(expressions)
    return output_path


def run_interactive(
    session: CalculatorSession, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None
) -> None:
    """
    Read expressions until EOF or ``quit`` and print their results.

    ``deg`` and ``rad`` switch the angle mode, ``history`` lists past results.
    Streams default to the process stdin and stdout.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        command = line.strip()

        if command.lower() in ("quit", "exit"):
            break
        if command.lower() in ("deg", "rad"):
            session.set_angle_mode(AngleMode(command.upper()))
            stdout.write(f"{session.angle_mode.value}\n")
        elif command.lower() == "history":
            for entry in session.history:
                stdout.write(f"{entry.source_expression} = {entry.formatted_result}\n")
        else:
            stdout.write(f"{session.submit(command)}\n")


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main function of the ``sci-calculator`` command.
    """
    cli_args = parse_args(argv)
    set_verbose(cli_args.verbose)

    if cli_args.file_path is not None:
        output_path = run_file(Path(cli_args.file_path), cli_args.mode)
        logger.info("Results written to %s", output_path)
        return

    run_interactive(CalculatorSession(context=EvaluationContext(angle_mode=cli_args.mode)))


if __name__ == "__main__":
    main()
