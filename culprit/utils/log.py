"""Set of helper functions for logging and printing warnings or errors

The output is structured into major sections (printed with `major_info`) and minor lines,
printed with indentation. Everything is printed to the standard output through click,
so the output of the commands can be captured in tests by CliRunner.
"""

from __future__ import annotations

# Standard Imports
import sys
import traceback
from typing import Any, Iterable, Optional, TypeVar

# Third-Party Imports
import click
import progressbar

# Culprit Imports

T = TypeVar("T")

VERBOSITY: int = 0
VERBOSE_RELEASE: int = 0
VERBOSE_INFO: int = 1
VERBOSE_DEBUG: int = 2

CURRENT_INDENT: int = 0
INDENT_WIDTH: int = 2

SUFFIX: str = ":"
COLOR_STATUS: dict[str, str] = {"success": "green", "fail": "red", "warn": "yellow"}


def is_verbose_enough(verbosity_peak: int) -> bool:
    """Tests if the current verbosity of the log is enough

    :param verbosity_peak: peak of the verbosity we are testing
    :return: true if the verbosity is enough
    """
    return VERBOSITY >= verbosity_peak


def set_verbosity(verbosity: int) -> None:
    """Sets the global verbosity of the log, clamped to the known levels

    :param verbosity: new verbosity level
    """
    global VERBOSITY
    VERBOSITY = max(VERBOSE_RELEASE, min(verbosity, VERBOSE_DEBUG))


def increase_indent() -> None:
    """Increases the indent for minor and major steps"""
    global CURRENT_INDENT
    CURRENT_INDENT += 1


def decrease_indent() -> None:
    """Decreases the indent for minor and major steps"""
    global CURRENT_INDENT
    CURRENT_INDENT = max(CURRENT_INDENT - 1, 0)


def _indent() -> str:
    return " " * (CURRENT_INDENT * INDENT_WIDTH)


def write(*args: Any, end: str = "\n") -> None:
    """Writes the arguments separated by space to the output

    :param args: printed values
    :param end: string appended at the end of the printed message
    """
    click.echo(" ".join(str(arg) for arg in args) + end, nl=False)


def cprint(string: str, colour: str, attrs: Optional[list[str]] = None) -> None:
    """Prints colored string to the output without a new line

    :param string: printed string
    :param colour: colour of the string
    :param attrs: additional attributes (only 'bold' and 'underline' are recognized)
    """
    attrs = attrs or []
    click.echo(
        click.style(string, fg=colour, bold="bold" in attrs, underline="underline" in attrs),
        nl=False,
    )


def cprintln(string: str, colour: str, attrs: Optional[list[str]] = None) -> None:
    """Prints colored string to the output terminated by a new line

    :param string: printed string
    :param colour: colour of the string
    :param attrs: additional attributes
    """
    cprint(string, colour, attrs)
    click.echo("")


def highlight(string: Any) -> str:
    """Highlights the string in bold

    :param string: highlighted string or value
    :return: styled string
    """
    return click.style(str(string), bold=True)


def path_style(path: str) -> str:
    """Styles the path as a blue bold string

    :param path: path that is styled
    :return: styled path
    """
    return click.style(path, fg="blue", bold=True)


def cmd_style(cmd: str) -> str:
    """Styles the command as a magenta string

    :param cmd: command that is styled
    :return: styled command
    """
    return click.style(f"`{cmd}`", fg="magenta")


def major_info(msg: str, colour: str = "blue", no_title: bool = False) -> None:
    """Prints the major information, i.e. the header of some bigger step

    :param msg: printed message
    :param colour: colour of the header
    :param no_title: if set to true, the message is printed as is, otherwise it is titled
    """
    stripped = msg if no_title else msg.strip().title()
    click.echo("")
    click.echo(_indent() + "[" + click.style(stripped.upper(), fg=colour, bold=True) + "]")
    click.echo("")


def minor_info(msg: str, end: str = "\n") -> None:
    """Prints minor information, i.e. a single indented line

    :param msg: printed message
    :param end: ending of the message
    """
    click.echo(_indent() + " - " + msg.strip() + end, nl=False)


def minor_status(msg: str, status: str = "") -> None:
    """Prints minor information together with its status

    :param msg: printed message
    :param status: status of the message (printed after the separator)
    """
    minor_info(f"{msg.strip()}{SUFFIX} {status}" if status else msg, end="\n")


def minor_success(msg: str, status: str = "succeeded") -> None:
    """Prints minor information ending with a green status

    :param msg: printed message
    :param status: printed status
    """
    minor_status(msg, click.style(status, fg=COLOR_STATUS["success"], bold=True))


def minor_fail(msg: str, status: str = "failed") -> None:
    """Prints minor information ending with a red status

    :param msg: printed message
    :param status: printed status
    """
    minor_status(msg, click.style(status, fg=COLOR_STATUS["fail"], bold=True))


def debug(msg: str) -> None:
    """Prints the message only in the debug verbosity

    :param msg: printed debug message
    """
    if is_verbose_enough(VERBOSE_DEBUG):
        click.echo(_indent() + click.style("debug: ", fg="cyan") + msg, err=True)


def warn(msg: str, end: str = "\n") -> None:
    """Prints the warning to the error output

    :param msg: printed warning
    :param end: ending of the message
    """
    click.echo(
        _indent() + click.style("warning: ", fg=COLOR_STATUS["warn"], bold=True) + msg + end,
        nl=False,
        err=True,
    )


def error_msg(msg: str) -> str:
    """Formats the message as an error

    :param msg: error message
    :return: formatted error message
    """
    return click.style("fatal: ", fg=COLOR_STATUS["fail"], bold=True) + msg


def error(
    msg: str, recoverable: bool = False, raised_exception: Optional[BaseException] = None
) -> None:
    """Prints the error message and terminates the program, unless it is recoverable

    :param msg: error message
    :param recoverable: if set to true, the program continues after the error
    :param raised_exception: exception that caused the error, its trace is printed in debug
    :raises SystemExit: when the error is not recoverable
    """
    click.echo(error_msg(msg), err=True)
    if raised_exception is not None and is_verbose_enough(VERBOSE_DEBUG):
        click.echo(
            "".join(traceback.format_exception(raised_exception)), err=True
        )
    if not recoverable:
        sys.exit(1)


def progress(
    collection: Iterable[T], description: str = "", verbosity: int = VERBOSE_INFO
) -> Iterable[T]:
    """Wraps the collection into the progress bar, if the verbosity is high enough

    :param collection: iterated collection
    :param description: prefix of the progress bar
    :param verbosity: verbosity needed to show the progress bar
    :return: iterable collection (either wrapped or the original one)
    """
    if not is_verbose_enough(verbosity):
        return collection
    return progressbar.progressbar(collection, prefix=f"{_indent()}{description} ")

