"""Set of helper functions for the command line interface: callbacks, input and output"""

from __future__ import annotations

# Standard Imports
from pathlib import Path
from typing import Any, Callable, Optional
import os

# Third-Party Imports
import click

# Culprit Imports
from culprit.logic import config
from culprit.templates import factory as templates
from culprit.utils import log, streams
from culprit.utils.exceptions import InvalidParameterException
from culprit.utils.structs.bisect_structs import Commit

OUTPUT_FORMATS: list[str] = ["text", "json", "markdown"]


def set_verbosity_callback(_: click.Context, __: click.Option, value: int) -> int:
    """Sets the verbosity of the log by the number of ``-v`` flags

    The verbosity can also be configured by the ``verbosity`` key; the flags take precedence.

    :param value: number of ``-v`` flags
    :return: value of the option
    """
    configured = config.lookup_key_recursively("verbosity", log.VERBOSE_RELEASE)
    try:
        log.set_verbosity(max(value, int(configured)))
    except (TypeError, ValueError):
        log.set_verbosity(value)
    return value


def config_options_callback(
    _: click.Context, param: click.Option, values: tuple[str, ...]
) -> tuple[str, ...]:
    """Sets the runtime configuration from the ``-c key=value`` options

    :param param: the option, for the error message
    :param values: list of ``key=value`` strings
    :return: the values
    :raises click.BadParameter: when some option is not in ``key=value`` form
    """
    for value in values:
        try:
            config.set_from_option(value)
        except InvalidParameterException as exc:
            raise click.BadParameter(str(exc), param=param)
    return values


def read_input(input_file: str) -> str:
    """Reads the input either from the file or takes it literally

    :param input_file: path to the file, or the literal input
    :return: contents of the input
    """
    input_path = Path(input_file)
    if input_path.is_file():
        return input_path.read_text()
    return input_file


def create_debugging_file(output_dir: Path, file_name: str, input_data: str) -> Path:
    """Stores the minimized input into the ``delta_debugging`` subdirectory

    :param output_dir: directory, where the results are stored
    :param file_name: name (or path) of the original input
    :param input_data: minimized input
    :return: path to the created file
    """
    full_dir_path = output_dir.resolve() / "delta_debugging"
    full_dir_path.mkdir(parents=True, exist_ok=True)
    file_path = full_dir_path / (Path(file_name).name if Path(file_name).is_file() else "input")
    file_path.write_text(input_data)
    return file_path


def read_commits(commits_file: str) -> list[Commit]:
    """Reads the linear history from the file, one commit per line from the oldest

    Each line contains the commit id optionally followed by the message, e.g. as printed by
    ``git log --reverse --format='%H %s'``. Empty lines and lines starting with # are ignored.

    :param commits_file: path to the file with commits
    :return: ordered list of commits
    """
    commits = []
    with open(commits_file, "r") as commits_handle:
        for line in commits_handle:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            commit_id, _, message = stripped.partition(" ")
            commits.append(Commit(commit_id, message.strip()))
    return commits


def emit_result(
    record: Any,
    output_format: str,
    template_name: str,
    text_printer: Callable[[Any], None],
    **context: Any,
) -> None:
    """Prints the result of the command in the requested format

    :param record: dataclass record (or list of records) to print
    :param output_format: one of text, json or markdown
    :param template_name: markdown template of the record
    :param text_printer: prints the record in the human readable form
    :param context: additional variables of the markdown template
    """
    if output_format == "json":
        click.echo(streams.record_to_json(record))
    elif output_format == "markdown":
        click.echo(templates.render(template_name, **context), nl=False)
    else:
        text_printer(record)


def default_output_dir() -> Optional[Path]:
    """
    :return: configured directory for the minimized inputs, if any
    """
    configured = config.lookup_key_recursively("deltadebugging.output_dir", None)
    return Path(os.path.expanduser(str(configured))) if configured else None
