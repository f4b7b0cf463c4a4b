"""Helper functions for working with commands.

This contains the process wrapper used to turn external commands into oracles: the command is
run without the shell, with an optional timeout, and its exit code, timing and outputs are
collected. The algorithms never run the commands themselves; only the command line layer does.
"""

from __future__ import annotations

# Standard Imports
import dataclasses
import shlex
import subprocess
import time
from typing import Optional

# Third-Party Imports

# Culprit Imports
from culprit.utils import log
from culprit.utils.exceptions import ExternalCommandException

PLACEHOLDER: str = "{}"


@dataclasses.dataclass(frozen=True)
class CommandRun:
    """Result of one run of the external command

    :ivar command: the executed command
    :ivar returncode: exit code of the command, None if it timed out
    :ivar timed_out: whether the command was killed after the timeout
    :ivar elapsed_ms: wall-clock time of the run in milliseconds
    :ivar stdout: captured standard output
    :ivar stderr: captured standard error
    """

    command: str
    returncode: Optional[int]
    timed_out: bool
    elapsed_ms: float
    stdout: bytes = b""
    stderr: bytes = b""


def substitute(cmd: str, value: str) -> str:
    """Substitutes the value for the placeholder in the command, or appends it

    :param cmd: command, possibly containing the ``{}`` placeholder
    :param value: substituted value (e.g. path or commit id)
    :return: command with the value
    """
    quoted = shlex.quote(value)
    if PLACEHOLDER in cmd:
        return cmd.replace(PLACEHOLDER, quoted)
    return f"{cmd} {quoted}"


def run_with_timeout(cmd: str, timeout: Optional[float] = None) -> CommandRun:
    """Runs the command without the shell and measures its wall-clock time

    :param cmd: string with command that we are executing
    :param timeout: timeout of the command in seconds
    :return: result of the run
    :raises ExternalCommandException: when the command cannot be executed at all
    """
    try:
        executed_command = shlex.split(cmd)
    except ValueError as exc:
        raise ExternalCommandException(cmd, str(exc))
    if not executed_command:
        raise ExternalCommandException(cmd, "empty command")

    start = time.perf_counter()
    try:
        completed = subprocess.run(
            executed_command,
            shell=False,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        log.debug(f"{log.cmd_style(cmd)} timed out after {elapsed_ms:.1f}ms")
        return CommandRun(cmd, None, True, elapsed_ms, exc.stdout or b"", exc.stderr or b"")
    except OSError as exc:
        raise ExternalCommandException(cmd, str(exc))
    elapsed_ms = (time.perf_counter() - start) * 1000.0
    log.debug(f"{log.cmd_style(cmd)} exited with {completed.returncode} in {elapsed_ms:.1f}ms")
    return CommandRun(
        cmd, completed.returncode, False, elapsed_ms, completed.stdout, completed.stderr
    )
