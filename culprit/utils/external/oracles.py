"""Oracles backed by external commands.

Each builder returns a callable matching the oracle signature of one of the algorithms. The
command may contain the ``{}`` placeholder, which is replaced by the tested value (path to the
candidate file or the commit id); otherwise the value is appended as the last argument.
"""

from __future__ import annotations

# Standard Imports
from pathlib import Path
from typing import Callable, Collection, Mapping, Optional
import tempfile

# Third-Party Imports

# Culprit Imports
from culprit.utils import log
from culprit.utils.external import commands
from culprit.utils.structs.bisect_structs import BisectVerdict, CommitId
from culprit.utils.structs.check_structs import ExecutionStatus
from culprit.utils.structs.dd_structs import TestOutcome

# Exit code used by the test scripts to mark the commit as untestable
SKIP_EXIT_CODE: int = 125


def outcome_from_run(
    run: commands.CommandRun,
    fail_codes: Optional[Collection[int]] = None,
    fail_on_timeout: bool = False,
) -> TestOutcome:
    """Classifies the finished run of the command for the delta debugging

    Without explicit fail codes, any non-zero exit code is a failure. With fail codes, only
    those codes are failures, zero is a pass and everything else is unresolved.

    :param run: finished run of the command
    :param fail_codes: exit codes, which signal the failure
    :param fail_on_timeout: whether the timeout is the failure we are looking for
    :return: outcome of the test
    """
    if run.timed_out:
        return TestOutcome.FAIL if fail_on_timeout else TestOutcome.UNRESOLVED
    if fail_codes:
        if run.returncode in fail_codes:
            return TestOutcome.FAIL
        return TestOutcome.PASS if run.returncode == 0 else TestOutcome.UNRESOLVED
    return TestOutcome.PASS if run.returncode == 0 else TestOutcome.FAIL


def candidate_oracle(
    cmd: str,
    timeout: Optional[float] = None,
    fail_codes: Optional[Collection[int]] = None,
    fail_on_timeout: bool = False,
    suffix: str = "",
) -> Callable[[str], TestOutcome]:
    """Creates the oracle, which runs the command on the candidate stored in a temporary file

    :param cmd: command testing the candidate file
    :param timeout: timeout of one run in seconds
    :param fail_codes: exit codes, which signal the failure
    :param fail_on_timeout: whether the timeout is the failure we are looking for
    :param suffix: suffix of the temporary file (e.g. ``.c``), some tools require it
    :return: oracle of the delta debugging
    """

    def oracle(candidate: str) -> TestOutcome:
        with tempfile.TemporaryDirectory(prefix="culprit-") as tmp_dir:
            candidate_path = Path(tmp_dir) / f"candidate{suffix}"
            candidate_path.write_text(candidate)
            run = commands.run_with_timeout(
                commands.substitute(cmd, str(candidate_path)), timeout
            )
        return outcome_from_run(run, fail_codes, fail_on_timeout)

    return oracle


def commit_oracle(cmd: str, timeout: Optional[float] = None) -> Callable[[CommitId], BisectVerdict]:
    """Creates the oracle, which runs the command for the commit id

    The exit codes follow the convention of ``git bisect run``: zero is good, 125 skips the
    commit and anything else is bad. Timed out runs are skipped as well.

    :param cmd: command testing the commit
    :param timeout: timeout of one run in seconds
    :return: oracle of the bisection
    """

    def oracle(commit: CommitId) -> BisectVerdict:
        run = commands.run_with_timeout(commands.substitute(cmd, commit), timeout)
        if run.timed_out or run.returncode == SKIP_EXIT_CODE:
            return BisectVerdict.SKIP
        return BisectVerdict.GOOD if run.returncode == 0 else BisectVerdict.BAD

    return oracle


def timing_sampler(
    variants: Mapping[str, str], timeout: Optional[float] = None
) -> Callable[[str], Optional[float]]:
    """Creates the sampler measuring the wall-clock time of the variant commands

    Failed or timed out runs yield no sample.

    :param variants: map of variant tags to their commands
    :param timeout: timeout of one run in seconds
    :return: sample function returning the time in milliseconds
    """

    def sample(variant: str) -> Optional[float]:
        run = commands.run_with_timeout(variants[variant], timeout)
        if run.timed_out or run.returncode != 0:
            log.debug(f"run of {variant} failed, sample is dropped")
            return None
        return run.elapsed_ms

    return sample


def status_oracle(
    variants: Mapping[str, str],
    timeout: Optional[float] = None,
    expected_output: Optional[bytes] = None,
) -> Callable[[str], ExecutionStatus]:
    """Creates the oracle classifying single runs of the variant commands

    :param variants: map of variant tags to their commands
    :param timeout: timeout of one run in seconds
    :param expected_output: expected standard output; if None, the output is not checked
    :return: function returning the status of one run
    """

    def oracle(variant: str) -> ExecutionStatus:
        run = commands.run_with_timeout(variants[variant], timeout)
        if run.timed_out:
            return ExecutionStatus.HANG
        if run.returncode != 0:
            return ExecutionStatus.CRASH
        if expected_output is not None and run.stdout != expected_output:
            return ExecutionStatus.WRONG_OUTPUT
        return ExecutionStatus.PASS

    return oracle
