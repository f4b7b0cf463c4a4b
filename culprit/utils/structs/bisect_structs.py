"""Structures used by the bisection of the commit history"""

from __future__ import annotations

# Standard Imports
import dataclasses
import enum
from typing import Optional

# Third-Party Imports

# Culprit Imports
from culprit.utils.structs.confidence_structs import ConfidenceScore

CommitId = str


def short_id(commit_id: CommitId) -> str:
    """
    :param commit_id: full identifier of the commit
    :return: first seven characters of the identifier
    """
    return commit_id[:7]


class BisectVerdict(str, enum.Enum):
    """Result of testing one commit by the bisection oracle"""

    GOOD = "good"
    BAD = "bad"
    SKIP = "skip"


@dataclasses.dataclass(frozen=True)
class Commit:
    """Metadata of one commit of the linear history

    :ivar id: identifier of the commit
    :ivar message: commit message
    :ivar author: author of the commit
    :ivar timestamp: unix timestamp of the commit
    """

    id: CommitId
    message: str = ""
    author: str = ""
    timestamp: int = 0

    def __str__(self) -> str:
        return short_id(self.id)


@dataclasses.dataclass
class BisectionState:
    """Working state of one bisection; owned by the running call only

    :ivar good: currently known good commit
    :ivar bad: currently known bad commit
    :ivar tested: ordered history of tested commits and their verdicts
    """

    good: CommitId
    bad: CommitId
    tested: list[tuple[CommitId, BisectVerdict]] = dataclasses.field(default_factory=list)

    def record_result(self, commit: CommitId, verdict: BisectVerdict) -> None:
        """Records the verdict and moves the boundaries

        :param commit: tested commit
        :param verdict: verdict of the oracle
        """
        self.tested.append((commit, verdict))
        if verdict == BisectVerdict.GOOD:
            self.good = commit
        elif verdict == BisectVerdict.BAD:
            self.bad = commit

    def has_tested(self, commit: CommitId) -> bool:
        return any(tested == commit for tested, _ in self.tested)

    @property
    def skipped(self) -> int:
        return sum(1 for _, verdict in self.tested if verdict == BisectVerdict.SKIP)


@dataclasses.dataclass(frozen=True)
class BisectionResult:
    """Boundary found by the bisection

    :ivar first_bad_commit: first commit, in which the bug manifests
    :ivar last_good_commit: direct predecessor of the first bad commit
    :ivar commits_tested: number of oracle invocations
    :ivar test_results: ordered history of tested commits and their verdicts
    :ivar confidence: confidence of the found boundary
    """

    first_bad_commit: Commit
    last_good_commit: Commit
    commits_tested: int
    test_results: tuple[tuple[CommitId, BisectVerdict], ...]
    confidence: Optional[ConfidenceScore] = None

    def summary(self) -> str:
        """
        :return: human-readable summary of the boundary
        """
        first_bad, last_good = self.first_bad_commit, self.last_good_commit
        return (
            f'Regression introduced in commit {first_bad} ("{first_bad.message}")\n'
            f'Last good: {last_good} ("{last_good.message}")\n'
            f"Commits tested: {self.commits_tested}"
        )
