"""Bisection of the linear commit history for the boundary between good and bad commits.

The bisection keeps two boundaries, the known good and the known bad commit, and always tests
the positional midpoint of the untested commits strictly between them. Skipped commits (e.g.
the ones that cannot be built) are permanently excluded from the selection, so the searched
pool shrinks monotonically and the bisection always terminates.

The bisection never guesses: if the seed commits are inconsistent, or the final boundaries are
not adjacent (the gap consists only of skipped commits), no result is returned.
"""

from __future__ import annotations

# Standard Imports
from typing import Any, Callable, Iterable, Optional, Union

# Third-Party Imports

# Culprit Imports
from culprit.confidence import factory as confidence
from culprit.utils import log
from culprit.utils.structs.bisect_structs import (
    BisectionResult,
    BisectionState,
    BisectVerdict,
    Commit,
    CommitId,
    short_id,
)
from culprit.utils.structs.confidence_structs import (
    ConfidenceScore,
    ConfidenceWeights,
    DiscoveryMethod,
    EvidenceStrength,
    Reproducibility,
    RootCauseClarity,
)

Oracle = Callable[[CommitId], BisectVerdict]


def to_commits(commits: Iterable[Union[Commit, CommitId]]) -> list[Commit]:
    """Converts the ordered history to the list of commits

    :param commits: commits or their bare identifiers, ordered from the oldest to the newest
    :return: list of commits
    """
    return [commit if isinstance(commit, Commit) else Commit(commit) for commit in commits]


class Bisector:
    """Bisection over one ordered list of commits

    :ivar commits: history ordered from the oldest to the newest
    :ivar oracle: classifies the commit as GOOD, BAD or SKIP
    :ivar should_stop: optional cancellation flag checked before each oracle invocation
    :ivar discovery: how the regression was discovered (used for confidence)
    :ivar weights: weights of the confidence axes
    """

    def __init__(
        self,
        commits: Iterable[Union[Commit, CommitId]],
        oracle: Oracle,
        should_stop: Optional[Callable[[], bool]] = None,
        discovery: DiscoveryMethod = DiscoveryMethod.FUZZING,
        weights: Optional[ConfidenceWeights] = None,
    ) -> None:
        self.commits: list[Commit] = to_commits(commits)
        self.oracle: Oracle = oracle
        self.should_stop: Optional[Callable[[], bool]] = should_stop
        self.discovery: DiscoveryMethod = discovery
        self.weights: Optional[ConfidenceWeights] = weights
        self._positions: dict[CommitId, int] = {}
        for position, commit in enumerate(self.commits):
            self._positions.setdefault(commit.id, position)

    def find_commit_index(self, commit: CommitId) -> Optional[int]:
        """
        :param commit: identifier of the commit
        :return: position of the commit in the history, or None if it is not there
        """
        return self._positions.get(commit)

    def test(self, commit: CommitId, state: BisectionState) -> bool:
        """Runs the oracle on the commit and records its verdict

        :param commit: tested commit
        :param state: state of the running bisection
        :return: false if the bisection was cancelled before the oracle was invoked
        """
        if self.should_stop is not None and self.should_stop():
            log.debug("bisection cancelled")
            return False
        raw_verdict = self.oracle(commit)
        try:
            verdict = BisectVerdict(raw_verdict)
        except ValueError:
            log.warn(
                f"oracle returned unknown verdict {raw_verdict!r}, skipping {short_id(commit)}"
            )
            verdict = BisectVerdict.SKIP
        log.debug(f"commit {short_id(commit)} is {verdict.value}")
        state.record_result(commit, verdict)
        return True

    def select_next_commit(self, state: BisectionState) -> Optional[CommitId]:
        """Selects the positional midpoint of untested commits between the boundaries

        :param state: state of the running bisection
        :return: next commit to test, or None if there is none
        """
        good_index = self.find_commit_index(state.good)
        bad_index = self.find_commit_index(state.bad)
        if good_index is None or bad_index is None:
            return None
        untested = [
            commit.id
            for commit in self.commits[good_index + 1 : bad_index]
            if not state.has_tested(commit.id)
        ]
        return untested[len(untested) // 2] if untested else None

    def bisect(self, good: CommitId, bad: CommitId) -> Optional[BisectionResult]:
        """Finds the first bad commit between the good and bad seeds

        :param good: commit, which is expected to be good
        :param bad: commit, which is expected to be bad
        :return: boundary of the regression, or None if it cannot be soundly determined
        """
        good_index, bad_index = self.find_commit_index(good), self.find_commit_index(bad)
        if good_index is None or bad_index is None or good_index >= bad_index:
            log.warn(
                f"cannot bisect between {short_id(good)} and {short_id(bad)}:"
                " both must be in the history and the good commit must precede the bad one"
            )
            return None

        state = BisectionState(good, bad)
        if not self.test(good, state) or state.tested[-1][1] != BisectVerdict.GOOD:
            log.warn(f"the supposedly good commit {short_id(good)} is not good")
            return None
        if not self.test(bad, state) or state.tested[-1][1] != BisectVerdict.BAD:
            log.warn(f"the supposedly bad commit {short_id(bad)} is not bad")
            return None

        while (next_commit := self.select_next_commit(state)) is not None:
            if not self.test(next_commit, state):
                return None

        good_index = self.find_commit_index(state.good)
        bad_index = self.find_commit_index(state.bad)
        if good_index is None or bad_index is None or bad_index != good_index + 1:
            log.warn(
                f"only skipped commits remain between {short_id(state.good)}"
                f" and {short_id(state.bad)}, the boundary cannot be determined"
            )
            return None

        return BisectionResult(
            first_bad_commit=self.commits[bad_index],
            last_good_commit=self.commits[good_index],
            commits_tested=len(state.tested),
            test_results=tuple(state.tested),
            confidence=self.score(state),
        )

    def score(self, state: BisectionState) -> ConfidenceScore:
        """Scores the found boundary; skipped commits weaken the evidence

        :param state: finished state of the bisection
        :return: confidence of the boundary
        """
        if state.skipped:
            reproducibility, evidence = Reproducibility.OFTEN, EvidenceStrength.MODERATE
        else:
            reproducibility, evidence = Reproducibility.ALWAYS, EvidenceStrength.STRONG
        return confidence.score(
            self.discovery, reproducibility, evidence, RootCauseClarity.LIKELY, self.weights
        )


def bisect(
    commits: Iterable[Union[Commit, CommitId]],
    good: CommitId,
    bad: CommitId,
    oracle: Oracle,
    **kwargs: Any,
) -> Optional[BisectionResult]:
    """Binary searches the ordered commits for the boundary between good and bad commits

    :param commits: history ordered from the oldest to the newest
    :param good: commit, which is expected to be good
    :param bad: commit, which is expected to be bad
    :param oracle: classifies the commit as GOOD, BAD or SKIP
    :param kwargs: additional parameters of :class:`Bisector` (should_stop, discovery, weights)
    :return: boundary of the regression, or None if it cannot be soundly determined
    """
    return Bisector(commits, oracle, **kwargs).bisect(good, bad)
