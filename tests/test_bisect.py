"""Tests of the bisection of the linear commit history"""

from __future__ import annotations

# Standard Imports

# Third-Party Imports
import pytest

# Culprit Imports
from culprit.bisect import factory as bisect_factory
from culprit.utils.structs import (
    BisectionState,
    BisectVerdict,
    Commit,
    EvidenceStrength,
    Priority,
    Reproducibility,
)


def history(count):
    return [f"c{i:02d}" for i in range(count)]


def boundary_oracle(first_bad, skipped=()):
    """Creates the oracle recording its calls with the regression introduced in first_bad"""
    calls = []

    def oracle(commit):
        calls.append(commit)
        if commit in skipped:
            return BisectVerdict.SKIP
        return BisectVerdict.BAD if int(commit[1:]) >= first_bad else BisectVerdict.GOOD

    oracle.calls = calls
    return oracle


def test_bisect_twenty_commits():
    """The boundary is found within ceil(log2(20)) + 2 oracle calls"""
    oracle = boundary_oracle(12)
    result = bisect_factory.bisect(history(20), "c00", "c19", oracle)

    assert result is not None
    assert result.first_bad_commit.id == "c12"
    assert result.last_good_commit.id == "c11"
    assert result.commits_tested == len(oracle.calls) == 7
    assert oracle.calls == ["c00", "c19", "c10", "c15", "c13", "c12", "c11"]
    assert result.test_results[0] == ("c00", BisectVerdict.GOOD)
    assert result.test_results[1] == ("c19", BisectVerdict.BAD)

    assert result.confidence is not None
    assert result.confidence.overall == pytest.approx(0.885)
    assert result.confidence.priority == Priority.CRITICAL


@pytest.mark.parametrize("first_bad", [1, 2, 9, 18, 19])
def test_bisect_boundaries(first_bad):
    oracle = boundary_oracle(first_bad)
    result = bisect_factory.bisect(history(20), "c00", "c19", oracle)
    assert result is not None
    assert result.first_bad_commit.id == f"c{first_bad:02d}"
    assert result.last_good_commit.id == f"c{first_bad - 1:02d}"
    assert result.commits_tested <= 7


def test_bisect_adjacent_seeds():
    oracle = boundary_oracle(1)
    result = bisect_factory.bisect(history(2), "c00", "c01", oracle)
    assert result is not None
    assert result.commits_tested == 2


def test_bisect_good_precondition():
    """The supposedly good commit is in fact bad"""
    oracle = boundary_oracle(0)
    assert bisect_factory.bisect(history(10), "c00", "c09", oracle) is None
    assert oracle.calls == ["c00"]


def test_bisect_bad_precondition():
    """The supposedly bad commit is in fact good"""
    oracle = boundary_oracle(100)
    assert bisect_factory.bisect(history(10), "c00", "c09", oracle) is None
    assert oracle.calls == ["c00", "c09"]


def test_bisect_invalid_seeds():
    oracle = boundary_oracle(5)
    assert bisect_factory.bisect(history(10), "c00", "unknown", oracle) is None
    assert bisect_factory.bisect(history(10), "c07", "c02", oracle) is None
    assert bisect_factory.bisect(history(10), "c03", "c03", oracle) is None
    assert oracle.calls == []


def test_bisect_with_skipped_commit():
    oracle = boundary_oracle(6, skipped={"c07"})
    result = bisect_factory.bisect(history(10), "c00", "c09", oracle)

    assert result is not None
    assert result.first_bad_commit.id == "c06"
    assert ("c07", BisectVerdict.SKIP) in result.test_results
    assert result.commits_tested == 6

    # Skipped commits weaken the confidence
    assert result.confidence is not None
    assert result.confidence.reproducibility == Reproducibility.OFTEN.weight
    assert result.confidence.evidence == EvidenceStrength.MODERATE.weight


def test_bisect_skipped_gap():
    """Only skipped commits remain between the boundaries, hence no result is guessed"""
    oracle = boundary_oracle(6, skipped={"c05"})
    assert bisect_factory.bisect(history(10), "c00", "c09", oracle) is None
    assert "c05" in oracle.calls


def test_bisect_all_skipped():
    oracle = boundary_oracle(5, skipped=set(history(10)[1:-1]))
    assert bisect_factory.bisect(history(10), "c00", "c09", oracle) is None
    assert len(oracle.calls) == 10


def test_bisect_invalid_verdict():
    """Unknown verdicts are treated as skipped commits"""

    def oracle(commit):
        if commit == "c03":
            return "maybe"
        return BisectVerdict.BAD if int(commit[1:]) >= 3 else BisectVerdict.GOOD

    assert bisect_factory.bisect(history(6), "c00", "c05", oracle) is None


def test_bisect_cancellation():
    oracle = boundary_oracle(12)
    bisector = bisect_factory.Bisector(
        history(20), oracle, should_stop=lambda: len(oracle.calls) >= 3
    )
    assert bisector.bisect("c00", "c19") is None
    assert len(oracle.calls) == 3


def test_bisect_commit_metadata():
    commits = [
        Commit(f"{i:040x}", message=f"change {i}", author="dev", timestamp=i) for i in range(8)
    ]
    oracle = lambda commit: BisectVerdict.BAD if int(commit, 16) >= 4 else BisectVerdict.GOOD
    result = bisect_factory.bisect(commits, commits[0].id, commits[-1].id, oracle)

    assert result is not None
    assert result.first_bad_commit == commits[4]
    assert str(result.first_bad_commit) == "0000000"
    summary = result.summary()
    assert '("change 4")' in summary
    assert '("change 3")' in summary
    assert f"Commits tested: {result.commits_tested}" in summary


def test_bisection_state():
    state = BisectionState("a", "z")
    state.record_result("m", BisectVerdict.GOOD)
    state.record_result("p", BisectVerdict.SKIP)
    state.record_result("q", BisectVerdict.BAD)

    assert (state.good, state.bad) == ("m", "q")
    assert state.has_tested("p")
    assert not state.has_tested("x")
    assert state.skipped == 1


def test_select_next_commit():
    bisector = bisect_factory.Bisector(history(6), boundary_oracle(3))
    assert bisector.select_next_commit(BisectionState("c00", "c05")) == "c03"
    assert bisector.select_next_commit(BisectionState("c02", "c03")) is None
    assert bisector.select_next_commit(BisectionState("c00", "unknown")) is None


def test_to_commits():
    commits = bisect_factory.to_commits(["a", Commit("b", "message")])
    assert commits == [Commit("a"), Commit("b", "message")]
