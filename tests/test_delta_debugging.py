"""Tests of the delta debugging of failure-inducing inputs"""

from __future__ import annotations

# Standard Imports
import math

# Third-Party Imports
import pytest

# Culprit Imports
from culprit.deltadebugging import factory as dd_factory
from culprit.deltadebugging import units as dd_units
from culprit.utils.exceptions import UnsupportedModuleException
from culprit.utils.structs import Priority, TestOutcome, UnitKind


def failing_if(predicate):
    """Creates the oracle recording its calls, which fails when predicate holds"""
    calls = []

    def oracle(candidate):
        calls.append(candidate)
        return TestOutcome.FAIL if predicate(candidate) else TestOutcome.PASS

    oracle.calls = calls
    return oracle


def test_minimize_lines():
    """The failing line is isolated from the rest"""
    oracle = failing_if(lambda text: "bug" in text)
    result = dd_factory.minimize("line1\nline2 bug\nline3", oracle)

    assert result.minimized == "line2 bug"
    assert result.original_size == 3
    assert result.minimized_size == 1
    assert result.reduction_ratio == pytest.approx(2 / 3)
    assert result.unit_kind == UnitKind.LINE
    assert result.test_run_count == len(oracle.calls)
    assert "3 -> 1 lines" in result.summary()

    # Small reproducer with strong reduction is likely to point to the root cause
    assert result.confidence is not None
    assert result.confidence.overall == pytest.approx(0.885)
    assert result.confidence.priority == Priority.CRITICAL


def test_minimize_is_idempotent():
    oracle = failing_if(lambda text: "bug" in text)
    first = dd_factory.minimize("a\nb bug\nc\nd\ne", oracle)
    second = dd_factory.minimize(first.minimized, oracle)
    assert second.minimized == first.minimized
    assert second.minimized_size == first.minimized_size


def test_minimize_passing_candidate():
    """Candidates, which do not fail, are returned unchanged after a single run"""
    oracle = failing_if(lambda text: False)
    candidate = "line1\nline2\nline3"
    result = dd_factory.minimize(candidate, oracle)

    assert result.minimized == candidate
    assert result.test_run_count == 1
    assert result.reduction_ratio == 0.0
    assert result.confidence is None


def test_minimize_degenerate_candidates():
    always = failing_if(lambda text: True)
    empty = dd_factory.minimize("", always)
    assert empty.minimized == ""
    assert empty.original_size == 0
    assert empty.reduction_ratio == 0.0
    assert empty.test_run_count == 1

    single = dd_factory.minimize("only line", always)
    assert single.minimized == "only line"
    assert single.minimized_size == 1


def test_unresolved_is_not_failure():
    """Candidates, which cannot be classified, are never accepted as failing"""
    calls = []

    def oracle(candidate):
        calls.append(candidate)
        if "bug" in candidate and "keep" in candidate:
            return TestOutcome.FAIL
        if "bug" in candidate:
            return TestOutcome.UNRESOLVED
        return TestOutcome.PASS

    result = dd_factory.minimize("keep\nnoise\nbug\nnoise2", oracle)
    assert result.minimized == "keep\nbug"
    assert oracle(result.minimized) == TestOutcome.FAIL


def test_memoization_counts_only_real_runs():
    oracle = failing_if(lambda text: "x" in text and "y" in text)
    result = dd_factory.minimize("a\nx\nb\nc\ny\nd\ne\nf", oracle)

    assert result.minimized == "x\ny"
    assert result.test_run_count == len(oracle.calls)
    assert len(set(oracle.calls)) == len(oracle.calls)


def test_minimize_characters():
    oracle = failing_if(lambda text: "xyz" in text)
    result = dd_factory.minimize("abcxyzdef", oracle, UnitKind.CHARACTER)
    assert result.minimized == "xyz"
    assert result.original_size == 9
    assert result.minimized_size == 3


def test_minimize_tokens():
    oracle = failing_if(lambda text: "foo(" in text)
    result = dd_factory.minimize("int x = foo(bar, baz);", oracle, UnitKind.TOKEN)
    assert result.minimized == "foo("
    assert result.minimized_size == 2


def test_minimize_to_one_minimal_subset():
    """Removing any single line of the result makes it pass"""
    oracle = failing_if(lambda text: len(text.splitlines()) > 2)
    candidate = "\n".join(f"line{i}" for i in range(10))
    result = dd_factory.minimize(candidate, oracle)

    assert result.minimized_size == 3
    lines = result.minimized.splitlines()
    for i in range(len(lines)):
        assert oracle("\n".join(lines[:i] + lines[i + 1 :])) != TestOutcome.FAIL


def test_minimize_monotonicity():
    oracle = failing_if(lambda text: "3" in text and "7" in text)
    candidate = "\n".join(str(i) for i in range(16))
    result = dd_factory.minimize(candidate, oracle)

    assert result.minimized_size <= result.original_size
    assert oracle(result.minimized) == TestOutcome.FAIL
    assert set(result.minimized.splitlines()) <= set(candidate.splitlines())


def test_minimize_invalid_outcome():
    """Unknown outcomes of the oracle are considered unresolved"""
    result = dd_factory.minimize("a\nb", lambda candidate: "garbage")
    assert result.minimized == "a\nb"
    assert result.confidence is None


def test_minimize_cancellation():
    """Cancelled minimization returns the best failing reduction found so far"""
    oracle = failing_if(lambda text: "bug" in text)
    candidate = "\n".join(f"line{i}" for i in range(20)) + "\nbug"
    debugger = dd_factory.DeltaDebugger(oracle, should_stop=lambda: len(oracle.calls) >= 3)
    result = debugger.minimize(candidate)

    assert result.test_run_count == 3
    assert "bug" in result.minimized
    assert result.minimized_size < result.original_size

    cancelled = dd_factory.DeltaDebugger(oracle, should_stop=lambda: True).minimize(candidate)
    assert cancelled.minimized == candidate
    assert cancelled.test_run_count == 0


def test_debugger_is_reusable():
    oracle = failing_if(lambda text: "bug" in text)
    debugger = dd_factory.DeltaDebugger(oracle)
    first = debugger.minimize("a\nbug\nb")
    second = debugger.minimize("c\nd\nbug")
    assert first.minimized == second.minimized == "bug"
    assert second.test_run_count + first.test_run_count == len(oracle.calls)


def test_minimize_hierarchical():
    candidate = "int a = 1;\nvoid f() {\n  call();\n  bug();\n}\nint b = 2;"
    oracle = failing_if(lambda text: "bug();" in text)
    result = dd_factory.minimize_hierarchical(candidate, oracle)

    assert result.minimized.strip() == "bug();"
    assert result.unit_kind == UnitKind.LINE
    assert result.original_size == 6
    assert result.minimized_size == 1
    assert result.test_run_count == len(oracle.calls)


def test_minimize_hierarchical_keeps_balanced_blocks():
    """Node level removes whole blocks, line level cannot break the remaining one"""
    candidate = "int a;\nvoid g() {\n  x();\n}\nvoid f() {\n  bug();\n}\nint b;"

    def balanced_bug(text):
        return "bug" in text and text.count("{") == text.count("}") >= 1

    oracle = failing_if(balanced_bug)
    result = dd_factory.minimize_hierarchical(candidate, oracle)

    assert result.minimized == "void f() {\n  bug();\n}"
    assert result.original_size == 8
    assert result.minimized_size == 3
    assert oracle.calls[:4] == [
        candidate,
        "void f() {\n  bug();\n}\nint b;",
        "int b;",
        "void f() {\n  bug();\n}",
    ]
    assert result.test_run_count == len(oracle.calls) == 10
    assert oracle(result.minimized) == TestOutcome.FAIL


def test_minimize_candidate_order():
    """Complements are tried before chunks, both left to right, before the granularity grows"""
    oracle = failing_if(lambda text: "x" in text and "y" in text)
    result = dd_factory.minimize("x\na\nb\ny", oracle)

    assert result.minimized == "x\ny"
    assert oracle.calls == [
        "x\na\nb\ny",
        "b\ny",
        "x\na",
        "a\nb\ny",
        "x\nb\ny",
        "x",
        "x\ny",
        "y",
    ]
    assert result.test_run_count == 8


@pytest.mark.parametrize("line_count", [16, 128, 1024])
def test_minimize_logarithmic_runs(line_count):
    """Single failing line is found in logarithmic number of runs"""
    lines = [f"line{i}" for i in range(line_count)]
    lines[line_count // 3] = "bug"
    oracle = failing_if(lambda text: "bug" in text)
    result = dd_factory.minimize("\n".join(lines), oracle)

    assert result.minimized == "bug"
    assert result.test_run_count <= 2 * math.log2(line_count) + 1


def test_units_tokenize():
    assert dd_units.tokenize("f(a, b);") == ["f", "(", "a", ",", " ", "b", ")", ";"]
    assert dd_units.tokenize("a\tb") == ["a", " ", "b"]
    assert dd_units.tokenize("") == []


def test_units_split_nodes():
    nodes = dd_units.split_nodes("int a;\nvoid f() {\n  g();\n}\n  continued\nint b;")
    assert nodes == ["int a;", "void f() {\n  g();\n}\n  continued", "int b;"]


def test_units_partition():
    assert dd_units.partition([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4, 5]]
    assert dd_units.partition([1, 2, 3], 3) == [[1], [2], [3]]
    assert dd_units.partition(list(range(10)), 4) == [[0, 1], [2, 3], [4, 5], [6, 7, 8, 9]]


def test_units_split_and_join():
    for kind in (UnitKind.LINE, UnitKind.CHARACTER, UnitKind.NODE):
        assert dd_units.join(dd_units.split("a b\nc", kind), kind) == "a b\nc"
    tokens = dd_units.split("f(a, b);", UnitKind.TOKEN)
    assert dd_units.join(tokens, UnitKind.TOKEN) == "f(a, b);"
    assert dd_units.measure("a\nb\nc", UnitKind.LINE) == 3
    assert dd_units.measure("abc", UnitKind.CHARACTER) == 3


def test_units_kind_conversion():
    assert dd_units.to_unit_kind("token") == UnitKind.TOKEN
    assert dd_units.to_unit_kind(UnitKind.NODE) == UnitKind.NODE
    with pytest.raises(UnsupportedModuleException):
        dd_units.to_unit_kind("paragraph")
