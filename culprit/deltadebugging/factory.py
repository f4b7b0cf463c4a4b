"""Delta debugging of failure-inducing inputs (ddmin).

https://www.debuggingbook.org/html/DeltaDebugger.html

The candidate is split into units (lines, tokens, characters, or top-level nodes) and the
units are repeatedly partitioned into n chunks. Each round first tries to remove one chunk
(subtraction), then to keep only one chunk (isolation), and if neither still fails, doubles
the granularity. Once the granularity equals the number of units and nothing can be removed,
the candidate is 1-minimal.

Only the FAIL outcome counts as "still failing"; UNRESOLVED is treated as PASS, so the
minimization never wanders into a state, which could not be classified. Tested texts are
memoized for the duration of one call, as the oracle is assumed to be deterministic.
"""

from __future__ import annotations

# Standard Imports
from typing import Any, Callable, Optional

# Third-Party Imports

# Culprit Imports
from culprit.confidence import factory as confidence
from culprit.deltadebugging import units as dd_units
from culprit.utils import log
from culprit.utils.structs.confidence_structs import (
    ConfidenceScore,
    ConfidenceWeights,
    DiscoveryMethod,
    EvidenceStrength,
    Reproducibility,
    RootCauseClarity,
)
from culprit.utils.structs.dd_structs import MinimizationResult, TestOutcome, UnitKind

Oracle = Callable[[str], TestOutcome]

MINIMAL_REPRODUCER_SIZE: int = 10


class DeltaDebugger:
    """Minimizer of the failing candidates

    The memo and the number of runs are reset by each call of :meth:`minimize`, so one
    instance can be reused, but must not be shared between concurrently running threads.

    :ivar oracle: classifies the candidate text as PASS, FAIL or UNRESOLVED
    :ivar unit_kind: units into which the candidate is split
    :ivar should_stop: optional cancellation flag checked before each oracle invocation
    :ivar discovery: how the failing candidate was discovered (used for confidence)
    :ivar weights: weights of the confidence axes
    """

    def __init__(
        self,
        oracle: Oracle,
        unit_kind: UnitKind = UnitKind.LINE,
        should_stop: Optional[Callable[[], bool]] = None,
        discovery: DiscoveryMethod = DiscoveryMethod.FUZZING,
        weights: Optional[ConfidenceWeights] = None,
    ) -> None:
        self.oracle: Oracle = oracle
        self.unit_kind: UnitKind = unit_kind
        self.should_stop: Optional[Callable[[], bool]] = should_stop
        self.discovery: DiscoveryMethod = discovery
        self.weights: Optional[ConfidenceWeights] = weights
        self.test_runs: int = 0
        self.stopped: bool = False
        self._memo: dict[str, TestOutcome] = {}

    def _reset(self) -> None:
        self.test_runs = 0
        self.stopped = False
        self._memo = {}

    def test(self, candidate: str) -> TestOutcome:
        """Runs the oracle on the candidate, unless it was already tested

        :param candidate: tested text
        :return: outcome of the oracle (UNRESOLVED if the run was cancelled)
        """
        if candidate in self._memo:
            return self._memo[candidate]
        if self.stopped or (self.should_stop is not None and self.should_stop()):
            self.stopped = True
            return TestOutcome.UNRESOLVED
        self.test_runs += 1
        raw_outcome = self.oracle(candidate)
        try:
            outcome = TestOutcome(raw_outcome)
        except ValueError:
            log.warn(f"oracle returned unknown outcome {raw_outcome!r}, treating it as unresolved")
            outcome = TestOutcome.UNRESOLVED
        self._memo[candidate] = outcome
        return outcome

    def fails(self, units: list[str], kind: UnitKind) -> bool:
        """
        :param units: units of the tested candidate
        :param kind: kind of the units
        :return: true if the reassembled candidate still fails
        """
        return self.test(dd_units.join(units, kind)) == TestOutcome.FAIL

    def _reduce(self, chunks: list[list[str]], kind: UnitKind) -> Optional[list[str]]:
        """Tries the subtraction and the isolation of the chunks, left to right

        :param chunks: partitioned units
        :param kind: kind of the units
        :return: reduced units that still fail, or None if no chunk can be reduced
        """
        for i in range(len(chunks)):
            complement = [unit for j, chunk in enumerate(chunks) if j != i for unit in chunk]
            if complement and self.fails(complement, kind):
                log.debug(f"removed chunk {i + 1}/{len(chunks)}: {len(complement)} units left")
                return complement
        for i, chunk in enumerate(chunks):
            if chunk and self.fails(chunk, kind):
                log.debug(f"isolated chunk {i + 1}/{len(chunks)}: {len(chunk)} units left")
                return chunk
        return None

    def ddmin(self, units: list[str], kind: UnitKind) -> list[str]:
        """Reduces the failing units to the 1-minimal subset

        :param units: units of the failing candidate
        :param kind: kind of the units
        :return: 1-minimal failing units (or the best reduction, if cancelled)
        """
        granularity = 2
        while len(units) >= 2 and not self.stopped:
            reduced = self._reduce(dd_units.partition(units, granularity), kind)
            if reduced is not None:
                units, granularity = reduced, 2
            elif granularity < len(units):
                granularity = min(granularity * 2, len(units))
            else:
                break
        return units

    def _reduce_text(self, candidate: str, kind: UnitKind) -> str:
        """Runs the ddmin over the units of the candidate and reassembles the result

        :param candidate: failing candidate
        :param kind: kind of the units
        :return: reduced candidate; the candidate itself if nothing could be removed
        """
        units = dd_units.split(candidate, kind)
        minimized = self.ddmin(units, kind)
        return candidate if minimized == units else dd_units.join(minimized, kind)

    def minimize(self, candidate: str) -> MinimizationResult:
        """Minimizes the failing candidate

        If the candidate does not fail, it is returned unchanged.

        :param candidate: candidate text
        :return: result of the minimization
        """
        self._reset()
        original_size = dd_units.measure(candidate, self.unit_kind)
        if self.test(candidate) != TestOutcome.FAIL:
            log.debug("the candidate does not fail, nothing to minimize")
            return MinimizationResult(
                candidate, original_size, original_size, self.test_runs, self.unit_kind
            )

        minimized = self._reduce_text(candidate, self.unit_kind)
        return self._create_result(minimized, original_size, self.unit_kind)

    def minimize_hierarchical(self, candidate: str) -> MinimizationResult:
        """Minimizes the failing candidate first by top-level nodes and then by lines

        The sizes of the result are measured in lines.

        :param candidate: candidate text
        :return: result of the minimization
        """
        self._reset()
        original_size = dd_units.measure(candidate, UnitKind.LINE)
        if self.test(candidate) != TestOutcome.FAIL:
            return MinimizationResult(
                candidate, original_size, original_size, self.test_runs, UnitKind.LINE
            )

        minimized = self._reduce_text(candidate, UnitKind.NODE)
        node_level_size = dd_units.measure(minimized, UnitKind.LINE)
        log.debug(f"node level reduced the candidate to {node_level_size} lines")
        minimized = self._reduce_text(minimized, UnitKind.LINE)
        return self._create_result(minimized, original_size, UnitKind.LINE)

    def _create_result(
        self, minimized: str, original_size: int, kind: UnitKind
    ) -> MinimizationResult:
        minimized_size = dd_units.measure(minimized, kind)
        result = MinimizationResult(
            minimized,
            original_size,
            minimized_size,
            self.test_runs,
            kind,
            self.score(original_size, minimized_size),
        )
        log.debug(result.summary())
        return result

    def score(self, original_size: int, minimized_size: int) -> ConfidenceScore:
        """Scores the minimized reproducer

        The stronger the reduction, the stronger the evidence; small reproducers make the
        root cause likely to be found.

        :param original_size: size of the original candidate
        :param minimized_size: size of the minimized candidate
        :return: confidence of the minimized reproducer
        """
        ratio = 1.0 - minimized_size / original_size if original_size else 0.0
        if ratio >= 0.5:
            evidence = EvidenceStrength.STRONG
        elif ratio >= 0.2:
            evidence = EvidenceStrength.MODERATE
        else:
            evidence = EvidenceStrength.WEAK
        clarity = (
            RootCauseClarity.LIKELY
            if minimized_size < MINIMAL_REPRODUCER_SIZE
            else RootCauseClarity.UNCLEAR
        )
        return confidence.score(
            self.discovery, Reproducibility.ALWAYS, evidence, clarity, self.weights
        )


def minimize(
    candidate: str,
    oracle: Oracle,
    unit_kind: UnitKind = UnitKind.LINE,
    **kwargs: Any,
) -> MinimizationResult:
    """Minimizes the failing candidate to the 1-minimal reproducer

    :param candidate: candidate text
    :param oracle: classifies the candidate text as PASS, FAIL or UNRESOLVED
    :param unit_kind: units into which the candidate is split
    :param kwargs: additional parameters of :class:`DeltaDebugger` (should_stop, discovery,
        weights)
    :return: result of the minimization
    """
    return DeltaDebugger(oracle, unit_kind, **kwargs).minimize(candidate)


def minimize_hierarchical(candidate: str, oracle: Oracle, **kwargs: Any) -> MinimizationResult:
    """Minimizes the failing candidate by top-level nodes and then by lines

    :param candidate: candidate text
    :param oracle: classifies the candidate text as PASS, FAIL or UNRESOLVED
    :param kwargs: additional parameters of :class:`DeltaDebugger`
    :return: result of the minimization measured in lines
    """
    return DeltaDebugger(oracle, UnitKind.NODE, **kwargs).minimize_hierarchical(candidate)
