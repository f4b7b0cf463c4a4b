"""Structures used by the delta debugging"""

from __future__ import annotations

# Standard Imports
import dataclasses
import enum
from typing import Optional

# Third-Party Imports

# Culprit Imports
from culprit.utils.structs.confidence_structs import ConfidenceScore


class TestOutcome(str, enum.Enum):
    """Result of running the oracle on the candidate.

    UNRESOLVED (e.g. timeout or an unrelated crash) is never equivalent to FAIL.
    """

    __test__ = False

    PASS = "pass"
    FAIL = "fail"
    UNRESOLVED = "unresolved"


class UnitKind(str, enum.Enum):
    """Atomic units, into which the candidate is split"""

    LINE = "line"
    TOKEN = "token"
    CHARACTER = "character"
    NODE = "node"

    @property
    def separator(self) -> str:
        """Separator used to reassemble the units back into the candidate"""
        return "\n" if self in (UnitKind.LINE, UnitKind.NODE) else ""

    @staticmethod
    def supported() -> list[str]:
        """Obtain the collection of supported unit kinds.

        :return: the collection of valid unit kinds
        """
        return [kind.value for kind in UnitKind]

    @staticmethod
    def default() -> str:
        """Provide the default unit kind.

        :return: the default unit kind
        """
        return UnitKind.LINE.value


@dataclasses.dataclass(frozen=True)
class MinimizationResult:
    """Result of the delta debugging

    :ivar minimized: minimized candidate, still failing if the original failed
    :ivar original_size: number of units of the original candidate
    :ivar minimized_size: number of units of the minimized candidate
    :ivar test_run_count: number of actual oracle invocations (memo hits are not counted)
    :ivar unit_kind: units in which the sizes are measured
    :ivar confidence: confidence of the minimized reproducer (None if nothing failed)
    :ivar reduction_ratio: 1 - minimized_size / original_size, 0 for empty original
    """

    minimized: str
    original_size: int
    minimized_size: int
    test_run_count: int
    unit_kind: UnitKind = UnitKind.LINE
    confidence: Optional[ConfidenceScore] = None
    reduction_ratio: float = dataclasses.field(init=False, default=0.0)

    def __post_init__(self) -> None:
        if self.original_size > 0:
            ratio = 1.0 - self.minimized_size / self.original_size
            object.__setattr__(self, "reduction_ratio", ratio)

    def summary(self) -> str:
        """
        :return: one line summary of the minimization
        """
        return (
            f"minimized {self.original_size} -> {self.minimized_size} {self.unit_kind.value}s"
            f" ({self.reduction_ratio:.1%} reduction) in {self.test_run_count} test runs"
        )
