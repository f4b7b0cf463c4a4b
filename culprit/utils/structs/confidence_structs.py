"""Structures of the confidence model: the four evidence axes, priorities and the score itself.

Each evidence axis is a small enumeration of levels, where each level carries a fixed weight in
the [0, 1] range. The levels derive from str, so the records can be directly serialized.
"""

from __future__ import annotations

# Standard Imports
import dataclasses
import enum

# Third-Party Imports

# Culprit Imports


class DiscoveryMethod(str, enum.Enum):
    """How the finding was discovered"""

    PROPERTY_TESTING = "property-testing"
    FUZZING = "fuzzing"
    MANUAL = "manual"
    USER_REPORT = "user-report"

    @property
    def weight(self) -> float:
        return _DISCOVERY_WEIGHTS[self]

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()

    @staticmethod
    def supported() -> list[str]:
        """Obtain the collection of supported discovery methods.

        :return: the collection of valid discovery methods
        """
        return [method.value for method in DiscoveryMethod]


class Reproducibility(str, enum.Enum):
    """How often the finding reproduces"""

    ALWAYS = "always"
    OFTEN = "often"
    SOMETIMES = "sometimes"
    RARELY = "rarely"

    @property
    def weight(self) -> float:
        return _REPRODUCIBILITY_WEIGHTS[self]

    @property
    def label(self) -> str:
        return _REPRODUCIBILITY_LABELS[self]

    @staticmethod
    def supported() -> list[str]:
        return [level.value for level in Reproducibility]

    @classmethod
    def from_ratio(cls, ratio: float) -> Reproducibility:
        """Classifies the ratio of reproducing runs into the reproducibility level

        :param ratio: ratio of runs in which the finding manifested
        :return: reproducibility level
        """
        if ratio >= 1.0:
            return cls.ALWAYS
        if ratio > 0.75:
            return cls.OFTEN
        if ratio >= 0.25:
            return cls.SOMETIMES
        return cls.RARELY


class EvidenceStrength(str, enum.Enum):
    """How strong the quantitative evidence of the finding is"""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"

    @property
    def weight(self) -> float:
        return _EVIDENCE_WEIGHTS[self]

    @property
    def label(self) -> str:
        return self.value.title()

    @staticmethod
    def supported() -> list[str]:
        return [level.value for level in EvidenceStrength]


class RootCauseClarity(str, enum.Enum):
    """How clear the root cause of the finding is"""

    CONFIRMED = "confirmed"
    LIKELY = "likely"
    UNCLEAR = "unclear"

    @property
    def weight(self) -> float:
        return _CLARITY_WEIGHTS[self]

    @property
    def label(self) -> str:
        return self.value.title()

    @staticmethod
    def supported() -> list[str]:
        return [level.value for level in RootCauseClarity]


_DISCOVERY_WEIGHTS: dict[DiscoveryMethod, float] = {
    DiscoveryMethod.PROPERTY_TESTING: 0.90,
    DiscoveryMethod.FUZZING: 0.85,
    DiscoveryMethod.MANUAL: 0.70,
    DiscoveryMethod.USER_REPORT: 0.50,
}
_REPRODUCIBILITY_WEIGHTS: dict[Reproducibility, float] = {
    Reproducibility.ALWAYS: 1.0,
    Reproducibility.OFTEN: 0.8,
    Reproducibility.SOMETIMES: 0.5,
    Reproducibility.RARELY: 0.2,
}
_REPRODUCIBILITY_LABELS: dict[Reproducibility, str] = {
    Reproducibility.ALWAYS: "Always",
    Reproducibility.OFTEN: "Often (>75%)",
    Reproducibility.SOMETIMES: "Sometimes (25-75%)",
    Reproducibility.RARELY: "Rarely (<25%)",
}
_EVIDENCE_WEIGHTS: dict[EvidenceStrength, float] = {
    EvidenceStrength.STRONG: 0.9,
    EvidenceStrength.MODERATE: 0.6,
    EvidenceStrength.WEAK: 0.3,
}
_CLARITY_WEIGHTS: dict[RootCauseClarity, float] = {
    RootCauseClarity.CONFIRMED: 1.0,
    RootCauseClarity.LIKELY: 0.7,
    RootCauseClarity.UNCLEAR: 0.3,
}


class Priority(str, enum.Enum):
    """Priority tier derived from the overall confidence"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: float) -> Priority:
        """Step function mapping the overall score to the priority tier

        :param score: overall confidence score
        :return: priority tier
        """
        if score > 0.8:
            return cls.CRITICAL
        if score > 0.6:
            return cls.HIGH
        if score > 0.4:
            return cls.MEDIUM
        return cls.LOW

    @property
    def recommended_action(self) -> str:
        return _RECOMMENDED_ACTIONS[self]


_RECOMMENDED_ACTIONS: dict[Priority, str] = {
    Priority.CRITICAL: "Investigate immediately, block the release",
    Priority.HIGH: "Investigate soon, prioritize the fix",
    Priority.MEDIUM: "Triage in the normal flow",
    Priority.LOW: "Review manually, gather more evidence",
}


@dataclasses.dataclass(frozen=True)
class ConfidenceWeights:
    """Weight vector of the four evidence axes

    :ivar discovery: weight of the discovery method axis
    :ivar reproducibility: weight of the reproducibility axis
    :ivar evidence: weight of the evidence strength axis
    :ivar clarity: weight of the root-cause clarity axis
    """

    discovery: float
    reproducibility: float
    evidence: float
    clarity: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        return self.discovery, self.reproducibility, self.evidence, self.clarity


WEIGHTED_SCHEME = ConfidenceWeights(0.30, 0.30, 0.25, 0.15)
EQUAL_SCHEME = ConfidenceWeights(0.25, 0.25, 0.25, 0.25)
WEIGHT_SCHEMES: dict[str, ConfidenceWeights] = {
    "weighted": WEIGHTED_SCHEME,
    "equal": EQUAL_SCHEME,
}


@dataclasses.dataclass(frozen=True)
class ConfidenceScore:
    """Aggregated confidence of one finding

    :ivar overall: weighted sum of the sub-scores clamped to [0, 1]
    :ivar discovery: sub-score of the discovery method axis
    :ivar reproducibility: sub-score of the reproducibility axis
    :ivar evidence: sub-score of the evidence strength axis
    :ivar clarity: sub-score of the root-cause clarity axis
    :ivar weights: weight vector used for the aggregation
    :ivar contributions: human-readable label of each contributing axis
    :ivar priority: priority tier derived from overall
    :ivar needs_human_validation: automated findings always need to be validated by a human
    """

    overall: float
    discovery: float
    reproducibility: float
    evidence: float
    clarity: float
    weights: ConfidenceWeights
    contributions: tuple[str, ...]
    priority: Priority
    needs_human_validation: bool = True

    @property
    def recommended_action(self) -> str:
        return self.priority.recommended_action

    def explain(self) -> str:
        """Generates human-readable explanation of the score

        :return: multi-line explanation with each contributing axis
        """
        lines = [f"Confidence Score: {self.overall:.2f} ({self.priority.value.upper()})"]
        lines.extend(f"  - {contribution}" for contribution in self.contributions)
        lines.append(
            "Formula: "
            + " + ".join(
                f"{weight:.2f}*{sub_score:.2f}"
                for weight, sub_score in zip(
                    self.weights.as_tuple(),
                    (self.discovery, self.reproducibility, self.evidence, self.clarity),
                )
            )
            + f" = {self.overall:.3f}"
        )
        lines.append("Needs human validation: yes")
        return "\n".join(lines)
