"""Structures used by the differential analysis of two or more variants"""

from __future__ import annotations

# Standard Imports
import dataclasses
import enum
from typing import Optional

# Third-Party Imports

# Culprit Imports
from culprit.utils.structs.confidence_structs import ConfidenceScore


class ExecutionStatus(str, enum.Enum):
    """Functional outcome of one run of the variant"""

    PASS = "pass"
    HANG = "hang"
    CRASH = "crash"
    WRONG_OUTPUT = "wrong-output"

    @property
    def is_failure(self) -> bool:
        return self != ExecutionStatus.PASS


class RegressionKind(str, enum.Enum):
    """Kind of the detected regression"""

    FUNCTIONAL = "functional"
    PERFORMANCE = "performance"


@dataclasses.dataclass(frozen=True)
class RegressionVerdict:
    """Result of the statistical comparison of the baseline and the variant

    :ivar baseline: tag of the baseline variant
    :ivar variant: tag of the compared variant
    :ivar slowdown_factor: mean(variant) / mean(baseline)
    :ivar t_statistic: Welch's t statistic of (baseline, variant)
    :ivar p_value: two-sided p-value of the Welch's t-test
    :ivar effect_size: Cohen's d of the variant w.r.t. the baseline
    :ivar baseline_mean: mean of the baseline samples
    :ivar variant_mean: mean of the variant samples
    :ivar is_regression: true iff the difference is both significant and large enough
    """

    baseline: str
    variant: str
    slowdown_factor: float
    t_statistic: float
    p_value: float
    effect_size: float
    baseline_mean: float
    variant_mean: float
    is_regression: bool

    def summary(self) -> str:
        """
        :return: one line summary of the verdict
        """
        verdict = "REGRESSION" if self.is_regression else "no regression"
        return (
            f"{self.baseline} -> {self.variant}: {verdict} (slowdown {self.slowdown_factor:.2f}x,"
            f" p={self.p_value:.4f}, d={self.effect_size:.2f},"
            f" means {self.baseline_mean:.3f} -> {self.variant_mean:.3f})"
        )


@dataclasses.dataclass(frozen=True)
class FunctionalRegression:
    """Baseline passes unanimously, while the variant fails at least once

    :ivar baseline: tag of the baseline variant
    :ivar variant: tag of the failing variant
    :ivar failure_mode: status of the first failing run of the variant
    :ivar failing_runs: number of failing runs of the variant
    :ivar total_runs: number of runs of the variant
    """

    baseline: str
    variant: str
    failure_mode: ExecutionStatus
    failing_runs: int
    total_runs: int

    def summary(self) -> str:
        return (
            f"{self.baseline} -> {self.variant}: {self.failure_mode.value}"
            f" in {self.failing_runs}/{self.total_runs} runs"
        )


@dataclasses.dataclass(frozen=True)
class Regression:
    """One detected regression between consecutive variants

    :ivar kind: functional or performance regression
    :ivar baseline: tag of the baseline variant
    :ivar variant: tag of the regressed variant
    :ivar functional: details of the functional regression (if kind is functional)
    :ivar verdict: details of the performance regression (if kind is performance)
    :ivar confidence: confidence of the regression
    """

    kind: RegressionKind
    baseline: str
    variant: str
    functional: Optional[FunctionalRegression] = None
    verdict: Optional[RegressionVerdict] = None
    confidence: Optional[ConfidenceScore] = None

    def summary(self) -> str:
        details = self.functional or self.verdict
        return f"[{self.kind.value}] " + (details.summary() if details else "")
