"""Differential analysis of variants (e.g. versions or builds) for regressions.

Two kinds of regressions are detected between the baseline and the variant:

  1. **functional**: the baseline passes in all runs, while the variant hangs, crashes or
     produces wrong output in at least one run. This check takes precedence, since it is
     clear evidence that does not need any statistics.
  2. **performance**: the timings of both variants are compared by the Welch's t-test. The
     regression is declared only if the difference is statistically significant (p-value below
     the significance level) *and* practically significant (the slowdown exceeds the minimal
     slowdown). Neither of the conditions alone is enough.

If fewer samples than requested could be collected, no verdict is given at all.
"""

from __future__ import annotations

# Standard Imports
import math
from typing import Any, Callable, Optional, Sequence

# Third-Party Imports

# Culprit Imports
from culprit.check import stats_kit
from culprit.confidence import factory as confidence
from culprit.logic import config
from culprit.utils import log
from culprit.utils.exceptions import InvalidParameterException
from culprit.utils.structs.check_structs import (
    ExecutionStatus,
    FunctionalRegression,
    Regression,
    RegressionKind,
    RegressionVerdict,
)
from culprit.utils.structs.confidence_structs import (
    ConfidenceScore,
    ConfidenceWeights,
    DiscoveryMethod,
    EvidenceStrength,
    Reproducibility,
    RootCauseClarity,
)

SampleFn = Callable[[str], Optional[float]]
OutcomeFn = Callable[[str], ExecutionStatus]

DEFAULT_SAMPLES: int = 30
DEFAULT_SIGNIFICANCE: float = 0.05
DEFAULT_MIN_SLOWDOWN: float = 1.2


class DifferentialAnalyzer:
    """Hypothesis testing of variants for functional and performance regressions

    :ivar samples: number of samples drawn per variant (at least 2)
    :ivar significance: significance level alpha of the t-test
    :ivar min_slowdown: minimal slowdown tau considered as the regression
    :ivar should_stop: optional cancellation flag checked before each oracle invocation
    :ivar discovery: how the variants were obtained (used for confidence)
    :ivar weights: weights of the confidence axes
    """

    def __init__(
        self,
        samples: int = DEFAULT_SAMPLES,
        significance: float = DEFAULT_SIGNIFICANCE,
        min_slowdown: float = DEFAULT_MIN_SLOWDOWN,
        should_stop: Optional[Callable[[], bool]] = None,
        discovery: DiscoveryMethod = DiscoveryMethod.FUZZING,
        weights: Optional[ConfidenceWeights] = None,
    ) -> None:
        if samples < 2:
            raise InvalidParameterException("samples", samples, "at least two samples")
        if not 0.0 < significance < 1.0:
            raise InvalidParameterException("significance", significance, "values in (0, 1)")
        self.samples: int = samples
        self.significance: float = significance
        self.min_slowdown: float = min_slowdown
        self.should_stop: Optional[Callable[[], bool]] = should_stop
        self.discovery: DiscoveryMethod = discovery
        self.weights: Optional[ConfidenceWeights] = weights

    @classmethod
    def from_config(cls, **kwargs: Any) -> DifferentialAnalyzer:
        """Creates the analyzer with parameters looked up in the ``differential`` section

        :param kwargs: parameters overriding the configuration
        :return: configured analyzer
        :raises InvalidParameterException: when some configured value is not a number
        """
        configured = [
            ("samples", int, DEFAULT_SAMPLES),
            ("significance", float, DEFAULT_SIGNIFICANCE),
            ("min_slowdown", float, DEFAULT_MIN_SLOWDOWN),
        ]
        params: dict[str, Any] = {}
        for key, convert, default in configured:
            if kwargs.get(key) is not None:
                continue
            value = config.lookup_key_recursively(f"differential.{key}", default)
            try:
                params[key] = convert(value)
            except (TypeError, ValueError):
                raise InvalidParameterException(
                    f"differential.{key}", value, f"{convert.__name__} values"
                )
        params.update({key: value for key, value in kwargs.items() if value is not None})
        return cls(**params)

    def _cancelled(self) -> bool:
        return self.should_stop is not None and self.should_stop()

    def collect_samples(self, variant: str, sample_fn: SampleFn) -> list[float]:
        """Draws the timing samples of the variant

        Failed samples (None or NaN) are dropped; the collection stops on cancellation.

        :param variant: tag of the variant
        :param sample_fn: returns one timing sample of the variant
        :return: collected samples (possibly fewer than requested)
        """
        collected: list[float] = []
        for _ in log.progress(range(self.samples), description=f"Sampling {variant}"):
            if self._cancelled():
                log.debug(f"sampling of {variant} cancelled")
                break
            sample = sample_fn(variant)
            if sample is None or math.isnan(sample):
                log.debug(f"failed to collect a sample of {variant}")
                continue
            collected.append(float(sample))
        return collected

    def collect_outcomes(self, variant: str, outcome_fn: OutcomeFn) -> list[ExecutionStatus]:
        """Runs the variant repeatedly for the functional check

        :param variant: tag of the variant
        :param outcome_fn: returns the functional status of one run of the variant
        :return: statuses of the runs (possibly fewer than requested)
        """
        outcomes: list[ExecutionStatus] = []
        for _ in range(self.samples):
            if self._cancelled():
                break
            raw_status = outcome_fn(variant)
            try:
                outcomes.append(ExecutionStatus(raw_status))
            except ValueError:
                log.warn(f"unknown execution status {raw_status!r} of {variant} is ignored")
        return outcomes

    def verdict_from_samples(
        self,
        baseline: str,
        variant: str,
        baseline_samples: Sequence[float],
        variant_samples: Sequence[float],
    ) -> Optional[RegressionVerdict]:
        """Computes the verdict from already collected samples

        :param baseline: tag of the baseline
        :param variant: tag of the variant
        :param baseline_samples: timing samples of the baseline
        :param variant_samples: timing samples of the variant
        :return: verdict, or None if there are not enough samples
        """
        if len(baseline_samples) < self.samples or len(variant_samples) < self.samples:
            log.warn(
                f"insufficient samples for {baseline} -> {variant}"
                f" ({len(baseline_samples)} and {len(variant_samples)} of {self.samples})"
            )
            return None
        t_stat, p_value = stats_kit.welchs_t_test(baseline_samples, variant_samples)
        slowdown = stats_kit.slowdown_factor(baseline_samples, variant_samples)
        verdict = RegressionVerdict(
            baseline=baseline,
            variant=variant,
            slowdown_factor=slowdown,
            t_statistic=t_stat,
            p_value=p_value,
            effect_size=stats_kit.cohens_d(baseline_samples, variant_samples),
            baseline_mean=stats_kit.mean(baseline_samples),
            variant_mean=stats_kit.mean(variant_samples),
            is_regression=p_value < self.significance and slowdown > self.min_slowdown,
        )
        log.debug(verdict.summary())
        return verdict

    def compare(
        self, baseline: str, variant: str, sample_fn: SampleFn
    ) -> Optional[RegressionVerdict]:
        """Samples both variants and compares their timings

        :param baseline: tag of the baseline
        :param variant: tag of the variant
        :param sample_fn: returns one timing sample of the given variant
        :return: verdict, or None if there are not enough samples
        """
        baseline_samples = self.collect_samples(baseline, sample_fn)
        variant_samples = self.collect_samples(variant, sample_fn)
        return self.verdict_from_samples(baseline, variant, baseline_samples, variant_samples)

    def functional_from_outcomes(
        self,
        baseline: str,
        variant: str,
        baseline_outcomes: Sequence[ExecutionStatus],
        variant_outcomes: Sequence[ExecutionStatus],
    ) -> Optional[FunctionalRegression]:
        """Detects the functional regression from already collected outcomes

        :param baseline: tag of the baseline
        :param variant: tag of the variant
        :param baseline_outcomes: statuses of the baseline runs
        :param variant_outcomes: statuses of the variant runs
        :return: functional regression, or None if there is none (or not enough runs)
        """
        if len(baseline_outcomes) < self.samples or len(variant_outcomes) < self.samples:
            return None
        if any(status.is_failure for status in baseline_outcomes):
            return None
        failures = [status for status in variant_outcomes if status.is_failure]
        if not failures:
            return None
        return FunctionalRegression(
            baseline=baseline,
            variant=variant,
            failure_mode=failures[0],
            failing_runs=len(failures),
            total_runs=len(variant_outcomes),
        )

    def check_functional(
        self, baseline: str, variant: str, outcome_fn: OutcomeFn
    ) -> Optional[FunctionalRegression]:
        """Runs both variants and checks whether the variant broke the functionality

        :param baseline: tag of the baseline
        :param variant: tag of the variant
        :param outcome_fn: returns the functional status of one run of the given variant
        :return: functional regression, or None if there is none
        """
        return self.functional_from_outcomes(
            baseline,
            variant,
            self.collect_outcomes(baseline, outcome_fn),
            self.collect_outcomes(variant, outcome_fn),
        )

    def find_regressions(
        self,
        variants: Sequence[str],
        sample_fn: SampleFn,
        outcome_fn: Optional[OutcomeFn] = None,
    ) -> list[Regression]:
        """Compares every consecutive pair of the ordered variants

        Each variant is sampled once and its samples are reused for both pairs it takes part
        in. The functional check of the pair goes first; the statistical check is run only
        if the pair has no functional regression. Regressions are never suppressed across pairs.

        :param variants: ordered tags of the variants (e.g. from the oldest version)
        :param sample_fn: returns one timing sample of the given variant
        :param outcome_fn: returns the functional status of one run of the given variant
        :return: all detected regressions in the order of pairs
        """
        timings: dict[str, list[float]] = {}
        outcomes: dict[str, list[ExecutionStatus]] = {}
        regressions: list[Regression] = []

        for baseline, variant in zip(variants, variants[1:]):
            if outcome_fn is not None:
                for tag in (baseline, variant):
                    if tag not in outcomes:
                        outcomes[tag] = self.collect_outcomes(tag, outcome_fn)
                functional = self.functional_from_outcomes(
                    baseline, variant, outcomes[baseline], outcomes[variant]
                )
                if functional is not None:
                    regressions.append(
                        Regression(
                            RegressionKind.FUNCTIONAL,
                            baseline,
                            variant,
                            functional=functional,
                            confidence=self.score_functional(functional),
                        )
                    )
                    continue

            for tag in (baseline, variant):
                if tag not in timings:
                    timings[tag] = self.collect_samples(tag, sample_fn)
            verdict = self.verdict_from_samples(
                baseline, variant, timings[baseline], timings[variant]
            )
            if verdict is not None and verdict.is_regression:
                regressions.append(
                    Regression(
                        RegressionKind.PERFORMANCE,
                        baseline,
                        variant,
                        verdict=verdict,
                        confidence=self.score_verdict(verdict),
                    )
                )
        return regressions

    def score_verdict(self, verdict: RegressionVerdict) -> ConfidenceScore:
        """Scores the performance regression by its effect size and p-value

        :param verdict: verdict of the comparison
        :return: confidence of the regression
        """
        category = stats_kit.effect_size_category(verdict.effect_size)
        if category == "large":
            evidence = EvidenceStrength.STRONG
        elif category == "medium":
            evidence = EvidenceStrength.MODERATE
        else:
            evidence = EvidenceStrength.WEAK
        reproducibility = (
            Reproducibility.ALWAYS
            if verdict.p_value < self.significance / 10
            else Reproducibility.OFTEN
        )
        return confidence.score(
            self.discovery, reproducibility, evidence, RootCauseClarity.UNCLEAR, self.weights
        )

    def score_functional(self, regression: FunctionalRegression) -> ConfidenceScore:
        """Scores the functional regression by the ratio of failing runs

        :param regression: detected functional regression
        :return: confidence of the regression
        """
        reproducibility = Reproducibility.from_ratio(
            regression.failing_runs / regression.total_runs
        )
        return confidence.score(
            self.discovery,
            reproducibility,
            EvidenceStrength.STRONG,
            RootCauseClarity.LIKELY,
            self.weights,
        )


def compare(
    baseline: str,
    variant: str,
    sample_fn: SampleFn,
    samples: int = DEFAULT_SAMPLES,
    significance: float = DEFAULT_SIGNIFICANCE,
    min_slowdown: float = DEFAULT_MIN_SLOWDOWN,
    **kwargs: Any,
) -> Optional[RegressionVerdict]:
    """Samples both variants and tests them for the performance regression

    :param baseline: tag of the baseline
    :param variant: tag of the variant
    :param sample_fn: returns one timing sample of the given variant
    :param samples: number of samples per variant
    :param significance: significance level alpha
    :param min_slowdown: minimal slowdown tau
    :param kwargs: additional parameters of :class:`DifferentialAnalyzer`
    :return: verdict, or None if there are not enough samples
    """
    analyzer = DifferentialAnalyzer(samples, significance, min_slowdown, **kwargs)
    return analyzer.compare(baseline, variant, sample_fn)
