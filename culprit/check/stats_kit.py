"""Statistical helpers for the comparison of two sets of samples.

All functions are free functions over sequences of floats, independent of the rest of the
system. The Welch's t-test itself is delegated to scipy, the degenerate inputs are handled
here.
"""

from __future__ import annotations

# Standard Imports
import math
import statistics
from typing import Sequence

# Third-Party Imports
from scipy import stats

# Culprit Imports


def mean(samples: Sequence[float]) -> float:
    """
    :param samples: sequence of samples
    :return: arithmetic mean of the samples, 0 for no samples
    """
    return statistics.fmean(samples) if samples else 0.0


def variance(samples: Sequence[float]) -> float:
    """
    :param samples: sequence of samples
    :return: unbiased sample variance, 0 for less than two samples
    """
    return statistics.variance(samples) if len(samples) >= 2 else 0.0


def welchs_t_test(sample1: Sequence[float], sample2: Sequence[float]) -> tuple[float, float]:
    """Two-sided two-sample t-test without the assumption of equal variances

    Degenerate inputs are handled without raising: less than two samples in either set
    yields (0, 1); zero variance in both sets yields (0, 1) for equal means and an infinite
    statistic with zero p-value otherwise.

    :param sample1: first set of samples (e.g. baseline)
    :param sample2: second set of samples (e.g. variant)
    :return: t statistic and two-sided p-value
    """
    n1, n2 = len(sample1), len(sample2)
    if n1 < 2 or n2 < 2:
        return 0.0, 1.0
    mean1, mean2 = mean(sample1), mean(sample2)
    var1, var2 = variance(sample1) / n1, variance(sample2) / n2
    standard_error_sq = var1 + var2
    if standard_error_sq == 0.0:
        if mean1 == mean2:
            return 0.0, 1.0
        return math.copysign(math.inf, mean1 - mean2), 0.0

    t_stat, p_value = stats.ttest_ind(sample1, sample2, equal_var=False)
    return float(t_stat), min(float(p_value), 1.0)


def cohens_d(sample1: Sequence[float], sample2: Sequence[float]) -> float:
    """Standardized difference of the means using the pooled standard deviation

    The pooled deviation weights the variances by the degrees of freedom, so it works for
    sets of unequal sizes. The sign is positive when the second set has the higher mean.

    :param sample1: first set of samples (e.g. baseline)
    :param sample2: second set of samples (e.g. variant)
    :return: Cohen's d, 0 if there is no variance
    """
    n1, n2 = len(sample1), len(sample2)
    if n1 + n2 <= 2:
        return 0.0
    pooled_var = ((n1 - 1) * variance(sample1) + (n2 - 1) * variance(sample2)) / (n1 + n2 - 2)
    if pooled_var <= 0.0:
        return 0.0
    return (mean(sample2) - mean(sample1)) / math.sqrt(pooled_var)


def effect_size_category(effect_size: float) -> str:
    """Classifies the Cohen's d by the conventional thresholds

    :param effect_size: Cohen's d
    :return: one of negligible, small, medium, large
    """
    magnitude = abs(effect_size)
    if magnitude > 0.8:
        return "large"
    if magnitude > 0.5:
        return "medium"
    if magnitude > 0.2:
        return "small"
    return "negligible"


def slowdown_factor(baseline: Sequence[float], variant: Sequence[float]) -> float:
    """
    :param baseline: samples of the baseline
    :param variant: samples of the variant
    :return: mean(variant) / mean(baseline); infinity for zero baseline and non-zero variant
    """
    baseline_mean, variant_mean = mean(baseline), mean(variant)
    if baseline_mean == 0.0:
        return 1.0 if variant_mean == 0.0 else math.inf
    return variant_mean / baseline_mean
