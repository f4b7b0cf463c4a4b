"""Confidence model aggregating four evidence axes into a single normalized score.

Every automated finding (minimized reproducer, bisection boundary, detected regression) is
scored along the following axes:

  1. **discovery method**: how was the finding discovered (property testing, fuzzing, ...)
  2. **reproducibility**: how often does the finding reproduce
  3. **evidence strength**: how strong is the quantitative evidence
  4. **root-cause clarity**: how clear is the cause of the finding

The overall score is the weighted sum of the axis levels, clamped to [0, 1], and is mapped to
the priority tier by a simple step function. The weight vector is a configuration: the
``weighted`` scheme (0.30/0.30/0.25/0.15) and the ``equal`` scheme (0.25 each) are available
by name, and arbitrary vectors can be set by the ``confidence.weights`` key.

The :func:`score` function is pure; it never performs I/O and never raises.
"""

from __future__ import annotations

# Standard Imports
import math
from typing import Any, Optional, Sequence, Union

# Third-Party Imports

# Culprit Imports
from culprit.logic import config
from culprit.utils import log
from culprit.utils.exceptions import InvalidParameterException, UnsupportedModuleException
from culprit.utils.structs.confidence_structs import (
    ConfidenceScore,
    ConfidenceWeights,
    DiscoveryMethod,
    EvidenceStrength,
    Priority,
    Reproducibility,
    RootCauseClarity,
    WEIGHT_SCHEMES,
    WEIGHTED_SCHEME,
)

AxisLevel = Union[DiscoveryMethod, Reproducibility, EvidenceStrength, RootCauseClarity, float]

AXIS_NAMES: tuple[str, str, str, str] = (
    "Discovery Method",
    "Reproducibility",
    "Evidence",
    "Root Cause",
)


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Clamps the value into the [lower, upper] interval; NaN is clamped to lower

    :param value: clamped value
    :param lower: lower bound of the interval
    :param upper: upper bound of the interval
    :return: clamped value
    """
    if math.isnan(value):
        return lower
    return max(lower, min(value, upper))


def _axis_value(level: AxisLevel) -> tuple[float, str]:
    """Converts the axis level (or a raw number) into its weight and label

    :param level: level of the axis, or a raw weight
    :return: weight in [0, 1] and the label of the level
    """
    if isinstance(level, (DiscoveryMethod, Reproducibility, EvidenceStrength, RootCauseClarity)):
        return level.weight, level.label
    value = clamp(float(level))
    return value, f"{value:.2f}"


def score(
    discovery: AxisLevel,
    reproducibility: AxisLevel,
    evidence: AxisLevel,
    clarity: AxisLevel,
    weights: Optional[ConfidenceWeights] = None,
) -> ConfidenceScore:
    """Aggregates the four evidence axes into the confidence score

    :param discovery: discovery method (or a raw weight, which is clamped to [0, 1])
    :param reproducibility: reproducibility level (or a raw weight)
    :param evidence: evidence strength (or a raw weight)
    :param clarity: root-cause clarity (or a raw weight)
    :param weights: weight vector of the axes; the weighted scheme is used if not given
    :return: confidence score with priority, labels and human validation flag
    """
    weights = weights or WEIGHTED_SCHEME
    axes = [_axis_value(level) for level in (discovery, reproducibility, evidence, clarity)]
    overall = clamp(
        sum(axis_weight * value for axis_weight, (value, _) in zip(weights.as_tuple(), axes))
    )
    contributions = tuple(
        f"{name}: {label} (weight: {value:.2f} x {axis_weight:.2f})"
        for name, (value, label), axis_weight in zip(AXIS_NAMES, axes, weights.as_tuple())
    )
    return ConfidenceScore(
        overall=overall,
        discovery=axes[0][0],
        reproducibility=axes[1][0],
        evidence=axes[2][0],
        clarity=axes[3][0],
        weights=weights,
        contributions=contributions,
        priority=Priority.from_score(overall),
    )


def parse_weights(weights: Union[str, Sequence[Any], ConfidenceWeights]) -> ConfidenceWeights:
    """Parses the weight vector from the scheme name or the sequence of four numbers

    :param weights: name of the scheme (weighted, equal), comma separated string or sequence
    :return: parsed weight vector
    :raises UnsupportedModuleException: when the scheme name is unknown
    :raises InvalidParameterException: when the vector is not four numbers
    """
    if isinstance(weights, ConfidenceWeights):
        return weights
    if isinstance(weights, str):
        if weights.strip().lower() in WEIGHT_SCHEMES:
            return WEIGHT_SCHEMES[weights.strip().lower()]
        if "," not in weights:
            raise UnsupportedModuleException(weights)
        weights = weights.split(",")
    try:
        values = [float(weight) for weight in weights]
    except (TypeError, ValueError):
        raise InvalidParameterException(
            "confidence.weights", weights, "four comma separated numbers"
        )
    if len(values) != 4:
        raise InvalidParameterException("confidence.weights", weights, "exactly four weights")
    return ConfidenceWeights(*values)


def weights_from_config() -> ConfidenceWeights:
    """Looks up the weight vector in the ``confidence.weights`` key

    Invalid configuration is reported and the weighted scheme is used instead.

    :return: configured weight vector
    """
    configured = config.lookup_key_recursively("confidence.weights", "weighted")
    try:
        return parse_weights(configured)
    except (InvalidParameterException, UnsupportedModuleException) as exc:
        log.warn(f"{exc}; using the 'weighted' scheme instead")
        return WEIGHTED_SCHEME


def discovery_from_config() -> DiscoveryMethod:
    """Looks up the default discovery method in the ``confidence.discovery_method`` key

    :return: configured discovery method (fuzzing if not configured or invalid)
    """
    configured = config.lookup_key_recursively("confidence.discovery_method", "fuzzing")
    try:
        return DiscoveryMethod(str(configured).strip().lower())
    except ValueError:
        log.warn(
            f"Unknown discovery method: {configured}. Using 'fuzzing' instead. "
            f"Please choose one of ({', '.join(DiscoveryMethod.supported())})."
        )
        return DiscoveryMethod.FUZZING
