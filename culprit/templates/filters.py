"""
Filters contain custom filters for working with jinja2
"""

from __future__ import annotations

# Standard Imports
import math

# Third-Party Imports

# Culprit Imports


def percent(value: float, precision: int = 1) -> str:
    """Formats the ratio as percents

    :param value: ratio, e.g. 0.25
    :param precision: number of decimal places
    :return: formatted percents, e.g. 25.0%
    """
    return f"{value * 100:.{precision}f}%"


def fixed(value: float, precision: int = 2) -> str:
    """Formats the float with fixed precision; infinities and NaN are kept readable

    :param value: formatted number
    :param precision: number of decimal places
    :return: formatted number
    """
    if math.isnan(value):
        return "n/a"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:.{precision}f}"


def code_fence(value: str) -> str:
    """Wraps the text into markdown code block, longer fence than any backtick run inside

    :param value: text of the block
    :return: fenced code block
    """
    longest, current = 0, 0
    for char in value:
        current = current + 1 if char == "`" else 0
        longest = max(longest, current)
    fence = "`" * max(3, longest + 1)
    body = value if value.endswith("\n") else value + "\n"
    return f"{fence}\n{body}{fence}"


def capitalize_label(value: str) -> str:
    """Turns the enum value (e.g. wrong-output) into the label (e.g. Wrong output)"""
    return str(value).replace("-", " ").replace("_", " ").capitalize()
