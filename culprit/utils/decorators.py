"""Set of useful decorators used across culprit"""

from __future__ import annotations

# Standard Imports
import functools
from typing import Any, Callable, TypeVar

# Third-Party Imports

# Culprit Imports

T = TypeVar("T")

registered_singletons: list[Callable[..., Any]] = []


def singleton(func: Callable[[], T]) -> Callable[[], T]:
    """Wraps the function without arguments, so it is evaluated only once

    The cached value can be dropped by :func:`reset_singletons` (e.g. in tests).

    :param func: decorated function without arguments
    :return: decorated function returning always the same value
    """
    cache: dict[str, T] = {}

    @functools.wraps(func)
    def wrapper() -> T:
        if "value" not in cache:
            cache["value"] = func()
        return cache["value"]

    wrapper.cache = cache  # type: ignore[attr-defined]
    registered_singletons.append(wrapper)
    return wrapper


def reset_singletons() -> None:
    """Drops all values cached by :func:`singleton`"""
    for func in registered_singletons:
        func.cache.clear()  # type: ignore[attr-defined]
