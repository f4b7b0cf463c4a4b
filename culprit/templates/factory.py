"""
Functions for working with templates
"""

from __future__ import annotations

# Standard Imports
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

# Third-Party Imports
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

# Culprit Imports
from culprit.templates import filters

DEFAULT_FILTERS: dict[str, Callable[..., str]] = {
    "percent": filters.percent,
    "fixed": filters.fixed,
    "code_fence": filters.code_fence,
    "capitalize_label": filters.capitalize_label,
}


def get_environment(**kwargs: Any) -> Environment:
    """Returns Jinja2 environment loading the templates from this directory

    :return: jinja environment with the report filters registered
    """
    env = Environment(
        loader=FileSystemLoader(Path(__file__).parent),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        **kwargs,
    )
    env.filters.update(DEFAULT_FILTERS)
    return env


def get_template(
    template_name: str, extra_filters: Optional[Mapping[str, Callable[..., str]]] = None
) -> Template:
    """Loads jinja2 template from the templates directory

    We use the FileSystemLoader with absolute path, so the templates are found both in the
    editable and in the classic installation.

    :param template_name: name of the template file
    :param extra_filters: additional filters registered for the template
    :return: loaded template from culprit/templates directory
    """
    env = get_environment()
    for filter_name, filter_func in (extra_filters or {}).items():
        env.filters[filter_name] = filter_func
    return env.get_template(template_name)


def render(template_name: str, **context: Any) -> str:
    """
    :param template_name: name of the template file
    :param context: variables passed to the template
    :return: rendered template
    """
    return get_template(template_name).render(**context)
