"""Functions for loading and working with streams (e.g. yaml or json)

Configuration is stored in yaml, while the result records produced by the algorithms are
rendered to json. This module encapsulates such functions, so they can be used in CLI, in tests,
and in configs.
"""

from __future__ import annotations

# Standard Imports
import dataclasses
import enum
import json
import os
from typing import Any, TextIO

# Third-Party Imports
from ruamel.yaml import YAML

# Culprit Imports
from culprit.utils import log


def safely_load_yaml_from_file(yaml_file: str) -> dict[Any, Any]:
    """
    :param yaml_file: name of the yaml file
    :return: loaded yaml as dictionary, or empty dictionary if the file does not exist
    """
    if not os.path.exists(yaml_file):
        log.debug(f"yaml source file '{yaml_file}' does not exist")
        return {}

    with open(yaml_file, "r") as yaml_handle:
        return safely_load_yaml_from_stream(yaml_handle)


def safely_load_yaml_from_stream(yaml_stream: TextIO | str) -> dict[Any, Any]:
    """
    :param yaml_stream: stream in the yaml format (or not)
    :return: loaded yaml as dictionary, or empty dictionary if the stream is malformed
    """
    # Remove the trailing double quotes screwing correct loading of yaml
    if isinstance(yaml_stream, str) and yaml_stream[:1] == '"' and yaml_stream[-1:] == '"':
        yaml_stream = yaml_stream[1:-1]
    try:
        loaded_yaml = YAML(typ="safe").load(yaml_stream)
    except Exception as exc:
        log.warn(f"malformed yaml stream: {exc}")
        return {}
    if not isinstance(loaded_yaml, dict):
        return {}
    return loaded_yaml


def _to_serializable(value: Any) -> Any:
    """Converts the value into something json can digest

    :param value: converted value
    :return: json serializable value
    """
    if isinstance(value, enum.Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: _to_serializable(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {str(key): _to_serializable(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_serializable(item) for item in value]
    return value


def record_to_json(record: Any) -> str:
    """Renders the (possibly nested) result record to json

    :param record: dataclass record (e.g. MinimizationResult), or list of records
    :return: json string
    """
    return json.dumps(_to_serializable(record), indent=2)
