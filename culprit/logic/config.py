"""Config is a simple layered key-value storage of the culprit settings.

There are two layers of the configuration:

  1. **runtime**: temporary configuration, which lives only during one run of the process;
     it is filled e.g. by the ``-c key=value`` options of CLI or by tests.
  2. **shared**: user-wide configuration loaded from the yaml file specified by the
     ``CULPRIT_CONFIG`` environment variable or ``~/.config/culprit/config.yml``.

The keys are dotted paths into nested dictionaries (e.g. ``differential.samples``). Lookups
walk the runtime configuration first and then the shared one. The algorithms themselves
never consult the configuration; only their callers (CLI, factory helpers) do.
"""

from __future__ import annotations

# Standard Imports
import dataclasses
import os
from typing import Any

# Third-Party Imports
from ruamel.yaml import YAML

# Culprit Imports
from culprit.utils import decorators, log, streams
from culprit.utils.exceptions import InvalidParameterException

DEFAULT_CONFIG_PATH: str = os.path.join("~", ".config", "culprit", "config.yml")


@dataclasses.dataclass
class Config:
    """Config represents one layer of the configuration

    :ivar type: type of the config (runtime or shared)
    :ivar path: path to the file, where the config is stored (empty for runtime)
    :ivar data: nested dictionary of the stored keys
    """

    type: str
    path: str = ""
    data: dict[str, Any] = dataclasses.field(default_factory=dict)

    def set(self, key: str, value: Any) -> None:
        """Sets the value of the dotted key, creating the intermediate sections

        :param key: dotted key, e.g. ``confidence.weights``
        :param value: value of the key
        """
        *sections, last = key.split(".")
        section = self.data
        for section_key in sections:
            section = section.setdefault(section_key, {})
        section[last] = value

    def get(self, key: str) -> Any:
        """Returns the value of the dotted key

        :param key: dotted key
        :return: value of the key
        :raises KeyError: when the key is not present in the config
        """
        value: Any = self.data
        for section_key in key.split("."):
            if not isinstance(value, dict):
                raise KeyError(key)
            value = value[section_key]
        return value

    def safe_get(self, key: str, default: Any = None) -> Any:
        """Returns the value of the dotted key, or default, if it is not present

        :param key: dotted key
        :param default: returned value if the key is missing
        :return: value of the key or default
        """
        try:
            return self.get(key)
        except KeyError:
            return default


@decorators.singleton
def runtime() -> Config:
    """Returns the runtime configuration, which is kept in memory for the run of the process

    :return: runtime config
    """
    return Config("runtime")


@decorators.singleton
def shared() -> Config:
    """Returns the shared user configuration loaded from the yaml file

    :return: shared config
    """
    path = os.path.expanduser(os.environ.get("CULPRIT_CONFIG", DEFAULT_CONFIG_PATH))
    return Config("shared", path, streams.safely_load_yaml_from_file(path))


def lookup_key_recursively(key: str, default: Any = None) -> Any:
    """Looks up the key first in runtime and then in shared config

    :param key: dotted key
    :param default: returned value if no layer contains the key
    :return: value of the key in the closest layer or default
    """
    for config_layer in (runtime(), shared()):
        try:
            return config_layer.get(key)
        except KeyError:
            continue
    return default


def set_from_option(option: str) -> None:
    """Sets the runtime key from the option in form ``key=value``

    The value is parsed as yaml, so ``-c differential.samples=10`` sets an integer and
    ``-c confidence.weights=[0.4,0.3,0.2,0.1]`` sets a list.

    :param option: option in form ``key=value``
    :raises InvalidParameterException: when the option is not in the ``key=value`` form
    """
    key, sep, raw_value = option.partition("=")
    if not sep or not key.strip():
        raise InvalidParameterException("config option", option, "options in form 'key=value'")
    value = YAML(typ="safe").load(raw_value) if raw_value.strip() else ""
    log.debug(f"setting runtime config {key.strip()}={value!r}")
    runtime().set(key.strip(), value)
