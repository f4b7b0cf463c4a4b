"""Collection of the special exceptions raised by culprit

The search and statistics algorithms themselves never raise for any behavior of the oracle;
the exceptions here guard the configuration of the algorithms and the outer command layer.
"""

from __future__ import annotations

# Standard Imports
from typing import Any

# Third-Party Imports

# Culprit Imports


class CulpritException(Exception):
    """Base class for all culprit exceptions"""


class InvalidParameterException(CulpritException):
    """Raises when the given parameter is not in the range of supported values"""

    def __init__(self, parameter: str, parameter_value: Any, choices_msg: str = "") -> None:
        """
        :param parameter: name of the parameter that is invalid
        :param parameter_value: value of the parameter
        :param choices_msg: string with the supported values or the expected range
        """
        super().__init__("")
        self.parameter = parameter
        self.value = str(parameter_value)
        self.choices_msg = choices_msg

    def __str__(self) -> str:
        return (
            f"Invalid value '{self.value}' for the parameter '{self.parameter}'"
            + (f": only {self.choices_msg} are supported" if self.choices_msg else "")
        )


class UnsupportedModuleException(CulpritException):
    """Raises when the given unit kind, scheme or other module is not supported"""

    def __init__(self, module: str) -> None:
        """
        :param module: name of the module that is not supported
        """
        super().__init__("")
        self.module = module

    def __str__(self) -> str:
        return f"Module '{self.module}' is not supported"


class ExternalCommandException(CulpritException):
    """Raises when the external command wrapped into an oracle cannot be run at all"""

    def __init__(self, command: str, reason: str) -> None:
        """
        :param command: command that could not be run
        :param reason: reason of the failure
        """
        super().__init__("")
        self.command = command
        self.reason = reason

    def __str__(self) -> str:
        return f"Could not run '{self.command}': {self.reason}"
