"""Shared fixtures of the culprit tests"""

from __future__ import annotations

# Standard Imports
from pathlib import Path
import sys
import textwrap

# Third-Party Imports
import pytest

# Culprit Imports
from culprit.utils import decorators, log


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Points the shared config into the temporary directory and drops the cached configs"""
    monkeypatch.setenv("CULPRIT_CONFIG", str(tmp_path / "culprit-config.yml"))
    decorators.reset_singletons()
    log.set_verbosity(log.VERBOSE_RELEASE)
    log.CURRENT_INDENT = 0
    yield
    decorators.reset_singletons()
    log.set_verbosity(log.VERBOSE_RELEASE)
    log.CURRENT_INDENT = 0


@pytest.fixture
def cleandir(tmp_path, monkeypatch):
    """Runs the test in the empty temporary directory"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def script_factory(tmp_path):
    """Creates the python script in temporary directory and returns the command running it"""

    def create_script(name: str, source: str) -> str:
        script_path = Path(tmp_path) / name
        script_path.write_text(textwrap.dedent(source))
        return f'"{sys.executable}" "{script_path}"'

    return create_script
