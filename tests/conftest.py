"""
Global pytest configuration and fixtures.
"""

import os

import pytest

from konfig import system
from konfig.environment import _reset_current_environment
from konfig.identity import NaisProperty, _reset_current_identity

PROCESS_ENV_VARS = [prop.value for prop in NaisProperty] + [
    system.OPTS_ENV_VAR,
    "KONFIG_PROFILES",
    "KONFIG_RESOURCE_DIR",
]


@pytest.fixture(autouse=True)
def isolate_process_state():
    """Give every test a clean process-wide state.

    Clears the system properties store and the memoized identity/environment,
    and hides NAIS/konfig variables that may be set on the machine running
    the tests.
    """
    saved = {name: os.environ.pop(name) for name in PROCESS_ENV_VARS if name in os.environ}
    system.reset()
    _reset_current_identity()
    _reset_current_environment()
    yield
    system.reset()
    _reset_current_identity()
    _reset_current_environment()
    for name in PROCESS_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)


@pytest.fixture
def write_properties(tmp_path):
    """Write a properties file into tmp_path and return its path."""

    def _write(name: str, content: str):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
