# type: ignore
import logging
import os

import pytest

# Read no user configuration, this must be set before spdxtv modules load it
os.environ["SPDXTV_CONFIG"] = "/dev/null"

import spdxtv.log  # noqa: E402
from spdxtv.config import Config  # noqa: E402
from spdxtv.licence import LicenceList  # noqa: E402


def init_testsuite_env():
    """Initialize testsuite environment."""
    # Activate full debug logs
    spdxtv.log.activate(level=logging.DEBUG)

    # Force UTC timezone
    os.environ["TZ"] = "UTC"


init_testsuite_env()


@pytest.fixture(autouse=True)
def env_protect(tmp_path, monkeypatch):
    """Run each test in its own directory with a fresh configuration."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SPDXTV_CONFIG", "/dev/null")
    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def registry():
    """A licence list holding the identifiers used by the tests."""
    return LicenceList(
        ["Apache-2.0", "GPL-2.0", "LGPL-2.0", "MIT", "BSD-3-Clause", "MPL-1.1"]
    )
