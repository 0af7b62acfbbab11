"""
Shared fixtures for pinreqs tests.
"""

import logging
import subprocess
from unittest.mock import patch

import pytest

from pinreqs import cli_config, error_handling
from pinreqs.structured_logging import ROOT_LOGGER_NAME

SAMPLE_FREEZE_OUTPUT = "Flask==2.3.2\nrequests==2.31.0\nunrelated==1.0\n"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test from an empty working directory with a clean config."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.chdir(workdir)
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "PINREQS_LOG_LEVEL",
        "PINREQS_PACKAGE_MANAGER",
        "PINREQS_SOURCE_SUFFIX",
    ):
        monkeypatch.delenv(var, raising=False)

    cli_config.reset_config()
    error_handling.setup_error_handling()

    yield workdir

    cli_config.reset_config()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir(tmp_path):
    """Scratch directory separate from the working directory."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def sample_project(temp_dir):
    """A small source tree with top-level and nested imports."""
    project = temp_dir / "project"
    (project / "pkg" / "sub").mkdir(parents=True)

    (project / "app.py").write_text("import requests\nfrom flask import Flask\n")
    (project / "pkg" / "__init__.py").write_text("")
    (project / "pkg" / "sub" / "frames.py").write_text(
        "import os\nfrom pandas.core import frame\n"
    )
    (project / "README.md").write_text("import numpy\n")

    return project


@pytest.fixture
def completed_process():
    """Build a CompletedProcess like the one subprocess.run returns."""

    def _build(stdout="", returncode=0, stderr=""):
        return subprocess.CompletedProcess(
            args=["pip", "freeze"],
            returncode=returncode,
            stdout=stdout.encode("utf-8"),
            stderr=stderr.encode("utf-8"),
        )

    return _build


@pytest.fixture
def mock_pip_freeze(completed_process):
    """Patch the package manager call to return a fixed listing."""
    with patch("pinreqs.package_lister.subprocess.run") as mock_run:
        mock_run.return_value = completed_process(SAMPLE_FREEZE_OUTPUT)
        yield mock_run
