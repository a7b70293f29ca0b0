from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import pytest

from tests._fixtures.clock import FIXED_NOW
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def fixed_clock():
    """Clock returning a constant instant so timestamps are predictable."""
    return lambda: FIXED_NOW


@pytest.fixture
def missing_git_runner():
    """Runner behaving like git outside of a repository."""

    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(
            128,
            list(args),
            output="",
            stderr="fatal: not a git repository (or any of the parent directories): .git\n",
        )

    return runner


@pytest.fixture
def git_runner():
    """Runner returning canned answers for the three revision queries."""

    answers = {
        ("git", "rev-parse", "--short", "HEAD"): "a1b2c3d\n",
        ("git", "log", "-1", "--format=%ci"): "2025-12-20 10:11:12 +0000\n",
        ("git", "rev-parse", "--abbrev-ref", "HEAD"): "main\n",
    }

    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        return answers[tuple(args)]

    return runner


@pytest.fixture(autouse=True)
def _reset_ecodocs_logger():
    """Undo configure_logging() side effects so caplog sees every record."""
    yield
    logger = logging.getLogger("ecodocs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
