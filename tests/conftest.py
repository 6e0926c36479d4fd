"""Shared pytest fixtures for kube_hello tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from kube_hello.cli.main import app
from kube_hello.logging.config import configure_logging


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
version: "1.0"
environment: test
plugins:
  hello:
    namespace: from-config
"""
    )
    return config_path


@pytest.fixture
def mock_config() -> dict[str, object]:
    """Provide a mock configuration dictionary."""
    return {
        "version": "1.0",
        "environment": "test",
        "debug": True,
        "plugins": {
            "hello": {"namespace": "team-a"},
        },
    }


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate each test from the user's environment.

    Clears KHELLO_ variables, points KUBECONFIG at a missing file and keeps
    configuration and log files inside the test's temporary directory.
    """
    for key in list(os.environ.keys()):
        if key.startswith("KHELLO_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("KUBECONFIG", str(tmp_path / "missing-kubeconfig"))
    monkeypatch.setattr("kube_hello.core.config.models.CONFIG_FILE", tmp_path / "no-config.yaml")
    monkeypatch.setattr("kube_hello.logging.config.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr("kube_hello.logging.config.LOG_FILE", tmp_path / "logs" / "khello.log")


@pytest.fixture(autouse=True, scope="session")
def configure_test_logging() -> None:
    """Route structlog through stdlib logging so log lines never reach stdout."""
    with patch("kube_hello.logging.config._setup_file_logging", return_value=None):
        configure_logging()


@pytest.fixture(autouse=True)
def reset_root_logger() -> Generator[None]:
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers


@pytest.fixture
def capture_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Fixture to capture log output."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app
