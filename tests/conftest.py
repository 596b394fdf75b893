"""Shared pytest fixtures for k8s_app_monitor tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from io import StringIO
from pathlib import Path

import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

from k8s_app_monitor.cli.main import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Reset K8S_MONITOR_ variables and keep config/log files out of $HOME."""
    for key in list(os.environ.keys()):
        if key.startswith("K8S_MONITOR_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(
        "k8s_app_monitor.core.config.models.CONFIG_FILE", tmp_path / "missing.yaml"
    )
    monkeypatch.setattr("k8s_app_monitor.logging.config.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(
        "k8s_app_monitor.logging.config.LOG_FILE", tmp_path / "logs" / "monitor.log"
    )


@pytest.fixture(autouse=True)
def reset_root_handlers() -> Generator[None]:
    """Drop handlers configure_logging adds to the root logger during a test."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def capture_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Fixture to capture log output."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def console() -> Console:
    """Wide recording console; read output with ``console.export_text()``."""
    return Console(file=StringIO(), width=200, record=True)

