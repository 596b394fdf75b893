"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import pytest

from k8s_app_monitor.logging.config import (
    RETENTION_DAYS,
    _file_handler,
    _prune_rotated_logs,
    configure_logging,
    console_level,
)


def _age(path: Path, days: int) -> None:
    old_time = (datetime.now() - timedelta(days=days)).timestamp()
    os.utime(path, (old_time, old_time))


def _console_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]


def _file_handlers() -> list[RotatingFileHandler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]


@pytest.mark.unit
class TestPruneRotatedLogs:
    """Tests for _prune_rotated_logs."""

    def test_returns_early_when_log_dir_missing(self, tmp_path: Path) -> None:
        """A missing directory is not an error."""
        with patch("k8s_app_monitor.logging.config.LOG_DIR", tmp_path / "nonexistent"):
            _prune_rotated_logs()

    def test_deletes_only_old_monitor_logs(self, tmp_path: Path) -> None:
        """Old rotated monitor logs go; recent ones and other files stay."""
        old = tmp_path / "monitor.log.1"
        recent = tmp_path / "monitor.log"
        unrelated = tmp_path / "notes.txt"
        for path in (old, recent, unrelated):
            path.write_text("data")
        _age(old, RETENTION_DAYS + 5)
        _age(unrelated, RETENTION_DAYS + 5)

        with patch("k8s_app_monitor.logging.config.LOG_DIR", tmp_path):
            _prune_rotated_logs()

        assert not old.exists()
        assert recent.exists()
        assert unrelated.exists()

    def test_ignores_os_errors(self, tmp_path: Path) -> None:
        """Unlink failures are ignored."""
        old = tmp_path / "monitor.log.2"
        old.write_text("data")
        _age(old, RETENTION_DAYS + 5)

        with (
            patch("k8s_app_monitor.logging.config.LOG_DIR", tmp_path),
            patch.object(Path, "unlink", side_effect=OSError("permission denied")),
        ):
            _prune_rotated_logs()

        assert old.exists()


@pytest.mark.unit
class TestFileHandler:
    """Tests for the rotating JSON file handler."""

    def test_builds_rotating_handler(self, tmp_path: Path) -> None:
        """The handler writes to LOG_FILE, creating its directory."""
        log_file = tmp_path / "state" / "monitor.log"
        with (
            patch("k8s_app_monitor.logging.config.LOG_DIR", tmp_path / "state"),
            patch("k8s_app_monitor.logging.config.LOG_FILE", log_file),
        ):
            handler = _file_handler()

        assert handler is not None
        try:
            assert handler.baseFilename == str(log_file)
            assert handler.level == logging.DEBUG
            assert (tmp_path / "state").is_dir()
        finally:
            handler.close()

    def test_unwritable_dir_gives_none(self, tmp_path: Path) -> None:
        """If the directory cannot be created there is no file handler."""
        with (
            patch("k8s_app_monitor.logging.config.LOG_DIR", tmp_path / "x"),
            patch.object(Path, "mkdir", side_effect=OSError("read-only")),
        ):
            assert _file_handler() is None


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.parametrize(
        ("verbose", "debug", "level"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.INFO),
            (False, True, logging.DEBUG),
            (True, True, logging.DEBUG),
        ],
    )
    def test_console_level(self, verbose: bool, debug: bool, level: int) -> None:
        """The console handler level follows the flags."""
        assert console_level(verbose, debug) == level

        configure_logging(verbose=verbose, debug=debug)

        assert _console_handlers()[-1].level == level

    def test_console_goes_to_stderr(self) -> None:
        """The dashboard owns stdout, so logs go to stderr."""
        configure_logging()

        assert _console_handlers()[-1].stream is sys.stderr

    def test_file_log_installed(self) -> None:
        """A JSON file log is attached alongside the console."""
        configure_logging()

        assert len(_file_handlers()) == 1

    def test_reconfigure_replaces_handlers(self) -> None:
        """A second call does not stack handlers."""
        configure_logging()
        configure_logging(debug=True)

        assert len(_console_handlers()) == 1
        assert len(_file_handlers()) == 1
        assert _console_handlers()[0].level == logging.DEBUG

    def test_quiet_third_party_loggers(self) -> None:
        """kubernetes and urllib3 are capped at WARNING."""
        configure_logging(debug=True)

        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("kubernetes").level == logging.WARNING
