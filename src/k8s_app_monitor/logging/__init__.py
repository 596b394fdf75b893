"""Logging configuration for k8s_app_monitor."""

from k8s_app_monitor.logging.config import configure_logging, console_level

__all__ = ["configure_logging", "console_level"]
