"""Configuration management with Pydantic validation."""

from k8s_app_monitor.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    MonitorConfig,
    load_config,
)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "MonitorConfig",
    "load_config",
]
