"""Monitor configuration models and loading.

Settings are layered, lowest precedence first: model defaults, the YAML
config file, ``K8S_MONITOR_*`` environment variables, then command-line
flags. Every layer is validated together by ``MonitorConfig``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from k8s_app_monitor.integrations.kubernetes.config import ClusterConfig
from k8s_app_monitor.services.monitor.sections import ExtraSection

logger = structlog.get_logger()

CONFIG_DIR = Path.home() / ".config" / "k8s-monitor"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_NAMESPACE = "ml-ops"
DEFAULT_APPS = ["mlflow"]
MAX_LOG_TAIL_LINES = 1000


class MonitorConfig(BaseModel):
    """Everything one dashboard run needs.

    Example config file::

        namespace: ml-ops
        refresh_interval: 15
        apps: [mlflow, jupyterhub]
        extra_sections: [replicasets, ingresses]
        cluster:
          context: staging
          request_timeout: 5
    """

    model_config = ConfigDict(extra="forbid")

    namespace: str = DEFAULT_NAMESPACE
    refresh_interval: int = 10
    apps: list[str] = Field(default_factory=lambda: list(DEFAULT_APPS))
    log_tail_lines: int = 10
    event_limit: int = 5
    extra_sections: list[ExtraSection] = Field(default_factory=list)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Validate namespace is non-blank."""
        v = v.strip()
        if not v:
            raise ValueError("namespace must not be empty")
        return v

    @field_validator("refresh_interval")
    @classmethod
    def validate_refresh_interval(cls, v: int) -> int:
        """Validate refresh interval is a positive number of seconds."""
        if v <= 0:
            raise ValueError("refresh_interval must be a positive integer")
        return v

    @field_validator("apps", mode="before")
    @classmethod
    def validate_apps(cls, v: Any) -> Any:
        """Accept a comma-separated string; drop blanks and duplicates."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list | tuple):
            seen: list[str] = []
            for app in v:
                app = str(app).strip()
                if app and app not in seen:
                    seen.append(app)
            if not seen:
                raise ValueError("at least one application name is required")
            return seen
        return v

    @field_validator("log_tail_lines")
    @classmethod
    def validate_log_tail_lines(cls, v: int) -> int:
        """Validate log tail length."""
        if not 1 <= v <= MAX_LOG_TAIL_LINES:
            raise ValueError(f"log_tail_lines must be between 1 and {MAX_LOG_TAIL_LINES}")
        return v

    @field_validator("event_limit")
    @classmethod
    def validate_event_limit(cls, v: int) -> int:
        """Validate event limit."""
        if v < 1:
            raise ValueError("event_limit must be at least 1")
        return v

    @classmethod
    def env_overrides(cls) -> dict[str, Any]:
        """Collect monitor settings from the environment.

        Supported environment variables:
            K8S_MONITOR_NAMESPACE: target namespace
            K8S_MONITOR_REFRESH: refresh interval in seconds
            K8S_MONITOR_APPS: comma-separated application names
        Cluster variables are read by ``ClusterConfig.env_overrides``.
        """
        overrides: dict[str, Any] = {}
        if namespace := os.environ.get("K8S_MONITOR_NAMESPACE"):
            overrides["namespace"] = namespace
        if refresh := os.environ.get("K8S_MONITOR_REFRESH"):
            overrides["refresh_interval"] = refresh
        if apps := os.environ.get("K8S_MONITOR_APPS"):
            overrides["apps"] = apps
        if cluster := ClusterConfig.env_overrides():
            overrides["cluster"] = cluster
        return overrides


def _merge(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in layer.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_config_file(path: Path) -> dict[str, Any]:
    with path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> MonitorConfig:
    """Load configuration from file, environment and explicit overrides.

    Args:
        path: Config file path. Defaults to ``CONFIG_FILE``; a missing default
            file is fine, a missing explicit file is an error.
        overrides: Highest-precedence values, typically from CLI flags.
            ``None`` values are ignored.

    Returns:
        Validated MonitorConfig.

    Raises:
        FileNotFoundError: If an explicit ``path`` does not exist.
        ValueError: If the file is not a YAML mapping.
        yaml.YAMLError: If the file is not valid YAML.
        pydantic.ValidationError: If the merged values are invalid.
    """
    data: dict[str, Any] = {}
    config_path = path or CONFIG_FILE
    if config_path.exists():
        data = _read_config_file(config_path)
        logger.debug("config_file_loaded", path=str(config_path))
    elif path is not None:
        raise FileNotFoundError(f"Config file not found: {path}")

    data = _merge(data, MonitorConfig.env_overrides())
    data = _merge(data, overrides or {})
    return MonitorConfig.model_validate(data)
