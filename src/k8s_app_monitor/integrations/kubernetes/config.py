"""Kubernetes connection configuration model."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ClusterConfig(BaseModel):
    """How to reach the cluster being monitored.

    ``context`` and ``kubeconfig`` left unset mean "whatever kubectl would
    use": the current context of the default kubeconfig, or the in-cluster
    service account when running inside a pod.
    """

    model_config = ConfigDict(extra="forbid")

    context: str | None = None
    kubeconfig: str | None = None
    request_timeout: int = 10
    retry_attempts: int = 2

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: int) -> int:
        """Validate request timeout is positive."""
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate at least one attempt is made."""
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str | None) -> str | None:
        """Expand ~ in kubeconfig path."""
        if v is None:
            return None
        return str(Path(v).expanduser())

    @classmethod
    def env_overrides(cls) -> dict[str, Any]:
        """Collect cluster settings from the environment.

        Supported environment variables:
            K8S_MONITOR_CONTEXT: kubeconfig context to use
            K8S_MONITOR_KUBECONFIG: kubeconfig path
            K8S_MONITOR_TIMEOUT: per-request timeout in seconds
        """
        overrides: dict[str, Any] = {}
        if context := os.environ.get("K8S_MONITOR_CONTEXT"):
            overrides["context"] = context
        if kubeconfig := os.environ.get("K8S_MONITOR_KUBECONFIG"):
            overrides["kubeconfig"] = kubeconfig
        if timeout := os.environ.get("K8S_MONITOR_TIMEOUT"):
            overrides["request_timeout"] = timeout
        return overrides
