"""Kubernetes integration - API client, configuration and display models."""

from k8s_app_monitor.integrations.kubernetes.client import KubernetesClient
from k8s_app_monitor.integrations.kubernetes.config import ClusterConfig
from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesConflictError,
    KubernetesError,
    KubernetesFieldNotSetError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
    MonitorPreconditionError,
)

__all__ = [
    "ClusterConfig",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConnectionError",
    "KubernetesConflictError",
    "KubernetesError",
    "KubernetesFieldNotSetError",
    "KubernetesNotFoundError",
    "KubernetesTimeoutError",
    "KubernetesValidationError",
    "MonitorPreconditionError",
]
