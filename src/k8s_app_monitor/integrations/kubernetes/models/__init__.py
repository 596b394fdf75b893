"""Kubernetes resource display models."""

from k8s_app_monitor.integrations.kubernetes.models.base import (
    K8sEntityBase,
    ResourceKind,
    format_age,
)
from k8s_app_monitor.integrations.kubernetes.models.cluster import EventSummary
from k8s_app_monitor.integrations.kubernetes.models.configuration import (
    ConfigMapSummary,
    SecretSummary,
)
from k8s_app_monitor.integrations.kubernetes.models.networking import (
    IngressSummary,
    ServicePort,
    ServiceSummary,
)
from k8s_app_monitor.integrations.kubernetes.models.workloads import (
    ContainerStatus,
    DeploymentSummary,
    PodSummary,
    ReplicaSetSummary,
)

__all__ = [
    "ConfigMapSummary",
    "ContainerStatus",
    "DeploymentSummary",
    "EventSummary",
    "IngressSummary",
    "K8sEntityBase",
    "PodSummary",
    "ReplicaSetSummary",
    "ResourceKind",
    "SecretSummary",
    "ServicePort",
    "ServiceSummary",
    "format_age",
]
