"""Kubernetes query services."""

from k8s_app_monitor.services.kubernetes.base import K8sBaseManager
from k8s_app_monitor.services.kubernetes.query_service import ClusterQueryService

__all__ = ["ClusterQueryService", "K8sBaseManager"]
