"""Kubernetes workload resource display models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from k8s_app_monitor.integrations.kubernetes.models.base import (
    K8sEntityBase,
    ResourceKind,
    _metadata_fields,
    _safe_get,
)


class ContainerStatus(K8sEntityBase):
    """Container status within a pod."""

    _entity_name: ClassVar[str] = "container"

    image: str | None = Field(default=None, description="Container image")
    ready: bool = Field(default=False, description="Whether container is ready")
    restart_count: int = Field(default=0, description="Number of restarts")
    state: str = Field(default="Unknown", description="Current state or waiting reason")
    waiting: bool = Field(default=False, description="Container is in a waiting state")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ContainerStatus:
        """Create from a kubernetes V1ContainerStatus object."""
        state = "Unknown"
        waiting = False
        if obj_state := getattr(obj, "state", None):
            if getattr(obj_state, "running", None):
                state = "Running"
            elif getattr(obj_state, "waiting", None):
                state = str(_safe_get(obj_state, "waiting", "reason", default="Waiting"))
                waiting = True
            elif getattr(obj_state, "terminated", None):
                state = str(_safe_get(obj_state, "terminated", "reason", default="Terminated"))

        return cls(
            name=getattr(obj, "name", "") or "",
            image=getattr(obj, "image", None),
            ready=getattr(obj, "ready", False) or False,
            restart_count=getattr(obj, "restart_count", 0) or 0,
            state=state,
            waiting=waiting,
        )


class PodSummary(K8sEntityBase):
    """Pod display model."""

    kind: ClassVar[ResourceKind] = ResourceKind.POD
    _entity_name: ClassVar[str] = "pod"

    phase: str = Field(default="Unknown", description="Pod phase")
    node_name: str | None = Field(default=None, description="Node the pod is running on")
    restarts: int = Field(default=0, description="Total container restarts")
    ready_count: int = Field(default=0, description="Number of ready containers")
    container_names: list[str] = Field(
        default_factory=list, description="Container names in pod spec order"
    )
    containers: list[ContainerStatus] = Field(
        default_factory=list, description="Container statuses (the kubelet sorts them by name)"
    )

    @property
    def total_count(self) -> int:
        """Number of containers declared in the pod spec."""
        return len(self.container_names)

    @property
    def log_container(self) -> str | None:
        """Container to tail: the first in the spec, or None for single-container pods."""
        if len(self.container_names) > 1:
            return self.container_names[0]
        return None

    @property
    def status(self) -> str:
        """kubectl-style STATUS: a waiting reason such as CrashLoopBackOff wins over the phase."""
        for container in self.containers:
            if container.waiting:
                return container.state
        return self.phase

    @property
    def ready_display(self) -> str:
        """READY column text, e.g. ``1/2``."""
        return f"{self.ready_count}/{self.total_count}"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> PodSummary:
        """Create from a kubernetes V1Pod object."""
        container_statuses = _safe_get(obj, "status", "container_statuses") or []
        containers = [ContainerStatus.from_k8s_object(cs) for cs in container_statuses]
        spec_containers = _safe_get(obj, "spec", "containers") or []

        return cls(
            **_metadata_fields(obj),
            phase=_safe_get(obj, "status", "phase", default="Unknown"),
            node_name=_safe_get(obj, "spec", "node_name"),
            restarts=sum(c.restart_count for c in containers),
            ready_count=sum(1 for c in containers if c.ready),
            container_names=[name for c in spec_containers if (name := getattr(c, "name", None))],
            containers=containers,
        )


class DeploymentSummary(K8sEntityBase):
    """Deployment display model."""

    kind: ClassVar[ResourceKind] = ResourceKind.DEPLOYMENT
    _entity_name: ClassVar[str] = "deployment"

    replicas: int = Field(default=0, description="Desired replicas")
    ready_replicas: int = Field(default=0, description="Ready replicas")
    updated_replicas: int = Field(default=0, description="Updated replicas")
    available_condition: str = Field(
        default="Unknown", description="Status of the Available condition (True/False)"
    )

    @property
    def ready_display(self) -> str:
        """READY column text, e.g. ``2/3``."""
        return f"{self.ready_replicas}/{self.replicas}"

    @property
    def ready_token(self) -> str:
        """Status token summarizing readiness for the classifier."""
        if self.replicas == 0:
            return "Unknown"
        if self.ready_replicas >= self.replicas:
            return "Ready"
        return "Pending"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> DeploymentSummary:
        """Create from a kubernetes V1Deployment object."""
        available = "Unknown"
        for cond in _safe_get(obj, "status", "conditions") or []:
            if getattr(cond, "type", None) == "Available":
                available = getattr(cond, "status", None) or "Unknown"
                break

        return cls(
            **_metadata_fields(obj),
            replicas=_safe_get(obj, "spec", "replicas", default=0) or 0,
            ready_replicas=_safe_get(obj, "status", "ready_replicas", default=0) or 0,
            updated_replicas=_safe_get(obj, "status", "updated_replicas", default=0) or 0,
            available_condition=available,
        )


class ReplicaSetSummary(K8sEntityBase):
    """ReplicaSet display model."""

    kind: ClassVar[ResourceKind] = ResourceKind.REPLICA_SET
    _entity_name: ClassVar[str] = "replicaset"

    desired: int = Field(default=0, description="Desired replicas")
    current: int = Field(default=0, description="Current replicas")
    ready: int = Field(default=0, description="Ready replicas")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ReplicaSetSummary:
        """Create from a kubernetes V1ReplicaSet object."""
        return cls(
            **_metadata_fields(obj),
            desired=_safe_get(obj, "spec", "replicas", default=0) or 0,
            current=_safe_get(obj, "status", "replicas", default=0) or 0,
            ready=_safe_get(obj, "status", "ready_replicas", default=0) or 0,
        )
