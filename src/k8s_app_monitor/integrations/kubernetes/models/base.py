"""Base models for Kubernetes resource display."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ResourceKind(StrEnum):
    """Resource kinds the monitor knows how to query."""

    DEPLOYMENT = "Deployment"
    REPLICA_SET = "ReplicaSet"
    POD = "Pod"
    SERVICE = "Service"
    EVENT = "Event"
    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"
    INGRESS = "Ingress"


class K8sEntityBase(BaseModel):
    """Base class for all Kubernetes display models.

    Instances are read-only snapshots taken during one refresh pass.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(description="Resource name")
    namespace: str | None = Field(default=None, description="Resource namespace")
    creation_timestamp: str | None = Field(default=None, description="Creation time")
    labels: dict[str, str] | None = Field(default=None, description="Resource labels")

    kind: ClassVar[ResourceKind | None] = None
    _entity_name: ClassVar[str] = "entity"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> K8sEntityBase:
        """Build a display model from a kubernetes SDK object."""
        raise NotImplementedError

    @property
    def match_name(self) -> str:
        """Name used for name-prefix matching against an application."""
        return self.name

    @property
    def age(self) -> str:
        """Human-readable age string."""
        return format_age(self.creation_timestamp)


def format_age(timestamp: str | None, now: datetime | None = None) -> str:
    """Render an ISO timestamp as a kubectl-style age ("3d", "5h", "12m", "40s")."""
    if not timestamp:
        return "<unknown>"
    try:
        created = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        delta = (now or datetime.now(UTC)) - created
        if delta.total_seconds() < 0:
            return "0s"
        days = delta.days
        hours, remainder = divmod(delta.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        if days > 0:
            return f"{days}d"
        if hours > 0:
            return f"{hours}h"
        if minutes > 0:
            return f"{minutes}m"
        return f"{seconds}s"
    except (ValueError, TypeError):
        return "<unknown>"


def _safe_get(obj: Any, *attrs: str, default: Any = None) -> Any:
    """Safely traverse nested attributes on kubernetes SDK objects."""
    current = obj
    for attr in attrs:
        if current is None:
            return default
        current = getattr(current, attr, None)
    return current if current is not None else default


def _get_timestamp(obj: Any) -> str | None:
    """Extract ISO timestamp string from a datetime or string."""
    if obj is None:
        return None
    if isinstance(obj, str):
        return obj
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def _get_labels(obj: Any) -> dict[str, str] | None:
    """Extract labels dict, returning None if empty."""
    labels = _safe_get(obj, "metadata", "labels")
    return dict(labels) if labels else None


def _metadata_fields(obj: Any) -> dict[str, Any]:
    """Common metadata fields shared by every display model."""
    return {
        "name": _safe_get(obj, "metadata", "name", default=""),
        "namespace": _safe_get(obj, "metadata", "namespace"),
        "creation_timestamp": _get_timestamp(_safe_get(obj, "metadata", "creation_timestamp")),
        "labels": _get_labels(obj),
    }
