"""Kubernetes event display model."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from k8s_app_monitor.integrations.kubernetes.models.base import (
    K8sEntityBase,
    ResourceKind,
    _get_timestamp,
    _metadata_fields,
    _safe_get,
)


class EventSummary(K8sEntityBase):
    """Event display model.

    Events are named after the object they describe plus a hash suffix, so
    matching against an application uses the involved object's name instead.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.EVENT
    _entity_name: ClassVar[str] = "event"

    type: str = Field(default="Normal", description="Event type (Normal/Warning)")
    reason: str | None = Field(default=None, description="Event reason")
    message: str | None = Field(default=None, description="Event message")
    first_timestamp: str | None = Field(default=None, description="First occurrence")
    last_timestamp: str | None = Field(default=None, description="Last occurrence")
    involved_object_kind: str | None = Field(default=None, description="Involved object kind")
    involved_object_name: str | None = Field(default=None, description="Involved object name")

    @property
    def match_name(self) -> str:
        """Involved object name, falling back to the event name."""
        return self.involved_object_name or self.name

    @property
    def last_seen(self) -> str | None:
        """Best available timestamp for "when did this last happen"."""
        return self.last_timestamp or self.first_timestamp or self.creation_timestamp

    @property
    def object_display(self) -> str:
        """OBJECT column text, e.g. ``pod/mlflow-7d9c-abcde``."""
        if self.involved_object_kind and self.involved_object_name:
            return f"{self.involved_object_kind.lower()}/{self.involved_object_name}"
        return self.match_name

    @classmethod
    def from_k8s_object(cls, obj: Any) -> EventSummary:
        """Create from a kubernetes CoreV1Event object."""
        involved = getattr(obj, "involved_object", None)

        return cls(
            **_metadata_fields(obj),
            type=getattr(obj, "type", "Normal") or "Normal",
            reason=getattr(obj, "reason", None),
            message=getattr(obj, "message", None),
            first_timestamp=_get_timestamp(getattr(obj, "first_timestamp", None)),
            last_timestamp=_get_timestamp(getattr(obj, "last_timestamp", None)),
            involved_object_kind=_safe_get(involved, "kind"),
            involved_object_name=_safe_get(involved, "name"),
        )
