"""ConfigMap and Secret display models.

Both expose key names only. Secret values are never copied off the SDK
object.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from k8s_app_monitor.integrations.kubernetes.models.base import (
    K8sEntityBase,
    ResourceKind,
    _metadata_fields,
)


def _key_names(*mappings: dict[str, Any] | None) -> list[str]:
    return sorted({key for mapping in mappings if mapping for key in mapping})


class ConfigMapSummary(K8sEntityBase):
    """ConfigMap row: name and the keys of ``data`` and ``binaryData``."""

    kind: ClassVar[ResourceKind] = ResourceKind.CONFIG_MAP
    _entity_name: ClassVar[str] = "configmap"

    data_keys: list[str] = Field(default_factory=list)

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ConfigMapSummary:
        return cls(
            **_metadata_fields(obj),
            data_keys=_key_names(getattr(obj, "data", None), getattr(obj, "binary_data", None)),
        )


class SecretSummary(K8sEntityBase):
    """Secret row: name, type and key names."""

    kind: ClassVar[ResourceKind] = ResourceKind.SECRET
    _entity_name: ClassVar[str] = "secret"

    type: str = "Opaque"
    data_keys: list[str] = Field(default_factory=list)

    @classmethod
    def from_k8s_object(cls, obj: Any) -> SecretSummary:
        return cls(
            **_metadata_fields(obj),
            type=getattr(obj, "type", None) or "Opaque",
            data_keys=_key_names(getattr(obj, "data", None)),
        )
