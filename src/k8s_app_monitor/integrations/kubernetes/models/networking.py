"""Kubernetes networking resource display models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from k8s_app_monitor.integrations.kubernetes.models.base import (
    K8sEntityBase,
    ResourceKind,
    _metadata_fields,
    _safe_get,
)


class ServicePort(BaseModel):
    """Service port definition."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    port: int = Field(description="Service port number")
    protocol: str = Field(default="TCP", description="Protocol")
    node_port: int | None = Field(default=None, description="Node port")

    @property
    def display(self) -> str:
        """kubectl-style port text: ``80/TCP`` or ``80:30080/TCP``."""
        if self.node_port:
            return f"{self.port}:{self.node_port}/{self.protocol}"
        return f"{self.port}/{self.protocol}"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServicePort:
        """Create from a kubernetes V1ServicePort object."""
        return cls(
            port=getattr(obj, "port", 0) or 0,
            protocol=getattr(obj, "protocol", "TCP") or "TCP",
            node_port=getattr(obj, "node_port", None),
        )


class ServiceSummary(K8sEntityBase):
    """Service display model."""

    kind: ClassVar[ResourceKind] = ResourceKind.SERVICE
    _entity_name: ClassVar[str] = "service"

    type: str = Field(default="ClusterIP", description="Service type")
    cluster_ip: str | None = Field(default=None, description="Cluster IP")
    external_ip: str | None = Field(default=None, description="External IP")
    ports: list[ServicePort] = Field(default_factory=list, description="Service ports")

    @property
    def ports_display(self) -> str:
        """PORT(S) column text."""
        return ",".join(p.display for p in self.ports) or "<none>"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServiceSummary:
        """Create from a kubernetes V1Service object."""
        ports = _safe_get(obj, "spec", "ports") or []

        # The SDK spells spec.externalIPs "external_ips" or, in older releases, "external_i_ps"
        external_ips = (
            _safe_get(obj, "spec", "external_ips") or _safe_get(obj, "spec", "external_i_ps") or []
        )
        lb_ingress = _safe_get(obj, "status", "load_balancer", "ingress") or []
        external_ip = None
        if external_ips:
            external_ip = external_ips[0]
        elif lb_ingress:
            external_ip = getattr(lb_ingress[0], "ip", None) or getattr(
                lb_ingress[0], "hostname", None
            )

        return cls(
            **_metadata_fields(obj),
            type=_safe_get(obj, "spec", "type", default="ClusterIP"),
            cluster_ip=_safe_get(obj, "spec", "cluster_ip"),
            external_ip=external_ip,
            ports=[ServicePort.from_k8s_object(p) for p in ports],
        )


class IngressSummary(K8sEntityBase):
    """Ingress display model."""

    kind: ClassVar[ResourceKind] = ResourceKind.INGRESS
    _entity_name: ClassVar[str] = "ingress"

    class_name: str | None = Field(default=None, description="Ingress class")
    hosts: list[str] = Field(default_factory=list, description="Hostnames")
    addresses: list[str] = Field(default_factory=list, description="Load balancer addresses")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> IngressSummary:
        """Create from a kubernetes V1Ingress object."""
        rules = _safe_get(obj, "spec", "rules") or []
        hosts = [host for rule in rules if (host := getattr(rule, "host", None))]

        addresses = []
        for ing in _safe_get(obj, "status", "load_balancer", "ingress") or []:
            if addr := getattr(ing, "ip", None) or getattr(ing, "hostname", None):
                addresses.append(str(addr))

        return cls(
            **_metadata_fields(obj),
            class_name=_safe_get(obj, "spec", "ingress_class_name"),
            hosts=hosts,
            addresses=addresses,
        )
