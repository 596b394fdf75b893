"""Read-only cluster query service.

The monitor's whole view of the cluster goes through four operations:
list by label, list everything, read one field of one object, and tail a
pod's logs. Each returns typed display models or plain strings and raises
a ``KubernetesError`` subclass on any failure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesFieldNotSetError,
    KubernetesValidationError,
)
from k8s_app_monitor.integrations.kubernetes.models import (
    ConfigMapSummary,
    DeploymentSummary,
    EventSummary,
    IngressSummary,
    K8sEntityBase,
    PodSummary,
    ReplicaSetSummary,
    ResourceKind,
    SecretSummary,
    ServiceSummary,
)
from k8s_app_monitor.services.kubernetes.base import K8sBaseManager

# One token of a field path: ".name", "[0]" or "[type=Ready]"
_PATH_TOKEN_RE = re.compile(
    r"\.?(?P<name>[A-Za-z_]\w*)"
    r"|\[(?P<index>\d+)\]"
    r"|\[(?P<key>[A-Za-z_]\w*)=(?P<value>[^\]]*)\]"
)
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@dataclass(frozen=True)
class _KindSpec:
    """Where a resource kind lives in the kubernetes SDK."""

    api_group: str
    list_method: str
    read_method: str
    model: type[K8sEntityBase]


_KIND_SPECS: dict[ResourceKind, _KindSpec] = {
    ResourceKind.DEPLOYMENT: _KindSpec(
        "apps_v1", "list_namespaced_deployment", "read_namespaced_deployment", DeploymentSummary
    ),
    ResourceKind.REPLICA_SET: _KindSpec(
        "apps_v1", "list_namespaced_replica_set", "read_namespaced_replica_set", ReplicaSetSummary
    ),
    ResourceKind.POD: _KindSpec(
        "core_v1", "list_namespaced_pod", "read_namespaced_pod", PodSummary
    ),
    ResourceKind.SERVICE: _KindSpec(
        "core_v1", "list_namespaced_service", "read_namespaced_service", ServiceSummary
    ),
    ResourceKind.EVENT: _KindSpec(
        "core_v1", "list_namespaced_event", "read_namespaced_event", EventSummary
    ),
    ResourceKind.CONFIG_MAP: _KindSpec(
        "core_v1", "list_namespaced_config_map", "read_namespaced_config_map", ConfigMapSummary
    ),
    ResourceKind.SECRET: _KindSpec(
        "core_v1", "list_namespaced_secret", "read_namespaced_secret", SecretSummary
    ),
    ResourceKind.INGRESS: _KindSpec(
        "networking_v1", "list_namespaced_ingress", "read_namespaced_ingress", IngressSummary
    ),
}


def parse_field_path(field_path: str) -> list[str | int | tuple[str, str]]:
    """Parse a kubectl-jsonpath-like field path.

    Supports dotted names (camelCase or snake_case), list indexes and
    ``[key=value]`` list filters, e.g.
    ``status.conditions[type=Ready].status`` or
    ``status.containerStatuses[0].restartCount``.

    Raises:
        KubernetesValidationError: If the path is empty or malformed.
    """
    tokens: list[str | int | tuple[str, str]] = []
    pos = 0
    path = field_path.strip()
    while pos < len(path):
        match = _PATH_TOKEN_RE.match(path, pos)
        if not match:
            raise KubernetesValidationError(message=f"Invalid field path '{field_path}'")
        if name := match.group("name"):
            tokens.append(_CAMEL_BOUNDARY_RE.sub("_", name).lower())
        elif (index := match.group("index")) is not None:
            tokens.append(int(index))
        else:
            key = _CAMEL_BOUNDARY_RE.sub("_", match.group("key")).lower()
            tokens.append((key, match.group("value").strip("'\"")))
        pos = match.end()
    if not tokens:
        raise KubernetesValidationError(message=f"Invalid field path '{field_path}'")
    return tokens


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_field(obj: Any, tokens: list[str | int | tuple[str, str]]) -> Any:
    """Walk parsed field-path tokens over a kubernetes SDK object.

    Returns:
        The value found, or None if any step is missing.
    """
    current = obj
    for token in tokens:
        if current is None:
            return None
        if isinstance(token, str):
            current = _field(current, token)
        elif isinstance(token, int):
            if not isinstance(current, list) or token >= len(current):
                return None
            current = current[token]
        else:
            key, value = token
            if not isinstance(current, list):
                return None
            current = next((item for item in current if str(_field(item, key)) == value), None)
    return current


class ClusterQueryService(K8sBaseManager):
    """Query service behind the resource resolver and section renderers."""

    _entity_name = "cluster_query"

    def list_by_label(
        self,
        kind: ResourceKind,
        namespace: str,
        key: str,
        value: str,
    ) -> list[K8sEntityBase]:
        """List objects of ``kind`` carrying the label ``key=value``.

        Args:
            kind: Resource kind.
            namespace: Target namespace.
            key: Label key (e.g. ``app``).
            value: Label value.

        Returns:
            Display models in API order.
        """
        return self._list(kind, namespace, label_selector=f"{key}={value}")

    def list_all(self, kind: ResourceKind, namespace: str) -> list[K8sEntityBase]:
        """List every object of ``kind`` in ``namespace``."""
        return self._list(kind, namespace)

    def get_field(
        self,
        kind: ResourceKind,
        namespace: str,
        name: str,
        field_path: str,
    ) -> str:
        """Read a single field of a single object.

        Args:
            kind: Resource kind.
            namespace: Target namespace.
            name: Object name.
            field_path: Path such as ``status.conditions[type=Ready].status``.

        Returns:
            The field value rendered as a string.

        Raises:
            KubernetesNotFoundError: If the object does not exist.
            KubernetesFieldNotSetError: If the object exists but the field is unset.
            KubernetesValidationError: If the field path is malformed.
        """
        tokens = parse_field_path(field_path)
        spec = _KIND_SPECS[kind]
        self._log.debug("reading_field", kind=str(kind), name=name, field=field_path)
        obj = self._request(
            getattr(getattr(self._client, spec.api_group), spec.read_method),
            str(kind),
            name=name,
            namespace=namespace,
        )
        value = extract_field(obj, tokens)
        if value is None:
            raise KubernetesFieldNotSetError(field_path, str(kind), name)
        if isinstance(value, datetime):
            return value.isoformat()
        return str(value)

    def tail_logs(
        self,
        namespace: str,
        pod_name: str,
        line_count: int,
        container: str | None = None,
    ) -> str:
        """Return the last ``line_count`` lines of a pod's log.

        Args:
            namespace: Target namespace.
            pod_name: Pod name.
            line_count: Number of lines from the end of the log.
            container: Container name, required by the API for multi-container pods.

        Returns:
            Log content as a string (possibly empty).
        """
        if line_count <= 0:
            raise KubernetesValidationError(message="line_count must be positive")
        self._log.debug("tailing_logs", pod=pod_name, namespace=namespace, lines=line_count)
        kwargs: dict[str, Any] = {"tail_lines": line_count}
        if container:
            kwargs["container"] = container
        logs = self._request(
            self._client.core_v1.read_namespaced_pod_log,
            str(ResourceKind.POD),
            name=pod_name,
            namespace=namespace,
            **kwargs,
        )
        return logs or ""

    def _list(
        self,
        kind: ResourceKind,
        namespace: str,
        label_selector: str | None = None,
    ) -> list[K8sEntityBase]:
        spec = _KIND_SPECS[kind]
        self._log.debug(
            "listing", kind=str(kind), namespace=namespace, label_selector=label_selector
        )
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        result = self._request(
            getattr(getattr(self._client, spec.api_group), spec.list_method),
            str(kind),
            namespace=namespace,
            **kwargs,
        )
        objects = [spec.model.from_k8s_object(item) for item in result.items or []]
        self._log.debug("listed", kind=str(kind), count=len(objects))
        return objects
