"""Read-only Kubernetes API client for the monitor.

Loads kubeconfig (falling back to in-cluster credentials), builds the four
API groups the dashboard reads from on first use, and turns every SDK or
transport failure into a ``KubernetesError`` subclass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
import urllib3.exceptions
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)

if TYPE_CHECKING:
    from kubernetes.client import (
        AppsV1Api,
        CoreV1Api,
        NetworkingV1Api,
        VersionApi,
    )

    from k8s_app_monitor.integrations.kubernetes.config import ClusterConfig

logger = structlog.get_logger()

DEFAULT_CONTEXT_LABEL = "current-context"
IN_CLUSTER_CONTEXT = "in-cluster"

# attribute name -> class in kubernetes.client
_API_GROUPS: dict[str, str] = {
    "core_v1": "CoreV1Api",
    "apps_v1": "AppsV1Api",
    "networking_v1": "NetworkingV1Api",
    "version_api": "VersionApi",
}


class KubernetesClient:
    """Kubernetes client shared by the query service and the controller.

    Example:
        ```python
        with KubernetesClient(ClusterConfig(context="staging")) as client:
            if client.check_connection():
                pods = client.core_v1.list_namespaced_pod("ml-ops")
        ```
    """

    def __init__(self, cluster_config: ClusterConfig) -> None:
        """Load cluster credentials.

        Raises:
            KubernetesConnectionError: If neither a kubeconfig nor in-cluster
                credentials are usable.
        """
        self._config = cluster_config
        self._retries = cluster_config.retry_attempts
        self._apis: dict[str, Any] = {}
        self._current_context = self._load_credentials()
        logger.info(
            "kubernetes_client_ready",
            context=self._current_context,
            request_timeout=self.request_timeout,
        )

    def _load_credentials(self) -> str:
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            config.load_kube_config(
                config_file=self._config.kubeconfig,
                context=self._config.context,
            )
        except ConfigException:
            logger.debug("kubeconfig_unavailable", kubeconfig=self._config.kubeconfig)
        else:
            return self._config.context or self._active_context_name()

        try:
            config.load_incluster_config()
        except ConfigException as e:
            raise KubernetesConnectionError(
                message="Cannot load Kubernetes configuration. "
                "Ensure kubeconfig exists or running inside a cluster.",
                original_error=e,
            ) from e
        return IN_CLUSTER_CONTEXT

    def _active_context_name(self) -> str:
        """Name of the kubeconfig's current-context, for the dashboard header."""
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            _, active = config.list_kube_config_contexts(config_file=self._config.kubeconfig)
        except ConfigException:
            return DEFAULT_CONTEXT_LABEL
        if not active:
            return DEFAULT_CONTEXT_LABEL
        return active.get("name") or DEFAULT_CONTEXT_LABEL

    def _api(self, group: str) -> Any:
        if group not in self._apis:
            import kubernetes.client

            self._apis[group] = getattr(kubernetes.client, _API_GROUPS[group])()
        return self._apis[group]

    @property
    def core_v1(self) -> CoreV1Api:
        """Pods, services, events, configmaps, secrets, namespaces and logs."""
        return self._api("core_v1")

    @property
    def apps_v1(self) -> AppsV1Api:
        """Deployments and replicasets."""
        return self._api("apps_v1")

    @property
    def networking_v1(self) -> NetworkingV1Api:
        """Ingresses."""
        return self._api("networking_v1")

    @property
    def version_api(self) -> VersionApi:
        return self._api("version_api")

    @property
    def current_context(self) -> str:
        """Active context name, or ``in-cluster`` inside a pod."""
        return self._current_context

    @property
    def request_timeout(self) -> int:
        """Per-request timeout in seconds, passed as ``_request_timeout``."""
        return self._config.request_timeout

    def translate_api_exception(
        self,
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Map an SDK or urllib3 exception onto the ``KubernetesError`` hierarchy.

        Transport failures are checked first: a read timeout becomes
        ``KubernetesTimeoutError`` and any other urllib3 error a
        ``KubernetesConnectionError``. ``ApiException`` statuses map as
        401/403 auth, 404 not found, 409 conflict, 400/422 validation, and
        anything else a plain ``KubernetesError`` carrying the status.
        """
        from kubernetes.client import ApiException

        if isinstance(e, KubernetesError):
            return e
        if isinstance(e, urllib3.exceptions.TimeoutError):
            return KubernetesTimeoutError(timeout_seconds=self.request_timeout)
        if isinstance(e, urllib3.exceptions.HTTPError):
            return KubernetesConnectionError(
                message="Kubernetes API server unreachable", original_error=e
            )

        where: dict[str, Any] = {
            "resource_type": resource_type,
            "resource_name": resource_name,
            "namespace": namespace,
        }
        if not isinstance(e, ApiException):
            return KubernetesError(message=str(e), **where)

        status, reason = e.status, e.reason
        if status in (401, 403):
            return KubernetesAuthError(
                message=reason or "Authentication/authorization failed",
                status_code=status,
                reason=reason,
            )
        if status == 404:
            return KubernetesNotFoundError(**where)
        if status == 409:
            return KubernetesConflictError(message=reason or "Resource conflict", **where)
        if status in (400, 422):
            return KubernetesValidationError(
                message=reason or "Invalid request", status_code=status
            )
        return KubernetesError(
            message=reason or f"Kubernetes API error: {status}", status_code=status, **where
        )

    def make_retry_decorator(self) -> Any:
        """Retry policy for transient connection errors.

        Exponential backoff capped at two seconds, ``retry_attempts`` tries in
        total, and the last error re-raised unchanged.
        """
        return retry(
            retry=retry_if_exception_type(KubernetesConnectionError),
            stop=stop_after_attempt(self._retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
            reraise=True,
        )

    def check_connection(self) -> bool:
        """Whether the API server answers the version endpoint."""
        try:
            self.version_api.get_code(_request_timeout=self.request_timeout)
        except Exception as e:
            logger.debug("connection_check_failed", error=str(e))
            return False
        return True

    def namespace_exists(self, namespace: str) -> bool:
        """Whether ``namespace`` exists.

        Returns False only on a 404.

        Raises:
            KubernetesError: For any other failure (e.g. RBAC denial).
        """
        try:
            self.core_v1.read_namespace(name=namespace, _request_timeout=self.request_timeout)
        except Exception as e:
            error = self.translate_api_exception(e, "Namespace", namespace)
            if isinstance(error, KubernetesNotFoundError):
                return False
            raise error from e
        return True

    def close(self) -> None:
        """Drop the cached API group instances."""
        self._apis.clear()
        logger.debug("kubernetes_client_closed")

    def __enter__(self) -> KubernetesClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
