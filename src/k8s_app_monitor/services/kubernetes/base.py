"""Base manager for Kubernetes query services.

Provides shared infrastructure for services that talk to the API: client
access, structured logging with entity binding, per-request timeout and
retry wiring, and error translation.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn

import structlog

if TYPE_CHECKING:
    from k8s_app_monitor.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()


class K8sBaseManager:
    """Base class for Kubernetes query services.

    Subclasses set ``_entity_name`` for structured log context.

    Example:
        >>> class ClusterQueryService(K8sBaseManager):
        ...     _entity_name = "cluster_query"
    """

    _entity_name: str = ""

    def __init__(self, client: KubernetesClient) -> None:
        """Initialize the manager.

        Args:
            client: Kubernetes API client instance.
        """
        self._client = client
        self._log = logger.bind(entity=self._entity_name)

    def _request(
        self,
        api_call: Callable[..., Any],
        resource_type: str | None = None,
        **kwargs: Any,
    ) -> Any:
        """Invoke an API method with the client's timeout and retry policy.

        ``name`` and ``namespace`` in ``kwargs`` double as error context.

        Args:
            api_call: Bound kubernetes API method.
            resource_type: Kind of resource, for error context.
            **kwargs: Arguments forwarded to ``api_call``.

        Returns:
            Whatever the API method returns.

        Raises:
            KubernetesError: Translated failure after retries are exhausted.
        """

        def attempt() -> Any:
            try:
                return api_call(_request_timeout=self._client.request_timeout, **kwargs)
            except Exception as e:
                self._handle_api_error(
                    e, resource_type, kwargs.get("name"), kwargs.get("namespace")
                )

        return self._client.make_retry_decorator()(attempt)()

    def _handle_api_error(
        self,
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> NoReturn:
        """Translate a Kubernetes API exception and re-raise.

        Raises:
            KubernetesError: Always raises an appropriate subclass.
        """
        error = self._client.translate_api_exception(
            e,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )
        if error is e:
            raise error
        raise error from e
