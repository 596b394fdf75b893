"""Kubernetes integration custom exceptions.

Every failure of a cluster query surfaces as a ``KubernetesError`` subclass.
The monitor treats all of them as "no data" during a refresh pass, except
``MonitorPreconditionError`` which aborts the process before the loop starts.
"""

from __future__ import annotations


class KubernetesError(Exception):
    """Base exception for Kubernetes queries.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from Kubernetes API (if applicable).
        resource_type: Kind of resource involved (e.g., "Pod", "Deployment").
        resource_name: Name of the resource involved.
        namespace: Namespace of the resource (if applicable).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.resource_type:
            loc = f"[{self.resource_type}"
            if self.resource_name:
                loc += f"/{self.resource_name}"
            if self.namespace:
                loc += f" in {self.namespace}"
            loc += "]"
            parts.append(loc)
        return " ".join(parts)


class KubernetesConnectionError(KubernetesError):
    """Raised when the cluster cannot be reached.

    Covers missing or broken kubeconfig, refused connections and DNS failures.
    """

    def __init__(
        self,
        message: str = "Failed to connect to Kubernetes cluster",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message=message)
        self.original_error = original_error


class KubernetesAuthError(KubernetesError):
    """Raised on 401/403 responses (bad credentials or RBAC denial)."""

    def __init__(
        self,
        message: str = "Kubernetes authentication/authorization failed",
        status_code: int | None = 401,
        reason: str | None = None,
    ) -> None:
        super().__init__(message=message, status_code=status_code)
        self.reason = reason


class KubernetesNotFoundError(KubernetesError):
    """Raised when a resource, namespace, resource type or field is absent."""

    def __init__(
        self,
        message: str = "Kubernetes resource not found",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' not found"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message=message,
            status_code=404,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesConflictError(KubernetesError):
    """Raised on 409 responses, e.g. an object replaced mid-read."""

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesValidationError(KubernetesError):
    """Raised on 400/422 responses.

    For a read-only monitor this usually means a label selector value the API
    server refuses (for example an application name with characters that are
    not valid in a label value).
    """

    def __init__(
        self,
        message: str = "Invalid request",
        status_code: int | None = 422,
    ) -> None:
        super().__init__(message=message, status_code=status_code)


class KubernetesTimeoutError(KubernetesError):
    """Raised when a single API call exceeds its request timeout."""

    def __init__(
        self,
        message: str = "Kubernetes request timed out",
        timeout_seconds: int | None = None,
    ) -> None:
        if timeout_seconds:
            message = f"{message} (after {timeout_seconds}s)"
        super().__init__(message=message)
        self.timeout_seconds = timeout_seconds


class MonitorPreconditionError(KubernetesError):
    """Raised when the monitor cannot start: API unreachable or namespace missing."""

    def __init__(self, message: str, namespace: str | None = None) -> None:
        super().__init__(message=message, resource_type="Namespace", namespace=namespace)


class KubernetesFieldNotSetError(KubernetesNotFoundError):
    """Raised when an object exists but a requested field is unset.

    For example ``status.containerStatuses[0].restartCount`` on a pod whose
    containers have not been created yet.
    """

    def __init__(self, field_path: str, resource_type: str, resource_name: str) -> None:
        super().__init__(
            message=f"Field '{field_path}' not set on {resource_type} '{resource_name}'"
        )
        self.field_path = field_path
        self.resource_type = resource_type
        self.resource_name = resource_name
