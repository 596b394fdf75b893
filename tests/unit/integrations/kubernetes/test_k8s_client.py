"""Unit tests for the Kubernetes client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import urllib3.exceptions
from kubernetes.client import ApiException

from k8s_app_monitor.integrations.kubernetes.client import KubernetesClient
from k8s_app_monitor.integrations.kubernetes.config import ClusterConfig
from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)


@pytest.fixture
def client() -> KubernetesClient:
    """Client with kubeconfig loading patched out."""
    with patch("kubernetes.config") as mock_config:
        mock_config.list_kube_config_contexts.return_value = ([], {"name": "test"})
        return KubernetesClient(ClusterConfig(request_timeout=7, retry_attempts=3))


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubernetesClientInitialization:
    """Test KubernetesClient initialization."""

    @patch("kubernetes.config")
    def test_init_with_default_config(self, mock_config: MagicMock) -> None:
        """Default config reports the kubeconfig's active context."""
        mock_config.list_kube_config_contexts.return_value = (
            [{"name": "minikube"}],
            {"name": "minikube"},
        )

        client = KubernetesClient(ClusterConfig())

        mock_config.load_kube_config.assert_called_once_with(config_file=None, context=None)
        assert client.current_context == "minikube"
        assert client.request_timeout == 10
        assert client._retries == 2

    @patch("kubernetes.config")
    def test_init_without_active_context(self, mock_config: MagicMock) -> None:
        """A kubeconfig without a current-context gets a generic label."""
        mock_config.list_kube_config_contexts.return_value = ([], None)

        client = KubernetesClient(ClusterConfig())

        assert client.current_context == "current-context"

    @patch("kubernetes.config")
    def test_init_with_context(self, mock_config: MagicMock) -> None:
        """An explicit context and kubeconfig are passed through."""
        client = KubernetesClient(
            ClusterConfig(context="staging", kubeconfig="/path/to/config")
        )

        mock_config.load_kube_config.assert_called_once_with(
            config_file="/path/to/config", context="staging"
        )
        assert client.current_context == "staging"

    @patch("kubernetes.config")
    def test_init_fallback_to_incluster(self, mock_config: MagicMock) -> None:
        """Without kubeconfig the client falls back to in-cluster config."""
        from kubernetes.config import ConfigException

        mock_config.load_kube_config.side_effect = ConfigException("Not found")

        client = KubernetesClient(ClusterConfig())

        mock_config.load_incluster_config.assert_called_once()
        assert client.current_context == "in-cluster"

    @patch("kubernetes.config")
    def test_init_connection_error(self, mock_config: MagicMock) -> None:
        """No usable configuration at all is a connection error."""
        from kubernetes.config import ConfigException

        mock_config.load_kube_config.side_effect = ConfigException("No config")
        mock_config.load_incluster_config.side_effect = ConfigException("Not in cluster")

        with pytest.raises(KubernetesConnectionError) as exc_info:
            KubernetesClient(ClusterConfig())

        assert "Cannot load Kubernetes configuration" in str(exc_info.value)
        assert isinstance(exc_info.value.original_error, ConfigException)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubernetesClientAPIProperties:
    """Test lazy API group properties."""

    def test_core_v1_lazy_loading(self, client: KubernetesClient) -> None:
        """CoreV1Api is created on first use and cached."""
        assert "core_v1" not in client._apis

        with patch("kubernetes.client.CoreV1Api") as mock_api:
            first = client.core_v1
            second = client.core_v1

        assert first is second
        mock_api.assert_called_once()

    @pytest.mark.parametrize(
        ("prop", "cls"),
        [
            ("apps_v1", "AppsV1Api"),
            ("networking_v1", "NetworkingV1Api"),
            ("version_api", "VersionApi"),
        ],
    )
    def test_other_groups(self, client: KubernetesClient, prop: str, cls: str) -> None:
        """Every API group is lazily constructed."""
        with patch(f"kubernetes.client.{cls}") as mock_api:
            getattr(client, prop)

        mock_api.assert_called_once()

    def test_close_clears_cache(self, client: KubernetesClient) -> None:
        """close() drops cached API groups; the context manager calls it."""
        with patch("kubernetes.client.CoreV1Api"):
            client.core_v1
        with client:
            pass

        assert "core_v1" not in client._apis


@pytest.mark.unit
@pytest.mark.kubernetes
class TestTranslateApiException:
    """Test API exception translation."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (401, KubernetesAuthError),
            (403, KubernetesAuthError),
            (404, KubernetesNotFoundError),
            (409, KubernetesConflictError),
            (400, KubernetesValidationError),
            (422, KubernetesValidationError),
            (500, KubernetesError),
        ],
    )
    def test_status_mapping(
        self, client: KubernetesClient, status: int, expected: type[KubernetesError]
    ) -> None:
        """HTTP statuses map onto the error hierarchy."""
        error = client.translate_api_exception(
            ApiException(status=status, reason="Reason"), "Pod", "p", "ns"
        )

        assert type(error) is expected
        assert error.status_code == status

    def test_not_found_context(self, client: KubernetesClient) -> None:
        """404s carry the resource context."""
        error = client.translate_api_exception(
            ApiException(status=404), resource_type="Pod", resource_name="p", namespace="ns"
        )

        assert error.message == "Pod 'p' not found in namespace 'ns'"

    def test_urllib3_timeout(self, client: KubernetesClient) -> None:
        """Read timeouts become timeout errors with the configured limit."""
        error = client.translate_api_exception(
            urllib3.exceptions.ReadTimeoutError(None, "/api", "timed out")  # type: ignore[arg-type]
        )

        assert isinstance(error, KubernetesTimeoutError)
        assert error.timeout_seconds == 7

    def test_urllib3_connection_failure(self, client: KubernetesClient) -> None:
        """Refused connections become connection errors."""
        error = client.translate_api_exception(
            urllib3.exceptions.MaxRetryError(None, "/api")  # type: ignore[arg-type]
        )

        assert isinstance(error, KubernetesConnectionError)

    def test_passthrough_and_generic(self, client: KubernetesClient) -> None:
        """KubernetesErrors pass through; anything else is a generic error."""
        original = KubernetesAuthError()

        assert client.translate_api_exception(original) is original
        generic = client.translate_api_exception(ValueError("odd"), "Pod", "p")
        assert type(generic) is KubernetesError
        assert generic.message == "odd"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestPreconditions:
    """Test connectivity and namespace checks."""

    def test_check_connection(self, client: KubernetesClient) -> None:
        """The version endpoint answering means connected."""
        client._apis["version_api"] = MagicMock()

        assert client.check_connection() is True
        client._apis["version_api"].get_code.assert_called_once_with(_request_timeout=7)

    def test_check_connection_failure(self, client: KubernetesClient) -> None:
        """Any failure means not connected."""
        client._apis["version_api"] = MagicMock()
        version_api = client._apis["version_api"]
        version_api.get_code.side_effect = urllib3.exceptions.NewConnectionError(
            None, "refused"  # type: ignore[arg-type]
        )

        assert client.check_connection() is False

    def test_namespace_exists(self, client: KubernetesClient) -> None:
        """A readable namespace exists."""
        client._apis["core_v1"] = MagicMock()

        assert client.namespace_exists("ml-ops") is True
        client._apis["core_v1"].read_namespace.assert_called_once_with(
            name="ml-ops", _request_timeout=7
        )

    def test_namespace_missing(self, client: KubernetesClient) -> None:
        """A 404 means the namespace does not exist."""
        client._apis["core_v1"] = MagicMock()
        client._apis["core_v1"].read_namespace.side_effect = ApiException(status=404)

        assert client.namespace_exists("ghost") is False

    def test_namespace_forbidden(self, client: KubernetesClient) -> None:
        """Other failures propagate as translated errors."""
        client._apis["core_v1"] = MagicMock()
        client._apis["core_v1"].read_namespace.side_effect = ApiException(
            status=403, reason="Forbidden"
        )

        with pytest.raises(KubernetesAuthError):
            client.namespace_exists("ml-ops")


@pytest.mark.unit
@pytest.mark.kubernetes
class TestRetryDecorator:
    """Test the tenacity retry policy."""

    def test_retries_connection_errors(self, client: KubernetesClient) -> None:
        """Connection errors are retried up to retry_attempts times."""
        calls = MagicMock(side_effect=KubernetesConnectionError())

        with patch("time.sleep"):
            wrapped = client.make_retry_decorator()(calls)
            with pytest.raises(KubernetesConnectionError):
                wrapped()

        assert calls.call_count == 3

    def test_does_not_retry_other_errors(self, client: KubernetesClient) -> None:
        """Non-connection errors fail immediately."""
        calls = MagicMock(side_effect=KubernetesNotFoundError())

        with pytest.raises(KubernetesNotFoundError):
            client.make_retry_decorator()(calls)()

        assert calls.call_count == 1
