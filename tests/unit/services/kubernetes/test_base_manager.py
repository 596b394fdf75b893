"""Unit tests for K8sBaseManager."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
)
from k8s_app_monitor.services.kubernetes.base import K8sBaseManager


class _Manager(K8sBaseManager):
    _entity_name = "thing"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestK8sBaseManager:
    """Tests for K8sBaseManager base class."""

    def test_init(self, mock_k8s_client: MagicMock) -> None:
        """Manager should initialize with client."""
        manager = K8sBaseManager(mock_k8s_client)

        assert manager._client == mock_k8s_client
        assert manager._log is not None
        assert K8sBaseManager._entity_name == ""
        assert _Manager._entity_name == "thing"

    def test_request_passes_timeout(self, mock_k8s_client: MagicMock) -> None:
        """Every call carries the client's request timeout."""
        manager = _Manager(mock_k8s_client)
        api_call = MagicMock(return_value="ok")

        result = manager._request(api_call, "Pod", name="p", namespace="ns")

        assert result == "ok"
        api_call.assert_called_once_with(_request_timeout=10, name="p", namespace="ns")

    def test_request_translates_errors(self, mock_k8s_client: MagicMock) -> None:
        """Failures are translated with name/namespace as context."""
        manager = _Manager(mock_k8s_client)
        original = RuntimeError("socket closed")
        api_call = MagicMock(side_effect=original)

        with pytest.raises(KubernetesError, match="socket closed") as exc_info:
            manager._request(api_call, "Pod", name="p", namespace="ns")

        assert exc_info.value.__cause__ is original
        mock_k8s_client.translate_api_exception.assert_called_once_with(
            original, resource_type="Pod", resource_name="p", namespace="ns"
        )

    def test_request_uses_retry_decorator(self, mock_k8s_client: MagicMock) -> None:
        """Calls are wrapped in the client's retry policy."""
        manager = _Manager(mock_k8s_client)

        manager._request(MagicMock(return_value=None))

        mock_k8s_client.make_retry_decorator.assert_called_once()

    def test_retry_then_success(self, mock_k8s_client: MagicMock) -> None:
        """A transient connection failure is retried by a real tenacity policy."""
        from tenacity import retry, retry_if_exception_type, stop_after_attempt

        mock_k8s_client.make_retry_decorator.return_value = retry(
            retry=retry_if_exception_type(KubernetesConnectionError),
            stop=stop_after_attempt(2),
            reraise=True,
        )
        api_call = MagicMock(side_effect=[KubernetesConnectionError(), "items"])
        manager = _Manager(mock_k8s_client)

        assert manager._request(api_call) == "items"
        assert api_call.call_count == 2

    def test_handle_api_error_keeps_translated_error(self, mock_k8s_client: MagicMock) -> None:
        """Already-translated errors are re-raised as-is."""
        manager = _Manager(mock_k8s_client)
        error = KubernetesNotFoundError(resource_type="Pod", resource_name="p")

        with pytest.raises(KubernetesNotFoundError) as exc_info:
            manager._handle_api_error(error, "Pod", "p", "ns")

        assert exc_info.value is error
