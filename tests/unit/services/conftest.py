"""Shared fixtures for service tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from k8s_app_monitor.integrations.kubernetes.exceptions import KubernetesError


def _translate(e: Exception, *args: Any, **kwargs: Any) -> KubernetesError:
    if isinstance(e, KubernetesError):
        return e
    return KubernetesError(str(e))


@pytest.fixture
def mock_k8s_client() -> MagicMock:
    """Create a mock Kubernetes client.

    API groups (core_v1, apps_v1, networking_v1) are auto-created sub-mocks.
    Retries are disabled and errors translate to a plain KubernetesError.
    """
    mock_client = MagicMock()
    mock_client.request_timeout = 10
    mock_client.current_context = "test-context"
    mock_client.make_retry_decorator.return_value = lambda f: f
    mock_client.translate_api_exception.side_effect = _translate
    return mock_client


@pytest.fixture
def mock_queries() -> MagicMock:
    """Create a mock ClusterQueryService with empty results."""
    queries = MagicMock()
    queries.list_by_label.return_value = []
    queries.list_all.return_value = []
    return queries
