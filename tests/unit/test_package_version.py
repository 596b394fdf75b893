"""Tests for package metadata."""

from __future__ import annotations

import pytest

from k8s_app_monitor import __version__


@pytest.mark.unit
class TestVersion:
    """Test version information."""

    def test_version_format(self) -> None:
        """Version follows semantic versioning."""
        parts = __version__.split(".")
        assert len(parts) >= 2, "Version should have at least major.minor"
        assert all(part.isdigit() for part in parts[:2]), "Major and minor should be numeric"
