"""Unit tests for per-section aggregation."""

from __future__ import annotations

import pytest

from k8s_app_monitor.cli.output.theme import Colors
from k8s_app_monitor.integrations.kubernetes.models import PodSummary, ResourceKind
from k8s_app_monitor.services.monitor.aggregation import SectionAggregate, SectionResult
from k8s_app_monitor.services.monitor.resolver import ResolutionResult, ResolutionTier


def _found(app: str) -> ResolutionResult:
    return ResolutionResult(
        app=app,
        kind=ResourceKind.POD,
        objects=(PodSummary(name=f"{app}-abc-123"),),
        tier=ResolutionTier.LABEL,
    )


def _missing(app: str) -> ResolutionResult:
    return ResolutionResult(app=app, kind=ResourceKind.POD)


@pytest.mark.unit
@pytest.mark.monitor
class TestSectionAggregate:
    """Tests for SectionAggregate."""

    def test_add_returns_result(self) -> None:
        """add() hands the result straight back."""
        aggregate = SectionAggregate("pods")
        result = _found("a")

        assert aggregate.add(result) is result

    def test_partial_match(self) -> None:
        """Two apps, one match: caption names only the missing app."""
        aggregate = SectionAggregate("pods")
        aggregate.add(_found("a"))
        aggregate.add(_missing("b"))

        assert aggregate.found_any
        assert aggregate.found_apps == ["a"]
        assert aggregate.missing_apps == ["b"]
        assert aggregate.missing_caption() == "no matches: b"

    def test_all_found_has_no_caption(self) -> None:
        """No caption when every app matched."""
        aggregate = SectionAggregate("pods")
        aggregate.add(_found("a"))
        aggregate.add(_found("b"))

        assert aggregate.missing_caption() is None

    def test_none_found(self) -> None:
        """With nothing found there is no caption, only the notice."""
        aggregate = SectionAggregate("pods")
        for app in ("a", "b", "c"):
            aggregate.add(_missing(app))

        notice = aggregate.not_found_notice(["a", "b", "c"])

        assert not aggregate.found_any
        assert aggregate.missing_caption() is None
        assert notice.plain == "❌ No pods found for apps: a b c"
        assert notice.style == Colors.ERROR

    def test_informational_notice(self) -> None:
        """Events use the blue informational form."""
        aggregate = SectionAggregate("events")

        notice = aggregate.not_found_notice(["mlflow"], informational=True)

        assert "No recent events found for apps: mlflow" in notice.plain
        assert notice.plain.startswith("ℹ️")
        assert notice.style == Colors.INFO

    def test_order_follows_input(self) -> None:
        """Apps are reported in the order they were added."""
        aggregate = SectionAggregate("pods")
        for app in ("c", "a", "b"):
            aggregate.add(_missing(app))

        assert aggregate.missing_apps == ["c", "a", "b"]


@pytest.mark.unit
@pytest.mark.monitor
class TestSectionResult:
    """Tests for SectionResult."""

    def test_found_any(self) -> None:
        """found_any follows found_apps."""
        empty = SectionResult(key="pods", title="PODS", icon="🐳", body="")
        full = SectionResult(key="pods", title="PODS", icon="🐳", body="", found_apps=("a",))

        assert not empty.found_any
        assert full.found_any
