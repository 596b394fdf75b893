"""Per-section aggregation of "did we find anything" across applications.

A section is rendered once for all monitored applications. When none of
them has matching objects the section collapses to a single notice naming
every app; when only some do, the table is the section and the apps with
no matches are listed once in its caption.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from rich.console import RenderableType
from rich.text import Text

from k8s_app_monitor.cli.output.theme import Colors
from k8s_app_monitor.services.monitor.resolver import ResolutionResult


@dataclass
class SectionAggregate:
    """Collects resolution outcomes for one section, in app order."""

    noun: str
    results: list[ResolutionResult] = field(default_factory=list)

    def add(self, result: ResolutionResult) -> ResolutionResult:
        """Record a result and hand it back for rendering."""
        self.results.append(result)
        return result

    @property
    def found_apps(self) -> list[str]:
        """Apps with at least one object, in input order."""
        return [r.app for r in self.results if r.found]

    @property
    def missing_apps(self) -> list[str]:
        """Apps with no objects, in input order."""
        return [r.app for r in self.results if not r.found]

    @property
    def found_any(self) -> bool:
        """Whether any app had objects."""
        return any(r.found for r in self.results)

    def not_found_notice(self, apps: Sequence[str], informational: bool = False) -> Text:
        """The single consolidated notice for an empty section."""
        icon, style = ("ℹ️ ", Colors.INFO) if informational else ("❌", Colors.ERROR)
        qualifier = "recent " if informational else ""
        notice = Text(f"{icon} No {qualifier}{self.noun} found for apps: ", style=style)
        notice.append(" ".join(apps), style=f"bold {style}")
        return notice

    def missing_caption(self) -> str | None:
        """Caption listing apps that had no matches, or None when all did."""
        missing = self.missing_apps
        if not missing or not self.found_any:
            return None
        return f"no matches: {' '.join(missing)}"


@dataclass(frozen=True)
class SectionResult:
    """What a section renderer hands back to the controller."""

    key: str
    title: str
    icon: str
    body: RenderableType
    found_apps: tuple[str, ...] = ()
    missing_apps: tuple[str, ...] = ()

    @property
    def found_any(self) -> bool:
        """Whether any app contributed rows."""
        return bool(self.found_apps)
