"""Refresh loop controller.

Drives the dashboard: verify the cluster once, then render every section,
sleep, and repeat until stopped. The loop is synchronous and single
threaded. A stop request is a plain flag, set without taking any lock so a
signal handler can set it at any point, and the sleep polls it.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog
from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from k8s_app_monitor.cli.output import Colors
from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesError,
    MonitorPreconditionError,
)
from k8s_app_monitor.services.kubernetes.query_service import ClusterQueryService
from k8s_app_monitor.services.monitor.aggregation import SectionResult
from k8s_app_monitor.services.monitor.resolver import ResourceResolver
from k8s_app_monitor.services.monitor.sections import SectionRenderer, build_sections

if TYPE_CHECKING:
    from k8s_app_monitor.core.config import MonitorConfig
    from k8s_app_monitor.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()

SECTION_RULE_WIDTH = 50
STOPPED_MESSAGE = "Monitoring stopped."
STOP_POLL_INTERVAL = 0.25


class MonitorState(StrEnum):
    """Lifecycle of the refresh loop."""

    INITIALIZING = "initializing"
    RENDERING = "rendering"
    SLEEPING = "sleeping"
    TERMINATED = "terminated"


class MonitorController:
    """Run the live dashboard for a set of applications.

    Example:
        controller = MonitorController(client, config)
        controller.run()
    """

    def __init__(
        self,
        client: KubernetesClient,
        config: MonitorConfig,
        console: Console | None = None,
        sections: Sequence[SectionRenderer] | None = None,
        max_passes: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._client = client
        self._config = config
        self._console = console or Console()
        self._max_passes = max_passes
        self._clock = clock
        self._stop_requested = False
        self.state = MonitorState.INITIALIZING
        self.passes = 0
        if sections is None:
            resolver = ResourceResolver(ClusterQueryService(client))
            sections = build_sections(
                resolver,
                extras=config.extra_sections,
                log_tail_lines=config.log_tail_lines,
                event_limit=config.event_limit,
            )
        self._sections = list(sections)
        self._log = logger.bind(namespace=config.namespace)

    @property
    def sections(self) -> list[SectionRenderer]:
        """Sections in render order."""
        return list(self._sections)

    @property
    def stopped(self) -> bool:
        """Whether a stop was requested."""
        return self._stop_requested

    def initialize(self) -> None:
        """Check that the API is reachable and the namespace exists.

        Raises:
            MonitorPreconditionError: If either check fails.
        """
        self.state = MonitorState.INITIALIZING
        namespace = self._config.namespace
        if not self._client.check_connection():
            raise MonitorPreconditionError(
                f"Cannot reach the Kubernetes API (context: {self._client.current_context})"
            )
        try:
            exists = self._client.namespace_exists(namespace)
        except KubernetesError as e:
            raise MonitorPreconditionError(
                f"Cannot check namespace '{namespace}': {e.message}", namespace=namespace
            ) from e
        if not exists:
            raise MonitorPreconditionError(
                f"Namespace '{namespace}' does not exist", namespace=namespace
            )
        self._log.info("monitor_initialized", context=self._client.current_context)

    def run(self) -> int:
        """Run until stopped or ``max_passes`` is reached.

        Returns:
            Number of completed passes.

        Raises:
            MonitorPreconditionError: If the startup checks fail. Nothing is
                rendered in that case.
        """
        try:
            self.initialize()
            while not self.stopped:
                self.render_pass()
                if self._max_passes is not None and self.passes >= self._max_passes:
                    break
                self.state = MonitorState.SLEEPING
                if self._sleep(self._config.refresh_interval):
                    break
        except KeyboardInterrupt:
            self.stop()
        self.state = MonitorState.TERMINATED
        self._log.info("monitor_stopped", passes=self.passes)
        self._console.print()
        self._console.print(Text(STOPPED_MESSAGE, style=Colors.WARNING))
        return self.passes

    def render_pass(self) -> list[SectionResult]:
        """Render one full dashboard pass."""
        self.state = MonitorState.RENDERING
        self._console.clear()
        self._console.print(self._header())
        results: list[SectionResult] = []
        for section in self._sections:
            result = self._render_section(section)
            if result is not None:
                results.append(result)
        self.passes += 1
        if self._max_passes is None or self.passes < self._max_passes:
            self._console.print(self._footer())
        return results

    def stop(self) -> None:
        """Request termination. Safe to call from a signal handler."""
        self._stop_requested = True

    def _sleep(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; True if a stop was requested meanwhile."""
        deadline = time.monotonic() + seconds
        while not self._stop_requested:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(remaining, STOP_POLL_INTERVAL))
        return True

    def _render_section(self, section: SectionRenderer) -> SectionResult | None:
        try:
            result = section.render(self._config.apps, self._config.namespace)
        except Exception as e:
            self._log.warning("section_failed", section=section.key, error=str(e), exc_info=True)
            self._print_section_title(section.icon, section.title)
            notice = f"⚠️  Section unavailable: {section.title.lower()} ({e})"
            self._console.print(Text(notice, style=Colors.ERROR))
            self._console.print()
            return None
        self._print_section_title(result.icon, result.title)
        self._console.print(result.body)
        self._console.print()
        return result

    def _print_section_title(self, icon: str, title: str) -> None:
        self._console.print(Text(f"{icon} {title}", style=f"bold {Colors.WARNING}"))
        self._console.print(Text("─" * SECTION_RULE_WIDTH, style=Colors.WARNING))

    def _header(self) -> Panel:
        config = self._config
        lines = Group(
            Text(f"📅 {self._clock().strftime('%Y-%m-%d %H:%M:%S')}"),
            Text.assemble("🎯 Apps: ", (" ".join(config.apps), f"bold {Colors.APP}")),
            Text.assemble("📦 Namespace: ", (config.namespace, Colors.NAME)),
            Text(f"🔄 Refresh interval: {config.refresh_interval}s"),
            Text(f"☸️  Context: {self._client.current_context}", style="dim"),
        )
        return Panel(
            lines,
            title="🔍 Kubernetes Application Monitor",
            title_align="left",
            border_style=Colors.BORDER,
        )

    def _footer(self) -> Panel:
        return Panel(
            Text(
                f"Next refresh in {self._config.refresh_interval} seconds... "
                "(Press Ctrl+C to stop)",
                style=Colors.INFO,
            ),
            border_style=Colors.BORDER,
        )
