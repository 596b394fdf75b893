"""Dashboard sections.

Each section renders one resource view across every monitored application:
it resolves the apps' objects, fills one table (or, for logs, one panel per
pod) and hands back a ``SectionResult``. A section never raises for missing
data; apps with nothing to show are consolidated by ``SectionAggregate``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar, cast

import structlog
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from k8s_app_monitor.cli.output import Colors, Table
from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesError,
    KubernetesFieldNotSetError,
)
from k8s_app_monitor.integrations.kubernetes.models import (
    ConfigMapSummary,
    DeploymentSummary,
    EventSummary,
    IngressSummary,
    PodSummary,
    ReplicaSetSummary,
    ResourceKind,
    SecretSummary,
    ServiceSummary,
    format_age,
)
from k8s_app_monitor.services.monitor.aggregation import SectionAggregate, SectionResult
from k8s_app_monitor.services.monitor.resolver import ResolutionResult, ResourceResolver
from k8s_app_monitor.services.monitor.status import (
    CATEGORY_STYLES,
    classify_event_type,
    count_text,
    status_text,
)

logger = structlog.get_logger()

Row = Sequence[RenderableType]

NONE_PLACEHOLDER = "<none>"

PHASE_FIELD = "status.phase"
READY_FIELD = "status.conditions[type=Ready].status"
RESTARTS_FIELD = "status.containerStatuses[0].restartCount"


class ExtraSection(StrEnum):
    """Optional sections enabled with ``--extra``."""

    REPLICASETS = "replicasets"
    INGRESSES = "ingresses"
    CONFIGMAPS = "configmaps"
    SECRETS = "secrets"


def _name(value: str) -> Text:
    return Text(value, style=Colors.NAME)


def _app(value: str) -> Text:
    return Text(value, style=Colors.APP)


def _age(value: str) -> Text:
    return Text(value, style=Colors.AGE)


def _or_none(value: str | None, style: str = "") -> Text:
    if not value:
        return Text(NONE_PLACEHOLDER, style="dim")
    return Text(value, style=style)


class SectionRenderer(ABC):
    """Base class for a table-shaped dashboard section.

    Subclasses declare the resource kind, the table headers and how one
    object becomes one row. The base class resolves each app, collects the
    outcomes and decides between a table and a consolidated notice.
    """

    key: ClassVar[str]
    title: ClassVar[str]
    icon: ClassVar[str]
    kind: ClassVar[ResourceKind]
    noun: ClassVar[str]
    headers: ClassVar[tuple[str, ...]] = ()
    informational: ClassVar[bool] = False

    def __init__(self, resolver: ResourceResolver) -> None:
        self._resolver = resolver
        self._log = logger.bind(section=self.key)

    def render(self, apps: Sequence[str], namespace: str) -> SectionResult:
        """Render this section for ``apps`` in ``namespace``."""
        aggregate = SectionAggregate(self.noun)
        table = Table(*self.headers)
        for app in apps:
            result = aggregate.add(self.resolve(app, namespace))
            for row in self.rows(result, namespace):
                table.add_row(*row)
        return self._finish(aggregate, apps, table)

    def resolve(self, app: str, namespace: str) -> ResolutionResult:
        """Resolve one app's objects for this section."""
        return self._resolver.resolve(app, self.kind, namespace)

    @abstractmethod
    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        """Yield table rows for one app's resolved objects."""

    def _finish(
        self,
        aggregate: SectionAggregate,
        apps: Sequence[str],
        body: RenderableType,
    ) -> SectionResult:
        if not aggregate.found_any:
            body = aggregate.not_found_notice(apps, informational=self.informational)
        elif isinstance(body, Table):
            body.caption = aggregate.missing_caption()
        self._log.debug(
            "section_rendered",
            found=aggregate.found_apps,
            missing=aggregate.missing_apps,
        )
        return SectionResult(
            key=self.key,
            title=self.title,
            icon=self.icon,
            body=body,
            found_apps=tuple(aggregate.found_apps),
            missing_apps=tuple(aggregate.missing_apps),
        )


class DeploymentsSection(SectionRenderer):
    key = "deployments"
    title = "DEPLOYMENTS"
    icon = "🚀"
    kind = ResourceKind.DEPLOYMENT
    noun = "deployments"
    headers = ("NAME", "READY", "UP-TO-DATE", "AVAILABLE", "AGE", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for deployment in cast("tuple[DeploymentSummary, ...]", result.objects):
            yield (
                _name(deployment.name),
                status_text(deployment.ready_token, label=deployment.ready_display),
                count_text(deployment.updated_replicas),
                status_text(deployment.available_condition),
                _age(deployment.age),
                _app(result.app),
            )


class ReplicaSetsSection(SectionRenderer):
    key = ExtraSection.REPLICASETS.value
    title = "REPLICASETS"
    icon = "🔄"
    kind = ResourceKind.REPLICA_SET
    noun = "replicasets"
    headers = ("NAME", "DESIRED", "CURRENT", "READY", "AGE", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for rs in cast("tuple[ReplicaSetSummary, ...]", result.objects):
            yield (
                _name(rs.name),
                count_text(rs.desired),
                count_text(rs.current),
                count_text(rs.ready),
                _age(rs.age),
                _app(result.app),
            )


class PodsSection(SectionRenderer):
    key = "pods"
    title = "PODS"
    icon = "🐳"
    kind = ResourceKind.POD
    noun = "pods"
    headers = ("NAME", "STATUS", "RESTARTS", "AGE", "NODE", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for pod in cast("tuple[PodSummary, ...]", result.objects):
            yield (
                _name(pod.name),
                status_text(pod.status),
                count_text(pod.restarts, restart_like=True),
                _age(pod.age),
                _or_none(pod.node_name, Colors.NODE),
                _app(result.app),
            )


class ServicesSection(SectionRenderer):
    key = "services"
    title = "SERVICES"
    icon = "🌐"
    kind = ResourceKind.SERVICE
    noun = "services"
    headers = ("NAME", "TYPE", "CLUSTER-IP", "EXTERNAL-IP", "PORT(S)", "AGE", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for svc in cast("tuple[ServiceSummary, ...]", result.objects):
            yield (
                _name(svc.name),
                Text(svc.type, style=Colors.WARNING),
                _or_none(svc.cluster_ip, Colors.INFO),
                _or_none(svc.external_ip, Colors.SUCCESS),
                Text(svc.ports_display, style=Colors.AGE),
                _age(svc.age),
                _app(result.app),
            )


class PodHealthSection(SectionRenderer):
    """Per-pod health read field by field from the live object.

    Each pod costs three extra reads. A field that is simply not set yet
    (no container statuses on a freshly scheduled pod) falls back to a
    placeholder; any other failure marks the whole row unavailable.
    """

    key = "pod-health"
    title = "POD HEALTH STATUS"
    icon = "💊"
    kind = ResourceKind.POD
    noun = "pods"
    headers = ("POD NAME", "PHASE", "READY", "RESTARTS", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for pod in result.objects:
            try:
                phase = self._read(pod.name, namespace, PHASE_FIELD, "Unknown")
                ready = self._read(pod.name, namespace, READY_FIELD, "Unknown")
                restarts = self._read(pod.name, namespace, RESTARTS_FIELD, "0")
            except KubernetesError as e:
                self._log.warning("pod_health_unavailable", pod=pod.name, error=str(e))
                yield (
                    _name(pod.name),
                    Text("⚠️  unavailable", style=Colors.ERROR),
                    Text("-", style="dim"),
                    Text("-", style="dim"),
                    _app(result.app),
                )
                continue
            yield (
                _name(pod.name),
                status_text(phase),
                status_text(ready),
                count_text(restarts, restart_like=True),
                _app(result.app),
            )

    def _read(self, pod_name: str, namespace: str, field_path: str, default: str) -> str:
        try:
            return self._resolver.queries.get_field(
                ResourceKind.POD, namespace, pod_name, field_path
            )
        except KubernetesFieldNotSetError:
            return default


class EventsSection(SectionRenderer):
    """Most recent events whose involved object belongs to an app.

    Events are ordered oldest to newest and only the last ``event_limit``
    per app are kept.
    """

    key = "events"
    title = "RECENT EVENTS"
    icon = "📋"
    kind = ResourceKind.EVENT
    noun = "events"
    headers = ("LAST SEEN", "TYPE", "REASON", "OBJECT", "MESSAGE", "APP")
    informational = True

    def __init__(self, resolver: ResourceResolver, event_limit: int = 5) -> None:
        super().__init__(resolver)
        self._event_limit = event_limit

    def resolve(self, app: str, namespace: str) -> ResolutionResult:
        result = super().resolve(app, namespace)
        if not result.found:
            return result
        events = sorted(result.objects, key=_event_sort_key)
        kept = tuple(events[-self._event_limit :]) if self._event_limit > 0 else ()
        return ResolutionResult(app=result.app, kind=result.kind, objects=kept, tier=result.tier)

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for event in cast("tuple[EventSummary, ...]", result.objects):
            category = classify_event_type(event.type)
            yield (
                _age(format_age(event.last_seen)),
                Text(event.type, style=CATEGORY_STYLES[category]),
                Text(event.reason or "", style="bold"),
                Text(event.object_display),
                Text(event.message or ""),
                _app(result.app),
            )


def _event_sort_key(event: Any) -> datetime:
    stamp = getattr(event, "last_seen", None)
    if not stamp:
        return datetime.min.replace(tzinfo=UTC)
    try:
        parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=UTC)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


class LogsSection(SectionRenderer):
    """Tail of every matched pod's log, one panel per pod."""

    key = "logs"
    title = "POD LOGS"
    icon = "📄"
    kind = ResourceKind.POD
    noun = "pods"

    def __init__(self, resolver: ResourceResolver, tail_lines: int = 10) -> None:
        super().__init__(resolver)
        self._tail_lines = tail_lines

    def render(self, apps: Sequence[str], namespace: str) -> SectionResult:
        aggregate = SectionAggregate(self.noun)
        panels: list[RenderableType] = []
        for app in apps:
            result = aggregate.add(self.resolve(app, namespace))
            panels.extend(self.rows(result, namespace))
        return self._finish(aggregate, apps, Group(*panels))

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[RenderableType]:
        for pod in cast("tuple[PodSummary, ...]", result.objects):
            yield self._pod_panel(pod, result.app, namespace)

    def _pod_panel(self, pod: PodSummary, app: str, namespace: str) -> RenderableType:
        try:
            logs = self._resolver.queries.tail_logs(
                namespace, pod.name, self._tail_lines, container=pod.log_container
            )
        except KubernetesError as e:
            self._log.warning("logs_unavailable", pod=pod.name, error=str(e))
            return Text(f"❌ Unable to fetch logs for pod: {pod.name}", style=Colors.ERROR)
        body = Text(logs.rstrip("\n")) if logs.strip() else Text("(no log output)", style="dim")
        title = Text.assemble(
            "🔍 Logs for pod: ",
            (pod.name, Colors.NAME),
            " (app: ",
            (app, Colors.APP),
            ")",
        )
        return Panel(body, title=title, title_align="left", border_style=Colors.INFO)


class IngressesSection(SectionRenderer):
    key = ExtraSection.INGRESSES.value
    title = "INGRESS"
    icon = "🔀"
    kind = ResourceKind.INGRESS
    noun = "ingresses"
    headers = ("NAME", "CLASS", "HOSTS", "ADDRESS", "AGE", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for ingress in cast("tuple[IngressSummary, ...]", result.objects):
            yield (
                _name(ingress.name),
                _or_none(ingress.class_name),
                Text(",".join(ingress.hosts) or "*"),
                _or_none(",".join(ingress.addresses), Colors.SUCCESS),
                _age(ingress.age),
                _app(result.app),
            )


class ConfigMapsSection(SectionRenderer):
    key = ExtraSection.CONFIGMAPS.value
    title = "CONFIGMAPS"
    icon = "🗂"
    kind = ResourceKind.CONFIG_MAP
    noun = "configmaps"
    headers = ("NAME", "KEYS", "AGE", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for cm in cast("tuple[ConfigMapSummary, ...]", result.objects):
            yield (
                _name(cm.name),
                _or_none(", ".join(cm.data_keys)),
                _age(cm.age),
                _app(result.app),
            )


class SecretsSection(SectionRenderer):
    """Secrets by name, type and key names. Values are never read."""

    key = ExtraSection.SECRETS.value
    title = "SECRETS"
    icon = "🔐"
    kind = ResourceKind.SECRET
    noun = "secrets"
    headers = ("NAME", "TYPE", "KEYS", "AGE", "APP")

    def rows(self, result: ResolutionResult, namespace: str) -> Iterable[Row]:
        for secret in cast("tuple[SecretSummary, ...]", result.objects):
            yield (
                _name(secret.name),
                _or_none(secret.type),
                _or_none(", ".join(secret.data_keys)),
                _age(secret.age),
                _app(result.app),
            )


def build_sections(
    resolver: ResourceResolver,
    extras: Iterable[ExtraSection | str] = (),
    log_tail_lines: int = 10,
    event_limit: int = 5,
) -> list[SectionRenderer]:
    """Build the ordered section list for one dashboard.

    The fixed order is deployments, pods, services, pod health, events and
    logs. Replica sets, when enabled, follow deployments; the remaining
    extras follow logs.
    """
    enabled = {ExtraSection(e) for e in extras}
    sections: list[SectionRenderer] = [DeploymentsSection(resolver)]
    if ExtraSection.REPLICASETS in enabled:
        sections.append(ReplicaSetsSection(resolver))
    sections.extend(
        [
            PodsSection(resolver),
            ServicesSection(resolver),
            PodHealthSection(resolver),
            EventsSection(resolver, event_limit=event_limit),
            LogsSection(resolver, tail_lines=log_tail_lines),
        ]
    )
    if ExtraSection.INGRESSES in enabled:
        sections.append(IngressesSection(resolver))
    if ExtraSection.CONFIGMAPS in enabled:
        sections.append(ConfigMapsSection(resolver))
    if ExtraSection.SECRETS in enabled:
        sections.append(SecretsSection(resolver))
    return sections
