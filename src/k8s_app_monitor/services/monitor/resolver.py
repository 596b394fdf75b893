"""Resource resolution: which cluster objects belong to an application.

Label metadata across a namespace is rarely consistent, so resolution is a
two-step strategy:

1. ``LabelSelectorTier`` asks the API for objects labeled ``app=<name>``.
2. ``NamePrefixTier`` runs only when tier 1 found nothing. It lists every
   object of the kind and keeps those named ``<name>`` or ``<name>-...``,
   minus names that look like an auto-generated child one level deeper
   than the kind's own generation (e.g. pods when listing replica sets).

Both tiers swallow query failures and report zero results instead; a
refresh pass never fails because one lookup did. The prefix heuristic can
over-match applications whose names share a leading segment, and can miss
objects whose generated suffix starts with an uppercase letter.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from k8s_app_monitor.integrations.kubernetes.models import K8sEntityBase, ResourceKind

if TYPE_CHECKING:
    from k8s_app_monitor.services.kubernetes.query_service import ClusterQueryService

logger = structlog.get_logger()

APP_LABEL = "app"

# How many generated "-segment"s an object's own name carries beyond the app
# name: ReplicaSets are "<app>-<hash>", pods "<app>-<hash>-<suffix>".
GENERATION_DEPTH: dict[ResourceKind, int] = {
    ResourceKind.REPLICA_SET: 1,
}
DEFAULT_GENERATION_DEPTH = 2


class ResolutionTier(StrEnum):
    """Which tier produced a resolution result."""

    LABEL = "label"
    NAME_PREFIX = "name-prefix"
    NONE = "none"


@dataclass(frozen=True)
class ResolutionResult:
    """Objects found for one (application, kind) pair in one pass."""

    app: str
    kind: ResourceKind
    objects: tuple[K8sEntityBase, ...] = ()
    tier: ResolutionTier = ResolutionTier.NONE

    @property
    def found(self) -> bool:
        """Whether anything matched."""
        return bool(self.objects)


def matches_app_name(name: str, app: str, depth: int = DEFAULT_GENERATION_DEPTH) -> bool:
    """Apply the name-prefix heuristic.

    ``name`` matches when it equals ``app``, or starts with ``app + "-"``
    and does not carry a further generated segment past ``depth``. A
    segment counts as generated when it starts with a lowercase ASCII
    letter or digit.

    >>> matches_app_name("app1-worker-abc123", "app1")
    True
    >>> matches_app_name("app1-worker-abc123-xyz789", "app1")
    False
    """
    if not app:
        return False
    if name == app:
        return True
    prefix = f"{app}-"
    if not name.startswith(prefix):
        return False
    segments = name[len(prefix) :].split("-")
    if len(segments) <= depth:
        return True
    return not _looks_generated(segments[depth])


def _looks_generated(segment: str) -> bool:
    return bool(segment) and segment[0].isascii() and (segment[0].islower() or segment[0].isdigit())


class LabelSelectorTier:
    """Tier 1: objects labeled ``app=<name>``."""

    tier = ResolutionTier.LABEL

    def __init__(self, queries: ClusterQueryService, label_key: str = APP_LABEL) -> None:
        self._queries = queries
        self._label_key = label_key

    def lookup(self, app: str, kind: ResourceKind, namespace: str) -> list[K8sEntityBase]:
        """Return labeled objects, or an empty list on any query failure."""
        try:
            return list(self._queries.list_by_label(kind, namespace, self._label_key, app))
        except Exception as e:
            logger.debug(
                "label_lookup_failed",
                app=app,
                kind=str(kind),
                namespace=namespace,
                error=str(e),
            )
            return []


class NamePrefixTier:
    """Tier 2: objects whose name (or ``match_name``) fits the prefix heuristic."""

    tier = ResolutionTier.NAME_PREFIX

    def __init__(
        self,
        queries: ClusterQueryService,
        depths: dict[ResourceKind, int] | None = None,
    ) -> None:
        self._queries = queries
        self._depths = GENERATION_DEPTH if depths is None else depths

    def depth_for(self, kind: ResourceKind) -> int:
        """Own-generation depth for a kind."""
        return self._depths.get(kind, DEFAULT_GENERATION_DEPTH)

    def lookup(self, app: str, kind: ResourceKind, namespace: str) -> list[K8sEntityBase]:
        """Return prefix-matched objects, or an empty list on any query failure."""
        try:
            candidates = self._queries.list_all(kind, namespace)
        except Exception as e:
            logger.debug(
                "prefix_lookup_failed",
                app=app,
                kind=str(kind),
                namespace=namespace,
                error=str(e),
            )
            return []
        depth = self.depth_for(kind)
        return [obj for obj in candidates if matches_app_name(obj.match_name, app, depth)]


class ResourceResolver:
    """Resolve an application's objects of one kind, tier by tier.

    Results are never cached; every call goes back to the API.
    """

    def __init__(
        self,
        queries: ClusterQueryService,
        tiers: Sequence[LabelSelectorTier | NamePrefixTier] | None = None,
    ) -> None:
        self._queries = queries
        if tiers is None:
            tiers = (LabelSelectorTier(queries), NamePrefixTier(queries))
        self._tiers = tuple(tiers)

    @property
    def queries(self) -> ClusterQueryService:
        """Underlying query service, for secondary per-object queries."""
        return self._queries

    def resolve(self, app: str, kind: ResourceKind, namespace: str) -> ResolutionResult:
        """Resolve ``app``'s objects of ``kind`` in ``namespace``.

        Returns:
            The first tier's non-empty result, or an empty result with
            ``tier == ResolutionTier.NONE``.
        """
        for tier in self._tiers:
            objects = tier.lookup(app, kind, namespace)
            if objects:
                logger.debug(
                    "resolved", app=app, kind=str(kind), tier=str(tier.tier), count=len(objects)
                )
                return ResolutionResult(app=app, kind=kind, objects=tuple(objects), tier=tier.tier)
        return ResolutionResult(app=app, kind=kind)
