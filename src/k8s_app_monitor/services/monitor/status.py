"""Status classification and color coding.

Maps raw status tokens coming out of the API (pod phases, condition
statuses, waiting reasons) to a small set of semantic categories, and
categories to terminal styles. Every function here is total: unexpected
input degrades to ``StatusCategory.UNKNOWN`` instead of raising.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from rich.text import Text

from k8s_app_monitor.cli.output.theme import Colors


class StatusCategory(StrEnum):
    """Semantic category of a status token."""

    HEALTHY = "healthy"
    PENDING = "pending"
    FAILED = "failed"
    UNKNOWN = "unknown"


HEALTHY_TOKENS = frozenset({"Running", "Ready", "True", "Available"})
PENDING_TOKENS = frozenset({"Pending", "ContainerCreating"})
FAILED_TOKENS = frozenset({"Failed", "Error", "CrashLoopBackOff", "ImagePullBackOff", "False"})

CATEGORY_STYLES: dict[StatusCategory, str] = {
    StatusCategory.HEALTHY: Colors.SUCCESS,
    StatusCategory.PENDING: Colors.WARNING,
    StatusCategory.FAILED: Colors.ERROR,
    StatusCategory.UNKNOWN: Colors.NEUTRAL,
}

CATEGORY_ICONS: dict[StatusCategory, str] = {
    StatusCategory.HEALTHY: "✅",
    StatusCategory.PENDING: "⏳",
    StatusCategory.FAILED: "❌",
    StatusCategory.UNKNOWN: "🔄",
}


def classify(token: Any) -> StatusCategory:
    """Classify a raw status token.

    Matching is exact and case-sensitive, as the API reports these values.
    """
    if not isinstance(token, str):
        return StatusCategory.UNKNOWN
    if token in HEALTHY_TOKENS:
        return StatusCategory.HEALTHY
    if token in PENDING_TOKENS:
        return StatusCategory.PENDING
    if token in FAILED_TOKENS:
        return StatusCategory.FAILED
    return StatusCategory.UNKNOWN


def classify_count(value: Any, restart_like: bool = False) -> StatusCategory:
    """Classify an integer counter.

    Restart-like counters are healthy at zero and pending above it. Every
    other counter is neutral.
    """
    count = _as_int(value)
    if count is None or not restart_like:
        return StatusCategory.UNKNOWN
    if count == 0:
        return StatusCategory.HEALTHY
    if count > 0:
        return StatusCategory.PENDING
    return StatusCategory.UNKNOWN


def classify_event_type(event_type: Any) -> StatusCategory:
    """Classify an event type: Normal is healthy, Warning is pending."""
    if event_type == "Normal":
        return StatusCategory.HEALTHY
    if event_type == "Warning":
        return StatusCategory.PENDING
    return StatusCategory.UNKNOWN


def status_text(token: Any, label: str | None = None) -> Text:
    """Render a status token with its category icon and color.

    Args:
        token: Raw status token to classify.
        label: Text to show instead of the token (e.g. ``1/1`` for a readiness token).
    """
    category = classify(token)
    shown = label if label is not None else ("" if token is None else str(token))
    return Text(f"{CATEGORY_ICONS[category]} {shown}", style=CATEGORY_STYLES[category])


def count_text(value: Any, restart_like: bool = False) -> Text:
    """Render a counter; non-integers are shown as-is, unstyled."""
    if _as_int(value) is None:
        return Text("" if value is None else str(value))
    category = classify_count(value, restart_like)
    style = CATEGORY_STYLES[category] if restart_like else Colors.COUNT
    return Text(str(value), style=style)


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
