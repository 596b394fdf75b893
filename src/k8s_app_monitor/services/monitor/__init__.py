"""Dashboard engine: resolution, classification, sections and the refresh loop."""

from k8s_app_monitor.services.monitor.aggregation import SectionAggregate, SectionResult
from k8s_app_monitor.services.monitor.controller import MonitorController, MonitorState
from k8s_app_monitor.services.monitor.resolver import (
    LabelSelectorTier,
    NamePrefixTier,
    ResolutionResult,
    ResolutionTier,
    ResourceResolver,
    matches_app_name,
)
from k8s_app_monitor.services.monitor.sections import (
    ExtraSection,
    SectionRenderer,
    build_sections,
)
from k8s_app_monitor.services.monitor.status import StatusCategory, classify

__all__ = [
    "ExtraSection",
    "LabelSelectorTier",
    "MonitorController",
    "MonitorState",
    "NamePrefixTier",
    "ResolutionResult",
    "ResolutionTier",
    "ResourceResolver",
    "SectionAggregate",
    "SectionRenderer",
    "SectionResult",
    "StatusCategory",
    "build_sections",
    "classify",
    "matches_app_name",
]
