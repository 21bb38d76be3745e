"""Collection core: problem matching, journal scanning, probes and report assembly."""

from __future__ import annotations

from .errors import CollectError, ConfigPathQueryError, InsufficientPrivilegeError, RuntimeNotFoundError
from .journal import COMPONENT_SOURCES, component_source, scan_component
from .models import CommandResult, ComponentSource, ScanResult, SelectorKind
from .patterns import DEFAULT_PROBLEM_PATTERN, ProblemPattern
from .process import CommandRunner, SubprocessRunner
from .report import SECTION_ORDER, Report, ReportBuilder, SectionKind, collect_report
from .settings import CollectSettings, load_settings

__all__ = [
    "COMPONENT_SOURCES",
    "DEFAULT_PROBLEM_PATTERN",
    "SECTION_ORDER",
    "CollectError",
    "CollectSettings",
    "CommandResult",
    "CommandRunner",
    "ComponentSource",
    "ConfigPathQueryError",
    "InsufficientPrivilegeError",
    "ProblemPattern",
    "Report",
    "ReportBuilder",
    "RuntimeNotFoundError",
    "ScanResult",
    "SectionKind",
    "SelectorKind",
    "SubprocessRunner",
    "collect_report",
    "component_source",
    "load_settings",
    "scan_component",
]
