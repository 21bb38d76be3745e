"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from typing import Any

from cc_collect_data.core.journal import component_source, scan_component
from cc_collect_data.core.models import ScanResult
from cc_collect_data.core.process import CommandRunner, SubprocessRunner
from cc_collect_data.core.report import collect_report
from cc_collect_data.core.runtime import ensure_root
from cc_collect_data.core.settings import CollectSettings, load_settings

HARD_LIMIT = 5000


def _scan_to_dict(scan: ScanResult) -> dict[str, Any]:
    """Convert a ScanResult into a JSON-serializable dict."""
    return {
        "component": scan.source.name,
        "program": scan.source.program,
        "found": scan.found,
        "count": len(scan.lines),
        "lines": list(scan.lines),
        "note": scan.note,
    }


async def collect_report_impl(
    *,
    runner: CommandRunner | None = None,
    settings: CollectSettings | None = None,
    euid: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `collect_report` MCP tool."""
    settings = settings or load_settings()
    report = await collect_report(settings, runner=runner or SubprocessRunner(), euid=euid)
    return {"report": report.render()}


async def scan_component_logs_impl(
    *,
    component: str,
    limit: int | None = None,
    runner: CommandRunner | None = None,
    settings: CollectSettings | None = None,
    euid: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `scan_component_logs` MCP tool.

    Notes
    -----
    - limit defaults to PROBLEM_LIMIT and is capped at HARD_LIMIT
    - reading the journal needs the same privilege as a full report
    """
    settings = settings or load_settings()
    source = component_source(component.strip().lower())
    if limit is None:
        limit = settings.problem_limit
    if limit < 0:
        raise ValueError("limit must be >= 0")
    limit = min(limit, HARD_LIMIT)

    ensure_root(euid)
    scan = await scan_component(
        source,
        runner=runner or SubprocessRunner(),
        limit=limit,
        timeout=settings.command_timeout,
    )
    return _scan_to_dict(scan)
