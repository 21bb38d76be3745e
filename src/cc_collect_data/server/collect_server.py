"""MCP server entrypoint (stdio transport).

Exposes the collector to MCP clients:
- collect_report: the full markdown report
- scan_component_logs: recent problem lines for one component

Run locally (stdio):
    python -m cc_collect_data.server.collect_server
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from cc_collect_data.tools.collect import collect_report_impl, scan_component_logs_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("CC_COLLECT_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("cc-collect-data", json_response=True)


@mcp.tool()
async def collect_report() -> dict[str, Any]:
    """Collect the full Clear Containers diagnostic report.

    Requires the server to run as root and the runtime to be on PATH.

    Returns
    -------
    dict:
        {"report": str} where report is markdown ready to attach to an issue.
    """
    return await collect_report_impl()


@mcp.tool()
async def scan_component_logs(component: str, limit: int | None = None) -> dict[str, Any]:
    """Return recent problem lines from the system journal for one component.

    Parameters
    ----------
    component:
        One of "runtime", "proxy" or "shim".
    limit:
        Maximum number of lines returned, most recent kept (default: PROBLEM_LIMIT).

    Returns
    -------
    dict:
        {"component", "program", "found", "count", "lines", "note"}
    """
    return await scan_component_logs_impl(component=component, limit=limit)


def main() -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
