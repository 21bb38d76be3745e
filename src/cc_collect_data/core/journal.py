"""Per-component problem scanning over the system journal."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from .models import ComponentSource, LogQuery, ScanResult, SelectorKind
from .patterns import DEFAULT_PROBLEM_PATTERN, ProblemPattern
from .process import EXIT_TIMED_OUT, CommandRunner, have_cmd

LOGGER = logging.getLogger(__name__)

DATA_SOURCE = "system journal"

# Only lines carrying a structured timestamp are considered; this drops stack
# trace continuation lines and blank separators.
TIMESTAMP_MARKER = "time="

RUNTIME_SOURCE = ComponentSource(name="runtime", program="cc-runtime", selector=SelectorKind.IDENTIFIER)
PROXY_SOURCE = ComponentSource(name="proxy", program="cc-proxy", selector=SelectorKind.UNIT)
SHIM_SOURCE = ComponentSource(name="shim", program="cc-shim", selector=SelectorKind.IDENTIFIER)

COMPONENT_SOURCES: tuple[ComponentSource, ...] = (RUNTIME_SOURCE, PROXY_SOURCE, SHIM_SOURCE)


def component_source(name: str) -> ComponentSource:
    """Look up one of the monitored components by display name."""
    for source in COMPONENT_SOURCES:
        if source.name == name:
            return source
    valid = ", ".join(s.name for s in COMPONENT_SOURCES)
    raise ValueError(f"Unknown component '{name}'. Valid values: {valid}.")


class ProblemTail:
    """The most recent `limit` timestamped problem lines fed so far."""

    def __init__(self, limit: int, pattern: ProblemPattern = DEFAULT_PROBLEM_PATTERN) -> None:
        self.pattern = pattern
        self.lines: deque[str] = deque(maxlen=max(limit, 0))

    def feed(self, line: str) -> None:
        if TIMESTAMP_MARKER in line and self.pattern.matches(line):
            self.lines.append(line)


def select_problems(lines: Iterable[str], *, limit: int, pattern: ProblemPattern) -> tuple[str, ...]:
    """Keep timestamped problem lines, then the most recent `limit` of them."""
    tail = ProblemTail(limit, pattern)
    for line in lines:
        tail.feed(line)
    return tuple(tail.lines)


async def scan_component(
    source: ComponentSource,
    *,
    runner: CommandRunner,
    limit: int,
    pattern: ProblemPattern = DEFAULT_PROBLEM_PATTERN,
    timeout: float | None = None,
) -> ScanResult:
    """Return recent problem lines logged by one component.

    The journal is filtered as it streams in, so memory stays bounded by
    `limit`. An unreadable journal never raises: the result comes back empty
    with a note explaining why. A timed-out read keeps what it found so far.
    """
    query = LogQuery(source=source, limit=limit)
    argv = query.argv()

    if not have_cmd(runner, argv[0]):
        LOGGER.warning("%s not available, skipping %s logs", argv[0], source.name)
        return ScanResult(source=source, lines=(), note=f"No `{argv[0]}` available to read the {DATA_SOURCE}.")

    tail = ProblemTail(query.limit, pattern)
    result = await runner.stream(argv, on_line=tail.feed, timeout=timeout)
    lines = tuple(tail.lines)

    if result.exit_code == EXIT_TIMED_OUT:
        LOGGER.warning("Reading %s logs timed out, %d lines kept", source.name, len(lines))
        return ScanResult(source=source, lines=lines, note=f"Reading the {DATA_SOURCE} timed out; results may be incomplete.")
    if not result.ok:
        LOGGER.warning("Reading %s logs failed (exit %s)", source.name, result.exit_code)
        detail = result.output.strip().splitlines()
        reason = detail[0] if detail else f"exit code {result.exit_code}"
        return ScanResult(source=source, lines=(), note=f"Unable to read the {DATA_SOURCE}: {reason}")

    LOGGER.debug("%d %s problem lines kept", len(lines), source.name)
    return ScanResult(source=source, lines=lines)
