from __future__ import annotations

import pytest

from cc_collect_data.core.journal import (
    COMPONENT_SOURCES,
    PROXY_SOURCE,
    RUNTIME_SOURCE,
    SHIM_SOURCE,
    ProblemTail,
    component_source,
    scan_component,
    select_problems,
)
from cc_collect_data.core.models import LogQuery, SelectorKind
from cc_collect_data.core.patterns import DEFAULT_PROBLEM_PATTERN
from cc_collect_data.core.process import EXIT_TIMED_OUT

RUNTIME_QUERY = ("journalctl", "-q", "-o", "cat", "-a", "-t", "cc-runtime")
PROXY_QUERY = ("journalctl", "-q", "-o", "cat", "-a", "-u", "cc-proxy")


def test_component_sources_are_fixed() -> None:
    assert [s.name for s in COMPONENT_SOURCES] == ["runtime", "proxy", "shim"]
    assert RUNTIME_SOURCE.selector is SelectorKind.IDENTIFIER
    assert PROXY_SOURCE.selector is SelectorKind.UNIT
    assert SHIM_SOURCE.selector is SelectorKind.IDENTIFIER


def test_query_selector_arguments() -> None:
    assert tuple(LogQuery(RUNTIME_SOURCE, 50).argv()) == RUNTIME_QUERY
    assert tuple(LogQuery(PROXY_SOURCE, 50).argv()) == PROXY_QUERY


def test_component_source_lookup() -> None:
    assert component_source("shim") is SHIM_SOURCE
    with pytest.raises(ValueError, match="Unknown component"):
        component_source("hypervisor")


def test_select_problems_requires_timestamp_marker() -> None:
    lines = [
        'time="2025-12-30T08:00:00Z" level=info msg="started"',
        "goroutine 1 [running]: error in stack trace",
        'time="2025-12-30T08:00:01Z" level=error msg="boom"',
    ]
    assert select_problems(lines, limit=10, pattern=DEFAULT_PROBLEM_PATTERN) == (lines[2],)


def test_select_problems_zero_limit_keeps_nothing() -> None:
    lines = ['time="x" error']
    assert select_problems(lines, limit=0, pattern=DEFAULT_PROBLEM_PATTERN) == ()


@pytest.mark.asyncio
async def test_scan_truncates_to_most_recent(make_runner, journal_lines) -> None:
    output = journal_lines(75)
    runner = make_runner(["journalctl"], {RUNTIME_QUERY: (0, output)})

    scan = await scan_component(RUNTIME_SOURCE, runner=runner, limit=50)

    assert scan.found
    assert scan.lines == tuple(output.splitlines()[-50:])
    assert scan.lines[0].endswith('msg="failure 25"')
    assert scan.lines[-1].endswith('msg="failure 74"')
    assert runner.calls == [RUNTIME_QUERY]


@pytest.mark.asyncio
async def test_scan_without_problems(make_runner) -> None:
    output = 'time="2025-12-30T08:00:00Z" level=info msg="all good"\n'
    runner = make_runner(["journalctl"], {PROXY_QUERY: (0, output)})

    scan = await scan_component(PROXY_SOURCE, runner=runner, limit=50)

    assert not scan.found
    assert scan.lines == ()
    assert scan.note is None


@pytest.mark.asyncio
async def test_scan_degrades_when_journal_unreadable(make_runner) -> None:
    runner = make_runner(["journalctl"], {RUNTIME_QUERY: (1, "Failed to open journal: Permission denied\n")})

    scan = await scan_component(RUNTIME_SOURCE, runner=runner, limit=50)

    assert not scan.found
    assert scan.note is not None
    assert "Permission denied" in scan.note


@pytest.mark.asyncio
async def test_scan_degrades_without_journalctl(make_runner) -> None:
    runner = make_runner()

    scan = await scan_component(SHIM_SOURCE, runner=runner, limit=50)

    assert not scan.found
    assert "journalctl" in (scan.note or "")
    assert runner.calls == []


def test_problem_tail_keeps_most_recent() -> None:
    tail = ProblemTail(3)
    for i in range(10):
        tail.feed(f'time="t{i}" level=error msg="failure {i}"')
        tail.feed(f'time="t{i}" level=info msg="fine {i}"')

    assert list(tail.lines) == [f'time="t{i}" level=error msg="failure {i}"' for i in (7, 8, 9)]


@pytest.mark.asyncio
async def test_scan_filters_long_journal_as_it_streams(make_runner, journal_lines) -> None:
    noise = "\n".join(f'time="2025-12-30T09:00:00Z" level=info msg="tick {i}"' for i in range(5000))
    output = "\n".join((journal_lines(200), noise))
    runner = make_runner(["journalctl"], {RUNTIME_QUERY: (0, output)})

    scan = await scan_component(RUNTIME_SOURCE, runner=runner, limit=10)

    assert len(scan.lines) == 10
    assert scan.lines[0].endswith('msg="failure 190"')
    assert scan.lines[-1].endswith('msg="failure 199"')
    assert scan.note is None


@pytest.mark.asyncio
async def test_scan_keeps_partial_results_on_timeout(make_runner, journal_lines) -> None:
    runner = make_runner(["journalctl"], {RUNTIME_QUERY: (EXIT_TIMED_OUT, journal_lines(5))})

    scan = await scan_component(RUNTIME_SOURCE, runner=runner, limit=50)

    assert scan.found
    assert len(scan.lines) == 5
    assert "timed out" in (scan.note or "")
