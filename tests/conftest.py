from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence

import pytest

from cc_collect_data.core.models import CommandResult


class FakeRunner:
    """Scripted stand-in for the process surface."""

    def __init__(
        self,
        commands: Iterable[str] = (),
        responses: Mapping[tuple[str, ...], tuple[int, str]] | None = None,
    ) -> None:
        self.paths = {name: f"/usr/bin/{name}" for name in commands}
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, ...]] = []

    def which(self, name: str) -> str | None:
        return self.paths.get(name)

    async def run(self, argv: Sequence[str], *, timeout: float | None = None) -> CommandResult:
        key = tuple(argv)
        self.calls.append(key)
        code, output = self.responses.get(key, (0, ""))
        return CommandResult(argv=key, exit_code=code, output=output)

    async def stream(
        self,
        argv: Sequence[str],
        *,
        on_line: Callable[[str], None],
        timeout: float | None = None,
    ) -> CommandResult:
        result = await self.run(argv, timeout=timeout)
        for line in result.output.splitlines():
            on_line(line)
        return result


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    def _make(
        commands: Iterable[str] = (),
        responses: Mapping[tuple[str, ...], tuple[int, str]] | None = None,
    ) -> FakeRunner:
        return FakeRunner(commands, responses)

    return _make


@pytest.fixture
def journal_lines() -> Callable[[int], str]:
    def _lines(count: int) -> str:
        return "\n".join(
            f'time="2025-12-30T08:{i // 60:02d}:{i % 60:02d}Z" level=error msg="failure {i}"'
            for i in range(count)
        )

    return _lines
