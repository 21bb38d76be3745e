from __future__ import annotations

import os
from collections.abc import Callable, Sequence

import pytest

from cc_collect_data import cli
from cc_collect_data.core.models import CommandResult


class ForbiddenRunner:
    """Fails the test if anything is probed."""

    def which(self, name: str) -> str | None:
        raise AssertionError(f"unexpected lookup of {name}")

    async def run(self, argv: Sequence[str], *, timeout: float | None = None) -> CommandResult:
        raise AssertionError(f"unexpected command {argv}")

    async def stream(
        self, argv: Sequence[str], *, on_line: Callable[[str], None], timeout: float | None = None
    ) -> CommandResult:
        raise AssertionError(f"unexpected command {argv}")


@pytest.mark.parametrize("argv", [["-h"], ["--help"]])
def test_help_flags(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv, runner=ForbiddenRunner())

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "cc-collect-data [help|-h|--help]" in out
    assert "Collect data about an installation" in out


def test_help_word(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["help"], runner=ForbiddenRunner())

    captured = capsys.readouterr()
    assert "Collect data about an installation" in captured.out
    assert captured.err == ""


def test_not_root(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(os, "geteuid", lambda: 1000)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([], runner=ForbiddenRunner())

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Need to run as root" in captured.err


def test_runtime_not_found(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], make_runner) -> None:
    monkeypatch.setattr(os, "geteuid", lambda: 0)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([], runner=make_runner())

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "cannot find runtime 'cc-runtime'" in captured.err


def test_config_query_failure_writes_no_report(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], make_runner
) -> None:
    monkeypatch.setattr(os, "geteuid", lambda: 0)
    runner = make_runner(["cc-runtime"], {("/usr/bin/cc-runtime", "--cc-show-default-config-paths"): (1, "")})

    with pytest.raises(SystemExit) as excinfo:
        cli.main([], runner=runner)

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "runtime is probably too old" in captured.err


def test_invalid_problem_limit(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(os, "geteuid", lambda: 0)
    monkeypatch.setenv("PROBLEM_LIMIT", "lots")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([], runner=ForbiddenRunner())

    assert excinfo.value.code == 2
    assert "PROBLEM_LIMIT" in capsys.readouterr().err


def test_not_root_wins_over_invalid_problem_limit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(os, "geteuid", lambda: 1000)
    monkeypatch.setenv("PROBLEM_LIMIT", "lots")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([], runner=ForbiddenRunner())

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Need to run as root" in captured.err


def test_report_written_to_stdout(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], make_runner
) -> None:
    monkeypatch.setattr(os, "geteuid", lambda: 0)
    monkeypatch.delenv("PROBLEM_LIMIT", raising=False)
    runner = make_runner(["cc-runtime"], {("/usr/bin/cc-runtime", "--cc-show-default-config-paths"): (0, "")})

    cli.main([], runner=runner)

    out = capsys.readouterr().out
    assert out.startswith("# Meta details")
    assert "# Packages" in out
