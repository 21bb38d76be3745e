"""Core data models for data collection and report assembly."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class SelectorKind(str, Enum):
    """How a journal query selects the entries of a component."""

    IDENTIFIER = "-t"  # syslog identifier / process name
    UNIT = "-u"  # systemd unit


@dataclass(frozen=True, slots=True)
class ComponentSource:
    """One monitored component and the journal selector for its logs."""

    name: str
    program: str
    selector: SelectorKind


@dataclass(frozen=True, slots=True)
class LogQuery:
    """Journal query for one component plus the result cap."""

    source: ComponentSource
    limit: int

    def argv(self) -> list[str]:
        # -o cat: raw message text, -a: keep unprintable fields
        return ["journalctl", "-q", "-o", "cat", "-a", self.source.selector.value, self.source.program]


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Bounded problem lines found for one component."""

    source: ComponentSource
    lines: tuple[str, ...]
    note: str | None = None  # set when the journal could not be read

    @property
    def found(self) -> bool:
        return bool(self.lines)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one external command (combined stdout/stderr)."""

    argv: tuple[str, ...]
    exit_code: int
    output: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True, slots=True)
class RuntimeHandle:
    """The runtime binary resolved once at startup."""

    name: str
    path: Path


@dataclass(frozen=True, slots=True)
class ConfigPathSet:
    """Runtime-reported config paths and the resolved, de-duplicated set."""

    reported: tuple[str, ...]
    resolved: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ConfigFile:
    """A config path and its contents (None when the file is absent)."""

    path: str
    contents: str | None
    error: str | None = None  # set when the file exists but cannot be read

    @property
    def exists(self) -> bool:
        return self.contents is not None or self.error is not None


@dataclass(frozen=True, slots=True)
class ContainerManagerProbe:
    """Sub-probe results for one container manager."""

    command: str
    title: str
    present: bool
    results: tuple[CommandResult, ...] = field(default_factory=tuple)
