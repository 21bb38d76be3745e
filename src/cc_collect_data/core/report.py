"""Report assembly.

Sections are produced one at a time, in ``SECTION_ORDER``, each external command
finishing before the next starts so that repeated runs produce comparable
documents. The whole report is built in memory before anything is written.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .. import __version__
from .config_files import read_config_files, resolve_config_paths
from .inventory import PACKAGE_MANAGERS, probe_container_managers, probe_packages
from .journal import COMPONENT_SOURCES, DATA_SOURCE, scan_component
from .markdown import SEPARATOR, code, command_output, heading, quoted
from .models import ConfigFile, RuntimeHandle, ScanResult
from .patterns import DEFAULT_PROBLEM_PATTERN, ProblemPattern
from .process import CommandRunner
from .runtime import ensure_root, resolve_runtime
from .settings import CollectSettings

LOGGER = logging.getLogger(__name__)

SCRIPT_NAME = "cc-collect-data"


class SectionKind(str, Enum):
    """Major report sections, declared in rendering order."""

    META = "meta"
    RUNTIME = "runtime"
    RUNTIME_CONFIG = "runtime-config"
    LOGS = "logs"
    CONTAINER_MANAGERS = "container-managers"
    PACKAGES = "packages"


SECTION_ORDER: tuple[SectionKind, ...] = tuple(SectionKind)


@dataclass(frozen=True, slots=True)
class ReportSection:
    """A titled block of rendered markdown."""

    kind: SectionKind
    title: str
    blocks: tuple[str, ...]
    level: int = 1

    def render(self) -> str:
        return "\n\n".join((heading(self.title, self.level), *self.blocks))


@dataclass(frozen=True, slots=True)
class Report:
    sections: tuple[ReportSection, ...]

    def section(self, kind: SectionKind) -> ReportSection:
        for s in self.sections:
            if s.kind == kind:
                return s
        raise KeyError(kind)

    def render(self) -> str:
        parts: list[str] = []
        for s in self.sections:
            parts.append(s.render())
            parts.append(SEPARATOR)
        return "\n\n".join(parts) + "\n"


def _scan_blocks(scan: ScanResult) -> list[str]:
    name = scan.source.name
    blocks = [scan.note] if scan.note else []
    if scan.found:
        blocks.extend((f"Recent {name} problems found in {DATA_SOURCE}:", quoted("\n".join(scan.lines))))
        return blocks
    blocks.append(f"No recent {name} problems found in {DATA_SOURCE}.")
    return blocks


def _config_file_blocks(cfg: ConfigFile) -> list[str]:
    if cfg.contents is not None:
        return [heading(f"Config file {code(cfg.path)}", 2), quoted(cfg.contents)]
    if cfg.error is not None:
        return [f"Config file {code(cfg.path)} could not be read: {cfg.error}"]
    return [f"Config file {code(cfg.path)} not found"]


class ReportBuilder:
    """Builds every report section for one resolved runtime."""

    def __init__(
        self,
        runtime: RuntimeHandle,
        *,
        runner: CommandRunner,
        settings: CollectSettings,
        pattern: ProblemPattern = DEFAULT_PROBLEM_PATTERN,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.runtime = runtime
        self.runner = runner
        self.settings = settings
        self.pattern = pattern
        self.clock = clock
        self._builders: dict[SectionKind, Callable[[], Awaitable[ReportSection]]] = {
            SectionKind.META: self._meta,
            SectionKind.RUNTIME: self._runtime,
            SectionKind.RUNTIME_CONFIG: self._runtime_config,
            SectionKind.LOGS: self._logs,
            SectionKind.CONTAINER_MANAGERS: self._container_managers,
            SectionKind.PACKAGES: self._packages,
        }

    @property
    def timeout(self) -> float:
        return self.settings.command_timeout

    async def build(self) -> Report:
        sections: list[ReportSection] = []
        for kind in SECTION_ORDER:
            LOGGER.debug("Building section %s", kind.value)
            sections.append(await self._builders[kind]())
        return Report(sections=tuple(sections))

    async def _meta(self) -> ReportSection:
        now = self.clock().strftime("%Y-%m-%d.%H:%M:%S.%f")
        return ReportSection(
            kind=SectionKind.META,
            title="Meta details",
            blocks=(
                f"Running {code(SCRIPT_NAME)} version {code(__version__)} at {code(now)}.",
                f"Please attach this report to an issue at {self.settings.bug_url}",
            ),
        )

    async def _runtime(self) -> ReportSection:
        env_cmd = self.settings.env_command
        argv = [str(self.runtime.path), env_cmd]
        result = await self.runner.run(argv, timeout=self.timeout)
        return ReportSection(
            kind=SectionKind.RUNTIME,
            title="Runtime",
            blocks=(
                f"Runtime is {code(str(self.runtime.path))}.",
                heading(code(env_cmd), 2),
                command_output(" ".join(argv), result.output),
            ),
        )

    async def _runtime_config(self) -> ReportSection:
        paths = await resolve_config_paths(
            self.runtime,
            runner=self.runner,
            option=self.settings.config_paths_option,
            fallbacks=self.settings.fallback_config_paths,
            timeout=self.timeout,
        )
        blocks = [
            heading("Runtime default config files", 2),
            quoted("\n".join(paths.reported)),
            heading("Runtime config file contents", 2),
        ]
        for cfg in await read_config_files(paths.resolved):
            blocks.extend(_config_file_blocks(cfg))
        return ReportSection(kind=SectionKind.RUNTIME_CONFIG, title="Runtime config files", blocks=tuple(blocks))

    async def _logs(self) -> ReportSection:
        blocks: list[str] = []
        for source in COMPONENT_SOURCES:
            scan = await scan_component(
                source,
                runner=self.runner,
                limit=self.settings.problem_limit,
                pattern=self.pattern,
                timeout=self.timeout,
            )
            blocks.append(heading(f"{source.name.capitalize()} logs", 2))
            blocks.extend(_scan_blocks(scan))
        return ReportSection(kind=SectionKind.LOGS, title="Logfiles", blocks=tuple(blocks))

    async def _container_managers(self) -> ReportSection:
        blocks: list[str] = []
        for probe in await probe_container_managers(runner=self.runner, timeout=self.timeout):
            if not probe.present:
                blocks.append(f"No {code(probe.command)}")
                continue
            blocks.append(heading(probe.title, 2))
            blocks.extend(command_output(r.command_line, r.output) for r in probe.results)
        return ReportSection(kind=SectionKind.CONTAINER_MANAGERS, title="Container manager details", blocks=tuple(blocks))

    async def _packages(self) -> ReportSection:
        found = await probe_packages(runner=self.runner, timeout=self.timeout)
        if not found:
            checked = ", ".join(code(manager) for manager, _ in PACKAGE_MANAGERS)
            return ReportSection(
                kind=SectionKind.PACKAGES,
                title="Packages",
                blocks=(f"No package manager found (checked {checked}).",),
            )

        blocks: list[str] = []
        for result in found.values():
            if result.ok and not result.output.strip():
                blocks.append(f"No known packages listed by {code(result.command_line)}.")
            else:
                blocks.append(command_output(result.command_line, result.output))
        return ReportSection(kind=SectionKind.PACKAGES, title="Packages", blocks=tuple(blocks))


async def collect_report(
    settings: CollectSettings,
    *,
    runner: CommandRunner,
    euid: int | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> Report:
    """Check the preconditions, then build the full report.

    Raises a ``CollectError`` subclass for the fatal conditions.
    """
    ensure_root(euid)
    runtime = resolve_runtime(settings.runtime_name, runner=runner)
    LOGGER.info("Collecting data for runtime %s", runtime.path)
    builder = ReportBuilder(runtime, runner=runner, settings=settings, clock=clock)
    return await builder.build()
