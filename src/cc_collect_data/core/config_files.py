"""Runtime configuration file discovery and loading."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import aiofiles

from .errors import ConfigPathQueryError
from .models import ConfigFile, ConfigPathSet, RuntimeHandle
from .process import CommandRunner
from .runtime import runtime_version

LOGGER = logging.getLogger(__name__)

DEFAULT_FALLBACK_PATHS: tuple[str, str] = (
    "/etc/clear-containers/configuration.toml",
    "/usr/share/defaults/clear-containers/configuration.toml",
)


def merge_config_paths(reported: Iterable[str], fallbacks: Iterable[str] = DEFAULT_FALLBACK_PATHS) -> tuple[str, ...]:
    """Union the reported paths with the fallbacks, de-duplicated and sorted."""
    return tuple(sorted({*reported, *fallbacks}))


async def resolve_config_paths(
    runtime: RuntimeHandle,
    *,
    runner: CommandRunner,
    option: str = "--cc-show-default-config-paths",
    fallbacks: Iterable[str] = DEFAULT_FALLBACK_PATHS,
    timeout: float | None = None,
) -> ConfigPathSet:
    """Ask the runtime for its config search path.

    A runtime that cannot answer is fatal: the rest of the report would not
    reflect what the runtime actually loads.
    """
    result = await runner.run([str(runtime.path), option], timeout=timeout)
    if not result.ok:
        version = await runtime_version(runtime, runner=runner, timeout=timeout)
        raise ConfigPathQueryError(version)

    reported = tuple(result.output.split())
    LOGGER.debug("Runtime reported %d config paths", len(reported))
    return ConfigPathSet(reported=reported, resolved=merge_config_paths(reported, fallbacks))


async def read_config_file(path: str, *, encoding: str = "utf-8", decode_errors: str = "replace") -> ConfigFile:
    """Read one config file; a missing file is not an error."""
    p = Path(path)
    if not p.exists():
        return ConfigFile(path=path, contents=None)
    try:
        async with aiofiles.open(p, encoding=encoding, errors=decode_errors) as f:
            contents = await f.read()
    except OSError as exc:
        LOGGER.warning("Cannot read config file %s: %s", path, exc)
        return ConfigFile(path=path, contents=None, error=exc.strerror or str(exc))
    return ConfigFile(path=path, contents=contents)


async def read_config_files(paths: Iterable[str]) -> list[ConfigFile]:
    """Read each path in order."""
    return [await read_config_file(path) for path in paths]
