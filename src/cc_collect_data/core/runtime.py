"""Startup preconditions: privilege and runtime binary resolution."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import InsufficientPrivilegeError, RuntimeNotFoundError
from .models import RuntimeHandle
from .process import CommandRunner


def ensure_root(euid: int | None = None) -> None:
    """Raise unless the effective user is root."""
    if euid is None:
        euid = os.geteuid()
    if euid != 0:
        raise InsufficientPrivilegeError("Need to run as root")


def resolve_runtime(runtime_name: str, *, runner: CommandRunner) -> RuntimeHandle:
    """Find the runtime binary on PATH."""
    found = runner.which(runtime_name)
    if not found:
        raise RuntimeNotFoundError(runtime_name)
    return RuntimeHandle(name=runtime_name, path=Path(found))


async def runtime_version(runtime: RuntimeHandle, *, runner: CommandRunner, timeout: float | None = None) -> str:
    """Return the runtime's --version output folded onto one line."""
    result = await runner.run([str(runtime.path), "--version"], timeout=timeout)
    return " ".join(result.output.split())
