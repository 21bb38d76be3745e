"""External command invocation.

Every external call goes through a ``CommandRunner`` with an explicit argument
list; nothing is ever passed through a shell.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Callable, Sequence
from contextlib import suppress
from typing import Protocol

from .models import CommandResult

LOGGER = logging.getLogger(__name__)

# Exit codes used when the command never produced one of its own.
EXIT_NOT_RUN = 127
EXIT_TIMED_OUT = 124

# Lines of streamed output kept in the result for error reporting.
STREAM_HEAD_LINES = 20
STREAM_CHUNK_SIZE = 64 * 1024


class CommandRunner(Protocol):
    """Command lookup and execution interface."""

    def which(self, name: str) -> str | None:
        """Return the absolute path of a command on PATH, or None."""
        ...

    async def run(self, argv: Sequence[str], *, timeout: float | None = None) -> CommandResult:
        """Run a command to completion, capturing stdout and stderr together."""
        ...

    async def stream(
        self,
        argv: Sequence[str],
        *,
        on_line: Callable[[str], None],
        timeout: float | None = None,
    ) -> CommandResult:
        """Run a command, handing each output line to `on_line` as it arrives.

        The result only keeps the first lines of output. Lines delivered
        before a timeout stay delivered.
        """
        ...


def have_cmd(runner: CommandRunner, name: str) -> bool:
    """Return True if the command is available."""
    return runner.which(name) is not None


def _timed_out(args: tuple[str, ...], timeout: float | None) -> CommandResult:
    LOGGER.warning("%s timed out after %s seconds", args[0], timeout)
    return CommandResult(
        argv=args,
        exit_code=EXIT_TIMED_OUT,
        output=f"Command timed out after {timeout:g} seconds",
    )


class SubprocessRunner:
    """CommandRunner backed by asyncio subprocesses."""

    def __init__(self, *, encoding: str = "utf-8", decode_errors: str = "replace") -> None:
        self.encoding = encoding
        self.decode_errors = decode_errors

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    async def _spawn(self, args: tuple[str, ...]) -> asyncio.subprocess.Process | CommandResult:
        LOGGER.debug("Running %s", " ".join(args))
        try:
            return await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            LOGGER.warning("Cannot run %s: %s", args[0], exc)
            return CommandResult(argv=args, exit_code=EXIT_NOT_RUN, output=str(exc))

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        # The child may already have exited on its own.
        with suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()

    def _decode(self, raw: bytes) -> str:
        return raw.decode(self.encoding, errors=self.decode_errors).rstrip("\r")

    async def run(self, argv: Sequence[str], *, timeout: float | None = None) -> CommandResult:
        args = tuple(argv)
        proc = await self._spawn(args)
        if isinstance(proc, CommandResult):
            return proc

        try:
            out, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            return _timed_out(args, timeout)

        text = out.decode(self.encoding, errors=self.decode_errors)
        return CommandResult(argv=args, exit_code=proc.returncode or 0, output=text)

    async def stream(
        self,
        argv: Sequence[str],
        *,
        on_line: Callable[[str], None],
        timeout: float | None = None,
    ) -> CommandResult:
        args = tuple(argv)
        proc = await self._spawn(args)
        if isinstance(proc, CommandResult):
            return proc

        head: list[str] = []

        def emit(raw: bytes) -> None:
            line = self._decode(raw)
            if len(head) < STREAM_HEAD_LINES:
                head.append(line)
            on_line(line)

        async def pump() -> int:
            assert proc.stdout is not None
            pending = b""
            while True:
                chunk = await proc.stdout.read(STREAM_CHUNK_SIZE)
                if not chunk:
                    break
                *complete, pending = (pending + chunk).split(b"\n")
                for raw in complete:
                    emit(raw)
            if pending:
                emit(pending)
            return await proc.wait()

        try:
            exit_code = await asyncio.wait_for(pump(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            return _timed_out(args, timeout)

        return CommandResult(argv=args, exit_code=exit_code, output="\n".join(head))
