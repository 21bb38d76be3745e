"""Markdown rendering helpers shared by the report sections."""

from __future__ import annotations

import re

SEPARATOR = "---"
FENCE = "```"

_BACKTICK_RUN = re.compile(r"`+")


def heading(text: str, level: int = 1) -> str:
    if level not in (1, 2):
        raise ValueError("heading level must be 1 or 2")
    return f"{'#' * level} {text}"


def code(text: str) -> str:
    """Inline code span."""
    return f"`{text}`"


def quoted(text: str) -> str:
    """Fenced verbatim block.

    The fence is longer than any backtick run in `text`, so embedded fences
    cannot close it early.
    """
    body = text.rstrip("\n")
    longest = max((len(run) for run in _BACKTICK_RUN.findall(body)), default=0)
    fence = "`" * max(len(FENCE), longest + 1)
    return f"{fence}\n{body}\n{fence}"


def command_output(command_line: str, output: str) -> str:
    """Label plus fenced output of a command."""
    return f'Output of "{code(command_line)}":\n\n{quoted(output)}'
