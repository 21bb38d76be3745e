from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from typing import NoReturn

from cc_collect_data.core.errors import CollectError
from cc_collect_data.core.process import CommandRunner, SubprocessRunner
from cc_collect_data.core.report import SCRIPT_NAME, collect_report
from cc_collect_data.core.runtime import ensure_root
from cc_collect_data.core.settings import CollectSettings, load_settings

LOGGER = logging.getLogger(__name__)

DESCRIPTION = """\
Summary: Collect data about an installation of Clear Containers.

Description: Run this script as root to obtain a markdown-formatted summary
  of the environment of the Clear Containers installation. The output of this
  script can be pasted directly into a github issue at the address below:

      {bug_url}

Environment:
  PROBLEM_LIMIT   maximum problem lines shown per component (default: 50)
"""


def _configure_logging() -> None:
    """Log to stderr so the report on stdout stays clean."""
    level_name = os.getenv("CC_COLLECT_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_parser(settings: CollectSettings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=SCRIPT_NAME,
        usage=f"{SCRIPT_NAME} [help|-h|--help]",
        description=DESCRIPTION.format(bug_url=settings.bug_url),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("command", nargs="?", choices=["help"], help="Show this help and exit")
    return p


def _fail(message: str, code: int) -> NoReturn:
    print(f"{SCRIPT_NAME}: ERROR: {message}", file=sys.stderr)
    raise SystemExit(code)


def main(argv: Sequence[str] | None = None, *, runner: CommandRunner | None = None) -> None:
    parser = _build_parser(CollectSettings())
    args = parser.parse_args(argv)
    if args.command == "help":
        parser.print_help()
        return

    _configure_logging()

    # Privilege comes first: a non-root run always exits 1.
    try:
        ensure_root()
    except CollectError as e:
        _fail(str(e), 1)

    try:
        settings = load_settings()
    except ValueError as e:
        _fail(str(e), 2)

    runner = runner or SubprocessRunner()
    try:
        report = asyncio.run(collect_report(settings, runner=runner))
    except CollectError as e:
        LOGGER.debug("Fatal collection error", exc_info=True)
        _fail(str(e), 1)

    sys.stdout.write(report.render())


if __name__ == "__main__":
    main()
