"""Fatal error types.

Only these conditions stop a collection run. Everything else is recorded in the
report as a degraded section.
"""

from __future__ import annotations


class CollectError(Exception):
    """Base class for conditions that abort the whole run."""


class InsufficientPrivilegeError(CollectError):
    """The collector is not running as root."""


class RuntimeNotFoundError(CollectError):
    """The runtime binary cannot be found on PATH."""

    def __init__(self, runtime_name: str) -> None:
        super().__init__(f"cannot find runtime '{runtime_name}'")
        self.runtime_name = runtime_name


class ConfigPathQueryError(CollectError):
    """The runtime refused to report its default config search path."""

    def __init__(self, runtime_version: str) -> None:
        super().__init__(
            f"failed to check config files - runtime is probably too old ({runtime_version})"
        )
        self.runtime_version = runtime_version
