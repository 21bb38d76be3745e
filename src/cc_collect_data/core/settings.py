"""Collector configuration and environment overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

PROBLEM_LIMIT_ENV = "PROBLEM_LIMIT"
COMMAND_TIMEOUT_ENV = "CC_COLLECT_COMMAND_TIMEOUT"


class CollectSettings(BaseModel):
    """Settings shared by every stage of a collection run."""

    model_config = ConfigDict(frozen=True)

    runtime_name: str = Field(default="cc-runtime", description="Runtime binary looked up on PATH.")
    project_type: str = Field(default="cc", description="Prefix of the runtime's project-specific options.")
    project_tag: str = Field(
        default="clear-containers", description="Directory name used by the fallback config paths."
    )
    bug_url: str = Field(
        default="https://github.com/clearcontainers/runtime/issues/new",
        description="Where the report should be filed.",
    )
    problem_limit: int = Field(default=50, ge=0, description="Problem lines kept per component.")
    command_timeout: float = Field(default=60.0, gt=0, description="Seconds allowed per external command.")

    @property
    def config_paths_option(self) -> str:
        return f"--{self.project_type}-show-default-config-paths"

    @property
    def env_command(self) -> str:
        return f"{self.project_type}-env"

    @property
    def fallback_config_paths(self) -> tuple[str, str]:
        return (
            f"/etc/{self.project_tag}/configuration.toml",
            f"/usr/share/defaults/{self.project_tag}/configuration.toml",
        )


def _env_override(environ: Mapping[str, str], name: str, field_name: str) -> dict[str, str]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return {}
    return {field_name: raw.strip()}


def load_settings(
    environ: Mapping[str, str] | None = None,
    base: CollectSettings | None = None,
) -> CollectSettings:
    """Return settings with environment overrides applied."""
    environ = os.environ if environ is None else environ
    base = base or CollectSettings()

    overrides: dict[str, str] = {}
    overrides.update(_env_override(environ, PROBLEM_LIMIT_ENV, "problem_limit"))
    overrides.update(_env_override(environ, COMMAND_TIMEOUT_ENV, "command_timeout"))
    if not overrides:
        return base

    try:
        return CollectSettings.model_validate({**base.model_dump(), **overrides})
    except ValidationError as exc:
        bad = exc.errors()[0]["loc"][0]
        env_name = PROBLEM_LIMIT_ENV if bad == "problem_limit" else COMMAND_TIMEOUT_ENV
        raise ValueError(f"{env_name} is invalid: {overrides[bad]!r}") from exc
