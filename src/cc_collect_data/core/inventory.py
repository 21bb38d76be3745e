"""Package version and container manager probes."""

from __future__ import annotations

import logging
import re

from .models import CommandResult, ContainerManagerProbe
from .process import CommandRunner, have_cmd

LOGGER = logging.getLogger(__name__)

PACKAGE_NAMES: tuple[str, ...] = (
    "cc-oci-runtime",
    "cc-runtime",
    "cc-proxy",
    "cc-shim",
    "kernel-cc",
    "linux-container",
    "clear-containers-image",
    "qemu-lite",
    "qemu-vanilla",
)

PACKAGE_PATTERN = re.compile("(" + "|".join(re.escape(name) for name in PACKAGE_NAMES) + ")")

# manager command -> list-installed argv
PACKAGE_MANAGERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("dpkg", ("dpkg", "-l")),
    ("rpm", ("rpm", "-qa")),
)

DOCKER_PROBES: tuple[tuple[str, ...], ...] = (
    ("docker", "version"),
    ("docker", "info"),
    ("systemctl", "show", "docker"),
)

KUBERNETES_PROBES: tuple[tuple[str, ...], ...] = (
    ("kubectl", "version"),
    ("kubectl", "config", "view"),
    ("systemctl", "show", "kubelet"),
)

# Only relevant on a Kubernetes node.
CRIO_PROBES: tuple[tuple[str, ...], ...] = (
    ("crio", "--version"),
    ("systemctl", "show", "crio"),
)


def filter_packages(output: str) -> str:
    """Keep only the lines that mention one of the known packages."""
    return "\n".join(line for line in output.splitlines() if PACKAGE_PATTERN.search(line))


async def probe_packages(*, runner: CommandRunner, timeout: float | None = None) -> dict[str, CommandResult]:
    """List the installed component packages for each package manager present."""
    out: dict[str, CommandResult] = {}
    for manager, argv in PACKAGE_MANAGERS:
        if not have_cmd(runner, manager):
            LOGGER.debug("Package manager %s not present", manager)
            continue
        result = await runner.run(argv, timeout=timeout)
        out[manager] = CommandResult(
            argv=result.argv,
            exit_code=result.exit_code,
            output=filter_packages(result.output) if result.ok else result.output,
        )
    return out


async def _run_all(
    probes: tuple[tuple[str, ...], ...],
    *,
    runner: CommandRunner,
    timeout: float | None,
) -> list[CommandResult]:
    # Sub-probes are independent: a failing one keeps its output and the rest still run.
    return [await runner.run(argv, timeout=timeout) for argv in probes]


async def probe_container_managers(
    *,
    runner: CommandRunner,
    timeout: float | None = None,
) -> list[ContainerManagerProbe]:
    """Probe docker and kubectl (with crio nested under kubectl)."""
    probes: list[ContainerManagerProbe] = []

    if have_cmd(runner, "docker"):
        results = await _run_all(DOCKER_PROBES, runner=runner, timeout=timeout)
        probes.append(ContainerManagerProbe(command="docker", title="Docker", present=True, results=tuple(results)))
    else:
        probes.append(ContainerManagerProbe(command="docker", title="Docker", present=False))

    if have_cmd(runner, "kubectl"):
        results = await _run_all(KUBERNETES_PROBES, runner=runner, timeout=timeout)
        if have_cmd(runner, "crio"):
            results += await _run_all(CRIO_PROBES, runner=runner, timeout=timeout)
        probes.append(
            ContainerManagerProbe(command="kubectl", title="Kubernetes", present=True, results=tuple(results))
        )
    else:
        probes.append(ContainerManagerProbe(command="kubectl", title="Kubernetes", present=False))

    return probes
