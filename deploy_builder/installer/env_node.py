"""Node dependency installation for the client project.

Runs a frozen lockfile install via ``pnpm`` (preferred) or ``npm ci``, falling
back to a plain ``npm install``. Extra packages the build needs but the
project may not declare (Tailwind toolchain, TypeScript typings) are added
before the main install.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from deploy_builder.logging import get_logger
from deploy_builder.types import ClientReport

log = get_logger(__name__)

TAILWIND_PACKAGES = ["tailwindcss", "postcss", "autoprefixer"]
TYPESCRIPT_PACKAGES = ["typescript", "@types/node", "@types/react", "@types/react-dom"]


def _has(cmd: str) -> bool:
    return shutil.which(cmd) is not None


def _require(cmd: str) -> str:
    exe = shutil.which(cmd)
    if exe is None:
        raise FileNotFoundError(f"{cmd} not found on PATH")
    return exe


def extra_packages(report: ClientReport) -> list[str]:
    extras: list[str] = []
    if report.tailwind:
        extras += TAILWIND_PACKAGES
    if report.typescript:
        extras += TYPESCRIPT_PACKAGES
    return extras


def install_commands(report: ClientReport) -> list[list[str]]:
    """Return the argv lists to run, in order, for *report*."""
    cmds: list[list[str]] = []
    extras = extra_packages(report)
    use_pnpm = report.package_manager == "pnpm" and _has("pnpm")

    if extras:
        cmds.append(["pnpm", "add", *extras] if use_pnpm else ["npm", "install", *extras])

    if use_pnpm:
        cmds.append(["pnpm", "i", "--frozen-lockfile"])
    elif report.frozen_lockfile and report.package_manager == "npm" and not extras:
        # npm ci would discard the extras just added
        cmds.append(["npm", "ci"])
    else:
        cmds.append(["npm", "install"])
    return cmds


def prepare_node_env(root: Path, report: ClientReport) -> None:
    if not (root / "package.json").exists():
        log.info("No package.json in %s, skipping dependency install", root)
        return

    for cmd in install_commands(report):
        exe = _require(cmd[0])
        log.info("Executing: %s", " ".join(cmd))
        subprocess.run([exe, *cmd[1:]], cwd=root, check=True)
