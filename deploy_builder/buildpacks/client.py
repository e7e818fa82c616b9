"""Client buildpack: install dependencies and run the project's build script."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from deploy_builder.detect.client import detect
from deploy_builder.installer.env_node import prepare_node_env
from deploy_builder.logging import get_logger
from deploy_builder.types import ClientReport

log = get_logger(__name__)


def build_command(report: ClientReport) -> list[str]:
    if report.package_manager == "pnpm" and shutil.which("pnpm"):
        return ["pnpm", "run", "build"]
    return ["npm", "run", "build"]


def install(ctx) -> ClientReport:
    client = Path(ctx.root) / ctx.settings.client_dir
    report = detect(client)
    if not report.exists:
        log.warning("Client directory %s not found, nothing to install", client)
        return report
    for note in report.notes:
        log.info(note)
    prepare_node_env(client, report)
    return report


def build(ctx) -> Path:
    """Run the client build; return its output directory.

    Raises ``RuntimeError`` when the build finished without producing
    ``dist/`` in the client directory.
    """
    client = Path(ctx.root) / ctx.settings.client_dir
    report = detect(client)
    if not report.exists:
        raise FileNotFoundError(f"Client directory {client} not found")

    cmd = build_command(report)
    exe = shutil.which(cmd[0])
    if exe is None:
        raise FileNotFoundError(f"{cmd[0]} not found on PATH")
    log.info("Executing: %s", " ".join(cmd))
    subprocess.run([exe, *cmd[1:]], cwd=client, check=True)

    out = client / "dist"
    if not out.is_dir():
        raise RuntimeError(f"Client build directory not found: {out}")
    return out
