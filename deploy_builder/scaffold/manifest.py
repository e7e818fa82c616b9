"""Reference ``package.json.vercel`` pointing the platform build at this tool."""

from __future__ import annotations

import json
from pathlib import Path

from deploy_builder.logging import get_logger

log = get_logger(__name__)

DEPLOY_BUILD_COMMAND = "deploy-builder build"
MANIFEST_NAME = "package.json.vercel"


def write_deploy_manifest(root: Path, build_command: str = DEPLOY_BUILD_COMMAND) -> Path | None:
    """Copy ``package.json`` to ``package.json.vercel`` with ``scripts.build`` set.

    An existing reference file is kept as is. Returns None when there is no
    ``package.json`` to derive from.
    """
    target = root / MANIFEST_NAME
    if target.exists():
        return target
    source = root / "package.json"
    if not source.exists():
        log.info("No package.json at %s, skipping %s", root, MANIFEST_NAME)
        return None

    package = json.loads(source.read_text(encoding="utf-8"))
    scripts = package.get("scripts") or {}
    scripts["build"] = build_command
    package["scripts"] = scripts
    target.write_text(json.dumps(package, indent=2) + "\n", encoding="utf-8")
    log.info("Created %s reference file", MANIFEST_NAME)
    return target
