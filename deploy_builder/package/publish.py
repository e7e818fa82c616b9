"""Publish the client build output into the serving directory."""

from __future__ import annotations

import shutil
from pathlib import Path

from deploy_builder.logging import get_logger

log = get_logger(__name__)


def publish_client(source: Path, public_dir: Path) -> list[Path]:
    """Copy the contents of *source* into *public_dir*.

    A missing or empty *source* is not an error: nothing is copied and an
    empty list is returned, leaving the fallback page to fill the gap.
    """
    if not source.is_dir() or not any(source.iterdir()):
        log.warning("Nothing to publish from %s", source)
        return []

    public_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, public_dir, dirs_exist_ok=True)
    copied = sorted(public_dir / p.relative_to(source) for p in source.rglob("*") if p.is_file())
    log.info("Client files copied to %s", public_dir)
    return copied
