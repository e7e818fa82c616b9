"""Temporary isolation of root-level tool configs.

Nested build tools (Vite running PostCSS, Tailwind) walk up the directory tree
looking for config files. A root-level ``postcss.config.js`` meant for another
toolchain then gets picked up by the client build. While isolated, each such
file is renamed to ``<name>.bak`` and renamed back when the scope exits.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from pathlib import Path

from deploy_builder.logging import get_logger

log = get_logger(__name__)

BACKUP_SUFFIX = ".bak"


@dataclass(frozen=True)
class ConfigBackup:
    original: Path
    backup: Path


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def take_backup(path: Path) -> ConfigBackup | None:
    """Rename *path* aside. Returns None when there is nothing to move."""
    if not path.exists():
        return None
    target = backup_path(path)
    if target.exists():
        # Left over from an interrupted run; never clobber it.
        log.warning("Backup %s already exists, leaving %s in place", target, path.name)
        return None
    os.replace(path, target)
    log.info("Moved %s aside to %s", path.name, target.name)
    return ConfigBackup(original=path, backup=target)


def restore_backup(backup: ConfigBackup) -> bool:
    if not backup.backup.exists():
        log.warning("Backup %s vanished, cannot restore %s", backup.backup, backup.original)
        return False
    os.replace(backup.backup, backup.original)
    log.info("Restored %s", backup.original.name)
    return True


def _release(backup: ConfigBackup) -> None:
    try:
        restore_backup(backup)
    except OSError:
        log.exception("Failed to restore %s; backup kept at %s", backup.original, backup.backup)


@contextmanager
def isolate_configs(root: Path, names: Iterable[str]) -> Iterator[list[ConfigBackup]]:
    """Move the named configs under *root* aside for the duration of the block.

    Yields the backups actually taken. Every one is restored exactly once on
    exit, including when the block raises.
    """
    backups: list[ConfigBackup] = []
    with ExitStack() as stack:
        for name in names:
            backup = take_backup(root / name)
            if backup is None:
                continue
            backups.append(backup)
            stack.callback(_release, backup)
        yield backups
