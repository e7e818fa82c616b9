"""Path separator normalization for bundled server output.

A server bundle produced on Windows can embed backslash paths that break on
the Linux deployment target. Every backslash is rewritten to a forward slash,
doubled (escaped) ones first.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from pathlib import Path

from deploy_builder.logging import get_logger
from deploy_builder.retry import retry

log = get_logger(__name__)


def normalize_separators(text: str) -> str:
    return text.replace("\\\\", "/").replace("\\", "/")


def fix_paths(files: Iterable[Path]) -> list[Path]:
    """Rewrite each existing file in place; return the files that changed."""
    changed: list[Path] = []
    for path in files:
        if not path.is_file():
            continue
        content = path.read_text(encoding="utf-8")
        fixed = normalize_separators(content)
        if fixed != content:
            path.write_text(fixed, encoding="utf-8")
            changed.append(path)
            log.info("Fixed paths in %s", path)
    return changed


def fix_paths_when_ready(
    files: Iterable[Path],
    attempts: int = 10,
    delay: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Wait for each target to appear, then normalize it.

    The bundler may still be flushing its output when this runs, so each file
    is polled for up to *attempts* checks. Returns False if any target never
    appeared; absence is logged, not raised.
    """
    all_found = True
    for path in files:
        outcome = retry(path.is_file, attempts=attempts, delay=delay, sleep=sleep)
        if not outcome.ok:
            log.warning("Gave up waiting for %s after %d attempts", path, outcome.attempts)
            all_found = False
            continue
        fix_paths([path])
    return all_found
