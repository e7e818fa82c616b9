"""Client project detector.

Heuristics:
- Look for ``package.json`` in the client directory
- TypeScript when ``src/main.tsx``/``src/App.tsx`` or a ``tsconfig.json`` exist
- Tailwind when a ``tailwind.config.{js,cjs,ts}`` sits in the client directory
  or ``tailwindcss`` is a declared dependency
- Package manager from the lockfile present (pnpm first, then npm)
"""

from __future__ import annotations

import json
from pathlib import Path

from deploy_builder.types import ClientReport

_TS_MARKERS = ["src/main.tsx", "src/App.tsx", "tsconfig.json"]
_TAILWIND_CONFIGS = ["tailwind.config.js", "tailwind.config.cjs", "tailwind.config.ts"]


def _read_package_json(root: Path) -> dict | None:
    pj = root / "package.json"
    if not pj.exists():
        return None
    try:
        return json.loads(pj.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def detect(root: Path) -> ClientReport:
    if not root.is_dir():
        return ClientReport(notes=[f"No client directory at {root}"])

    notes: list[str] = []
    pkg = _read_package_json(root)
    if pkg is None:
        notes.append("No readable package.json found")
        pkg = {}

    deps = set((pkg.get("dependencies") or {}).keys()) | set(
        (pkg.get("devDependencies") or {}).keys()
    )

    typescript = any((root / m).exists() for m in _TS_MARKERS) or "typescript" in deps
    tailwind = any((root / c).exists() for c in _TAILWIND_CONFIGS)
    if tailwind:
        notes.append("TailwindCSS configuration detected")
    elif "tailwindcss" in deps:
        tailwind = True
        notes.append("tailwindcss dependency declared")

    manager = None
    frozen = False
    if (root / "pnpm-lock.yaml").exists():
        manager, frozen = "pnpm", True
    elif (root / "package-lock.json").exists():
        manager, frozen = "npm", True
    elif pkg:
        manager = "npm"

    return ClientReport(
        exists=True,
        has_manifest=bool(pkg),
        typescript=typescript,
        tailwind=tailwind,
        package_manager=manager,
        frozen_lockfile=frozen,
        notes=notes,
    )
