"""Server buildpack: bundle the Node server into a single module with esbuild.

Output is one CommonJS file (``dist/index.js`` by default) so the serverless
entrypoint can ``require`` it. Runtime dependencies listed as externals stay
out of the bundle and are resolved from ``node_modules`` at run time.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

from deploy_builder.logging import get_logger
from deploy_builder.scaffold.server import find_server_entry

log = get_logger(__name__)

ESBUILD_TARGET = "node16"


def esbuild_command(entry: str, outfile: str, externals: Iterable[str] = ()) -> list[str]:
    cmd = [
        "npx",
        "esbuild",
        entry,
        "--bundle",
        "--platform=node",
        f"--target={ESBUILD_TARGET}",
        "--format=cjs",
        f"--outfile={outfile}",
        "--minify",
        "--sourcemap",
    ]
    cmd += [f"--external:{name}" for name in externals]
    return cmd


def build(ctx) -> Path:
    """Bundle the server for *ctx*; return the output file.

    Raises ``FileNotFoundError`` when there is no server entry or no ``npx``,
    and ``subprocess.CalledProcessError`` when esbuild fails.
    """
    root = Path(ctx.root)
    settings = ctx.settings
    entry = find_server_entry(root / settings.server_dir)
    if entry is None:
        raise FileNotFoundError(f"No server entry under {root / settings.server_dir}")

    outfile = root / settings.dist_dir / "index.js"
    cmd = esbuild_command(
        entry.relative_to(root).as_posix(),
        outfile.relative_to(root).as_posix(),
        settings.server_externals,
    )
    npx = shutil.which(cmd[0])
    if npx is None:
        raise FileNotFoundError("npx not found on PATH")

    log.info("Executing: %s", " ".join(cmd))
    subprocess.run([npx, *cmd[1:]], cwd=root, check=True)
    return outfile
