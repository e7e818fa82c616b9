"""Serverless function entrypoint (``api/index.js``).

The entry re-exports the bundled server. If the bundle cannot be loaded at
cold start it falls back to a bare Express app serving the static output.
"""

from __future__ import annotations

from pathlib import Path

from deploy_builder.logging import get_logger

log = get_logger(__name__)

_ENTRYPOINT_JS = """\
// Serverless function entrypoint: loads the server bundle built by esbuild.
const path = require('path');

let app;

try {{
  app = require('../{dist}/index.js');
}} catch (error) {{
  console.log('Error loading {dist}/index.js, using fallback server:', error.message);

  const express = require('express');
  const fallbackApp = express();

  fallbackApp.use(express.static(path.join(__dirname, '../{public}')));

  fallbackApp.get('*', (req, res) => {{
    res.sendFile(path.join(__dirname, '../{public}/index.html'));
  }});

  app = fallbackApp;
}}

module.exports = app;
"""


def render_api_entrypoint(dist_dir: str = "dist", public_dir: str = "dist/public") -> str:
    return _ENTRYPOINT_JS.format(
        dist=dist_dir.strip("/").replace("\\", "/"),
        public=public_dir.strip("/").replace("\\", "/"),
    )


def write_api_entrypoint(
    api_dir: Path, dist_dir: str = "dist", public_dir: str = "dist/public"
) -> Path:
    api_dir.mkdir(parents=True, exist_ok=True)
    target = api_dir / "index.js"
    target.write_text(render_api_entrypoint(dist_dir, public_dir), encoding="utf-8")
    log.info("Serverless entrypoint written to %s", target)
    return target
