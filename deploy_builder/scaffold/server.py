"""Minimal server entry for projects that ship only static assets."""

from __future__ import annotations

from pathlib import Path

from deploy_builder.logging import get_logger

log = get_logger(__name__)

SERVER_ENTRY_CANDIDATES = ["index.ts", "index.js"]

_SERVER_JS = """\
// Minimal server file for static site
const express = require('express');
const path = require('path');

const app = express();

app.use(express.static(path.join(__dirname, '../client/dist')));

app.get('*', (req, res) => {
  res.sendFile(path.join(__dirname, '../client/dist/index.html'));
});

module.exports = app;
"""


def find_server_entry(server_dir: Path) -> Path | None:
    for name in SERVER_ENTRY_CANDIDATES:
        p = server_dir / name
        if p.exists():
            return p
    return None


def ensure_server_entry(server_dir: Path) -> Path:
    """Return the server entry, writing ``index.js`` when none exists."""
    entry = find_server_entry(server_dir)
    if entry is not None:
        return entry
    server_dir.mkdir(parents=True, exist_ok=True)
    entry = server_dir / "index.js"
    entry.write_text(_SERVER_JS, encoding="utf-8")
    log.info("Created %s", entry)
    return entry
