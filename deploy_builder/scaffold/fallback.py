"""Fallback page written when the client build produced nothing servable."""

from __future__ import annotations

import html
from pathlib import Path

from deploy_builder.logging import get_logger

log = get_logger(__name__)

_FALLBACK_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: sans-serif; display: flex; justify-content: center; align-items: center; min-height: 100vh; margin: 0; background-color: #f5f5f5; }}
    .container {{ text-align: center; max-width: 600px; padding: 2rem; background: white; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }}
    h1 {{ margin-top: 0; color: #333; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Welcome to {title}</h1>
    <p>The site is currently being set up. Please check back later.</p>
  </div>
</body>
</html>
"""


def render_fallback_html(title: str) -> str:
    return _FALLBACK_HTML.format(title=html.escape(title))


def write_fallback_html(public_dir: Path, title: str = "LostShop") -> Path:
    public_dir.mkdir(parents=True, exist_ok=True)
    target = public_dir / "index.html"
    target.write_text(render_fallback_html(title), encoding="utf-8")
    log.info("Created fallback %s", target)
    return target
