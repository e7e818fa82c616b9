"""Placeholder front-end project.

When the client source tree is missing, a minimal React + Vite app is written
so the client build still has something to compile.
"""

from __future__ import annotations

import json
from pathlib import Path

from deploy_builder.logging import get_logger

log = get_logger(__name__)

_VITE_CONFIG = """\
import { defineConfig } from 'vite';
import react from '@vitejs/plugin-react';

export default defineConfig({
  plugins: [react()],
});
"""

# Local, empty PostCSS config so the client build never walks up to the root one.
_POSTCSS_CONFIG = """\
export default {
  plugins: []
};
"""

_INDEX_HTML = """\
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{title}</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/src/main.jsx"></script>
  </body>
</html>
"""

_MAIN_JSX = """\
import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';
import './index.css';

ReactDOM.createRoot(document.getElementById('root')).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);
"""

_APP_JSX = """\
import React from 'react';

function App() {{
  return (
    <div className="app">
      <header>
        <h1>Welcome to {title}</h1>
      </header>
      <main>
        <p>Your site is being set up.</p>
        <p>This is a placeholder page created during deployment.</p>
      </main>
    </div>
  );
}}

export default App;
"""

_INDEX_CSS = """\
body {
  margin: 0;
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', sans-serif;
  -webkit-font-smoothing: antialiased;
  background-color: #f5f5f5;
}

.app {
  text-align: center;
  max-width: 800px;
  margin: 0 auto;
  padding: 2rem;
}

main {
  background-color: white;
  padding: 2rem;
  border-radius: 8px;
  box-shadow: 0 2px 4px rgba(0, 0, 0, 0.1);
}
"""


def client_package_json(app_name: str) -> dict:
    slug = app_name.strip().lower().replace(" ", "-") or "app"
    return {
        "name": f"{slug}-client",
        "private": True,
        "version": "0.0.0",
        "type": "module",
        "scripts": {"dev": "vite", "build": "vite build", "preview": "vite preview"},
        "dependencies": {"react": "^18.2.0", "react-dom": "^18.2.0"},
        "devDependencies": {"@vitejs/plugin-react": "^4.0.0", "vite": "^4.3.9"},
    }


def write_placeholder_client(client_dir: Path, app_name: str = "LostShop") -> list[Path]:
    """Create the placeholder app in *client_dir* if the directory is absent.

    Returns the files written; an existing directory is left untouched and
    yields an empty list.
    """
    if client_dir.exists():
        log.info("Client directory found, using existing client code")
        return []

    log.info("Client directory not found, creating a minimal client setup")
    files = {
        "package.json": json.dumps(client_package_json(app_name), indent=2) + "\n",
        "vite.config.js": _VITE_CONFIG,
        "postcss.config.js": _POSTCSS_CONFIG,
        "index.html": _INDEX_HTML.format(title=app_name),
        "src/main.jsx": _MAIN_JSX,
        "src/App.jsx": _APP_JSX.format(title=app_name),
        "src/index.css": _INDEX_CSS,
    }
    written: list[Path] = []
    for rel, content in files.items():
        path = client_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        written.append(path)
    log.info("Created minimal client application (%d files)", len(written))
    return written
