from __future__ import annotations

import json
from pathlib import Path

import pytest
from jsonschema import ValidationError

from deploy_builder.scaffold.client import write_placeholder_client
from deploy_builder.scaffold.entrypoint import write_api_entrypoint
from deploy_builder.scaffold.fallback import write_fallback_html
from deploy_builder.scaffold.manifest import MANIFEST_NAME, write_deploy_manifest
from deploy_builder.scaffold.server import ensure_server_entry
from deploy_builder.validator import CONFIG_FILENAME, load_settings


def _read_json(p: Path) -> dict:
    return json.loads(p.read_text(encoding="utf-8"))


def test_placeholder_client_written_when_missing(tmp_path: Path) -> None:
    client = tmp_path / "client"
    written = write_placeholder_client(client, app_name="Lost Shop")

    names = {p.relative_to(client).as_posix() for p in written}
    assert {"package.json", "index.html", "src/main.jsx", "src/App.jsx"} <= names

    pkg = _read_json(client / "package.json")
    assert pkg["name"] == "lost-shop-client"
    assert pkg["scripts"]["build"] == "vite build"
    assert "Welcome to Lost Shop" in (client / "src" / "App.jsx").read_text(encoding="utf-8")
    assert "/src/main.jsx" in (client / "index.html").read_text(encoding="utf-8")


def test_placeholder_client_leaves_existing_tree_alone(tmp_path: Path) -> None:
    client = tmp_path / "client"
    client.mkdir()
    assert write_placeholder_client(client) == []
    assert list(client.iterdir()) == []


def test_server_entry_prefers_existing_typescript(tmp_path: Path) -> None:
    server = tmp_path / "server"
    server.mkdir()
    (server / "index.ts").write_text("export {}", encoding="utf-8")
    assert ensure_server_entry(server) == server / "index.ts"
    assert not (server / "index.js").exists()


def test_server_entry_created_when_absent(tmp_path: Path) -> None:
    entry = ensure_server_entry(tmp_path / "server")
    assert entry.name == "index.js"
    assert "express.static" in entry.read_text(encoding="utf-8")


def test_fallback_html_escapes_title(tmp_path: Path) -> None:
    page = write_fallback_html(tmp_path / "dist" / "public", title="Shop <&>")
    text = page.read_text(encoding="utf-8")
    assert page.name == "index.html"
    assert "Shop &lt;&amp;&gt;" in text


def test_api_entrypoint_requires_bundle_with_fallback(tmp_path: Path) -> None:
    path = write_api_entrypoint(tmp_path / "api")
    text = path.read_text(encoding="utf-8")
    assert "require('../dist/index.js')" in text
    assert "'../dist/public/index.html'" in text
    assert "module.exports = app;" in text


def test_deploy_manifest_sets_build_script(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "shop", "scripts": {"build": "vite build", "dev": "vite"}}),
        encoding="utf-8",
    )
    path = write_deploy_manifest(tmp_path)
    assert path == tmp_path / MANIFEST_NAME
    data = _read_json(path)
    assert data["scripts"] == {"build": "deploy-builder build", "dev": "vite"}
    # root package.json untouched
    assert _read_json(tmp_path / "package.json")["scripts"]["build"] == "vite build"


def test_deploy_manifest_without_package_json(tmp_path: Path) -> None:
    assert write_deploy_manifest(tmp_path) is None


def test_load_settings_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)
    assert settings.poll_attempts == 10
    assert "postcss.config.js" in settings.isolate_configs
    assert settings.public_dir == "dist/public"


def test_load_settings_from_file(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        json.dumps({"appName": "Pigs Head", "pollAttempts": 3, "pollDelay": 0.1}),
        encoding="utf-8",
    )
    settings = load_settings(tmp_path)
    assert settings.app_name == "Pigs Head"
    assert settings.poll_attempts == 3
    assert settings.client_dir == "client"


def test_load_settings_rejects_unknown_keys(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"pollAttempts": 0}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_settings(tmp_path)
    (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"retries": 4}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_settings(tmp_path)
