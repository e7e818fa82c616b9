from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from deploy_builder.detect.client import detect
from deploy_builder.installer import env_node
from deploy_builder.installer.env_node import install_commands, prepare_node_env
from deploy_builder.types import ClientReport

FIXTURE = Path(__file__).resolve().parents[2] / "fixtures" / "vite-ts-client"


def test_detect_fixture_client() -> None:
    report = detect(FIXTURE)
    assert report.exists and report.has_manifest
    assert report.typescript
    assert report.tailwind
    assert report.package_manager == "npm"
    assert report.frozen_lockfile


def test_detect_missing_directory(tmp_path: Path) -> None:
    report = detect(tmp_path / "client")
    assert not report.exists
    assert report.notes


def test_detect_plain_js_client(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"dependencies": {"react": "^18.2.0"}}), encoding="utf-8"
    )
    report = detect(tmp_path)
    assert not report.typescript
    assert not report.tailwind
    assert report.package_manager == "npm"
    assert not report.frozen_lockfile


def test_install_commands_add_extras_before_install(monkeypatch) -> None:
    monkeypatch.setattr(env_node, "_has", lambda cmd: False)
    report = ClientReport(exists=True, has_manifest=True, typescript=True, tailwind=True,
                          package_manager="npm", frozen_lockfile=True)
    cmds = install_commands(report)
    assert cmds[0][:2] == ["npm", "install"]
    assert "tailwindcss" in cmds[0] and "typescript" in cmds[0]
    # npm ci would drop the extras, so a plain install follows
    assert cmds[1] == ["npm", "install"]


def test_install_commands_frozen_npm(monkeypatch) -> None:
    monkeypatch.setattr(env_node, "_has", lambda cmd: False)
    report = ClientReport(exists=True, has_manifest=True, package_manager="npm",
                          frozen_lockfile=True)
    assert install_commands(report) == [["npm", "ci"]]


def test_install_commands_prefer_pnpm(monkeypatch) -> None:
    monkeypatch.setattr(env_node, "_has", lambda cmd: cmd == "pnpm")
    report = ClientReport(exists=True, has_manifest=True, package_manager="pnpm",
                          frozen_lockfile=True)
    assert install_commands(report) == [["pnpm", "i", "--frozen-lockfile"]]


def test_prepare_node_env_runs_in_client_dir(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    calls = []
    monkeypatch.setattr(env_node.shutil, "which", lambda cmd: f"/usr/bin/{cmd}")
    monkeypatch.setattr(
        env_node.subprocess, "run", lambda cmd, cwd, check: calls.append((cmd, cwd, check))
    )
    prepare_node_env(tmp_path, ClientReport(exists=True, package_manager="npm"))
    assert calls == [(["/usr/bin/npm", "install"], tmp_path, True)]


def test_prepare_node_env_missing_npm(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    monkeypatch.setattr(env_node.shutil, "which", lambda cmd: None)
    with pytest.raises(FileNotFoundError):
        prepare_node_env(tmp_path, ClientReport(exists=True))


def test_prepare_node_env_propagates_failure(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    monkeypatch.setattr(env_node.shutil, "which", lambda cmd: cmd)

    def fail(cmd, cwd, check):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(env_node.subprocess, "run", fail)
    with pytest.raises(subprocess.CalledProcessError):
        prepare_node_env(tmp_path, ClientReport(exists=True))
