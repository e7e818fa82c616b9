from __future__ import annotations

from pathlib import Path

import pytest

from deploy_builder.isolation.configs import backup_path, isolate_configs

NAMES = ["postcss.config.js", "tailwind.config.ts", "tailwind.config.cjs"]


def test_isolate_moves_present_configs_and_restores(tmp_path: Path) -> None:
    (tmp_path / "postcss.config.js").write_text("postcss", encoding="utf-8")
    (tmp_path / "tailwind.config.ts").write_text("tailwind", encoding="utf-8")

    with isolate_configs(tmp_path, NAMES) as backups:
        assert [b.original.name for b in backups] == ["postcss.config.js", "tailwind.config.ts"]
        assert not (tmp_path / "postcss.config.js").exists()
        assert (tmp_path / "postcss.config.js.bak").exists()

    assert (tmp_path / "postcss.config.js").read_text(encoding="utf-8") == "postcss"
    assert (tmp_path / "tailwind.config.ts").read_text(encoding="utf-8") == "tailwind"
    assert not list(tmp_path.glob("*.bak"))
    assert not (tmp_path / "tailwind.config.cjs").exists()


def test_isolate_restores_when_block_raises(tmp_path: Path) -> None:
    (tmp_path / "postcss.config.js").write_text("postcss", encoding="utf-8")

    with pytest.raises(RuntimeError):
        with isolate_configs(tmp_path, NAMES):
            raise RuntimeError("bundler crashed")

    assert (tmp_path / "postcss.config.js").exists()
    assert not list(tmp_path.glob("*.bak"))


def test_isolate_does_not_clobber_stale_backup(tmp_path: Path) -> None:
    cfg = tmp_path / "postcss.config.js"
    cfg.write_text("current", encoding="utf-8")
    backup_path(cfg).write_text("stale", encoding="utf-8")

    with isolate_configs(tmp_path, NAMES) as backups:
        assert backups == []
        assert cfg.exists()

    assert cfg.read_text(encoding="utf-8") == "current"
    assert backup_path(cfg).read_text(encoding="utf-8") == "stale"
