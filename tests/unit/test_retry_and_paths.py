from __future__ import annotations

import logging
from pathlib import Path

import pytest

from deploy_builder.fixups.paths import fix_paths, fix_paths_when_ready, normalize_separators
from deploy_builder.retry import retry


class FakeClock:
    def __init__(self) -> None:
        self.sleeps: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.sleeps.append(seconds)


def test_retry_stops_on_first_success() -> None:
    calls = []

    def action() -> bool:
        calls.append(1)
        return len(calls) == 3

    clock = FakeClock()
    outcome = retry(action, attempts=10, delay=0.5, sleep=clock)
    assert outcome.ok
    assert outcome.attempts == 3
    assert clock.sleeps == [0.5, 0.5]


def test_retry_gives_up_after_exact_attempts() -> None:
    calls = []
    clock = FakeClock()
    outcome = retry(lambda: calls.append(1), attempts=10, delay=0.25, sleep=clock)
    assert not outcome.ok
    assert outcome.attempts == 10
    assert len(calls) == 10
    # no sleep after the final attempt
    assert len(clock.sleeps) == 9


def test_retry_counts_exceptions_as_failed_attempts() -> None:
    def boom() -> bool:
        raise OSError("not yet")

    outcome = retry(boom, attempts=3, delay=0, sleep=FakeClock())
    assert not outcome.ok
    assert isinstance(outcome.error, OSError)


def test_retry_rejects_zero_attempts() -> None:
    with pytest.raises(ValueError):
        retry(lambda: True, attempts=0)


def test_normalize_separators_rewrites_single_and_doubled_backslashes() -> None:
    text = 'require("C:\\\\proj\\\\node_modules\\\\x");var p="src\\lib"'
    assert normalize_separators(text) == 'require("C:/proj/node_modules/x");var p="src/lib"'


def test_fix_paths_skips_missing_and_reports_changed(tmp_path: Path, caplog) -> None:
    bundle = tmp_path / "index.js"
    bundle.write_text("a\\b", encoding="utf-8")
    clean = tmp_path / "clean.js"
    clean.write_text("a/b", encoding="utf-8")

    with caplog.at_level(logging.INFO, logger="deploy_builder"):
        changed = fix_paths([bundle, clean, tmp_path / "missing.js"])
    assert changed == [bundle]
    fixed_msgs = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Fixed paths")]
    assert fixed_msgs == [f"Fixed paths in {bundle}"]
    assert bundle.read_text(encoding="utf-8") == "a/b"


def test_fix_paths_when_ready_waits_for_late_file(tmp_path: Path) -> None:
    target = tmp_path / "dist" / "index.js"

    def sleep(_: float) -> None:
        # The "bundler" finishes writing during the third wait.
        sleep.calls += 1
        if sleep.calls == 3:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("x\\y", encoding="utf-8")

    sleep.calls = 0
    assert fix_paths_when_ready([target], attempts=10, delay=0.5, sleep=sleep) is True
    assert sleep.calls == 3
    assert target.read_text(encoding="utf-8") == "x/y"


def test_fix_paths_when_ready_gives_up_without_raising(tmp_path: Path) -> None:
    clock = FakeClock()
    found = fix_paths_when_ready([tmp_path / "never.js"], attempts=10, delay=0.5, sleep=clock)
    assert found is False
    assert len(clock.sleeps) == 9
