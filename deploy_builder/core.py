"""Build orchestration: isolate configs → scaffold → steps → fallback → restore."""

from __future__ import annotations

import shutil
import subprocess
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from deploy_builder.buildpacks import client as client_pack
from deploy_builder.buildpacks import server as server_pack
from deploy_builder.fixups.paths import fix_paths_when_ready
from deploy_builder.isolation.configs import ConfigBackup, isolate_configs
from deploy_builder.logging import get_logger
from deploy_builder.package.publish import publish_client
from deploy_builder.scaffold.client import write_placeholder_client
from deploy_builder.scaffold.entrypoint import write_api_entrypoint
from deploy_builder.scaffold.fallback import write_fallback_html
from deploy_builder.scaffold.manifest import write_deploy_manifest
from deploy_builder.scaffold.server import ensure_server_entry
from deploy_builder.types import BuildSettings

log = get_logger(__name__)


@dataclass
class BuildContext:
    root: Path
    settings: BuildSettings = field(default_factory=BuildSettings)
    sleep: Callable[[float], None] = time.sleep

    @property
    def client_dir(self) -> Path:
        return self.root / self.settings.client_dir

    @property
    def server_dir(self) -> Path:
        return self.root / self.settings.server_dir

    @property
    def dist_dir(self) -> Path:
        return self.root / self.settings.dist_dir

    @property
    def public_dir(self) -> Path:
        return self.root / self.settings.public_dir

    @property
    def api_dir(self) -> Path:
        return self.root / self.settings.api_dir


StepAction = list[str] | Callable[[BuildContext], object]


@dataclass
class BuildStep:
    """One unit of the sequence.

    *action* is either an argv list, run as a child process from ``root/cwd``
    with inherited stdio, or a callable receiving the build context.
    """

    name: str
    action: StepAction
    fatal: bool = True
    cwd: str | None = None


class StepError(Exception):
    def __init__(self, step: str, cause: BaseException, command: list[str] | None = None):
        self.step = step
        self.cause = cause
        self.command = command
        detail = f" (command: {' '.join(map(str, command))})" if command else ""
        super().__init__(f"Step {step!r} failed: {cause}{detail}")


@dataclass
class BuildResult:
    ok: bool = True
    failed_step: str | None = None
    error: StepError | None = None
    completed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    backups: list[ConfigBackup] = field(default_factory=list)
    fallback: Path | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


# ---------------------------------------------------------------------------
# Step execution
# ---------------------------------------------------------------------------


def _run_command(step: BuildStep, ctx: BuildContext) -> None:
    cmd = [str(part) for part in step.action]
    if not cmd:
        raise StepError(step.name, ValueError("empty command"))
    cwd = ctx.root / step.cwd if step.cwd else ctx.root
    exe = shutil.which(cmd[0]) or cmd[0]
    log.info("Executing: %s", " ".join(cmd), extra={"step": step.name})
    try:
        subprocess.run([exe, *cmd[1:]], cwd=cwd, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise StepError(step.name, exc, command=cmd) from exc


def run_step(step: BuildStep, ctx: BuildContext) -> None:
    """Run *step*; any failure surfaces as ``StepError``."""
    if isinstance(step.action, list):
        _run_command(step, ctx)
        return
    try:
        step.action(ctx)
    except StepError:
        raise
    except subprocess.CalledProcessError as exc:
        cmd = exc.cmd if isinstance(exc.cmd, list) else [str(exc.cmd)]
        raise StepError(step.name, exc, command=[str(c) for c in cmd]) from exc
    except Exception as exc:
        raise StepError(step.name, exc) from exc


def _execute(steps: Sequence[BuildStep], ctx: BuildContext, result: BuildResult) -> None:
    for step in steps:
        log.info("Step started", extra={"step": step.name})
        try:
            run_step(step, ctx)
        except StepError as err:
            if step.fatal:
                log.error("Fatal step failed: %s", err, extra={"step": step.name})
                result.ok = False
                result.failed_step = step.name
                result.error = err
                return
            log.warning("Step failed, continuing: %s", err, extra={"step": step.name})
            result.warnings.append(step.name)
            continue
        result.completed.append(step.name)
        log.info("Step finished", extra={"step": step.name})


# ---------------------------------------------------------------------------
# Scaffolding and fallback
# ---------------------------------------------------------------------------


def prepare_workspace(ctx: BuildContext) -> None:
    """Create output directories and placeholders. Failures are logged only."""
    for directory in (ctx.server_dir, ctx.dist_dir, ctx.public_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            log.exception("Could not create %s", directory)
    try:
        ensure_server_entry(ctx.server_dir)
    except OSError:
        log.exception("Could not write a server entry")
    try:
        write_placeholder_client(ctx.client_dir, ctx.settings.app_name)
    except OSError:
        log.exception("Could not write the placeholder client")


def needs_fallback(ctx: BuildContext) -> bool:
    client_out = ctx.client_dir / "dist"
    return not client_out.is_dir() or not (ctx.public_dir / "index.html").exists()


def ensure_servable_output(ctx: BuildContext) -> Path | None:
    if not needs_fallback(ctx):
        return None
    log.info("Client build output missing, falling back to static HTML")
    try:
        return write_fallback_html(ctx.public_dir, ctx.settings.app_name)
    except OSError:
        log.exception("Could not write the fallback page")
        return None


# ---------------------------------------------------------------------------
# Sequencer
# ---------------------------------------------------------------------------


def run(steps: Sequence[BuildStep], ctx: BuildContext) -> BuildResult:
    """Run *steps* in order inside a config-isolated scope.

    The fallback page and the config restore happen on every path out,
    including a fatal abort.
    """
    log.info("Build sequence starting in %s", ctx.root)
    with isolate_configs(ctx.root, ctx.settings.isolate_configs) as backups:
        result = BuildResult(backups=list(backups))
        prepare_workspace(ctx)
        try:
            _execute(steps, ctx, result)
        finally:
            result.fallback = ensure_servable_output(ctx)

    if result.ok:
        log.info("Build sequence completed successfully")
    else:
        log.error("Build sequence failed at %s", result.failed_step)
    return result


# ---------------------------------------------------------------------------
# Default pipeline
# ---------------------------------------------------------------------------


def _fix_paths(ctx: BuildContext) -> bool:
    targets = [ctx.root / t for t in ctx.settings.path_fix_targets]
    return fix_paths_when_ready(
        targets,
        attempts=ctx.settings.poll_attempts,
        delay=ctx.settings.poll_delay,
        sleep=ctx.sleep,
    )


def _client_build(ctx: BuildContext) -> Path:
    # Output left by an earlier run must not pass for this run's build.
    stale = ctx.client_dir / "dist"
    if stale.is_dir():
        shutil.rmtree(stale)
    return client_pack.build(ctx)


def _publish(ctx: BuildContext) -> list[Path]:
    return publish_client(ctx.client_dir / "dist", ctx.public_dir)


def _api_entrypoint(ctx: BuildContext) -> Path:
    return write_api_entrypoint(ctx.api_dir, ctx.settings.dist_dir, ctx.settings.public_dir)


def _deploy_manifest(ctx: BuildContext) -> Path | None:
    return write_deploy_manifest(ctx.root)


def default_steps() -> list[BuildStep]:
    return [
        BuildStep("server-bundle", server_pack.build, fatal=True),
        BuildStep("fix-paths", _fix_paths, fatal=False),
        BuildStep("client-install", client_pack.install, fatal=False),
        BuildStep("client-build", _client_build, fatal=False),
        BuildStep("publish-client", _publish, fatal=False),
        BuildStep("api-entrypoint", _api_entrypoint, fatal=True),
        BuildStep("deploy-manifest", _deploy_manifest, fatal=False),
    ]


def build_pipeline(ctx: BuildContext) -> BuildResult:
    return run(default_steps(), ctx)
