"""deploy-builder CLI.

Commands:
- build: full sequence (config isolation, scaffolds, bundlers, fallback, restore)
- fix-paths: normalize path separators in the server bundle
- check-db / check-deploy: environment checks for the deployment target
- entrypoint / scaffold: write generated files without building
- smoke: storage feature checks against a running server
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import httpx
import typer
from jsonschema import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from deploy_builder.conformance.storage import (
    DEFAULT_BASE_URL,
    DEFAULT_FEATURES,
    SmokeFailure,
    check_feature,
    ensure_admin,
    login,
    run_storage_checks,
)
from deploy_builder.core import BuildContext, build_pipeline, prepare_workspace
from deploy_builder.database.url import check_database_url, write_fix_instructions
from deploy_builder.deploy.checks import check_deployment_config
from deploy_builder.fixups.paths import fix_paths_when_ready
from deploy_builder.scaffold.entrypoint import write_api_entrypoint
from deploy_builder.types import BuildSettings
from deploy_builder.validator import load_settings

app = typer.Typer(add_completion=False, help="Build and patch a web app for deployment")
console = Console()


def _settings(root: Path, config: str | None) -> BuildSettings:
    try:
        return load_settings(root, Path(config) if config else None)
    except ValidationError as exc:
        rprint(f"[red]Invalid build config:[/red] {exc.message}")
        raise typer.Exit(2) from exc
    except (ValueError, OSError) as exc:
        # malformed JSON or an unreadable --config file
        rprint(f"[red]Cannot read build config:[/red] {exc}")
        raise typer.Exit(2) from exc


@app.command()
def build(
    root: str = typer.Option(".", "--root", help="Project root"),
    config: str | None = typer.Option(None, "--config", help="Path to deploy.build.json"),
) -> None:
    base = Path(root).resolve()
    ctx = BuildContext(root=base, settings=_settings(base, config))
    result = build_pipeline(ctx)

    table = Table(title="Build Summary")
    table.add_column("Step", style="cyan")
    table.add_column("Outcome")
    for name in result.completed:
        table.add_row(name, "[green]ok[/green]")
    for name in result.warnings:
        table.add_row(name, "[yellow]failed (non-fatal)[/yellow]")
    if result.failed_step:
        table.add_row(result.failed_step, "[red]failed[/red]")
    console.print(table)

    if result.fallback:
        rprint(f"[yellow]Fallback page written:[/yellow] {result.fallback}")
    if not result.ok:
        rprint(f"[red]Build sequence failed:[/red] {result.error}")
        raise typer.Exit(result.exit_code)
    rprint("[green]Build sequence completed successfully![/green]")


@app.command("fix-paths")
def fix_paths(
    root: str = typer.Option(".", "--root", help="Project root"),
    attempts: int | None = typer.Option(None, "--attempts", help="Existence checks per file"),
    delay: float | None = typer.Option(None, "--delay", help="Seconds between checks"),
    config: str | None = typer.Option(None, "--config", help="Path to deploy.build.json"),
) -> None:
    base = Path(root).resolve()
    settings = _settings(base, config)
    found = fix_paths_when_ready(
        [base / t for t in settings.path_fix_targets],
        attempts=attempts or settings.poll_attempts,
        delay=settings.poll_delay if delay is None else delay,
    )
    if found:
        rprint("[green]Paths normalized.[/green]")
    else:
        rprint("[yellow]Some targets never appeared; see log.[/yellow]")


@app.command("check-db")
def check_db(
    root: str = typer.Option(".", "--root", help="Project root; instructions file goes here"),
    config: str | None = typer.Option(None, "--config", help="Path to deploy.build.json"),
    write_instructions: bool = typer.Option(
        True, "--write-instructions/--no-write-instructions", help="Write .db-connection-fix.txt"
    ),
) -> None:
    settings = _settings(Path(root).resolve(), config)
    status = check_database_url(os.environ, marker=settings.database_host_marker)
    rprint(status.model_dump_json(indent=2, exclude={"config": {"url"}}))
    if status.status in {"missing", "invalid"}:
        raise typer.Exit(1)
    if status.status == "fixed" and write_instructions:
        write_fix_instructions(Path(root))


@app.command("check-deploy")
def check_deploy(
    root: str = typer.Option(".", "--root", help="Project root"),
    config: str | None = typer.Option(None, "--config", help="Path to deploy.build.json"),
) -> None:
    settings = _settings(Path(root).resolve(), config)
    report = check_deployment_config(
        os.environ, settings.required_env, settings.database_host_marker
    )
    if report.ok:
        rprint("[green]Deployment configuration OK.[/green]")
        return
    if report.missing:
        rprint(f"[red]Missing required environment variables:[/red] {', '.join(report.missing)}")
    if report.invalid:
        rprint(f"[red]Invalid environment variables:[/red] {', '.join(report.invalid)}")
    raise typer.Exit(1)


@app.command()
def entrypoint(
    root: str = typer.Option(".", "--root", help="Project root"),
    config: str | None = typer.Option(None, "--config", help="Path to deploy.build.json"),
) -> None:
    base = Path(root).resolve()
    settings = _settings(base, config)
    path = write_api_entrypoint(base / settings.api_dir, settings.dist_dir, settings.public_dir)
    rprint(f"[green]Entrypoint written:[/green] {path}")


@app.command()
def scaffold(
    root: str = typer.Option(".", "--root", help="Project root"),
    config: str | None = typer.Option(None, "--config", help="Path to deploy.build.json"),
) -> None:
    base = Path(root).resolve()
    prepare_workspace(BuildContext(root=base, settings=_settings(base, config)))
    rprint("[green]Workspace scaffolded.[/green]")


@app.command()
def smoke(
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Running server URL"),
    feature: list[str] | None = typer.Option(
        None, "--feature", help="Feature to test (repeatable)", show_default=False
    ),
    interactive: bool = typer.Option(False, "--interactive", help="Pick features one by one"),
) -> None:
    if interactive:
        _interactive_smoke(base_url)
        return
    try:
        report = run_storage_checks(base_url, feature or DEFAULT_FEATURES)
    except SmokeFailure as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    for name, body in report.results.items():
        if body is None:
            rprint(f"[red]✗ {name}[/red]")
        else:
            rprint(f"[green]✓ {name}[/green]")
            print(json.dumps(body, indent=2))
    if report.failed:
        raise typer.Exit(1)


def _interactive_smoke(base_url: str) -> None:
    with httpx.Client(base_url=base_url, timeout=10.0) as client:
        ensure_admin(client)
        try:
            login(client)
        except SmokeFailure as exc:
            rprint(f"[red]{exc}[/red]")
            raise typer.Exit(1) from exc
        choices = {str(i): name for i, name in enumerate(DEFAULT_FEATURES, start=1)}
        while True:
            for key, name in choices.items():
                rprint(f"{key}. {name}")
            rprint(f"{len(choices) + 1}. exit")
            pick = typer.prompt("Which feature would you like to test?")
            if pick not in choices:
                return
            body = check_feature(client, choices[pick])
            if body is not None:
                print(json.dumps(body, indent=2))


if __name__ == "__main__":
    app()
