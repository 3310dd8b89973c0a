"""
gitmaven CLI - repository commands.

These commands play the part of the build tool that drives the sync core:
sync on startup, register the local path, publish after a release.
"""

import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from gitmaven.cli.errors import ExitCode, print_error, print_repo_error
from gitmaven.core.config import RepoConfig, load_config
from gitmaven.core.repo import RepositorySync, RepoSyncError, release_message

console = Console()


def _load(ctx: typer.Context) -> RepoConfig:
    project_dir: Path | None = (ctx.obj or {}).get("project_dir")
    try:
        return load_config(project_dir, use_cache=False)
    except ValidationError as e:
        print_error("Invalid configuration", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)


def _service(config: RepoConfig) -> RepositorySync:
    try:
        return RepositorySync(config)
    except RepoSyncError as e:
        raise typer.Exit(print_repo_error(e))


def sync(ctx: typer.Context) -> None:
    """
    Clone or update the local copy of the remote repository.

    Prints the local path to register as a package repository.

    Examples:
        gitmaven sync
        GITMAVEN_URL=git@host:pkgs.git gitmaven sync
    """
    config = _load(ctx)
    service = _service(config)

    try:
        result = service.sync()
    except RepoSyncError as e:
        raise typer.Exit(print_repo_error(e))

    console.print(f"[green]✓[/green] {result.summary()}")
    typer.echo(str(result.local_path))


def publish(
    ctx: typer.Context,
    message: str | None = typer.Option(
        None,
        "--message",
        "-m",
        help="Commit message (overrides --group/--artifact/--version)",
    ),
    group: str | None = typer.Option(None, "--group", "-g", help="Artifact group"),
    artifact: str | None = typer.Option(None, "--artifact", "-a", help="Artifact id"),
    version: str | None = typer.Option(None, "--version", help="Artifact version"),
    force: bool = typer.Option(
        False,
        "--force",
        help="Publish even when release is disabled in the config",
    ),
) -> None:
    """
    Commit and push everything in the local copy.

    Runs only when release is enabled, unless --force is given.

    Examples:
        gitmaven publish -g com.acme -a widgets --version 1.2.0
        gitmaven publish -m "Add snapshot" --force
    """
    if message is None:
        if not (group and artifact and version):
            print_error(
                "No commit message",
                solution="pass -m MESSAGE or --group, --artifact and --version",
            )
            raise typer.Exit(ExitCode.USER_ERROR)
        message = release_message(group, artifact, version)

    config = _load(ctx)
    if not config.release and not force:
        console.print("[yellow]Release disabled; nothing published[/yellow]")
        return

    service = _service(config)

    try:
        result = service.publish(message)
    except RepoSyncError as e:
        raise typer.Exit(print_repo_error(e))

    if result.success:
        console.print(f"[green]✓[/green] {result.summary()}")
    else:
        console.print(f"[yellow]{result.summary()}[/yellow]")


def status(ctx: typer.Context) -> None:
    """
    Show the state of the local copy (no network access).

    Examples:
        gitmaven status
    """
    config = _load(ctx)
    service = _service(config)

    try:
        repo_status = service.status()
    except RepoSyncError as e:
        raise typer.Exit(print_repo_error(e))

    if not repo_status.exists:
        console.print(f"[yellow]○[/yellow] No local copy at {repo_status.local_path}")
        console.print("\n[dim]→ Run [bold]gitmaven sync[/bold] to clone it[/dim]")
        return

    table = Table(title="Local Copy", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Path", str(repo_status.local_path))
    table.add_row("Remote", repo_status.remote_url or "[dim]none[/dim]")
    table.add_row("Branch", repo_status.branch or "[dim]detached[/dim]")
    table.add_row("HEAD", (repo_status.head_sha or "[dim]no commits[/dim]")[:12])
    table.add_row("Modified", "[yellow]yes[/yellow]" if repo_status.dirty else "no")
    table.add_row("Untracked files", str(repo_status.untracked_count))

    console.print(table)


def show_config(ctx: typer.Context) -> None:
    """
    Print the effective configuration (password masked).

    Examples:
        gitmaven config
    """
    config = _load(ctx)
    typer.echo(json.dumps(config.describe(), indent=2))
