"""
gitmaven CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console

from gitmaven import __version__
from gitmaven.cli import repo

app = typer.Typer(
    name="gitmaven",
    help="Keep a local copy of a git-hosted package repository in sync",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """
    Configure logging for CLI commands.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug output with detailed logging",
    ),
    project_dir: Path | None = typer.Option(
        None,
        "--project-dir",
        "-C",
        help="Directory containing .gitmaven.json and .env (defaults to cwd)",
    ),
) -> None:
    """
    gitmaven - git-backed package repository sync.

    Clones a remote repository into a local directory, keeps it aligned with
    the remote on every run, and pushes released artifacts back.

    Configuration is read from ~/.config/gitmaven/config.json, then
    .gitmaven.json in the project directory, then GITMAVEN_* lines in .env
    files, then GITMAVEN_* environment variables.
    """
    configure_logging(verbose)

    ctx.obj = {"verbose": verbose, "project_dir": project_dir}


app.command(name="sync")(repo.sync)
app.command(name="publish")(repo.publish)
app.command(name="status")(repo.status)
app.command(name="config")(repo.show_config)


@app.command()
def version() -> None:
    """Show gitmaven version and exit."""
    console.print(f"gitmaven version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    cli_main()
