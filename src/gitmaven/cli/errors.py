"""
Standardized error handling and exit codes for the gitmaven CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console

from gitmaven.core.repo.errors import (
    CloneFailedError,
    CommitFailedError,
    InvalidConfigError,
    PullFailedError,
    PushFailedError,
    RemoteMismatchError,
    RepoSyncError,
)

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for gitmaven CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Git or runtime failure."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_repo_error(error: RepoSyncError) -> ExitCode:
    """
    Print a sync failure with guidance and return the exit code to use.

    Args:
        error: The failure raised by the sync core

    Returns:
        USER_ERROR for configuration problems, GENERAL_ERROR otherwise
    """
    reason = error.stderr or None

    if isinstance(error, InvalidConfigError):
        print_error(
            str(error),
            reason=reason,
            solution="set \"url\" in .gitmaven.json or export GITMAVEN_URL",
        )
        return ExitCode.USER_ERROR

    if isinstance(error, RemoteMismatchError):
        print_error(
            str(error),
            solution="set \"repoint_remote\": true or choose another local_path",
        )
        return ExitCode.USER_ERROR

    if isinstance(error, CloneFailedError):
        solution = "check the url and credentials (GITMAVEN_USERNAME / GITMAVEN_PASSWORD)"
    elif isinstance(error, PullFailedError):
        solution = "check network access to the remote and run gitmaven sync again"
    elif isinstance(error, CommitFailedError):
        solution = "git config --global user.name / user.email"
    elif isinstance(error, PushFailedError):
        solution = "run gitmaven sync to pick up remote commits, then publish again"
    else:
        solution = None

    print_error(str(error), reason=reason, solution=solution)
    return ExitCode.GENERAL_ERROR
