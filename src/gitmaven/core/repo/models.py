"""
Data models for the repository sync service.

Defines Pydantic models for operation results and local copy status.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field


class SyncResult(BaseModel):
    """
    Result of a sync or publish operation.

    Failures are raised as exceptions, so a returned result always describes
    a completed operation. `success` is False only for a publish that was
    skipped because nothing changed and empty commits are disabled.
    """

    success: bool = Field(description="Whether the operation changed or aligned the repo")

    operation: str = Field(
        description="Type of operation (sync, publish)",
    )

    local_path: Path = Field(description="Directory of the local working copy")

    commit_sha: str | None = Field(
        default=None,
        description="HEAD commit after the operation",
    )

    previous_sha: str | None = Field(
        default=None,
        description="HEAD commit before the operation (None if freshly cloned)",
    )

    cloned: bool = Field(
        default=False,
        description="Whether the local copy was cloned during this operation",
    )

    message: str = Field(
        default="",
        description="Human-readable result message",
    )

    started_at: datetime | None = Field(default=None)
    completed_at: datetime | None = Field(default=None)

    @property
    def changed(self) -> bool:
        """Whether HEAD moved during the operation."""
        return self.cloned or self.previous_sha != self.commit_sha

    @property
    def duration_seconds(self) -> float | None:
        """Calculate operation duration in seconds."""
        if self.started_at and self.completed_at:
            delta = self.completed_at - self.started_at
            return delta.total_seconds()
        return None

    def summary(self) -> str:
        """Generate a human-readable summary of the result."""
        if not self.success:
            return f"{self.operation} skipped: {self.message}"

        parts = [f"{self.operation} succeeded"]

        if self.cloned:
            parts.append("cloned")

        if self.commit_sha:
            parts.append(f"commit {self.commit_sha[:8]}")

        if self.message:
            parts.append(self.message)

        return ", ".join(parts)


class RepoStatus(BaseModel):
    """Snapshot of the local copy, gathered without network access."""

    local_path: Path
    exists: bool = False
    branch: str | None = None
    head_sha: str | None = None
    remote_url: str | None = None
    dirty: bool = False
    untracked_count: int = Field(default=0, ge=0)
