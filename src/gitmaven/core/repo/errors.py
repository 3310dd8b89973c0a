"""
Exceptions raised by the repository sync core.

Every failure is terminal for the current run and propagates to the caller.
Errors that originate from a git command keep its stderr for display.
"""


class RepoSyncError(Exception):
    """Base exception for repository sync operations."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class InvalidConfigError(RepoSyncError):
    """Raised when a RepoConfig is rejected before any I/O happens."""

    pass


class CloneFailedError(RepoSyncError):
    """Raised when cloning the remote into the local path fails."""

    pass


class OpenFailedError(RepoSyncError):
    """Raised when an existing local copy cannot be opened."""

    pass


class RemoteMismatchError(OpenFailedError):
    """Raised when the local copy tracks a different remote URL than configured."""

    def __init__(self, local_url: str, configured_url: str):
        super().__init__(
            f"Local copy points at {local_url!r} but config.url is {configured_url!r}"
        )
        self.local_url = local_url
        self.configured_url = configured_url


class PullFailedError(RepoSyncError):
    """Raised when resetting to or pulling from the remote fails."""

    pass


class CommitFailedError(RepoSyncError):
    """Raised when staging or committing local changes fails."""

    pass


class PushFailedError(RepoSyncError):
    """Raised when the remote rejects or cannot receive a push."""

    pass
