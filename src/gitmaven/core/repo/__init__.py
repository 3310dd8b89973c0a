"""
Local working copy synchronization with a remote git repository.

On sync, the local copy is cloned if missing, then hard-reset to the
remote tracking branch and fast-forwarded with a pull. On publish, every
working-tree change is staged, committed and pushed.

Example:
    >>> from gitmaven.core.repo import RepositorySync, release_message
    >>> repo_sync = RepositorySync(config)
    >>> result = repo_sync.sync()
    >>> repo_sync.publish(release_message("com.acme", "widgets", "1.2.0"))
"""

from gitmaven.core.repo.auth import (
    AuthMode,
    HttpBasicAuth,
    LocalAuth,
    SshKeyAuth,
    detect_auth_mode,
    resolve_auth,
    transport_environment,
)
from gitmaven.core.repo.errors import (
    CloneFailedError,
    CommitFailedError,
    InvalidConfigError,
    OpenFailedError,
    PullFailedError,
    PushFailedError,
    RemoteMismatchError,
    RepoSyncError,
)
from gitmaven.core.repo.models import RepoStatus, SyncResult
from gitmaven.core.repo.service import RepositorySync, release_message
from gitmaven.core.repo.validation import validate_config

__all__ = [
    "RepositorySync",
    "release_message",
    "validate_config",
    "SyncResult",
    "RepoStatus",
    "AuthMode",
    "HttpBasicAuth",
    "SshKeyAuth",
    "LocalAuth",
    "detect_auth_mode",
    "resolve_auth",
    "transport_environment",
    "RepoSyncError",
    "InvalidConfigError",
    "CloneFailedError",
    "OpenFailedError",
    "RemoteMismatchError",
    "PullFailedError",
    "CommitFailedError",
    "PushFailedError",
]
