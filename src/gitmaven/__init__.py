"""
gitmaven - git-backed package repository sync

Keeps a local working copy of a remote git repository in sync so a build
tool can read from it and publish into it.
"""

__version__ = "0.3.0"

# Re-export the core API for convenience
from gitmaven.core.config.models import RepoConfig
from gitmaven.core.repo import RepositorySync, SyncResult, release_message

__all__ = ["RepoConfig", "RepositorySync", "SyncResult", "release_message", "__version__"]
