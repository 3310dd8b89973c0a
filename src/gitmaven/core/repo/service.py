"""
Repository synchronization service.

Keeps a local working copy of a remote repository aligned with the remote
and publishes local changes back to it. A run goes through three phases:

1. ensure_local: clone the remote if the local path has no git metadata,
   otherwise open it in place.
2. reconcile: hard-reset the tracked branch to the remote tracking ref and
   clean the working tree, then pull with --ff-only. The reset discards
   anything a crashed earlier publish left behind (a commit that never made
   it to the remote), so every run starts from the remote's state.
3. publish (on demand): stage everything, commit, push.

Every remote operation runs inside the transport environment of the auth
mode resolved from the url (see gitmaven.core.repo.auth).

All calls block, and nothing is retried. One instance owns one local path;
callers must not point two instances at the same path concurrently.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, PushInfo, Repo

from gitmaven.core.config.models import RepoConfig
from gitmaven.core.repo.auth import resolve_auth, transport_environment
from gitmaven.core.repo.errors import (
    CloneFailedError,
    CommitFailedError,
    OpenFailedError,
    PullFailedError,
    PushFailedError,
    RemoteMismatchError,
)
from gitmaven.core.repo.models import RepoStatus, SyncResult
from gitmaven.core.repo.validation import validate_config

_PUSH_FAILED_FLAGS = (
    PushInfo.ERROR | PushInfo.REJECTED | PushInfo.REMOTE_REJECTED | PushInfo.REMOTE_FAILURE
)


def release_message(group: str, artifact: str, version: str) -> str:
    """Conventional commit message for publishing a released artifact."""
    return f"Release {group}:{artifact}:{version}"


def _stderr(error: GitCommandError) -> str:
    return str(error.stderr or "").strip()


def _same_url(left: str, right: str) -> bool:
    return left.strip().rstrip("/") == right.strip().rstrip("/")


def _head_sha(repo: Repo) -> str | None:
    if not repo.head.is_valid():
        return None
    return repo.head.commit.hexsha


class RepositorySync:
    """
    Synchronizes one local working copy with its remote.

    The config is validated in the constructor, before any filesystem or
    network access. The logger is injectable so callers and tests can route
    output to their own sink.

    Example:
        >>> config = RepoConfig(url="https://example.com/pkgrepo.git",
        ...                     username="ci", password="token")
        >>> repo_sync = RepositorySync(config)
        >>> result = repo_sync.sync()
        >>> print(f"Register package repository at: {result.local_path}")
        >>> if config.release:
        ...     repo_sync.publish(release_message("com.acme", "lib", "1.0"))
    """

    def __init__(self, config: RepoConfig, logger: logging.Logger | None = None) -> None:
        """
        Initialize the sync service.

        Args:
            config: Repository settings
            logger: Logger for progress messages (defaults to this module's logger)

        Raises:
            InvalidConfigError: If the url is blank or its scheme is unsupported
        """
        self.logger = logger or logging.getLogger(__name__)
        validate_config(config)

        self.config = config
        self.auth = resolve_auth(config)
        self.local_path: Path = config.local_path
        self._repo: Repo | None = None

        self.logger.debug("Repository config: %s", config.describe())
        self.logger.debug("Transport auth mode: %s", self.auth.mode.value)

    @property
    def repo(self) -> Repo:
        """The opened local copy. Opens it on first access without cloning."""
        if self._repo is None:
            self._repo = self._open()
        return self._repo

    def has_local_copy(self) -> bool:
        """Whether git metadata exists at the local path."""
        return (self.local_path / ".git").exists()

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def ensure_local(self) -> Repo:
        """
        Clone the remote if needed, otherwise open the existing local copy.

        Returns:
            The opened repository

        Raises:
            CloneFailedError: If cloning fails or local_path already holds other files
            OpenFailedError: If existing metadata is corrupt or has no remote
            RemoteMismatchError: If the local copy tracks another url and
                repoint_remote is disabled
        """
        if self.has_local_copy():
            repo = self._open()
            self._check_remote(repo)
        else:
            repo = self._clone()

        self._repo = repo
        return repo

    def _clone(self) -> Repo:
        if self.local_path.exists() and (
            not self.local_path.is_dir() or any(self.local_path.iterdir())
        ):
            raise CloneFailedError(
                f"Local path {self.local_path} exists and is not a git repository"
            )

        self.logger.info("Cloning repository %s to %s", self.config.url, self.local_path)
        self.local_path.parent.mkdir(parents=True, exist_ok=True)

        options: dict[str, str] = {"origin": self.config.remote_name}
        if self.config.branch:
            options["branch"] = self.config.branch

        try:
            with transport_environment(self.auth) as env:
                repo = Repo.clone_from(self.config.url, self.local_path, env=env, **options)
        except GitCommandError as e:
            raise CloneFailedError(
                f"Failed to clone {self.config.url} into {self.local_path}",
                stderr=_stderr(e),
            ) from e

        self.logger.info("Clone repository completed.")
        return repo

    def _open(self) -> Repo:
        try:
            return Repo(self.local_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise OpenFailedError(f"Not a usable git repository: {self.local_path}") from e

    def _check_remote(self, repo: Repo) -> None:
        try:
            remote = repo.remote(self.config.remote_name)
        except ValueError as e:
            raise OpenFailedError(
                f"Local copy at {self.local_path} has no remote named "
                f"'{self.config.remote_name}'"
            ) from e

        local_url = remote.url
        if _same_url(local_url, self.config.url):
            return

        if not self.config.repoint_remote:
            raise RemoteMismatchError(local_url, self.config.url)

        self.logger.warning(
            "Re-pointing remote %s of %s from %s to %s",
            self.config.remote_name,
            self.local_path,
            local_url,
            self.config.url,
        )
        remote.set_url(self.config.url)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def tracked_branch(self, repo: Repo | None = None) -> str:
        """
        Name of the branch kept in sync with the remote.

        Uses config.branch when set, otherwise the remote's default branch as
        recorded by the clone, otherwise the checked-out branch (a clone of an
        empty remote has no remote HEAD yet).

        Raises:
            PullFailedError: If none of these is available
        """
        if self.config.branch:
            return self.config.branch

        repo = repo or self.repo
        prefix = f"{self.config.remote_name}/"
        try:
            remote_head = repo.git.symbolic_ref(
                f"refs/remotes/{self.config.remote_name}/HEAD", short=True
            )
            return remote_head[len(prefix) :] if remote_head.startswith(prefix) else remote_head
        except GitCommandError:
            self.logger.debug("No %sHEAD ref; using the checked-out branch", prefix)

        branch = self._current_branch(repo)
        if branch is None:
            raise PullFailedError(
                f"Cannot determine tracked branch: HEAD is detached in {self.local_path}"
            )
        return branch

    def reconcile(self, repo: Repo | None = None) -> None:
        """
        Align the local copy with the remote: hard reset, clean, then pull.

        Args:
            repo: Repository to reconcile (defaults to the opened local copy)

        Raises:
            PullFailedError: If the reset or the pull fails. A failed pull
                leaves the copy reset to the last fetched remote tip.
        """
        repo = repo or self.repo
        branch = self.tracked_branch(repo)
        remote_ref = f"{self.config.remote_name}/{branch}"

        try:
            if self._remote_ref_exists(repo, remote_ref):
                self.logger.info("Resetting %s to %s", self.local_path, remote_ref)
                if self._current_branch(repo) != branch:
                    repo.git.checkout("--force", "-B", branch, remote_ref)
                repo.git.reset("--hard", remote_ref)
                repo.git.clean("-f", "-d")
            else:
                self.logger.info("No %s ref yet; skipping reset", remote_ref)
        except GitCommandError as e:
            raise PullFailedError(
                f"Failed to reset {self.local_path} to {remote_ref}", stderr=_stderr(e)
            ) from e

        if not self._remote_has_branch(repo, branch):
            self.logger.info("Remote has no branch %s yet; nothing to pull", branch)
            return

        self.logger.info("Pulling %s from %s", branch, self.config.remote_name)
        try:
            with transport_environment(self.auth) as env, repo.git.custom_environment(**env):
                repo.remote(self.config.remote_name).pull(branch, ff_only=True)
        except GitCommandError as e:
            raise PullFailedError(
                f"Failed to pull {branch} from {self.config.url}", stderr=_stderr(e)
            ) from e

        self.logger.debug("Local copy now at %s", _head_sha(repo))

    def _current_branch(self, repo: Repo) -> str | None:
        try:
            return repo.active_branch.name
        except TypeError:
            return None

    def _remote_ref_exists(self, repo: Repo, remote_ref: str) -> bool:
        try:
            repo.git.rev_parse("--verify", "--quiet", f"refs/remotes/{remote_ref}")
        except GitCommandError:
            return False
        return True

    def _remote_has_branch(self, repo: Repo, branch: str) -> bool:
        """Ask the remote whether the branch exists (empty remotes have none)."""
        try:
            with transport_environment(self.auth) as env, repo.git.custom_environment(**env):
                output = repo.git.ls_remote(
                    "--heads", self.config.remote_name, f"refs/heads/{branch}"
                )
        except GitCommandError as e:
            raise PullFailedError(
                f"Failed to query {self.config.url}", stderr=_stderr(e)
            ) from e
        return bool(output.strip())

    def sync(self) -> SyncResult:
        """
        Ensure the local copy exists and matches the remote's latest state.

        Returns:
            SyncResult whose local_path is the directory to register as a
            package repository

        Raises:
            CloneFailedError, OpenFailedError, PullFailedError
        """
        started_at = datetime.now()
        cloned = not self.has_local_copy()

        repo = self.ensure_local()
        previous_sha = None if cloned else _head_sha(repo)
        self.reconcile(repo)
        commit_sha = _head_sha(repo)

        if cloned:
            message = f"Cloned {self.config.url}"
        elif previous_sha != commit_sha:
            message = "Updated from remote"
        else:
            message = "Already up to date"

        return SyncResult(
            success=True,
            operation="sync",
            local_path=self.local_path,
            commit_sha=commit_sha,
            previous_sha=previous_sha,
            cloned=cloned,
            message=message,
            started_at=started_at,
            completed_at=datetime.now(),
        )

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish(self, message: str) -> SyncResult:
        """
        Stage all changes, commit them with `message` and push.

        The message is passed to git verbatim. With allow_empty_commit (the
        default) a commit is created even when nothing changed.

        Args:
            message: Commit message

        Returns:
            SyncResult for the published commit. success is False only when
            the publish was skipped because there was nothing to commit and
            empty commits are disabled.

        Raises:
            OpenFailedError: If there is no local copy
            CommitFailedError: If staging or committing fails
            PushFailedError: If the push fails or is rejected
        """
        started_at = datetime.now()
        repo = self.repo
        branch = self.tracked_branch(repo)
        previous_sha = _head_sha(repo)

        self.logger.info("Pushing to remote git repository...")

        try:
            repo.git.add(A=True)

            if not self.config.allow_empty_commit and not self._has_staged_changes(repo):
                self.logger.warning("Nothing to publish in %s; skipping commit", self.local_path)
                return SyncResult(
                    success=False,
                    operation="publish",
                    local_path=self.local_path,
                    commit_sha=previous_sha,
                    previous_sha=previous_sha,
                    message="No changes to publish",
                    started_at=started_at,
                    completed_at=datetime.now(),
                )

            commit_args = ["--allow-empty-message", "--cleanup=verbatim", "-m", message]
            if self.config.allow_empty_commit:
                commit_args.insert(0, "--allow-empty")
            repo.git.commit(*commit_args)
        except GitCommandError as e:
            raise CommitFailedError(
                f"Failed to commit changes in {self.local_path}", stderr=_stderr(e)
            ) from e

        commit_sha = _head_sha(repo)
        self.logger.info("Committed %s: %s", (commit_sha or "")[:8], message)

        self._push(repo, branch)
        self.logger.info("Push artifact completed.")

        return SyncResult(
            success=True,
            operation="publish",
            local_path=self.local_path,
            commit_sha=commit_sha,
            previous_sha=previous_sha,
            message=f"Pushed to {self.config.remote_name}/{branch}",
            started_at=started_at,
            completed_at=datetime.now(),
        )

    def _has_staged_changes(self, repo: Repo) -> bool:
        if not repo.head.is_valid():
            return bool(repo.index.entries)
        return repo.is_dirty(index=True, working_tree=False, untracked_files=False)

    def _push(self, repo: Repo, branch: str) -> None:
        refspec = f"HEAD:refs/heads/{branch}"
        try:
            with transport_environment(self.auth) as env, repo.git.custom_environment(**env):
                results = repo.remote(self.config.remote_name).push(refspec)
                results.raise_if_error()
        except GitCommandError as e:
            raise PushFailedError(
                f"Failed to push {branch} to {self.config.url}", stderr=_stderr(e)
            ) from e

        rejected = [info for info in results if info.flags & _PUSH_FAILED_FLAGS]
        if rejected or not results:
            detail = "; ".join(info.summary.strip() for info in rejected) or "no ref updated"
            raise PushFailedError(f"Push of {branch} to {self.config.url} rejected: {detail}")

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def status(self) -> RepoStatus:
        """Describe the local copy without contacting the remote."""
        if not self.has_local_copy():
            return RepoStatus(local_path=self.local_path, exists=False)

        repo = self.repo
        try:
            remote_url: str | None = repo.remote(self.config.remote_name).url
        except ValueError:
            remote_url = None

        return RepoStatus(
            local_path=self.local_path,
            exists=True,
            branch=self._current_branch(repo),
            head_sha=_head_sha(repo),
            remote_url=remote_url,
            dirty=repo.is_dirty(untracked_files=False),
            untracked_count=len(repo.untracked_files),
        )
