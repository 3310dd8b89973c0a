"""
Pytest configuration and shared fixtures.

Provides an isolated git environment, a bare "remote" repository reachable
over file:// and helpers for committing to it from a separate clone.
"""

import subprocess
from pathlib import Path

import pytest

from gitmaven.core.config import RepoConfig, clear_cache

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """
    Isolate every test from the user's git and gitmaven configuration.

    - HOME and XDG_CONFIG_HOME point into tmp_path
    - system git config is ignored
    - a fixed commit identity is provided through the environment
    - GITMAVEN_* variables are removed
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")

    for key in ("URL", "USERNAME", "PASSWORD", "LOCAL_PATH", "BRANCH", "RELEASE"):
        monkeypatch.delenv(f"GITMAVEN_{key}", raising=False)

    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Git Helpers
# ==============================================================================


def git(*args: str, cwd: Path) -> str:
    """Run a git command and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_to_remote(
    remote: Path,
    work_dir: Path,
    files: dict[str, str],
    message: str,
) -> str:
    """
    Commit files to the remote from a scratch clone and push.

    Args:
        remote: Bare remote repository
        work_dir: Directory for the scratch clone (created if missing)
        files: Relative path -> content to write
        message: Commit message

    Returns:
        SHA of the pushed commit
    """
    if not (work_dir / ".git").exists():
        subprocess.run(
            ["git", "clone", str(remote), str(work_dir)],
            capture_output=True,
            check=True,
        )
    else:
        git("pull", "--ff-only", cwd=work_dir)

    for rel_path, content in files.items():
        target = work_dir / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    git("add", "-A", cwd=work_dir)
    git("commit", "-m", message, cwd=work_dir)
    git("push", "origin", "HEAD", cwd=work_dir)
    return git("rev-parse", "HEAD", cwd=work_dir)


def remote_head(remote: Path, branch: str = "main") -> str:
    """SHA of a branch in the bare remote."""
    return git("rev-parse", f"refs/heads/{branch}", cwd=remote)


def remote_commit_count(remote: Path, branch: str = "main") -> int:
    """Number of commits reachable from a branch in the bare remote."""
    return int(git("rev-list", "--count", f"refs/heads/{branch}", cwd=remote))


# ==============================================================================
# Repository Fixtures
# ==============================================================================


@pytest.fixture
def remote_repo(tmp_path) -> Path:
    """
    Create a bare remote repository with one commit on `main`.

    Layout of the initial commit mirrors a tiny Maven repository.
    """
    seed = tmp_path / "seed"
    seed.mkdir()
    git("init", cwd=seed)
    git("checkout", "-b", "main", cwd=seed)
    metadata = seed / "com" / "acme" / "widgets" / "maven-metadata.xml"
    metadata.parent.mkdir(parents=True)
    metadata.write_text("<metadata><versions/></metadata>\n")
    (seed / "README.md").write_text("# Package repository\n")
    git("add", "-A", cwd=seed)
    git("commit", "-m", "Initial commit", cwd=seed)

    remote = tmp_path / "remote.git"
    subprocess.run(
        ["git", "clone", "--bare", str(seed), str(remote)],
        capture_output=True,
        check=True,
    )
    return remote


@pytest.fixture
def empty_remote(tmp_path) -> Path:
    """Create a bare remote repository with no commits."""
    remote = tmp_path / "empty.git"
    remote.mkdir()
    git("init", "--bare", cwd=remote)
    return remote


@pytest.fixture
def remote_url(remote_repo: Path) -> str:
    """file:// url of the bare remote."""
    return remote_repo.as_uri()


@pytest.fixture
def local_path(tmp_path) -> Path:
    """Location for the local working copy (not created)."""
    return tmp_path / "cache" / "maven" / "repo"


@pytest.fixture
def make_config(remote_url: str, local_path: Path):
    """Factory for RepoConfig pointing at the bare remote."""

    def _make(**overrides) -> RepoConfig:
        values = {"url": remote_url, "local_path": local_path}
        values.update(overrides)
        return RepoConfig(**values)

    return _make
