"""
Configuration data models for gitmaven.

These models define the structure of .gitmaven.json and
~/.config/gitmaven/config.json files, with validation and type safety via
Pydantic. Keys may use snake_case or the camelCase names of the gitMavenRepo
build-plugin extension (localPath, sshOptions, gitUsername, ...).
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_REPO_DIR_NAME = ".gitMavenRepo"


def default_local_path() -> Path:
    """Well-known per-user directory for the local copy."""
    return Path.home() / DEFAULT_REPO_DIR_NAME


class RepoConfig(BaseModel):
    """
    Settings for one synchronized repository.

    Immutable once built. The url is deliberately not checked here so that a
    config can be loaded and displayed even when incomplete; the sync core
    runs validate_config() before touching the filesystem.

    Example:
        >>> config = RepoConfig(
        ...     url="https://example.com/pkgrepo.git",
        ...     username="ci",
        ...     password="s3cret",
        ...     release=True,
        ... )
        >>> config.local_path.name
        '.gitMavenRepo'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    url: str = Field(
        default="",
        description="Remote repository URL (http(s), ssh, scp-like or file)",
    )
    username: str = Field(
        default="",
        validation_alias=AliasChoices("username", "gitUsername"),
        description="Username for HTTP(S) remotes",
    )
    password: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("password", "gitPassword"),
        description="Password or token for HTTP(S) remotes",
    )
    local_path: Path = Field(
        default_factory=default_local_path,
        validation_alias=AliasChoices("local_path", "localPath", "repoDir"),
        description="Directory holding the local working copy",
    )
    release: bool = Field(
        default=False,
        description="Push published artifacts back to the remote",
    )
    ssh_options: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("ssh_options", "sshOptions", "sshConfig"),
        description="SSH session options, e.g. StrictHostKeyChecking=no",
    )
    branch: Optional[str] = Field(
        default=None,
        description="Tracked branch (defaults to the remote's default branch)",
    )
    remote_name: str = Field(
        default="origin",
        validation_alias=AliasChoices("remote_name", "remoteName"),
        description="Name of the single remote",
    )
    allow_empty_commit: bool = Field(
        default=True,
        validation_alias=AliasChoices("allow_empty_commit", "allowEmptyCommit"),
        description="Create a commit on publish even when nothing changed",
    )
    repoint_remote: bool = Field(
        default=False,
        validation_alias=AliasChoices("repoint_remote", "repointRemote"),
        description="Re-point an existing local copy whose remote URL differs",
    )

    @field_validator("local_path", mode="before")
    @classmethod
    def expand_local_path(cls, v: Any) -> Any:
        """Expand ~ in configured paths; empty means the default directory."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return default_local_path()
        return Path(v).expanduser()

    @field_validator("ssh_options", mode="before")
    @classmethod
    def stringify_ssh_options(cls, v: Any) -> Any:
        """Accept non-string option values (e.g. ports) from JSON files."""
        if isinstance(v, dict):
            return {str(key): str(value) for key, value in v.items()}
        return v

    def describe(self) -> dict[str, Any]:
        """Return the config as a dict that is safe to log or print."""
        data = self.model_dump(mode="json")
        if data.get("password"):
            data["password"] = "********"
        return data
