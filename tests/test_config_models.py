"""
Unit tests for the RepoConfig model.

Tests defaults, camelCase aliases, immutability and password masking.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gitmaven.core.config import RepoConfig, default_local_path


class TestRepoConfigDefaults:
    """Test default values."""

    def test_defaults(self):
        config = RepoConfig()

        assert config.url == ""
        assert config.username == ""
        assert config.password == ""
        assert config.release is False
        assert config.ssh_options == {}
        assert config.branch is None
        assert config.remote_name == "origin"
        assert config.allow_empty_commit is True
        assert config.repoint_remote is False

    def test_local_path_defaults_to_home_directory(self):
        config = RepoConfig(url="https://example.com/pkgrepo.git")
        assert config.local_path == Path.home() / ".gitMavenRepo"
        assert config.local_path == default_local_path()

    def test_blank_local_path_uses_default(self):
        config = RepoConfig(local_path="  ")
        assert config.local_path == default_local_path()

    def test_local_path_expands_user(self):
        config = RepoConfig(local_path="~/repos/maven")
        assert config.local_path == Path.home() / "repos" / "maven"


class TestRepoConfigAliases:
    """Test the camelCase keys of the original plugin extension."""

    def test_camel_case_keys(self, tmp_path):
        config = RepoConfig(
            **{
                "url": "https://example.com/pkgrepo.git",
                "gitUsername": "ci",
                "gitPassword": "token",
                "repoDir": str(tmp_path / "repo"),
                "sshConfig": {"StrictHostKeyChecking": "no"},
                "allowEmptyCommit": False,
            }
        )

        assert config.username == "ci"
        assert config.password == "token"
        assert config.local_path == tmp_path / "repo"
        assert config.ssh_options == {"StrictHostKeyChecking": "no"}
        assert config.allow_empty_commit is False

    def test_ssh_option_values_are_stringified(self):
        config = RepoConfig(sshOptions={"Port": 2222, "Compression": True})
        assert config.ssh_options == {"Port": "2222", "Compression": "True"}

    def test_unknown_keys_ignored(self):
        config = RepoConfig(url="https://example.com/r.git", publishTask="publish")
        assert not hasattr(config, "publishTask")


class TestRepoConfigImmutability:
    """Test that configs cannot change after construction."""

    def test_frozen(self):
        config = RepoConfig(url="https://example.com/r.git")
        with pytest.raises(ValidationError):
            config.url = "https://example.com/other.git"

    def test_invalid_type_rejected(self):
        with pytest.raises(ValidationError):
            RepoConfig(ssh_options=["not", "a", "mapping"])


class TestRepoConfigSecrets:
    """Test that the password never leaks into logs."""

    def test_password_not_in_repr(self):
        config = RepoConfig(url="https://example.com/r.git", password="hunter2")
        assert "hunter2" not in repr(config)

    def test_describe_masks_password(self):
        config = RepoConfig(url="https://example.com/r.git", username="ci", password="hunter2")
        described = config.describe()

        assert described["password"] == "********"
        assert described["username"] == "ci"
        assert "hunter2" not in str(described)

    def test_describe_keeps_empty_password(self):
        assert RepoConfig().describe()["password"] == ""
