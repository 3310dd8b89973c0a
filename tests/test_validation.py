"""
Tests for config validation.

Validation runs before any filesystem or network access, so a rejected
config must leave the local path untouched.
"""

from pathlib import Path

import pytest

from gitmaven.core.config import RepoConfig
from gitmaven.core.repo import AuthMode, InvalidConfigError, RepositorySync, validate_config


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_empty_url(self) -> None:
        with pytest.raises(InvalidConfigError, match="Url must not be empty"):
            validate_config(RepoConfig(url=""))

    def test_whitespace_url(self) -> None:
        with pytest.raises(InvalidConfigError, match="Url must not be empty"):
            validate_config(RepoConfig(url="  \t"))

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(InvalidConfigError):
            validate_config(RepoConfig(url="ftp://example.com/r.git"))

    def test_returns_auth_mode(self) -> None:
        assert validate_config(RepoConfig(url="https://example.com/r.git")) is AuthMode.HTTP_BASIC
        assert validate_config(RepoConfig(url="git@host:r.git")) is AuthMode.SSH_KEY

    def test_missing_credentials_accepted(self) -> None:
        """Credentials are checked by the remote, not up front."""
        config = RepoConfig(url="https://example.com/r.git")
        assert validate_config(config) is AuthMode.HTTP_BASIC


class TestValidationBeforeIO:
    """A rejected config performs no filesystem operation."""

    @pytest.mark.parametrize("url", ["", "   ", "ftp://example.com/r.git"])
    def test_service_rejects_without_creating_dirs(self, tmp_path: Path, url: str) -> None:
        local_path = tmp_path / "cache" / "repo"

        with pytest.raises(InvalidConfigError):
            RepositorySync(RepoConfig(url=url, local_path=local_path))

        assert not local_path.exists()
        assert not local_path.parent.exists()
