"""
Transport authentication for clone, pull and push.

The auth mode is resolved once from the configured URL into one of three
variants. Each variant knows how to prepare the environment git needs for
every remote operation:

- HttpBasicAuth: username/password answered through a GIT_ASKPASS helper
  that reads them from the environment, so they never reach the URL or
  .git/config.
- SshKeyAuth: ssh options applied to the session through GIT_SSH_COMMAND.
  Authentication relies on the ambient agent or identity files.
- LocalAuth: file:// URLs and filesystem paths, nothing to attach.

Example:
    >>> auth = resolve_auth(RepoConfig(url="git@host:repo.git"))
    >>> auth.mode
    <AuthMode.SSH_KEY: 'ssh_key'>
    >>> with transport_environment(auth) as env:
    ...     Repo.clone_from(url, path, env=env)
"""

from __future__ import annotations

import re
import shlex
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PureWindowsPath
from typing import ClassVar, Union

from gitmaven.core.config.models import RepoConfig
from gitmaven.core.repo.errors import InvalidConfigError

ASKPASS_USERNAME_ENV = "GITMAVEN_ASKPASS_USERNAME"
ASKPASS_PASSWORD_ENV = "GITMAVEN_ASKPASS_PASSWORD"

# git invokes the helper with a prompt such as "Username for 'https://host': "
_ASKPASS_SCRIPT = f"""#!/bin/sh
case "$1" in
    Username*) printf '%s\\n' "${ASKPASS_USERNAME_ENV}" ;;
    *) printf '%s\\n' "${ASKPASS_PASSWORD_ENV}" ;;
esac
"""

_HTTP_PREFIXES = ("http://", "https://")
_SSH_PREFIXES = ("ssh://", "git+ssh://", "ssh+git://")
_SCP_LIKE = re.compile(r"^[A-Za-z0-9._~-]+@[A-Za-z0-9._-]+:")


class AuthMode(str, Enum):
    """Credential strategy selected by the URL scheme."""

    HTTP_BASIC = "http_basic"
    SSH_KEY = "ssh_key"
    LOCAL = "local"


@dataclass(frozen=True)
class HttpBasicAuth:
    """Static username/password credentials for HTTP(S) remotes."""

    username: str
    password: str = field(repr=False)

    mode: ClassVar[AuthMode] = AuthMode.HTTP_BASIC


@dataclass(frozen=True)
class SshKeyAuth:
    """SSH session options applied before connecting, in configured order."""

    options: tuple[tuple[str, str], ...] = ()

    mode: ClassVar[AuthMode] = AuthMode.SSH_KEY

    def ssh_command(self) -> str:
        """Build the ssh invocation git should use for this remote."""
        parts = ["ssh"]
        for key, value in self.options:
            parts.extend(["-o", f"{key}={value}"])
        return " ".join(shlex.quote(part) for part in parts)


@dataclass(frozen=True)
class LocalAuth:
    """No credentials: the remote is reachable through the filesystem."""

    mode: ClassVar[AuthMode] = AuthMode.LOCAL


Auth = Union[HttpBasicAuth, SshKeyAuth, LocalAuth]


def _is_filesystem_path(url: str) -> bool:
    if url.startswith(("/", "./", "../", "~")):
        return True
    # C:\repos\pkg.git, C:/repos/pkg.git, \\server\share\pkg.git
    return bool(PureWindowsPath(url).drive)


def detect_auth_mode(url: str) -> AuthMode:
    """
    Classify a remote URL into an auth mode.

    Args:
        url: Remote repository URL

    Returns:
        The AuthMode for the URL

    Raises:
        InvalidConfigError: If the URL is blank or uses an unsupported scheme
    """
    candidate = url.strip()
    if not candidate:
        raise InvalidConfigError("Url must not be empty")

    lowered = candidate.lower()
    if lowered.startswith(_HTTP_PREFIXES):
        return AuthMode.HTTP_BASIC
    if lowered.startswith(_SSH_PREFIXES) or _SCP_LIKE.match(candidate):
        return AuthMode.SSH_KEY
    if lowered.startswith("file://") or _is_filesystem_path(candidate):
        return AuthMode.LOCAL

    raise InvalidConfigError(f"Unsupported repository url scheme: {candidate}")


def resolve_auth(config: RepoConfig) -> Auth:
    """Resolve the auth variant for a config. Raises InvalidConfigError."""
    mode = detect_auth_mode(config.url)
    if mode is AuthMode.HTTP_BASIC:
        return HttpBasicAuth(username=config.username, password=config.password)
    if mode is AuthMode.SSH_KEY:
        return SshKeyAuth(options=tuple(config.ssh_options.items()))
    return LocalAuth()


@contextmanager
def transport_environment(auth: Auth) -> Iterator[dict[str, str]]:
    """
    Yield the environment overrides for a git transport command.

    For HTTP the askpass helper lives in a private temporary directory that
    is removed when the context exits.
    """
    env = {"GIT_TERMINAL_PROMPT": "0"}

    if isinstance(auth, HttpBasicAuth):
        with tempfile.TemporaryDirectory(prefix="gitmaven-askpass-") as tmp:
            script = Path(tmp) / "askpass.sh"
            script.write_text(_ASKPASS_SCRIPT)
            script.chmod(0o700)
            env["GIT_ASKPASS"] = str(script)
            env[ASKPASS_USERNAME_ENV] = auth.username
            env[ASKPASS_PASSWORD_ENV] = auth.password
            yield env
        return

    if isinstance(auth, SshKeyAuth):
        env["GIT_SSH_COMMAND"] = auth.ssh_command()

    yield env
