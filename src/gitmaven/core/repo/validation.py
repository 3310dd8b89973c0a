"""Pre-flight validation of a RepoConfig. Performs no I/O."""

from gitmaven.core.config.models import RepoConfig
from gitmaven.core.repo.auth import AuthMode, detect_auth_mode
from gitmaven.core.repo.errors import InvalidConfigError


def validate_config(config: RepoConfig) -> AuthMode:
    """
    Check a config before any filesystem or network operation.

    Only the url is checked. Missing credentials are left for the remote to
    reject at transport time.

    Args:
        config: Configuration to validate

    Returns:
        The auth mode the url resolves to

    Raises:
        InvalidConfigError: If the url is blank or its scheme is unsupported
    """
    if not config.url or not config.url.strip():
        raise InvalidConfigError("Url must not be empty")
    return detect_auth_mode(config.url)
