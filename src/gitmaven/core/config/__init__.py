"""
Configuration models and loading.

This module provides the Pydantic RepoConfig model with multi-layer
merging: defaults < user < project < env vars.
"""

from .loader import (
    clear_cache,
    get_env_file_paths,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import RepoConfig, default_local_path

__all__ = [
    # Models
    "RepoConfig",
    "default_local_path",
    # Loader functions
    "clear_cache",
    "get_env_file_paths",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
]
