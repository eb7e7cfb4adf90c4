"""
Configuration models and loading.

Project settings merge defaults < n8n-sync.json < N8N_SYNC_* env vars;
instance settings come from config/<env>.env.
"""

from .loader import (
    get_environment_path,
    get_project_config_path,
    list_environments,
    load_environment,
    load_settings,
)
from .models import ActivationPolicy, EnvironmentConfig, SyncSettings

__all__ = [
    # Models
    "ActivationPolicy",
    "EnvironmentConfig",
    "SyncSettings",
    # Loader functions
    "get_environment_path",
    "get_project_config_path",
    "list_environments",
    "load_environment",
    "load_settings",
]
