"""
Configuration loading.

Project settings follow the precedence chain:
    defaults < project config (n8n-sync.json) < env vars (N8N_SYNC_*)

Environment (instance) settings come from config/<env>.env; when that file
does not exist, N8N_API_URL / N8N_API_KEY from the process environment are
used instead.

Nothing is cached: every call builds a fresh frozen model that the caller
passes on explicitly.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from n8nsync.core.config.env import read_env_file
from n8nsync.core.config.models import EnvironmentConfig, SyncSettings
from n8nsync.core.n8n.exceptions import ConfigError

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "n8n-sync.json"
ENV_CONFIG_DIR = "config"
TEMPLATE_ENV = "template"


def get_project_config_path(project_dir: Path) -> Path:
    """Return the path of the project settings file."""
    return project_dir / PROJECT_CONFIG_FILE


def get_environment_path(environment: str, project_dir: Path) -> Path:
    """Return the path of config/<environment>.env."""
    return project_dir / ENV_CONFIG_DIR / f"{environment}.env"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`; nested dicts
    are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}})
        {'a': 1, 'b': {'x': 10, 'y': 30}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON object from a file.

    Returns:
        Parsed object, or None if the file is missing or not a JSON object
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None

    if isinstance(data, dict):
        return data
    logger.warning("Ignoring config at %s: expected a JSON object", path)
    return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to project settings.

    Supported env vars:
        N8N_SYNC_WORKFLOWS_DIR - overrides workflows_dir
        N8N_SYNC_MAX_WORKERS - overrides max_workers
        N8N_SYNC_TIMEOUT - overrides timeout
        N8N_SYNC_ACTIVATION - overrides activation ("source" or "never")
    """
    result = config_dict.copy()

    if workflows_dir := os.environ.get("N8N_SYNC_WORKFLOWS_DIR"):
        result["workflows_dir"] = workflows_dir

    if workers_str := os.environ.get("N8N_SYNC_MAX_WORKERS"):
        try:
            result["max_workers"] = int(workers_str)
        except ValueError:
            logger.warning("Invalid N8N_SYNC_MAX_WORKERS value %r, ignoring", workers_str)

    if timeout_str := os.environ.get("N8N_SYNC_TIMEOUT"):
        try:
            result["timeout"] = float(timeout_str)
        except ValueError:
            logger.warning("Invalid N8N_SYNC_TIMEOUT value %r, ignoring", timeout_str)

    if activation := os.environ.get("N8N_SYNC_ACTIVATION"):
        result["activation"] = activation.strip().lower()

    return result


def load_settings(project_dir: Path) -> SyncSettings:
    """
    Load project settings with multi-layer merging.

    Args:
        project_dir: Project root holding n8n-sync.json

    Returns:
        Validated, frozen SyncSettings

    Raises:
        ConfigError: If the merged settings fail validation
    """
    merged: dict[str, Any] = {}

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    try:
        return SyncSettings(**merged)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid settings in {PROJECT_CONFIG_FILE}: {_format_errors(e)}",
            path=str(get_project_config_path(project_dir)),
        ) from e


def list_environments(project_dir: Path) -> list[str]:
    """Return the names of configured environments (config/*.env minus template)."""
    config_dir = project_dir / ENV_CONFIG_DIR
    if not config_dir.is_dir():
        return []
    return sorted(
        path.stem
        for path in config_dir.glob("*.env")
        if path.is_file() and path.stem != TEMPLATE_ENV
    )


def load_environment(environment: str, project_dir: Path) -> EnvironmentConfig:
    """
    Load connection settings for one environment.

    Args:
        environment: Environment name (e.g. "test", "production")
        project_dir: Project root holding the config/ directory

    Returns:
        Validated, frozen EnvironmentConfig

    Raises:
        ConfigError: If no configuration exists or it is invalid
    """
    env_path = get_environment_path(environment, project_dir)

    if env_path.exists():
        values = read_env_file(env_path)
        source = f"{ENV_CONFIG_DIR}/{environment}.env"
    else:
        values = {
            key: os.environ[key]
            for key in ("N8N_API_URL", "N8N_API_KEY", "ENVIRONMENT")
            if os.environ.get(key)
        }
        source = "process environment"
        if "N8N_API_URL" not in values or "N8N_API_KEY" not in values:
            available = ", ".join(list_environments(project_dir)) or "none configured"
            raise ConfigError(
                f"Configuration file not found: {ENV_CONFIG_DIR}/{environment}.env "
                f"(available environments: {available})",
                environment=environment,
            )
        logger.debug("No %s; using N8N_API_URL from the environment", env_path)

    try:
        return EnvironmentConfig(
            name=environment,
            api_url=values.get("N8N_API_URL", ""),
            api_key=values.get("N8N_API_KEY", ""),
            label=values.get("ENVIRONMENT"),
        )
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {source}: {_format_errors(e)}",
            environment=environment,
        ) from e


def _format_errors(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'value'}: {err['msg']}"
        for err in error.errors()
    )
