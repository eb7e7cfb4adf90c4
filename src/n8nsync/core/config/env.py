"""Dotenv helpers.

Two kinds of dotenv files are read:

- config/<env>.env: the N8N_API_URL / N8N_API_KEY of one n8n instance,
  parsed with ``read_env_file`` and never exported.
- .env files exported once at startup by ``load_layered_env`` so that the
  process-environment fallback of ``load_environment`` and the N8N_SYNC_*
  overrides can be kept out of the shell profile.

Exported values never replace a variable already set in the shell:

    shell > <project>/.env.local > <project>/.env > ~/.config/n8n-sync/.env
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values


def read_env_file(path: Path) -> dict[str, str]:
    """Parse a dotenv file, dropping keys without a value."""
    if not path.exists():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def user_env_path() -> Path:
    config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return config_home / "n8n-sync" / ".env"


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: list[Path] | None = None,
) -> dict[str, str]:
    """
    Export the user and project .env files into ``os.environ``.

    Args:
        project_dir: Directory holding .env and .env.local (defaults to cwd)
        user_env_paths: User-level files, lowest precedence first

    Returns:
        The variables that were exported
    """
    project_dir = project_dir or Path.cwd()
    layers = list(user_env_paths) if user_env_paths is not None else [user_env_path()]
    layers += [project_dir / ".env", project_dir / ".env.local"]

    merged: dict[str, str] = {}
    for path in layers:
        merged.update(read_env_file(path))

    exported = {key: value for key, value in merged.items() if key not in os.environ}
    os.environ.update(exported)
    return exported


__all__ = ["load_layered_env", "read_env_file", "user_env_path"]
