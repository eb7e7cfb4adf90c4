"""
Configuration data models for n8n-sync.

Two kinds of configuration exist:

- ``EnvironmentConfig``: how to reach one n8n instance (config/<env>.env)
- ``SyncSettings``: project-wide behavior (n8n-sync.json)

Both are frozen; they are built once by the loader and passed explicitly to
the services that need them.
"""

from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORIES = ("business", "management", "shared")


def validate_api_url(api_url: str) -> Optional[str]:
    """
    Check that an API URL points at the n8n REST API.

    Returns:
        A description of the problem, or None if the URL looks right
    """
    try:
        parsed = urlparse(api_url)
    except ValueError:
        return "N8N_API_URL is not a valid URL."

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return "N8N_API_URL is not a valid URL."

    path = parsed.path.rstrip("/")
    if "/home/workflows" in path:
        return 'N8N_API_URL should not contain UI paths like "/home/workflows".'
    if not path.endswith("/api/v1"):
        return 'N8N_API_URL must end with "/api/v1".'
    if parsed.hostname == "app.n8n.cloud":
        return (
            "N8N_API_URL must use your workspace subdomain "
            "(e.g., https://<workspace>.n8n.cloud/api/v1), not https://app.n8n.cloud/api/v1."
        )
    return None


class ActivationPolicy(str, Enum):
    """When a newly created workflow gets activated."""

    SOURCE = "source"
    """Activate only if the source definition says "active": true."""

    NEVER = "never"
    """Leave every created workflow inactive."""


class EnvironmentConfig(BaseModel):
    """
    Connection settings for one n8n instance.

    Loaded from config/<name>.env (N8N_API_URL, N8N_API_KEY, ENVIRONMENT).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Environment name used on the command line")
    api_url: str = Field(description="n8n REST API base URL, ending in /api/v1")
    api_key: str = Field(min_length=1, description="n8n API key")
    label: Optional[str] = Field(
        default=None,
        description="Free-form ENVIRONMENT value from the env file",
    )

    @field_validator("api_url")
    @classmethod
    def _check_api_url(cls, value: str) -> str:
        problem = validate_api_url(value)
        if problem:
            raise ValueError(f"{problem} Example: https://<your-workspace>.n8n.cloud/api/v1")
        return value.rstrip("/")


class SyncSettings(BaseModel):
    """
    Project-wide settings for pull, diff and deploy.

    Example n8n-sync.json:
        {
          "workflows_dir": "workflows",
          "categories": ["business", "management", "shared"],
          "activation": "source",
          "max_workers": 4
        }
    """

    model_config = ConfigDict(frozen=True)

    workflows_dir: str = Field(
        default="workflows",
        description="Directory (relative to the project root) holding workflow files",
    )
    categories: tuple[str, ...] = Field(
        default=DEFAULT_CATEGORIES,
        description="Recognized category tags, in priority order",
    )
    activation: ActivationPolicy = Field(
        default=ActivationPolicy.SOURCE,
        description="When newly created workflows are activated",
    )
    reactivate_recreated: bool = Field(
        default=False,
        description="Re-activate a workflow recreated after vanishing remotely if it was active",
    )
    recreate_missing: bool = Field(
        default=True,
        description="Create a workflow anew when the record found by name vanishes mid-deploy",
    )
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Thread pool size for parallel deploys (default: one per file)",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds for each n8n API request",
    )

    @field_validator("categories")
    @classmethod
    def _require_categories(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one category is required")
        return value


__all__ = [
    "ActivationPolicy",
    "DEFAULT_CATEGORIES",
    "EnvironmentConfig",
    "SyncSettings",
    "validate_api_url",
]
