"""
n8n public REST API client.

Thin synchronous wrapper around ``httpx.Client`` covering the endpoints the
sync engine needs: workflows (list, get, create, update, tags, activation)
and tags (list, create). Responses are validated into the models of
``n8nsync.core.workflows.models``.

No retries are attempted; a failed call raises immediately:

- 404 → NotFoundError
- other non-2xx → RemoteApiError with the body verbatim
- no response → TransportError

Example:
    >>> with N8nClient(env_config) as client:
    ...     summary = client.find_workflow_by_name("Invoice")
    ...     record = client.get_workflow(summary.id)
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from n8nsync.core.config.models import EnvironmentConfig
from n8nsync.core.n8n.exceptions import (
    N8nError,
    NotFoundError,
    RemoteApiError,
    TransportError,
)
from n8nsync.core.workflows.models import (
    RemoteWorkflow,
    Tag,
    WorkflowDefinition,
    WorkflowSummary,
)

logger = logging.getLogger(__name__)

# Fields n8n accepts on POST/PUT /workflows; everything else is read-only
WRITABLE_WORKFLOW_FIELDS = ("name", "nodes", "connections", "settings", "staticData")

PAGE_LIMIT = 100


class WorkflowApi(Protocol):
    """Remote workflow store operations used by the sync services."""

    def list_workflows(self) -> list[WorkflowSummary]: ...

    def get_workflow(self, workflow_id: str) -> RemoteWorkflow: ...

    def create_workflow(self, definition: WorkflowDefinition) -> RemoteWorkflow: ...

    def update_workflow(
        self, workflow_id: str, definition: WorkflowDefinition
    ) -> RemoteWorkflow: ...

    def set_workflow_tags(self, workflow_id: str, tag_ids: list[str]) -> None: ...

    def list_tags(self) -> list[Tag]: ...

    def create_tag(self, name: str) -> Tag: ...

    def activate_workflow(self, workflow_id: str) -> None: ...

    def deactivate_workflow(self, workflow_id: str) -> None: ...


def _is_html(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    if "text/html" in content_type:
        return True
    return "<!DOCTYPE html>" in response.text[:512]


def build_payload(definition: WorkflowDefinition) -> dict[str, Any]:
    """Return the writable subset of a definition as a JSON-ready dict."""
    data = definition.model_dump(mode="json", by_alias=True, exclude_none=True)
    payload = {key: data[key] for key in WRITABLE_WORKFLOW_FIELDS if key in data}
    payload.setdefault("settings", {})
    return payload


class N8nClient:
    """
    Client for one n8n instance.

    Args:
        config: Connection settings of the environment
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        config: EnvironmentConfig,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.Client(
            base_url=config.api_url,
            headers={
                "X-N8N-API-KEY": config.api_key,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> N8nClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            response = self._client.request(method, path, params=params, json=json)
        except httpx.TransportError as e:
            raise TransportError(
                f"No response from n8n API. Check your N8N_API_URL: {self.config.api_url} ({e})",
                url=self.config.api_url,
            ) from e

        if response.is_success:
            return response

        if _is_html(response):
            raise RemoteApiError(
                "It looks like N8N_API_URL points to the web UI (HTML) instead of the "
                'REST API. Make sure your URL ends with "/api/v1" and uses your '
                "workspace subdomain.",
                status_code=response.status_code,
                body=response.text,
            )

        error_cls = NotFoundError if response.status_code == 404 else RemoteApiError
        raise error_cls(
            f"n8n API error on {method} {path}: {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteApiError(
                f"n8n API returned a non-JSON response: {response.text[:200]}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _paginate(self, path: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            params: dict[str, Any] = {"limit": PAGE_LIMIT}
            if cursor:
                params["cursor"] = cursor
            data = self._json(self._request("GET", path, params=params))
            items.extend(data.get("data") or [])
            cursor = data.get("nextCursor")
            if not cursor:
                return items

    def _parse(self, model: type[Any], data: Any, what: str) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise N8nError(f"Unexpected {what} payload from n8n: {e}") from e

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def list_workflows(self) -> list[WorkflowSummary]:
        """List every workflow on the instance (all pages)."""
        return [
            self._parse(WorkflowSummary, item, "workflow list")
            for item in self._paginate("/workflows")
        ]

    def find_workflow_by_name(self, name: str) -> WorkflowSummary | None:
        """Return the workflow whose name is exactly ``name``, if any."""
        for summary in self.list_workflows():
            if summary.name == name:
                return summary
        return None

    def get_workflow(self, workflow_id: str) -> RemoteWorkflow:
        """Fetch the full record of one workflow."""
        data = self._json(self._request("GET", f"/workflows/{workflow_id}"))
        return self._parse(RemoteWorkflow, data, "workflow")

    def create_workflow(self, definition: WorkflowDefinition) -> RemoteWorkflow:
        """Create a workflow; any id on ``definition`` is ignored."""
        data = self._json(self._request("POST", "/workflows", json=build_payload(definition)))
        return self._parse(RemoteWorkflow, data, "workflow")

    def update_workflow(self, workflow_id: str, definition: WorkflowDefinition) -> RemoteWorkflow:
        """Replace the definition of an existing workflow."""
        data = self._json(
            self._request("PUT", f"/workflows/{workflow_id}", json=build_payload(definition))
        )
        return self._parse(RemoteWorkflow, data, "workflow")

    def set_workflow_tags(self, workflow_id: str, tag_ids: list[str]) -> None:
        """Replace the tags of a workflow."""
        self._request(
            "PUT",
            f"/workflows/{workflow_id}/tags",
            json=[{"id": tag_id} for tag_id in tag_ids],
        )

    def activate_workflow(self, workflow_id: str) -> None:
        self._request("POST", f"/workflows/{workflow_id}/activate")

    def deactivate_workflow(self, workflow_id: str) -> None:
        self._request("POST", f"/workflows/{workflow_id}/deactivate")

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def list_tags(self) -> list[Tag]:
        """List every tag on the instance (all pages)."""
        return [self._parse(Tag, item, "tag") for item in self._paginate("/tags")]

    def create_tag(self, name: str) -> Tag:
        data = self._json(self._request("POST", "/tags", json={"name": name}))
        return self._parse(Tag, data, "tag")

    # ------------------------------------------------------------------

    def test_connection(self) -> bool:
        """Return True if the API answers an authenticated request."""
        try:
            self._request("GET", "/workflows", params={"limit": 1})
        except N8nError as e:
            logger.debug("Connection check failed: %s", e)
            return False
        return True


__all__ = [
    "N8nClient",
    "PAGE_LIMIT",
    "WRITABLE_WORKFLOW_FIELDS",
    "WorkflowApi",
    "build_payload",
]
