"""Async HTTP client for the Jira Cloud REST API (v3).

Each request opens and closes its own ``httpx.AsyncClient`` so that no
connection state is shared between tool calls. There is deliberately no retry:
failures surface immediately as a ``JiraAPIError``.
"""

import logging
from typing import Any

import httpx

from jira_mcp.config import JiraSettings, load_settings
from jira_mcp.core.adf import text_to_adf

logger = logging.getLogger("jira_mcp.http")

API_PREFIX = "/rest/api/3"

# Fields requested for the detail view and for text search
ISSUE_DETAIL_FIELDS = ["summary", "status", "issuetype", "description", "parent", "issuelinks"]
SEARCH_FIELDS = ["summary", "status", "updated", "project", "description"]


class JiraAPIError(Exception):
    """Structured error from the Jira API.

    Carries the endpoint, HTTP status (0 for transport failures), and the
    response body so handlers can classify the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
        status_code: int = 0,
        body: str = "",
    ) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def _error_details(response: httpx.Response) -> str:
    """Pull Jira's errorMessages/errors out of a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:500]
    if not isinstance(payload, dict):
        return response.text[:500]

    details = [str(m) for m in payload.get("errorMessages") or []]
    errors = payload.get("errors") or {}
    if isinstance(errors, dict):
        details.extend(f"{field}: {msg}" for field, msg in errors.items())
    return "; ".join(details) or response.text[:500]


class JiraHTTPClient:
    """Thin wrapper over the handful of Jira endpoints the tools need."""

    def __init__(
        self,
        settings: JiraSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.host + API_PREFIX,
            auth=httpx.BasicAuth(self._settings.email, self._settings.api_token),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=self._settings.timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        endpoint = f"{method} {path}"
        logger.debug("Jira request %s", endpoint, extra={"endpoint": endpoint})
        try:
            async with self._new_client() as client:
                resp = await client.request(method, path, params=params, json=json_data)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            details = _error_details(exc.response)
            message = f"{endpoint} failed with {status}"
            if details:
                message = f"{message}: {details}"
            raise JiraAPIError(
                message,
                endpoint=endpoint,
                status_code=status,
                body=exc.response.text[:500],
            ) from exc
        except httpx.HTTPError as exc:
            raise JiraAPIError(
                f"Cannot reach Jira at {self._settings.host}: {exc}",
                endpoint=endpoint,
                status_code=0,
                body=str(exc),
            ) from exc

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # --- Read operations ---

    async def search_issues(
        self,
        jql: str,
        *,
        max_results: int | None = None,
        fields: list[str] | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"jql": jql}
        if max_results is not None:
            params["maxResults"] = max_results
        if fields:
            params["fields"] = ",".join(fields)
        return await self._request("GET", "/search/jql", params=params)

    async def get_issue(self, issue_id: str, fields: list[str] | None = None) -> dict[str, Any]:
        params = {"fields": ",".join(fields)} if fields else None
        return await self._request("GET", f"/issue/{issue_id}", params=params)

    async def get_comments(self, issue_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/issue/{issue_id}/comment")

    # --- Write operations ---

    async def create_issue(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Create an issue; a plain-text description is converted to ADF."""
        payload = dict(fields)
        if isinstance(payload.get("description"), str):
            payload["description"] = text_to_adf(payload["description"])
        return await self._request("POST", "/issue", json_data={"fields": payload})

    async def add_comment(self, issue_id: str, body: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/issue/{issue_id}/comment", json_data={"body": text_to_adf(body)}
        )

    async def do_transition(self, issue_id: str, transition_id: str) -> None:
        await self._request(
            "POST",
            f"/issue/{issue_id}/transitions",
            json_data={"transition": {"id": transition_id}},
        )


def get_jira_client() -> JiraHTTPClient:
    """Build a client from the current environment settings."""
    return JiraHTTPClient(load_settings())
