"""Fixtures for the Jira MCP test suite.

Provides environment isolation, mock HTTP transports and sample Jira
payloads shaped like real REST API v3 responses.
"""

from typing import Any

import httpx
import pytest

from jira_mcp.config import JiraSettings
from jira_mcp.http import JiraHTTPClient


# --- Environment Isolation ---


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove Jira settings so tests never touch a real instance.

    Setting before deleting makes monkeypatch restore the original state even
    when code under test (dotenv) writes the variable directly.
    """
    for var in ("JIRA_HOST", "JIRA_EMAIL", "JIRA_API_TOKEN", "JIRA_TIMEOUT", "JIRA_MCP_LOG_LEVEL"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    yield


@pytest.fixture
def jira_env(monkeypatch):
    """A fully configured environment."""
    monkeypatch.setenv("JIRA_HOST", "https://acme.atlassian.net")
    monkeypatch.setenv("JIRA_EMAIL", "dev@acme.test")
    monkeypatch.setenv("JIRA_API_TOKEN", "secret-token")


# --- Mock HTTP Transport ---


@pytest.fixture
def settings():
    return JiraSettings(
        host="https://acme.atlassian.net/",
        email="dev@acme.test",
        api_token="secret-token",
    )


@pytest.fixture
def make_client(settings):
    """Factory for a JiraHTTPClient wired to a mock transport handler."""

    def _make(handler) -> JiraHTTPClient:
        return JiraHTTPClient(settings, transport=httpx.MockTransport(handler))

    return _make


# --- Sample Data ---


def adf_doc(*paragraphs: str) -> dict[str, Any]:
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": p}]}
            for p in paragraphs
        ],
    }


@pytest.fixture
def sample_issue():
    """An issue as returned by GET /issue/{id} with detail fields."""
    return {
        "id": "10042",
        "key": "PROJ-42",
        "fields": {
            "summary": "Login page times out",
            "status": {"name": "In Progress"},
            "issuetype": {"name": "Bug"},
            "description": adf_doc("Users see a spinner forever.", "Happens on Safari."),
            "parent": {"key": "PROJ-1"},
            "issuelinks": [
                {
                    "type": {"name": "Blocks", "outward": "blocks", "inward": "is blocked by"},
                    "outwardIssue": {"key": "PROJ-50", "fields": {"summary": "Release 2.1"}},
                },
                {
                    "type": {"name": "Relates", "outward": "relates to", "inward": "relates to"},
                    "inwardIssue": {"key": "OPS-7", "fields": {"summary": "CDN config"}},
                },
            ],
        },
    }


@pytest.fixture
def sample_comments():
    return {
        "startAt": 0,
        "maxResults": 50,
        "total": 2,
        "comments": [
            {
                "id": "1",
                "author": {"displayName": "Dana Reyes"},
                "body": adf_doc("Reproduced on staging."),
                "created": "2024-01-15T10:30:00.000+0000",
            },
            {
                "id": "2",
                "author": {"displayName": "Sam Ito"},
                "body": adf_doc("Fix is in review."),
                "created": "2024-01-16T08:05:00.000+0000",
            },
        ],
    }


@pytest.fixture
def sample_search_response():
    return {
        "startAt": 0,
        "maxResults": 50,
        "total": 2,
        "issues": [
            {
                "key": "PROJ-42",
                "fields": {
                    "summary": "Login page times out",
                    "status": {"name": "In Progress"},
                    "project": {"key": "PROJ"},
                    "updated": "2024-02-01T12:00:00.000+0000",
                    "description": adf_doc("Users see a spinner forever."),
                },
            },
            {
                "key": "OPS-7",
                "fields": {
                    "summary": "CDN config",
                    "status": {"name": "Done"},
                    "project": {"key": "OPS"},
                    "updated": "2024-01-20T09:15:00.000+0000",
                },
            },
        ],
    }
