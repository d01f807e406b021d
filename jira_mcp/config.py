"""Jira connection settings.

Settings come from the environment (optionally seeded from ``.env`` files).
Missing settings never stop the server; tools report them instead.
"""

import logging
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("jira_mcp.config")

# Checked in this order; the first missing one is reported.
REQUIRED_SETTINGS = ("JIRA_HOST", "JIRA_EMAIL", "JIRA_API_TOKEN")

DEFAULT_TIMEOUT = 30.0


class JiraSettings(BaseModel):
    """Validated connection settings for the Jira Cloud REST API."""

    host: str = Field(..., min_length=1, description="Base URL, e.g. https://acme.atlassian.net")
    email: str = Field(..., min_length=1, description="Account email used for basic auth")
    api_token: str = Field(..., min_length=1, description="Atlassian API token")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds")

    @field_validator("host")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def validate_config() -> str | None:
    """Return a message naming the first missing setting, or None."""
    for name in REQUIRED_SETTINGS:
        if not os.getenv(name):
            return f"{name} environment variable is not set"
    return None


def load_settings() -> JiraSettings:
    """Build settings from the environment. Call validate_config() first."""
    return JiraSettings(
        host=os.getenv("JIRA_HOST", ""),
        email=os.getenv("JIRA_EMAIL", ""),
        api_token=os.getenv("JIRA_API_TOKEN", ""),
        timeout=float(os.getenv("JIRA_TIMEOUT", DEFAULT_TIMEOUT)),
    )


def load_env_files(extra: str | None = None) -> None:
    """Load ``.env`` from the working directory, the project root, and ``extra``.

    Variables already present in the environment are never overridden.
    """
    cwd_env = find_dotenv(usecwd=True)
    if cwd_env:
        load_dotenv(cwd_env)
    project_env = Path(__file__).resolve().parent.parent / ".env"
    if project_env.is_file():
        load_dotenv(project_env)
    if extra:
        if not Path(extra).is_file():
            logger.warning("Env file %s not found, skipping", extra)
        else:
            load_dotenv(extra)
