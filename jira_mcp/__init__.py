"""Jira MCP - Jira Cloud issue tools for tool-calling agents over MCP."""

from jira_mcp.config import JiraSettings, validate_config
from jira_mcp.http import JiraAPIError, JiraHTTPClient
from jira_mcp.tools import (
    READ_TOOLS,
    TOOL_NAMES,
    TOOLS,
    WRITE_TOOLS,
    ErrorKind,
    ToolResult,
    call_tool,
)

__all__ = [
    "JiraSettings",
    "validate_config",
    "JiraAPIError",
    "JiraHTTPClient",
    "TOOLS",
    "TOOL_NAMES",
    "READ_TOOLS",
    "WRITE_TOOLS",
    "ErrorKind",
    "ToolResult",
    "call_tool",
]
