"""Jira MCP Server - Exposes Jira issue operations via Model Context Protocol."""

import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from jira_mcp.config import validate_config
from jira_mcp.tools import TOOLS, call_tool as run_tool

logger = logging.getLogger("jira_mcp.server")

SERVER_NAME = "jira"

# Initialize MCP server
app = Server(SERVER_NAME)


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List all available Jira tools."""
    return [
        Tool(
            name=spec.name,
            description=spec.description,
            inputSchema=spec.input_schema(),
        )
        for spec in TOOLS.values()
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Execute a Jira tool and return its single text payload."""
    try:
        result = await run_tool(name, arguments)
    except Exception:
        logger.exception("Unexpected error in MCP tool handler", extra={"tool_name": name})
        return [TextContent(type="text", text="Unexpected error processing request")]
    return [TextContent(type="text", text=result.text)]


def report_config_status() -> bool:
    """Log whether Jira is configured. Returns True when it is."""
    config_error = validate_config()
    if config_error:
        logger.warning("Jira configuration error: %s", config_error)
        logger.warning("Please configure the required environment variables.")
        logger.warning(
            "Starting server in limited mode (tools will return configuration instructions)"
        )
        return False
    return True


async def main() -> None:
    """Run the MCP server over stdio."""
    report_config_status()
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Jira MCP Server running on stdio")
        await app.run(read_stream, write_stream, app.create_initialization_options())
