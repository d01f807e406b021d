#!/usr/bin/env python3
"""CLI entry point for the Jira MCP server.

Usage:
    # Serve over stdio (what MCP clients launch)
    jira-mcp

    # Load credentials from a specific env file
    jira-mcp --env-file ~/.config/jira-mcp.env

    # Human-readable debug logs on stderr
    jira-mcp --log-level DEBUG --plain-logs
"""

import argparse
import asyncio
import logging
import os
import signal
import sys

from jira_mcp.config import load_env_files
from jira_mcp.logging import configure_logging
from jira_mcp.server import main as serve

logger = logging.getLogger("jira_mcp.cli")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. Extracted for testability."""
    parser = argparse.ArgumentParser(
        description="Jira MCP server: Jira Cloud issue tools for MCP clients over stdio"
    )
    parser.add_argument(
        "--env-file",
        "-e",
        help="Extra .env file to load (existing environment variables win)",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        default=os.getenv("JIRA_MCP_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (default: INFO, or $JIRA_MCP_LOG_LEVEL)",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Write plain-text logs instead of JSON",
    )
    return parser


def _handle_signal(signum: int, frame) -> None:
    logger.info("Received %s signal, shutting down...", signal.Signals(signum).name)
    raise SystemExit(0)


def install_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_env_files(args.env_file)
    configure_logging(level=args.log_level, json_output=not args.plain_logs)
    install_signal_handlers()

    try:
        asyncio.run(serve())
    except Exception:
        logger.critical("Fatal error in Jira MCP server", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
