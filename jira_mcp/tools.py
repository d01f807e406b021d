"""Jira tools exposed to the agent.

Each tool validates input with Pydantic, checks the connection settings,
calls the Jira API through ``JiraHTTPClient``, and renders the response as a
single text payload. Handlers never raise: every outcome, including failures,
comes back as a ``ToolResult``.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from jira_mcp.config import validate_config
from jira_mcp.core.formatting import (
    format_comments,
    format_no_matches,
    format_search_results,
    format_ticket_detail,
    format_ticket_list,
)
from jira_mcp.core.jql import DEFAULT_JQL, build_search_jql, normalize_project_keys
from jira_mcp.http import (
    ISSUE_DETAIL_FIELDS,
    SEARCH_FIELDS,
    JiraAPIError,
    JiraHTTPClient,
    get_jira_client,
)
from jira_mcp.logging import log_outcome, tool_context

logger = logging.getLogger("jira_mcp.tools")

DEFAULT_MAX_RESULTS = 50

NO_PROJECT_KEYS = "No valid project keys provided. Please provide at least one project key."


# --- Results ---


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    NOT_FOUND = "not_found"
    REMOTE_API = "remote_api"
    VALIDATION = "validation"


@dataclass(frozen=True)
class ToolResult:
    """One text payload, plus the failure class when the call did not succeed."""

    text: str
    error: ErrorKind | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def _ok(text: str) -> ToolResult:
    return ToolResult(text)


def _error(text: str, kind: ErrorKind) -> ToolResult:
    return ToolResult(text, kind)


# --- Input Models ---


class ToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ListTicketsInput(ToolInput):
    jql: str | None = Field(None, description="Optional JQL query to filter tickets")


class TicketIdInput(ToolInput):
    ticket_id: str = Field(
        ..., alias="ticketId", min_length=1, description="The Jira ticket ID (e.g., PROJECT-123)"
    )


class TicketFields(ToolInput):
    summary: str = Field(..., description="The ticket summary")
    description: str = Field(..., description="The ticket description")
    project_key: str = Field(
        ..., alias="projectKey", min_length=1, description="The project key (e.g., PROJECT)"
    )
    issue_type: str = Field(
        ..., alias="issueType", min_length=1, description="The type of issue (e.g., Task, Bug)"
    )
    parent: str | None = Field(
        None, description="The parent/epic key (for next-gen projects)"
    )


class CreateTicketInput(ToolInput):
    ticket: TicketFields


class CommentBody(ToolInput):
    body: str = Field(..., description="The comment text")


class AddCommentInput(TicketIdInput):
    comment: CommentBody


class StatusUpdate(ToolInput):
    transition_id: str = Field(
        ..., alias="transitionId", min_length=1, description="The ID of the transition to perform"
    )


class UpdateStatusInput(TicketIdInput):
    status: StatusUpdate


class SearchTicketsInput(ToolInput):
    search_text: str = Field(..., alias="searchText", description="The text to search for in tickets")
    project_keys: str = Field(
        ..., alias="projectKeys", description="Comma-separated list of project keys"
    )
    max_results: int = Field(
        DEFAULT_MAX_RESULTS,
        alias="maxResults",
        ge=1,
        description="Maximum number of results to return",
    )


# --- Validation Helper ---


def _validate(
    model_cls: type[BaseModel], args: dict[str, Any] | None
) -> tuple[BaseModel | None, ToolResult | None]:
    """Validate tool args against a Pydantic model.

    Returns (validated_model, None) on success, or (None, error_result) on failure.
    """
    try:
        return model_cls.model_validate(args or {}), None
    except Exception as exc:
        return None, _error(
            f"Invalid input: {exc}. Check the tool's parameter descriptions and try again.",
            ErrorKind.VALIDATION,
        )


# --- Execution ---


async def _execute(
    operation: str,
    call: Callable[[JiraHTTPClient], Awaitable[Any]],
    render: Callable[[Any], str],
    *,
    ticket_id: str | None = None,
    written: str | None = None,
    guard: Callable[[], ToolResult | None] | None = None,
) -> ToolResult:
    """Config gate, one remote call, render, classify failures.

    ``written`` marks a write: if the remote call succeeded but its response
    cannot be rendered, the write is still reported as a success with this text.
    ``guard`` runs after the config gate and may short-circuit the call.
    Every call ends with one outcome record naming the operation.
    """
    started = time.monotonic()
    result = await _attempt(
        operation, call, render, ticket_id=ticket_id, written=written, guard=guard
    )
    log_outcome(
        logger, operation, result.error.value if result.error else None, started,
        ticket_id=ticket_id,
    )
    return result


async def _attempt(
    operation: str,
    call: Callable[[JiraHTTPClient], Awaitable[Any]],
    render: Callable[[Any], str],
    *,
    ticket_id: str | None,
    written: str | None,
    guard: Callable[[], ToolResult | None] | None,
) -> ToolResult:
    config_error = validate_config()
    if config_error:
        logger.debug("Configuration error: %s", config_error, extra={"operation": operation})
        return _error(f"Configuration error: {config_error}", ErrorKind.CONFIGURATION)

    if guard is not None:
        blocked = guard()
        if blocked is not None:
            return blocked

    try:
        response = await call(get_jira_client())
    except JiraAPIError as exc:
        if exc.not_found and ticket_id:
            logger.info(
                "Ticket %s not found", ticket_id,
                extra={"operation": operation, "status_code": exc.status_code},
            )
            return _error(f"Ticket {ticket_id} not found.", ErrorKind.NOT_FOUND)
        logger.warning(
            "Jira API error during %s: %s", operation, exc,
            extra={"operation": operation, "ticket_id": ticket_id, "status_code": exc.status_code},
        )
        return _error(f"Failed to {operation}: {exc}", ErrorKind.REMOTE_API)
    except Exception as exc:
        logger.error(
            "Unexpected error during %s: %s", operation, exc,
            exc_info=True, extra={"operation": operation},
        )
        return _error(f"Failed to {operation}: {exc}", ErrorKind.REMOTE_API)

    try:
        return _ok(render(response))
    except Exception as exc:
        if written is not None:
            logger.warning(
                "Write for %s succeeded but response could not be formatted", operation,
                exc_info=True, extra={"operation": operation, "ticket_id": ticket_id},
            )
            return _ok(written)
        logger.error(
            "Could not format response for %s", operation,
            exc_info=True, extra={"operation": operation},
        )
        return _error(f"Failed to {operation}: {exc}", ErrorKind.REMOTE_API)


# --- Tool Registry ---


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[ToolInput]
    handler: Callable[[Any], Awaitable[ToolResult]]

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)

    async def run(self, arguments: dict[str, Any] | None) -> ToolResult:
        with tool_context(self.name):
            started = time.monotonic()
            validated, err = _validate(self.input_model, arguments)
            if err:
                log_outcome(logger, "validate input", ErrorKind.VALIDATION.value, started)
                return err
            logger.debug("Tool call %s", self.name)
            return await self.handler(validated)


TOOLS: dict[str, ToolSpec] = {}


def tool(name: str, description: str, input_model: type[ToolInput]):
    """Register a handler under ``name`` with its input model."""

    def decorator(fn: Callable[[Any], Awaitable[ToolResult]]):
        TOOLS[name] = ToolSpec(name, description, input_model, fn)
        return fn

    return decorator


# --- Read Tools ---


@tool("list_tickets", "List Jira tickets assigned to you", ListTicketsInput)
async def list_tickets(args: ListTicketsInput) -> ToolResult:
    query = args.jql or DEFAULT_JQL
    return await _execute(
        "fetch tickets",
        lambda jira: jira.search_issues(query),
        lambda resp: format_ticket_list((resp or {}).get("issues")),
    )


@tool("get_ticket", "Get details of a specific Jira ticket", TicketIdInput)
async def get_ticket(args: TicketIdInput) -> ToolResult:
    return await _execute(
        "fetch ticket",
        lambda jira: jira.get_issue(args.ticket_id, fields=ISSUE_DETAIL_FIELDS),
        format_ticket_detail,
        ticket_id=args.ticket_id,
    )


@tool("get_comments", "Get comments for a specific Jira ticket", TicketIdInput)
async def get_comments(args: TicketIdInput) -> ToolResult:
    return await _execute(
        "fetch comments",
        lambda jira: jira.get_comments(args.ticket_id),
        lambda resp: format_comments((resp or {}).get("comments")),
        ticket_id=args.ticket_id,
    )


@tool(
    "search_tickets",
    "Search for tickets in specific projects using text search",
    SearchTicketsInput,
)
async def search_tickets(args: SearchTicketsInput) -> ToolResult:
    projects = normalize_project_keys(args.project_keys)

    def guard() -> ToolResult | None:
        if not projects:
            return _error(NO_PROJECT_KEYS, ErrorKind.VALIDATION)
        return None

    def render(resp: dict[str, Any] | None) -> str:
        issues = (resp or {}).get("issues") or []
        if not issues:
            return format_no_matches(args.search_text, projects)
        return format_search_results(issues, (resp or {}).get("total"), args.search_text)

    return await _execute(
        "search tickets",
        lambda jira: jira.search_issues(
            build_search_jql(args.search_text, projects),
            max_results=args.max_results,
            fields=SEARCH_FIELDS,
        ),
        render,
        guard=guard,
    )


# --- Write Tools ---


@tool("create_ticket", "Create a new Jira ticket", CreateTicketInput)
async def create_ticket(args: CreateTicketInput) -> ToolResult:
    ticket = args.ticket
    fields: dict[str, Any] = {
        "project": {"key": ticket.project_key},
        "summary": ticket.summary,
        "description": ticket.description,
        "issuetype": {"name": ticket.issue_type},
    }
    if ticket.parent:
        fields["parent"] = {"key": ticket.parent}

    return await _execute(
        "create ticket",
        lambda jira: jira.create_issue(fields),
        lambda resp: f"Created ticket: {resp['key']}",
        written=f"Created ticket in {ticket.project_key}",
    )


@tool("add_comment", "Add a comment to a Jira ticket", AddCommentInput)
async def add_comment(args: AddCommentInput) -> ToolResult:
    done = f"Added comment to {args.ticket_id}"
    return await _execute(
        "add comment",
        lambda jira: jira.add_comment(args.ticket_id, args.comment.body),
        lambda resp: done,
        ticket_id=args.ticket_id,
        written=done,
    )


@tool("update_status", "Update the status of a Jira ticket", UpdateStatusInput)
async def update_status(args: UpdateStatusInput) -> ToolResult:
    done = f"Updated status of {args.ticket_id}"
    return await _execute(
        "update status",
        lambda jira: jira.do_transition(args.ticket_id, args.status.transition_id),
        lambda resp: done,
        ticket_id=args.ticket_id,
        written=done,
    )


TOOL_NAMES = list(TOOLS)

# Tools that modify tracker state
WRITE_TOOLS = {"create_ticket", "add_comment", "update_status"}

READ_TOOLS = set(TOOL_NAMES) - WRITE_TOOLS


async def call_tool(name: str, arguments: dict[str, Any] | None) -> ToolResult:
    """Dispatch a tool call by name."""
    spec = TOOLS.get(name)
    if spec is None:
        logger.warning(
            "Unknown tool requested: %s", name,
            extra={"tool_name": name, "error_kind": ErrorKind.VALIDATION.value},
        )
        return _error(f"Unknown tool: {name}", ErrorKind.VALIDATION)
    return await spec.run(arguments)
