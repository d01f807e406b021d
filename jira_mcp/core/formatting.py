"""Text formatting for Jira API responses.

Every formatter takes the raw JSON dicts returned by the Jira REST API and
produces a fixed-layout text block for the agent. Missing optional fields are
replaced with a placeholder so no field is ever silently blank.
"""

from datetime import datetime, timezone
from typing import Any

from jira_mcp.core.adf import extract_text

NO_TICKETS = "No tickets found"
NO_COMMENTS = "No comments found for this ticket."

SEPARATOR = "-" * 40

_JIRA_TIMESTAMP = "%Y-%m-%dT%H:%M:%S.%f%z"


def _fields(issue: dict[str, Any]) -> dict[str, Any]:
    fields = issue.get("fields")
    return fields if isinstance(fields, dict) else {}


def _key(issue: dict[str, Any]) -> str:
    return issue.get("key") or "Unknown key"


def _name(obj: Any, default: str) -> str:
    if isinstance(obj, dict) and obj.get("name"):
        return obj["name"]
    return default


def format_timestamp(value: str | None) -> str:
    """Render a Jira ISO-8601 timestamp as ``YYYY-MM-DD HH:MM UTC``."""
    if not value:
        return "Unknown date"
    try:
        parsed = datetime.strptime(value, _JIRA_TIMESTAMP)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%d %H:%M UTC")


# --- Ticket lists ---


def format_ticket_line(issue: dict[str, Any]) -> str:
    fields = _fields(issue)
    summary = fields.get("summary") or "No summary"
    status = _name(fields.get("status"), "Unknown status")
    return f"{_key(issue)}: {summary} ({status})"


def format_ticket_list(issues: list[dict[str, Any]] | None) -> str:
    if not issues:
        return NO_TICKETS
    return "\n".join(format_ticket_line(issue) for issue in issues)


# --- Ticket detail ---


def _link_line(linked: dict[str, Any], relation: str) -> str:
    summary = _fields(linked).get("summary") or "No summary"
    return f"- [{relation}] {_key(linked)}: {summary}"


def format_linked_issues(links: Any) -> list[str]:
    """Render the linked-issues section, outward before inward per link."""
    if not isinstance(links, list) or not links:
        return ["\nLinked Issues: None"]

    lines = ["\nLinked Issues:"]
    for link in links:
        if not isinstance(link, dict):
            continue
        link_type = link.get("type")
        if not isinstance(link_type, dict):
            link_type = {}
        if isinstance(link.get("outwardIssue"), dict):
            relation = link_type.get("outward") or link_type.get("name") or "Related"
            lines.append(_link_line(link["outwardIssue"], relation))
        if isinstance(link.get("inwardIssue"), dict):
            relation = link_type.get("inward") or link_type.get("name") or "Related"
            lines.append(_link_line(link["inwardIssue"], relation))
    return lines


def format_ticket_detail(issue: dict[str, Any]) -> str:
    fields = _fields(issue)
    parent = fields.get("parent")
    if not isinstance(parent, dict):
        parent = {}

    lines = [
        f"Key: {_key(issue)}",
        f"Summary: {fields.get('summary') or 'No summary'}",
        f"Status: {_name(fields.get('status'), 'Unknown status')}",
        f"Type: {_name(fields.get('issuetype'), 'Unknown type')}",
        f"Description:\n{extract_text(fields.get('description')) or 'No description'}",
        f"Parent: {parent.get('key') or 'No parent'}",
    ]
    lines.extend(format_linked_issues(fields.get("issuelinks")))
    return "\n".join(lines)


# --- Comments ---


def format_comment(comment: dict[str, Any]) -> str:
    author = (comment.get("author") or {}).get("displayName") or "Unknown Author"
    body = extract_text(comment.get("body")) or "No comment body"
    created = format_timestamp(comment.get("created"))
    return f"[{created}] {author}:\n{body.strip()}\n---"


def format_comments(comments: list[dict[str, Any]] | None) -> str:
    if not comments:
        return NO_COMMENTS
    return "\n\n".join(format_comment(comment) for comment in comments)


# --- Search results ---


def format_search_entry(issue: dict[str, Any]) -> str:
    fields = _fields(issue)
    summary = fields.get("summary") or "No summary"
    status = _name(fields.get("status"), "Unknown status")
    project = (fields.get("project") or {}).get("key") or "Unknown project"
    updated = format_timestamp(fields.get("updated"))
    description = extract_text(fields.get("description")).strip() or "No description"
    return (
        f"[{project}] {_key(issue)}: {summary}\n"
        f"Status: {status} (Updated: {updated})\n"
        f"Description:\n"
        f"{description}\n"
        f"{SEPARATOR}\n"
    )


def format_search_results(
    issues: list[dict[str, Any]],
    total: int | None,
    search_text: str,
) -> str:
    """Header with the match count, then one block per issue."""
    count = total if total is not None else len(issues)
    plural = "" if count == 1 else "s"
    header = f'Found {count} ticket{plural} matching "{search_text}"\n\n'
    return header + "\n".join(format_search_entry(issue) for issue in issues)


def format_no_matches(search_text: str, project_keys: list[str]) -> str:
    return f'No tickets found matching "{search_text}" in projects: {", ".join(project_keys)}'
