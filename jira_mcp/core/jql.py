"""JQL query construction."""

import re

# Listing used when the caller supplies no JQL of their own
DEFAULT_JQL = "assignee = currentUser() ORDER BY updated DESC"

# Reserved JQL characters: + - & | ! ( ) { } [ ] ^ ~ * ? \ /
_RESERVED = re.compile(r"[+\-&|!(){}\[\]^~*?\\/]")


def normalize_project_keys(raw: str) -> list[str]:
    """Split a comma-separated key list into upper-case keys, dropping blanks."""
    return [key.strip().upper() for key in raw.split(",") if key.strip()]


def escape_jql_text(raw: str) -> str:
    """Backslash-escape reserved JQL characters in a free-text fragment."""
    return _RESERVED.sub(lambda m: "\\" + m.group(0), raw)


def build_search_jql(search_text: str, project_keys: list[str]) -> str:
    """Full-text search restricted to the given projects, newest first."""
    return (
        f'text ~ "{escape_jql_text(search_text)}" '
        f"AND project IN ({','.join(project_keys)}) "
        "ORDER BY updated DESC"
    )
