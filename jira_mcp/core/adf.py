"""Atlassian Document Format (ADF) helpers.

Jira Cloud v3 returns issue descriptions and comment bodies as ADF trees and
expects ADF back on writes. These helpers convert between ADF and plain text.
"""

from typing import Any


def extract_text(node: Any) -> str:
    """Recursively flatten an ADF node into plain text.

    Text nodes contribute their literal text. Container nodes concatenate
    their children; paragraphs get a trailing newline. Anything malformed
    contributes an empty string instead of raising.
    """
    if not node or not isinstance(node, dict):
        return ""

    # Leaf text node
    if node.get("type") == "text":
        text = node.get("text")
        return text if isinstance(text, str) else ""

    content = node.get("content")
    if not isinstance(content, list):
        return ""

    text = "".join(extract_text(child) for child in content)
    if node.get("type") == "paragraph":
        text += "\n"
    return text


def _paragraph(line: str) -> dict[str, Any]:
    if not line:
        return {"type": "paragraph", "content": []}
    return {"type": "paragraph", "content": [{"type": "text", "text": line}]}


def text_to_adf(text: str) -> dict[str, Any]:
    """Wrap plain text in a minimal ADF document, one paragraph per line."""
    lines = text.split("\n") if text else []
    return {
        "type": "doc",
        "version": 1,
        "content": [_paragraph(line) for line in lines],
    }
