"""Text rendering for Jira and Confluence JSON responses.

Every renderer takes a decoded JSON document and returns a report string.
Upstream schemas vary between server versions and plan tiers, so every
field lookup is optional: a missing key, ``null`` or a value of an
unexpected type skips the line instead of failing. The only hard failure is
:class:`~atlassian_cli.errors.MalformedResponse` for an issue document with
no ``fields`` object at all, or a body that is not JSON.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import Any

from .errors import MalformedResponse
from .html_text import strip_and_normalize

SEPARATOR = "─" * 41
CONTENT_SEPARATOR = "─" * 29
PREVIEW_CHARS = 200
DESCRIPTION_CHARS = 100
LIST_CONTAINERS = ("results", "values", "items")

_MISSING = object()


# ---- guarded accessors -------------------------------------------------
def get_path(tree: Any, *keys: str | int) -> Any:
    """Follow ``keys`` through objects and arrays; ``None`` when any hop fails."""
    node = tree
    for key in keys:
        if isinstance(key, int):
            if not isinstance(node, list) or not -len(node) <= key < len(node):
                return None
            node = node[key]
        else:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        if node is None:
            return None
    return node


def get_object(tree: Any, *keys: str | int) -> dict[str, Any] | None:
    node = get_path(tree, *keys)
    return node if isinstance(node, dict) else None


def get_array(tree: Any, *keys: str | int) -> list[Any] | None:
    node = get_path(tree, *keys)
    return node if isinstance(node, list) else None


def get_string(tree: Any, *keys: str | int) -> str | None:
    node = get_path(tree, *keys)
    return node if isinstance(node, str) else None


def get_int(tree: Any, *keys: str | int) -> int | None:
    node = get_path(tree, *keys)
    if isinstance(node, bool) or not isinstance(node, int):
        return None
    return node


def get_identifier(tree: Any, *keys: str | int) -> str | None:
    """Ids arrive as strings from Confluence v1 and as numbers elsewhere."""
    node = get_path(tree, *keys)
    if isinstance(node, str):
        return node or None
    if isinstance(node, int) and not isinstance(node, bool):
        return str(node)
    return None


def _field_state(tree: dict[str, Any], key: str) -> Any:
    """Distinguish an absent key (``_MISSING``) from an explicit ``null``."""
    return tree.get(key, _MISSING)


def parse_document(raw: bytes | str) -> Any:
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedResponse(f"Response is not valid JSON: {exc}") from exc


def adf_to_text(node: Any) -> str:
    """Flatten an Atlassian Document Format tree to plain text."""
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "".join(adf_to_text(child) for child in node)
    if not isinstance(node, dict):
        return ""
    kind = node.get("type")
    if kind == "text":
        text = node.get("text")
        return text if isinstance(text, str) else ""
    if kind == "hardBreak":
        return "\n"
    body = adf_to_text(node.get("content"))
    if kind in {"paragraph", "heading", "codeBlock", "blockquote", "listItem", "rule"}:
        return body.rstrip("\n") + "\n"
    return body


def _content_text(tree: Any) -> str | None:
    html = get_string(tree, "body", "storage", "value")
    if html is None:
        return None
    return strip_and_normalize(html).strip()


def _space_line(space: dict[str, Any]) -> str:
    name = get_string(space, "name") or "Unknown"
    key = get_string(space, "key") or "Unknown"
    return f"Space: {name} ({key})"


def _page_url(base_url: str, tree: Any) -> str | None:
    page_id = get_identifier(tree, "id")
    space_key = get_string(tree, "space", "key")
    if page_id is None or space_key is None:
        return None
    return f"{base_url.rstrip('/')}/wiki/spaces/{space_key}/pages/{page_id}"


def _finish(lines: Iterable[str]) -> str:
    return "\n".join(lines) + "\n"


# ---- Jira --------------------------------------------------------------
def render_single_issue(tree: Any) -> str:
    key = get_string(tree, "key") or "UNKNOWN"
    fields = get_object(tree, "fields")
    if fields is None:
        raise MalformedResponse(f"Issue {key} has no 'fields' object")

    lines = [
        f"Issue: {key}",
        f"Summary: {get_string(fields, 'summary') or 'No summary'}",
        SEPARATOR,
        "",
    ]
    for label, path in (
        ("Status", ("status", "name")),
        ("Type", ("issuetype", "name")),
        ("Priority", ("priority", "name")),
    ):
        value = get_string(fields, *path)
        if value is not None:
            lines.append(f"{label}: {value}")

    assignee = _field_state(fields, "assignee")
    if assignee is None:
        lines.append("Assignee: Unassigned")
    elif assignee is not _MISSING:
        name = get_string(assignee, "displayName")
        if name is not None:
            lines.append(f"Assignee: {name}")

    reporter = get_string(fields, "reporter", "displayName")
    if reporter is not None:
        lines.append(f"Reporter: {reporter}")

    labels = [label for label in get_array(fields, "labels") or [] if isinstance(label, str)]
    if labels:
        lines.append(f"Labels: {', '.join(labels)}")

    for label, name in (("Created", "created"), ("Updated", "updated")):
        value = get_string(fields, name)
        if value is not None:
            lines.append(f"{label}: {value}")

    description = fields.get("description")
    if isinstance(description, dict):
        description = adf_to_text(description).strip()
    if isinstance(description, str):
        lines.extend(["", "Description:", SEPARATOR, description])

    return _finish(lines)


def render_issue_list(tree: Any) -> str:
    issues = get_path(tree, "issues")
    if not isinstance(issues, list):
        return "No issues found.\n"

    total = get_int(tree, "total")
    lines = [f"Found {total if total is not None else len(issues)} issue(s):", ""]
    for index, issue in enumerate(issues, start=1):
        fields = get_object(issue, "fields")
        if fields is None:
            continue
        key = get_string(issue, "key") or "UNKNOWN"
        summary = get_string(fields, "summary") or "No summary"
        lines.append(f"[{index}] {key}: {summary}")

        status = get_string(fields, "status", "name")
        if status is not None:
            lines.append(f"    Status: {status}")
        assignee = _field_state(fields, "assignee")
        if assignee is None:
            lines.append("    Assignee: Unassigned")
        elif assignee is not _MISSING:
            name = get_string(assignee, "displayName")
            if name is not None:
                lines.append(f"    Assignee: {name}")
        priority = get_string(fields, "priority", "name")
        if priority is not None:
            lines.append(f"    Priority: {priority}")
        created = get_string(fields, "created")
        if created is not None:
            lines.append(f"    Created: {created}")
        lines.append("")
    return _finish(lines)


# ---- Confluence --------------------------------------------------------
def render_single_page(tree: Any, base_url: str) -> str:
    lines = [f"Page: {get_string(tree, 'title') or 'Untitled'}", SEPARATOR, ""]

    space = get_object(tree, "space")
    if space is not None:
        lines.append(_space_line(space))

    number = get_int(tree, "version", "number")
    if number is not None:
        lines.append(f"Version: {number}")
    when = get_string(tree, "version", "when")
    if when is not None:
        lines.append(f"Last Updated: {when}")
    by = get_string(tree, "version", "by", "displayName")
    if by is not None:
        lines.append(f"Last Modified By: {by}")

    url = _page_url(base_url, tree)
    if url is not None:
        lines.append(f"URL: {url}")

    content = _content_text(tree)
    if content is not None:
        lines.extend(["", "Content:", SEPARATOR, content])
    return _finish(lines)


def render_search_results(tree: Any, show_full_content: bool = False, base_url: str = "") -> str:
    results = get_path(tree, "results")
    if not isinstance(results, list):
        return "No results found.\n"

    lines = [f"Found {len(results)} result(s):", ""]
    for index, result in enumerate(results, start=1):
        lines.append(f"[{index}] {get_string(result, 'title') or 'Untitled'}")

        space = get_object(result, "space")
        if space is not None:
            lines.append(f"    {_space_line(space)}")
        when = get_string(result, "version", "when")
        if when is not None:
            lines.append(f"    Updated: {when}")
        author = get_string(result, "version", "by", "displayName")
        if author is not None:
            lines.append(f"    Author: {author}")
        url = _page_url(base_url, result)
        if url is not None:
            lines.append(f"    URL: {url}")

        content = _content_text(result)
        if content:
            if show_full_content:
                lines.extend(["    Content:", f"    {CONTENT_SEPARATOR}", f"    {content}"])
            elif len(content) > PREVIEW_CHARS:
                lines.append(
                    f"    Content: {content[:PREVIEW_CHARS]}... ({len(content)} characters total, "
                    "use --full-content for more)"
                )
            else:
                lines.append(f"    Content: {content}")
        lines.append("")
    return _finish(lines)


# ---- generic -----------------------------------------------------------
def _item_description(item: Any) -> str | None:
    desc = get_path(item, "description")
    if isinstance(desc, str):
        return desc
    plain = get_path(desc, "plain")
    if isinstance(plain, str):
        return plain
    return get_string(plain, "value")


def _list_container(tree: Any) -> Any:
    if isinstance(tree, list):
        return tree
    if isinstance(tree, dict):
        for name in LIST_CONTAINERS:
            if name in tree:
                return tree[name]
    return None


def render_generic_list(tree: Any, item_label: str) -> str:
    """Render spaces, projects, labels, comments, boards and similar lists.

    A container that exists but is not an array is reported as empty.
    """
    items = _list_container(tree)
    if not isinstance(items, list):
        return "No items found.\n"

    lines = [f"Found {len(items)} {item_label}(s):", ""]
    for index, item in enumerate(items, start=1):
        name = (
            get_string(item, "name")
            or get_string(item, "title")
            or get_string(item, "key")
            or "Unknown"
        )
        lines.append(f"[{index}] {name}")
        key = get_string(item, "key")
        if key is not None:
            lines.append(f"    Key: {key}")
        description = _item_description(item)
        if description is not None:
            if len(description) > DESCRIPTION_CHARS:
                description = description[:DESCRIPTION_CHARS] + "..."
            lines.append(f"    Description: {description}")
        lines.append("")
    return _finish(lines)


# ---- dispatch ----------------------------------------------------------
def _render_single_item(tree: Any, item_label: str) -> str:
    if isinstance(tree, dict) and _list_container(tree) is None:
        tree = [tree]
    return render_generic_list(tree, item_label)


_VIEWS: dict[str, Callable[..., str]] = {
    "issue": lambda tree, **_: render_single_issue(tree),
    "issues": lambda tree, **_: render_issue_list(tree),
    "page": lambda tree, base_url="", **_: render_single_page(tree, base_url),
    "search": lambda tree, show_full_content=False, base_url="", **_: render_search_results(
        tree, show_full_content=show_full_content, base_url=base_url
    ),
    "list": lambda tree, item_label="item", **_: render_generic_list(tree, item_label),
    "item": lambda tree, item_label="item", **_: _render_single_item(tree, item_label),
}


def render_response(raw: bytes | str, view: str, **options: Any) -> str:
    """Decode ``raw`` and render it with the named view."""
    try:
        renderer = _VIEWS[view]
    except KeyError:
        raise ValueError(f"Unknown view: {view}") from None
    return renderer(parse_document(raw), **options)


__all__ = [
    "adf_to_text",
    "get_array",
    "get_identifier",
    "get_int",
    "get_object",
    "get_path",
    "get_string",
    "parse_document",
    "render_generic_list",
    "render_issue_list",
    "render_response",
    "render_search_results",
    "render_single_issue",
    "render_single_page",
]
