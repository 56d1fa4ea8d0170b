"""Lossy HTML-to-text conversion for Confluence storage-format bodies.

This is a single left-to-right scan, not an HTML parser: tags are dropped,
a handful of entities are decoded and unknown ones vanish. Nesting is never
validated.
"""

from __future__ import annotations

_WHITESPACE = " \t\n\r"
_MAX_ENTITY_LEN = 10

_ENTITIES = {
    "nbsp": " ",
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
}


def _decode_entity(name: str) -> str:
    return _ENTITIES.get(name, "")


def strip_html_tags(html: str) -> str:
    """Remove tags and decode entities.

    Closing a tag emits one space so adjacent blocks do not merge, except
    when the next character is whitespace or the text so far is empty or
    already ends in whitespace.
    """
    out: list[str] = []
    in_tag = False
    in_entity = False
    entity: list[str] = []

    for i, c in enumerate(html):
        if c == "<":
            in_tag = True
        elif c == ">":
            in_tag = False
            next_is_space = i + 1 < len(html) and html[i + 1] in _WHITESPACE
            if out and out[-1] not in _WHITESPACE and not next_is_space:
                out.append(" ")
        elif in_tag:
            continue
        elif c == "&":
            in_entity = True
            entity = []
        elif in_entity:
            if c == ";":
                in_entity = False
                decoded = _decode_entity("".join(entity))
                if decoded:
                    out.append(decoded)
            elif len(entity) < _MAX_ENTITY_LEN:
                entity.append(c)
        else:
            out.append(c)
    return "".join(out)


def clean_whitespace(text: str) -> str:
    """Collapse every run of spaces, tabs, CR and LF into one space."""
    out: list[str] = []
    last_was_space = False
    for c in text:
        if c in _WHITESPACE:
            if not last_was_space:
                out.append(" ")
                last_was_space = True
        else:
            out.append(c)
            last_was_space = False
    return "".join(out)


def strip_and_normalize(html: str) -> str:
    return clean_whitespace(strip_html_tags(html))


__all__ = ["clean_whitespace", "strip_and_normalize", "strip_html_tags"]
