"""Percent-encoding for user-supplied query fragments (JQL, CQL, titles)."""

from __future__ import annotations

from urllib.parse import quote


def percent_encode(value: str | bytes) -> str:
    """Encode every byte outside ``A-Z a-z 0-9 - _ . ~`` as ``%XX``.

    Text is UTF-8 encoded first and multi-byte sequences are escaped byte by
    byte. Already-encoded input is encoded again (``%`` becomes ``%25``).
    """
    return quote(value, safe="")


__all__ = ["percent_encode"]
