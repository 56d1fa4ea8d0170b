from __future__ import annotations

import re
import string

import pytest

from atlassian_cli.url_encoding import percent_encode

_ALLOWED = set(string.ascii_letters + string.digits + "-_.~%")


def _decode(encoded: str) -> bytes:
    return re.sub(
        r"%([0-9A-F]{2})",
        lambda m: chr(int(m.group(1), 16)),
        encoded,
    ).encode("latin-1")


def test_space_is_encoded():
    assert percent_encode("hello world") == "hello%20world"


def test_reserved_characters_are_encoded():
    assert percent_encode("a=b&c=d") == "a%3Db%26c%3Dd"


def test_unreserved_characters_pass_through():
    text = string.ascii_letters + string.digits + "-_.~"
    assert percent_encode(text) == text


def test_multibyte_utf8_is_encoded_per_byte():
    assert percent_encode("é") == "%C3%A9"
    assert percent_encode("自己紹介") == "%E8%87%AA%E5%B7%B1%E7%B4%B9%E4%BB%8B"


def test_encoding_is_not_idempotent():
    once = percent_encode("a b")
    assert percent_encode(once) == "a%2520b"


def test_bytes_input_and_empty_input():
    assert percent_encode(b"\x00\xff") == "%00%FF"
    assert percent_encode("") == ""


@pytest.mark.parametrize(
    "value",
    [
        'project = DEV AND status = "In Progress" ORDER BY created DESC',
        "type=page AND siteSearch ~ \"日本語\"",
        bytes(range(256)),
    ],
)
def test_output_alphabet_and_round_trip(value: str | bytes):
    encoded = percent_encode(value)
    raw = value.encode("utf-8") if isinstance(value, str) else value

    assert set(encoded) <= _ALLOWED
    assert _decode(encoded) == raw
    assert len(raw) <= len(encoded) <= 3 * len(raw)


def test_matches_query_language_expectations():
    assert percent_encode('project = "DEV" ~ a/b') == "project%20%3D%20%22DEV%22%20~%20a%2Fb"
