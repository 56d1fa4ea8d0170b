"""Tests for UX helpers module."""

from __future__ import annotations

import io

import pytest

from atlassian_cli.ux import (
    Colors,
    colorize,
    print_error,
    print_hint,
    print_success,
    print_warning,
)


def test_colorize_with_tty_support(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test colorize adds colors when TTY is supported."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")

    stream = io.StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]

    result = colorize("test", Colors.RED, bold=True, stream=stream)
    assert result == f"{Colors.BOLD}{Colors.RED}test{Colors.RESET}"


def test_colorize_respects_no_color() -> None:
    stream = io.StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    assert colorize("test", Colors.RED, bold=True, stream=stream) == "test"


def test_colorize_dumb_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "dumb")
    stream = io.StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    assert colorize("test", Colors.GREEN, stream=stream) == "test"


def test_colorize_no_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test colorize returns plain text when not a TTY."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert colorize("test", Colors.GREEN, stream=io.StringIO()) == "test"


def test_status_lines_go_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    print_success("saved")
    print_error("Error: boom")
    print_warning("careful")
    print_hint("try again")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines() == [
        "✓ saved",
        "✗ Error: boom",
        "⚠ careful",
        "  hint: try again",
    ]


def test_explicit_stream() -> None:
    stream = io.StringIO()
    print_success("done", stream=stream)
    assert stream.getvalue() == "✓ done\n"
