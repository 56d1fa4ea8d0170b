"""Status lines for the CLI.

Everything here writes to stderr unless a stream is passed, so stdout only
carries command output. Colors are used only on a TTY and never when
``NO_COLOR`` is set or ``TERM=dumb``.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"


def _color_enabled(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    if not _color_enabled(stream or sys.stdout):
        return text
    return f"{Colors.BOLD if bold else ''}{color}{text}{Colors.RESET}"


def _status(symbol: str, color: str, message: str, stream: TextIO | None) -> None:
    out = stream or sys.stderr
    out.write(f"{colorize(symbol, color, bold=True, stream=out)} {message}\n")


def print_success(message: str, stream: TextIO | None = None) -> None:
    _status("✓", Colors.GREEN, message, stream)


def print_error(message: str, stream: TextIO | None = None) -> None:
    _status("✗", Colors.RED, message, stream)


def print_warning(message: str, stream: TextIO | None = None) -> None:
    _status("⚠", Colors.YELLOW, message, stream)


def print_hint(message: str, stream: TextIO | None = None) -> None:
    out = stream or sys.stderr
    out.write(colorize(f"  hint: {message}", Colors.DIM, stream=out) + "\n")


__all__ = [
    "Colors",
    "colorize",
    "print_error",
    "print_hint",
    "print_success",
    "print_warning",
]
