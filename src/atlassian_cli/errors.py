"""Error taxonomy & redaction.

Every failure the CLI can surface is one of the exception classes below.
The transport never prints; it raises an :class:`AtlassianAPIError` subclass
and the CLI boundary turns it into a message and an exit code through
:func:`classify_error`.

Public API:
- ConfigurationMissing / ConfigError / MalformedResponse
- AtlassianAPIError and its FailureKind-specific subclasses
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?i)(authorization:\s*basic\s+)[A-Za-z0-9+/=]+"),
    re.compile(r"(?i)(basic\s+)[A-Za-z0-9+/]{16,}={0,2}"),
    re.compile(r"ATATT[A-Za-z0-9_\-=]{20,}"),  # Atlassian Cloud API tokens
]

_REDACTION_PLACEHOLDER = "<redacted>"

EXIT_CONFIGURATION = 2
EXIT_AUTH = 3
EXIT_NOT_FOUND = 4
EXIT_HTTP = 5
EXIT_TRANSPORT = 6
EXIT_MALFORMED = 7


class AtlassianCliError(RuntimeError):
    """Base class for every error raised by atlassian_cli."""


class ConfigError(AtlassianCliError):
    """Raised for unreadable configuration files or unknown config keys."""


class ConfigurationMissing(AtlassianCliError):
    """Raised when a required setting resolved to nothing."""

    def __init__(self, message: str, *, setting: str | None = None):
        super().__init__(message)
        self.setting = setting


class MalformedResponse(AtlassianCliError):
    """Raised when a JSON document lacks a structurally required container."""


class FailureKind(str, enum.Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"
    TRANSPORT = "transport"


class AtlassianAPIError(AtlassianCliError):
    """Raised when a request to Jira or Confluence does not return 2xx."""

    kind: FailureKind = FailureKind.HTTP_ERROR
    hint: str | None = None

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message)
        self.method = method
        self.url = url
        self.status = status
        self.response_text = response_text


class UnauthorizedError(AtlassianAPIError):
    kind = FailureKind.UNAUTHORIZED
    hint = "Check ATLASSIAN_USERNAME and ATLASSIAN_API_TOKEN"


class ForbiddenError(AtlassianAPIError):
    kind = FailureKind.FORBIDDEN
    hint = "Check user permissions"


class NotFoundError(AtlassianAPIError):
    kind = FailureKind.NOT_FOUND
    hint = "Resource not found; check the key or id"


class HttpStatusError(AtlassianAPIError):
    kind = FailureKind.HTTP_ERROR


class TransportError(AtlassianAPIError):
    kind = FailureKind.TRANSPORT
    hint = "Check ATLASSIAN_URL and network connectivity"


_KIND_EXIT_CODES = {
    FailureKind.UNAUTHORIZED: EXIT_AUTH,
    FailureKind.FORBIDDEN: EXIT_AUTH,
    FailureKind.NOT_FOUND: EXIT_NOT_FOUND,
    FailureKind.HTTP_ERROR: EXIT_HTTP,
    FailureKind.TRANSPORT: EXIT_TRANSPORT,
}


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    exit_code: int = 1
    hint: str | None = None
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Redact credentials in arbitrary text.

    Basic auth header values keep their scheme prefix so the message still
    reads naturally, the token part becomes a placeholder.
    """
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Map an exception to a category, exit code and advisory hint."""
    msg = redact(str(exc) if exc else "")
    name = exc.__class__.__name__

    if isinstance(exc, AtlassianAPIError):
        details: dict[str, Any] = {}
        if exc.status is not None:
            details["status"] = exc.status
        if exc.url:
            details["url"] = exc.url
        return ErrorInfo(
            f"api.{exc.kind.value}",
            msg,
            name,
            exit_code=_KIND_EXIT_CODES[exc.kind],
            hint=exc.hint,
            details=details or None,
        )
    if isinstance(exc, ConfigurationMissing):
        details = {"setting": exc.setting} if exc.setting else None
        return ErrorInfo(
            "config.missing",
            msg,
            name,
            exit_code=EXIT_CONFIGURATION,
            hint="Set the environment variable or run 'atlassian-cli config set'",
            details=details,
        )
    if isinstance(exc, ConfigError):
        return ErrorInfo("config.invalid", msg, name, exit_code=EXIT_CONFIGURATION)
    if isinstance(exc, MalformedResponse):
        return ErrorInfo(
            "response.malformed",
            msg,
            name,
            exit_code=EXIT_MALFORMED,
            hint="Retry with --format=json to inspect the raw response",
        )
    return ErrorInfo("generic", msg, name)


__all__ = [
    "AtlassianAPIError",
    "AtlassianCliError",
    "ConfigError",
    "ConfigurationMissing",
    "ErrorInfo",
    "FailureKind",
    "ForbiddenError",
    "HttpStatusError",
    "MalformedResponse",
    "NotFoundError",
    "TransportError",
    "UnauthorizedError",
    "classify_error",
    "redact",
]
