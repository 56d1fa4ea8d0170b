from __future__ import annotations

import base64
import time
from dataclasses import dataclass, field

import requests

from .errors import (
    AtlassianAPIError,
    ConfigurationMissing,
    ForbiddenError,
    HttpStatusError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    redact,
)
from .logging import get_logger

USER_AGENT = "atlassian-cli/0.2.0"
DEFAULT_TIMEOUT = 30.0
_RESPONSE_EXCERPT = 500

_STATUS_ERRORS: dict[int, type[AtlassianAPIError]] = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}


@dataclass(frozen=True)
class Credential:
    """Base URL plus the Basic auth pair for one Atlassian site."""

    base_url: str
    identity: str
    secret: str = field(repr=False)
    is_cloud: bool = True

    def __post_init__(self) -> None:
        for name in ("base_url", "identity", "secret"):
            if not getattr(self, name):
                raise ConfigurationMissing(f"Credential field '{name}' must not be empty", setting=name)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def basic_auth_token(self) -> str:
        raw = f"{self.identity}:{self.secret}".encode()
        return base64.b64encode(raw).decode("ascii")


@dataclass
class AtlassianClient:
    """Single-attempt REST transport shared by the Jira and Confluence helpers."""

    credential: Credential
    session: requests.Session | None = None
    timeout: float = DEFAULT_TIMEOUT
    _session: requests.Session = field(init=False, repr=False)
    _auth_header: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        self._auth_header = f"Basic {self.credential.basic_auth_token()}"

    @property
    def base_url(self) -> str:
        return self.credential.base_url

    @property
    def is_cloud(self) -> bool:
        return self.credential.is_cloud

    def build_url(self, path: str, query: str | None = None) -> str:
        url = f"{self.credential.base_url}{path}"
        if query:
            url = f"{url}?{query}"
        return url

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": self._auth_header,
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def execute(self, method: str, path: str, query: str | None = None) -> bytes:
        """Issue one request and return the raw response body.

        ``query`` must already be percent-encoded; it is appended verbatim.
        Raises an :class:`AtlassianAPIError` subclass for any non-2xx status
        and :class:`TransportError` for network failures. No retries.
        """
        logger = get_logger()
        url = self.build_url(path, query)
        start = time.perf_counter()
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.log_request(method, url, error=redact(str(exc)))
            raise TransportError(
                f"{method} {url} failed: {redact(str(exc))}", method=method, url=url
            ) from exc

        status = response.status_code
        logger.log_request(method, url, status=status, duration_ms=(time.perf_counter() - start) * 1000)
        if 200 <= status < 300:  # noqa: PLR2004
            return response.content

        error_cls = _STATUS_ERRORS.get(status, HttpStatusError)
        text = redact(response.text or "")[:_RESPONSE_EXCERPT]
        raise error_cls(
            f"{method} {url} failed with HTTP {status}",
            method=method,
            url=url,
            status=status,
            response_text=text or None,
        )

    def close(self) -> None:
        self._session.close()


__all__ = ["AtlassianClient", "Credential", "DEFAULT_TIMEOUT", "USER_AGENT"]
