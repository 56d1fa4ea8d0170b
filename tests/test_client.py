import base64
from dataclasses import dataclass
from typing import Any

import pytest
import requests

from atlassian_cli.client import AtlassianClient, Credential
from atlassian_cli.errors import (
    ConfigurationMissing,
    FailureKind,
    ForbiddenError,
    HttpStatusError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
)


@dataclass
class _DummyResponse:
    status_code: int
    body: bytes = b"{}"

    @property
    def content(self) -> bytes:
        return self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")


class _DummySession:
    def __init__(self, responses: list[Any]):
        self._responses = responses
        self.request_log: list[tuple[str, str, dict[str, Any]]] = []
        self.closed = False

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        timeout: float | None = None,
    ) -> _DummyResponse:
        self.request_log.append((method, url, {"headers": headers, "timeout": timeout}))
        if not self._responses:
            raise AssertionError("No response queued for request")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def _client(responses: list[Any], **kwargs: Any) -> tuple[AtlassianClient, _DummySession]:
    session = _DummySession(responses)
    credential = Credential("https://acme.atlassian.net/", "me@acme.io", "s3cret")
    return AtlassianClient(credential, session=session, **kwargs), session  # type: ignore[arg-type]


def test_execute_returns_raw_body_and_sends_headers():
    client, session = _client([_DummyResponse(200, b'{"key": "DEV-1"}')])

    body = client.execute("GET", "/rest/api/3/issue/DEV-1", "fields=summary")

    assert body == b'{"key": "DEV-1"}'
    method, url, extra = session.request_log[0]
    assert method == "GET"
    assert url == "https://acme.atlassian.net/rest/api/3/issue/DEV-1?fields=summary"
    headers = extra["headers"]
    expected = base64.b64encode(b"me@acme.io:s3cret").decode("ascii")
    assert headers["Authorization"] == f"Basic {expected}"
    assert headers["Content-Type"] == "application/json"
    assert headers["Accept"] == "application/json"


def test_execute_without_query_has_no_question_mark():
    client, session = _client([_DummyResponse(200)])
    client.execute("GET", "/rest/api/3/project")
    assert session.request_log[0][1] == "https://acme.atlassian.net/rest/api/3/project"


def test_query_is_not_reencoded():
    client, session = _client([_DummyResponse(200)])
    client.execute("GET", "/rest/api/3/search/jql", "jql=project%3DDEV")
    assert session.request_log[0][1].endswith("?jql=project%3DDEV")


def test_timeout_is_forwarded():
    client, session = _client([_DummyResponse(200)], timeout=5.0)
    client.execute("GET", "/x")
    assert session.request_log[0][2]["timeout"] == 5.0


@pytest.mark.parametrize(
    "status, error_cls, kind",
    [
        (401, UnauthorizedError, FailureKind.UNAUTHORIZED),
        (403, ForbiddenError, FailureKind.FORBIDDEN),
        (404, NotFoundError, FailureKind.NOT_FOUND),
        (500, HttpStatusError, FailureKind.HTTP_ERROR),
        (429, HttpStatusError, FailureKind.HTTP_ERROR),
    ],
)
def test_status_mapping(status: int, error_cls: type, kind: FailureKind):
    client, _ = _client([_DummyResponse(status, b'{"errorMessages": ["nope"]}')])

    with pytest.raises(error_cls) as excinfo:
        client.execute("GET", "/rest/api/3/issue/DEV-1")

    assert excinfo.value.kind is kind
    assert excinfo.value.status == status
    assert excinfo.value.response_text == '{"errorMessages": ["nope"]}'


def test_not_found_issues_exactly_one_request():
    client, session = _client([_DummyResponse(404), _DummyResponse(200)])

    with pytest.raises(NotFoundError):
        client.execute("GET", "/rest/api/3/issue/NOPE-1")

    assert len(session.request_log) == 1


def test_network_failure_maps_to_transport_error():
    client, session = _client([requests.ConnectionError("connection refused")])

    with pytest.raises(TransportError) as excinfo:
        client.execute("GET", "/rest/api/3/myself")

    assert excinfo.value.kind is FailureKind.TRANSPORT
    assert excinfo.value.status is None
    assert len(session.request_log) == 1


def test_timeout_maps_to_transport_error():
    client, _ = _client([requests.Timeout("read timed out")])
    with pytest.raises(TransportError):
        client.execute("GET", "/rest/api/3/myself")


def test_credential_strips_trailing_slash_and_hides_secret():
    credential = Credential("https://acme.atlassian.net/", "me", "hidden-value")
    assert credential.base_url == "https://acme.atlassian.net"
    assert "hidden-value" not in repr(credential)


@pytest.mark.parametrize("field", ["base_url", "identity", "secret"])
def test_credential_rejects_empty_fields(field: str):
    values = {"base_url": "https://x", "identity": "me", "secret": "tkn"}
    values[field] = ""
    with pytest.raises(ConfigurationMissing):
        Credential(**values)


def test_close_closes_session():
    client, session = _client([])
    client.close()
    assert session.closed is True
