from __future__ import annotations

from typing import Any

import pytest
import requests

from viesvat.errors import TransportError, VatTimeoutError
from viesvat.transport import BASE_HEADERS, SERVICE_URL, RequestsTransport, build_headers


class _DummyResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code
        self.encoding: str | None = None


def test_build_headers_returns_fresh_dict() -> None:
    first = build_headers(SERVICE_URL, 100)
    second = build_headers(SERVICE_URL, 250)

    assert first["Content-Length"] == "100"
    assert second["Content-Length"] == "250"
    assert first["Host"] == "ec.europa.eu"
    assert first["Content-Type"] == "text/xml; charset=utf-8"
    assert "Content-Length" not in BASE_HEADERS


def test_send_posts_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[dict[str, Any]] = []

    def fake_post(url: str, data: bytes, headers: dict[str, str], timeout: float | None) -> _DummyResponse:
        captured.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        return _DummyResponse("<env:Envelope/>")

    monkeypatch.setattr("viesvat.transport.requests.post", fake_post)

    body = RequestsTransport().send(SERVICE_URL, {"Content-Length": "3"}, b"abc", 5.0)

    assert body == "<env:Envelope/>"
    assert captured == [
        {"url": SERVICE_URL, "data": b"abc", "headers": {"Content-Length": "3"}, "timeout": 5.0}
    ]


def test_send_returns_body_for_server_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "viesvat.transport.requests.post",
        lambda *args, **kwargs: _DummyResponse("<env:Fault/>", status_code=500),
    )

    assert RequestsTransport().send(SERVICE_URL, {}, b"") == "<env:Fault/>"


def test_send_uses_session_when_given() -> None:
    class _Session:
        def __init__(self) -> None:
            self.urls: list[str] = []

        def post(self, url: str, **kwargs: Any) -> _DummyResponse:
            self.urls.append(url)
            return _DummyResponse("ok")

    session = _Session()
    transport = RequestsTransport(session=session)  # type: ignore[arg-type]

    assert transport.send(SERVICE_URL, {}, b"") == "ok"
    assert session.urls == [SERVICE_URL]


@pytest.mark.parametrize(
    "raised, expected",
    [
        (requests.Timeout("read timed out"), VatTimeoutError),
        (requests.ConnectTimeout("connect timed out"), VatTimeoutError),
        (requests.ConnectionError("refused"), TransportError),
    ],
)
def test_send_maps_request_errors(
    monkeypatch: pytest.MonkeyPatch, raised: Exception, expected: type[Exception]
) -> None:
    def fake_post(*args: Any, **kwargs: Any) -> _DummyResponse:
        raise raised

    monkeypatch.setattr("viesvat.transport.requests.post", fake_post)

    with pytest.raises(expected) as exc_info:
        RequestsTransport().send(SERVICE_URL, {}, b"", 1.0)

    assert exc_info.value.__cause__ is raised
