from __future__ import annotations

import asyncio
import io
from email.message import Message
from http.client import BadStatusLine, IncompleteRead
from urllib.error import HTTPError, URLError

import pytest

from riow_client.errors import DownloadFailed, PollFailed, TransportError
from riow_client.jobs.client import JobClient
from riow_client.jobs.fetcher import ImageFetcher
from riow_client.jobs.status import JobHandle
from riow_client.jobs.transport import send


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200, content_type: str = "application/json") -> None:
        self._body = body
        self.status = status
        self.headers = Message()
        self.headers["content-type"] = content_type

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def test_send_returns_body_and_content_type(monkeypatch) -> None:
    seen = {}

    def fake_urlopen(req, timeout):
        seen["method"] = req.get_method()
        seen["url"] = req.full_url
        seen["data"] = req.data
        seen["content_type"] = req.get_header("Content-type")
        seen["timeout"] = timeout
        return FakeResponse(b'{"ok": true}', status=201)

    monkeypatch.setattr("riow_client.jobs.transport.urlopen", fake_urlopen)
    response = send(
        "POST",
        "https://svc/",
        body=b"{}",
        headers={"content-type": "application/json"},
        timeout_s=3,
    )

    assert response.status_code == 201
    assert response.ok
    assert response.body == b'{"ok": true}'
    assert response.content_type == "application/json"
    assert seen == {
        "method": "POST",
        "url": "https://svc/",
        "data": b"{}",
        "content_type": "application/json",
        "timeout": 3,
    }


def test_send_returns_http_error_statuses(monkeypatch) -> None:
    def fake_urlopen(req, timeout):
        headers = Message()
        headers["content-type"] = "text/plain"
        raise HTTPError(req.full_url, 429, "Too Many Requests", headers, io.BytesIO(b"come back later"))

    monkeypatch.setattr("riow_client.jobs.transport.urlopen", fake_urlopen)
    response = send("POST", "https://svc/", body=b"{}")
    assert response.status_code == 429
    assert not response.ok
    assert response.text() == "come back later"
    assert response.content_type == "text/plain"


@pytest.mark.parametrize("error", [URLError("connection refused"), TimeoutError("timed out")])
def test_send_raises_transport_error_without_response(monkeypatch, error: Exception) -> None:
    def fake_urlopen(req, timeout):
        raise error

    monkeypatch.setattr("riow_client.jobs.transport.urlopen", fake_urlopen)
    with pytest.raises(TransportError) as excinfo:
        send("GET", "https://svc/status/abc")
    assert excinfo.value.__cause__ is error


class TruncatedResponse(FakeResponse):
    def read(self) -> bytes:
        raise IncompleteRead(b"\x89PNG\r", 95)


def test_truncated_body_raises_transport_error(monkeypatch) -> None:
    monkeypatch.setattr(
        "riow_client.jobs.transport.urlopen",
        lambda req, timeout: TruncatedResponse(b"", content_type="image/png"),
    )
    with pytest.raises(TransportError) as excinfo:
        send("GET", "https://svc/img/abc.png")
    assert isinstance(excinfo.value.__cause__, IncompleteRead)
    assert "IncompleteRead" in str(excinfo.value)


def test_bad_status_line_raises_transport_error(monkeypatch) -> None:
    def fake_urlopen(req, timeout):
        raise BadStatusLine("garbage reply")

    monkeypatch.setattr("riow_client.jobs.transport.urlopen", fake_urlopen)
    with pytest.raises(TransportError) as excinfo:
        send("GET", "https://svc/status/abc")
    assert isinstance(excinfo.value.__cause__, BadStatusLine)


def test_http_error_with_truncated_body_keeps_status(monkeypatch) -> None:
    class TruncatedBody(io.BytesIO):
        def read(self, *args: object) -> bytes:
            raise IncompleteRead(b"", 10)

    def fake_urlopen(req, timeout):
        raise HTTPError(req.full_url, 503, "Service Unavailable", Message(), TruncatedBody())

    monkeypatch.setattr("riow_client.jobs.transport.urlopen", fake_urlopen)
    response = send("GET", "https://svc/status/abc")
    assert response.status_code == 503
    assert not response.ok


def test_garbled_poll_reply_surfaces_as_poll_failed(monkeypatch) -> None:
    def fake_urlopen(req, timeout):
        raise BadStatusLine("garbage reply")

    monkeypatch.setattr("riow_client.jobs.transport.urlopen", fake_urlopen)
    handle = JobHandle(id="abc", status_url="https://svc/status/abc")
    with pytest.raises(PollFailed) as excinfo:
        asyncio.run(JobClient("https://svc").poll(handle))
    assert excinfo.value.status_code is None


def test_truncated_download_surfaces_as_download_failed(monkeypatch) -> None:
    monkeypatch.setattr(
        "riow_client.jobs.transport.urlopen",
        lambda req, timeout: TruncatedResponse(b"", content_type="image/png"),
    )
    with pytest.raises(DownloadFailed) as excinfo:
        asyncio.run(ImageFetcher().fetch("https://svc/img/abc.png"))
    assert excinfo.value.status_code is None
