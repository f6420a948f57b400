from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from riow_client.errors import DownloadFailed, TransportError
from riow_client.jobs.fetcher import ImageFetcher, RenderedImage
from riow_client.jobs.transport import HttpResponse

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-payload"


def _patch_send(monkeypatch, response: Any) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []

    def fake_send(method: str, url: str, **kwargs: Any) -> HttpResponse:
        calls.append({"method": method, "url": url, **kwargs})
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr("riow_client.jobs.fetcher.send", fake_send)
    return calls


def test_fetch_spills_bytes_to_temp_file(tmp_path: Path, monkeypatch) -> None:
    calls = _patch_send(monkeypatch, HttpResponse(status_code=200, body=PNG_BYTES, content_type="image/png"))
    fetcher = ImageFetcher(download_timeout=9, directory=tmp_path / "spill")

    image = asyncio.run(fetcher.fetch("https://svc/abc/download"))

    assert calls[0]["method"] == "GET"
    assert calls[0]["url"] == "https://svc/abc/download"
    assert calls[0]["timeout_s"] == 9.0
    assert image.path.parent == tmp_path / "spill"
    assert image.path.suffix == ".png"
    assert image.data == PNG_BYTES
    assert image.size == len(PNG_BYTES)
    assert image.content_type == "image/png"
    assert image.source_url == "https://svc/abc/download"
    image.release()


def test_release_removes_file_and_is_idempotent(tmp_path: Path) -> None:
    image = RenderedImage.from_bytes(PNG_BYTES, content_type=None, source_url="https://svc/img/abc.png", directory=tmp_path)
    path = image.path
    assert path.exists()
    assert path.suffix == ".png"
    image.release()
    image.release()
    assert image.released
    assert not path.exists()
    with pytest.raises(RuntimeError):
        image.data
    assert "released" in repr(image)


def test_context_manager_releases(tmp_path: Path) -> None:
    with RenderedImage.from_bytes(PNG_BYTES, content_type="image/jpeg", source_url="x", directory=tmp_path) as image:
        saved = image.save(tmp_path / "out" / "render.jpg")
        path = image.path
    assert not path.exists()
    assert saved.read_bytes() == PNG_BYTES


@pytest.mark.parametrize(
    "response,status_code",
    [
        (HttpResponse(status_code=404, body=b"image id not found"), 404),
        (HttpResponse(status_code=500, body=b"Something went wrong"), 500),
        (HttpResponse(status_code=202, body=b'"Queued"', content_type="application/json"), 202),
        (HttpResponse(status_code=200, body=b"", content_type="image/png"), 200),
    ],
)
def test_fetch_failures(monkeypatch, response: HttpResponse, status_code: int) -> None:
    _patch_send(monkeypatch, response)
    with pytest.raises(DownloadFailed) as excinfo:
        asyncio.run(ImageFetcher().fetch("https://svc/abc/download"))
    assert excinfo.value.status_code == status_code


def test_fetch_transport_error(monkeypatch) -> None:
    _patch_send(monkeypatch, TransportError("connection reset"))
    with pytest.raises(DownloadFailed) as excinfo:
        asyncio.run(ImageFetcher().fetch("https://svc/abc/download"))
    assert excinfo.value.status_code is None
