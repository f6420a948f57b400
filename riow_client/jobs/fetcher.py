"""Download of finished renders."""

from __future__ import annotations

import asyncio
import mimetypes
import os
import shutil
import tempfile
from pathlib import Path
from typing import Mapping

from ..errors import DownloadFailed, TransportError
from .transport import send


class RenderedImage:
    """Downloaded image bytes backed by a local temp file.

    The file stays on disk until :meth:`release` is called or the ``with``
    block exits. Releasing twice is a no-op.
    """

    def __init__(self, path: Path, content_type: str | None, source_url: str) -> None:
        self.path = path
        self.content_type = content_type
        self.source_url = source_url
        self._released = False

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        content_type: str | None,
        source_url: str,
        directory: Path | None = None,
    ) -> "RenderedImage":
        suffix = _suffix_for(content_type, source_url)
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)
        fd, raw_path = tempfile.mkstemp(prefix="riow-", suffix=suffix, dir=directory)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        return cls(Path(raw_path), content_type, source_url)

    @property
    def released(self) -> bool:
        return self._released

    @property
    def size(self) -> int:
        self._check_alive()
        return self.path.stat().st_size

    @property
    def data(self) -> bytes:
        self._check_alive()
        return self.path.read_bytes()

    def save(self, dest: Path) -> Path:
        self._check_alive()
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self.path, dest)
        return dest

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self.path.unlink(missing_ok=True)

    def _check_alive(self) -> None:
        if self._released:
            raise RuntimeError(f"Rendered image {self.path} was already released.")

    def __enter__(self) -> "RenderedImage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self._released else str(self.path)
        return f"RenderedImage({state}, content_type={self.content_type!r})"


def _suffix_for(content_type: str | None, url: str) -> str:
    if content_type:
        ext = mimetypes.guess_extension(content_type.split(";", 1)[0].strip())
        if ext:
            return ext
    url_suffix = Path(url.split("?", 1)[0]).suffix.lower()
    if url_suffix in {".png", ".jpg", ".jpeg", ".webp", ".ppm"}:
        return url_suffix
    return ".png"


class ImageFetcher:
    def __init__(
        self,
        *,
        download_timeout: float = 60.0,
        headers: Mapping[str, str] | None = None,
        directory: Path | None = None,
    ) -> None:
        self.download_timeout = float(download_timeout)
        self.headers = dict(headers or {})
        self.directory = Path(directory) if directory is not None else None

    async def fetch(self, download_url: str) -> RenderedImage:
        try:
            response = await asyncio.to_thread(
                send,
                "GET",
                download_url,
                headers=self.headers,
                timeout_s=self.download_timeout,
            )
        except TransportError as exc:
            raise DownloadFailed(None, str(exc)) from exc
        if not response.ok:
            raise DownloadFailed(response.status_code, response.text())
        content_type = (response.content_type or "").lower()
        if content_type.startswith("application/json"):
            # The service redirects unfinished downloads back to the status page.
            raise DownloadFailed(response.status_code, response.text())
        if not response.body:
            raise DownloadFailed(response.status_code, "empty image body")
        return RenderedImage.from_bytes(
            response.body,
            content_type=response.content_type,
            source_url=download_url,
            directory=self.directory,
        )
