"""Job handles and the status payloads the render service reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union
from urllib.parse import urlparse

from ..errors import MalformedStatus


@dataclass(frozen=True)
class JobHandle:
    id: str
    status_url: str


@dataclass(frozen=True)
class Queued:
    """Accepted but not started, or a status body with nothing to report."""

    is_terminal = False


@dataclass(frozen=True)
class Rendering:
    cur_pixel: int
    max_pixels: int
    percent: str | None = None
    elapsed: str | None = None
    eta: str | None = None

    is_terminal = False

    @property
    def fraction(self) -> float:
        if self.max_pixels <= 0:
            return 0.0
        return max(0.0, min(1.0, self.cur_pixel / self.max_pixels))


@dataclass(frozen=True)
class Ready:
    download_url: str

    is_terminal = True


JobStatus = Union[Queued, Rendering, Ready]


def is_http_url(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def _require_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedStatus(f"Rendering.{key} must be an integer, got {value!r}", payload)
    return value


def _optional_text(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def parse_submit_response(payload: Any) -> JobHandle:
    if not isinstance(payload, dict):
        raise MalformedStatus(f"Submit response must be an object, got {type(payload).__name__}", payload)
    job_id = payload.get("id")
    status_url = payload.get("status_url")
    if not isinstance(job_id, str) or not job_id:
        raise MalformedStatus(f"Submit response missing id: {payload}", payload)
    if not is_http_url(status_url):
        raise MalformedStatus(f"Submit response has invalid status_url: {status_url!r}", payload)
    return JobHandle(id=job_id, status_url=status_url)


def parse_status(payload: Any) -> JobStatus:
    """Decode one status body.

    ``{"Rendering": {...}}`` and ``{"download_url": ...}`` are mutually
    exclusive. A body with neither (including the bare ``"Queued"`` string
    the service sends before rendering starts) is :class:`Queued`.
    """
    if payload == "Queued" or payload is None:
        return Queued()
    if not isinstance(payload, dict):
        raise MalformedStatus(f"Status must be an object, got {type(payload).__name__}", payload)
    rendering = payload.get("Rendering")
    download_url = payload.get("download_url")
    if rendering is not None and download_url is not None:
        raise MalformedStatus("Status reports both Rendering and download_url", payload)
    if download_url is not None:
        if not is_http_url(download_url):
            raise MalformedStatus(f"Status has invalid download_url: {download_url!r}", payload)
        return Ready(download_url=download_url)
    if rendering is not None:
        if not isinstance(rendering, dict):
            raise MalformedStatus("Status Rendering must be an object", payload)
        return Rendering(
            cur_pixel=_require_int(rendering, "cur_pixel"),
            max_pixels=_require_int(rendering, "max_pixels"),
            percent=_optional_text(rendering, "percent"),
            elapsed=_optional_text(rendering, "elapsed"),
            eta=_optional_text(rendering, "eta"),
        )
    return Queued()
