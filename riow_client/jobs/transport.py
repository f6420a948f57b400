"""Blocking HTTP round trips over urllib."""

from __future__ import annotations

from dataclasses import dataclass
from http.client import HTTPException
from typing import Mapping
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import TransportError


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes
    content_type: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


def send(
    method: str,
    url: str,
    *,
    body: bytes | None = None,
    headers: Mapping[str, str] | None = None,
    timeout_s: float = 30.0,
) -> HttpResponse:
    """Perform one request. HTTP error statuses are returned, not raised."""
    req = Request(url, data=body, headers=dict(headers or {}), method=method)
    try:
        with urlopen(req, timeout=timeout_s) as response:
            status_code = int(getattr(response, "status", 200))
            content_type = response.headers.get("content-type") if response.headers else None
            raw = response.read()
    except HTTPError as exc:
        try:
            raw = exc.read() if exc.fp else str(exc).encode("utf-8")
        except (HTTPException, OSError):
            raw = str(exc).encode("utf-8")
        content_type = exc.headers.get("content-type") if exc.headers else None
        return HttpResponse(status_code=int(exc.code), body=raw or b"", content_type=content_type)
    except URLError as exc:
        raise TransportError(f"{method} {url} failed: {exc.reason}") from exc
    except HTTPException as exc:
        # Malformed status line or a body cut short by the server.
        raise TransportError(f"{method} {url} failed: {type(exc).__name__}: {exc}") from exc
    except (TimeoutError, OSError) as exc:
        raise TransportError(f"{method} {url} failed: {exc}") from exc
    return HttpResponse(status_code=status_code, body=raw or b"", content_type=content_type)
