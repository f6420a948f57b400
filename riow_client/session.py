"""End-to-end render: map, submit, wait, download."""

from __future__ import annotations

import time
from typing import Callable

from .errors import RiowError
from .jobs.client import JobClient
from .jobs.fetcher import ImageFetcher, RenderedImage
from .jobs.polling import PollPolicy, wait_until_ready
from .jobs.status import JobHandle, JobStatus, Rendering
from .runs.events import EventWriter
from .scene.model import Scene
from .wire.mapper import scene_to_request


class RenderSession:
    def __init__(
        self,
        client: JobClient,
        fetcher: ImageFetcher,
        *,
        policy: PollPolicy | None = None,
        events: EventWriter | None = None,
    ) -> None:
        self.client = client
        self.fetcher = fetcher
        self.policy = policy or PollPolicy()
        self.events = events
        self.last_handle: JobHandle | None = None
        self.last_status: JobStatus | None = None

    def _emit(self, event_type: str, **payload: object) -> None:
        if self.events is not None:
            self.events.emit(event_type, **payload)

    async def render(
        self,
        scene: Scene,
        on_status: Callable[[JobStatus], None] | None = None,
    ) -> RenderedImage:
        """Render ``scene`` and return the downloaded image.

        The returned image must be released by the caller. A submission that
        fails leaves ``last_handle`` unset.
        """
        started = time.monotonic()
        self.last_handle = None
        self.last_status = None
        request = scene_to_request(scene)
        self._emit(
            "session_started",
            width=request["width"],
            height=request["height"],
            objects=len(request["objects"]),
        )
        try:
            handle = await self.client.submit(request)
            self.last_handle = handle
            self._emit("job_submitted", job_id=handle.id, status_url=handle.status_url)

            def _record(status: JobStatus) -> None:
                self.last_status = status
                payload: dict[str, object] = {"job_id": handle.id, "state": type(status).__name__}
                if isinstance(status, Rendering):
                    payload["cur_pixel"] = status.cur_pixel
                    payload["max_pixels"] = status.max_pixels
                self._emit("job_status", **payload)
                if on_status is not None:
                    on_status(status)

            def _failed_poll(exc: Exception, failures: int) -> None:
                self._emit("poll_failed", job_id=handle.id, error=str(exc), consecutive=failures)

            ready = await wait_until_ready(
                self.client.poll,
                handle,
                self.policy,
                on_status=_record,
                on_failure=_failed_poll,
            )
            self._emit("job_ready", job_id=handle.id, download_url=ready.download_url)
            image = await self.fetcher.fetch(ready.download_url)
        except RiowError as exc:
            self._emit(
                "job_failed",
                job_id=self.last_handle.id if self.last_handle else None,
                error_type=type(exc).__name__,
                error=str(exc),
                elapsed_s=round(time.monotonic() - started, 3),
            )
            raise
        self._emit(
            "image_fetched",
            job_id=handle.id,
            bytes=image.size,
            content_type=image.content_type,
            elapsed_s=round(time.monotonic() - started, 3),
        )
        return image
