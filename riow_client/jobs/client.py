"""Render job submission and status polling."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Mapping

from ..errors import MalformedStatus, PollFailed, SubmissionFailed, TransportError
from ..wire.mapper import encode_request
from .status import JobHandle, JobStatus, parse_status, parse_submit_response
from .transport import send

_JSON_HEADERS = {
    "accept": "application/json",
    "content-type": "application/json",
}


class JobClient:
    """Request/response client for the render service.

    Each call is a single round trip; the caller owns the polling loop (see
    :func:`riow_client.jobs.polling.wait_until_ready`). No per-job state is
    kept, so one client can track any number of jobs concurrently.
    """

    def __init__(
        self,
        base_url: str,
        *,
        request_timeout: float = 30.0,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.request_timeout = float(request_timeout)
        self.headers = dict(_JSON_HEADERS)
        self.headers.update(headers or {})

    @property
    def submit_url(self) -> str:
        return f"{self.base_url}/"

    async def submit(self, request: Mapping[str, Any]) -> JobHandle:
        body = encode_request(request)
        try:
            response = await asyncio.to_thread(
                send,
                "POST",
                self.submit_url,
                body=body,
                headers=self.headers,
                timeout_s=self.request_timeout,
            )
        except TransportError as exc:
            raise SubmissionFailed(None, str(exc)) from exc
        if not response.ok:
            raise SubmissionFailed(response.status_code, response.text())
        try:
            payload = json.loads(response.body)
        except ValueError as exc:
            raise SubmissionFailed(response.status_code, response.text()) from exc
        try:
            return parse_submit_response(payload)
        except MalformedStatus as exc:
            raise SubmissionFailed(response.status_code, response.text()) from exc

    async def poll(self, handle: JobHandle) -> JobStatus:
        headers = {"accept": self.headers.get("accept", "application/json")}
        for key, value in self.headers.items():
            if key.lower() not in {"accept", "content-type"}:
                headers[key] = value
        try:
            response = await asyncio.to_thread(
                send,
                "GET",
                handle.status_url,
                headers=headers,
                timeout_s=self.request_timeout,
            )
        except TransportError as exc:
            raise PollFailed(None, str(exc)) from exc
        if not response.ok:
            raise PollFailed(response.status_code, response.text())
        try:
            payload = json.loads(response.body) if response.body.strip() else None
        except ValueError as exc:
            raise MalformedStatus(f"Status body is not JSON: {response.text()[:200]}") from exc
        return parse_status(payload)
