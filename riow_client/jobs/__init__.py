"""Render job client, polling and image download."""

from __future__ import annotations

from .client import JobClient
from .fetcher import ImageFetcher, RenderedImage
from .polling import PollPolicy, wait_until_ready
from .status import JobHandle, JobStatus, Queued, Ready, Rendering, parse_status, parse_submit_response

__all__ = [
    "ImageFetcher",
    "JobClient",
    "JobHandle",
    "JobStatus",
    "PollPolicy",
    "Queued",
    "Ready",
    "RenderedImage",
    "Rendering",
    "parse_status",
    "parse_submit_response",
    "wait_until_ready",
]
