"""Client for the ray tracing render service."""

from __future__ import annotations

from .errors import (
    DownloadFailed,
    InvalidScene,
    MalformedStatus,
    NotAColor,
    PollFailed,
    PollTimeout,
    RiowError,
    SceneRejected,
    SubmissionFailed,
    TransportError,
    UnsupportedMaterial,
    UnsupportedShape,
)
from .jobs import ImageFetcher, JobClient, JobHandle, PollPolicy, Queued, Ready, RenderedImage, Rendering, wait_until_ready
from .scene import default_scene, hex_to_color
from .session import RenderSession
from .wire import scene_to_request, to_render_request

__all__ = [
    "DownloadFailed",
    "ImageFetcher",
    "InvalidScene",
    "JobClient",
    "JobHandle",
    "MalformedStatus",
    "NotAColor",
    "PollFailed",
    "PollPolicy",
    "PollTimeout",
    "Queued",
    "Ready",
    "RenderSession",
    "RenderedImage",
    "Rendering",
    "RiowError",
    "SceneRejected",
    "SubmissionFailed",
    "TransportError",
    "UnsupportedMaterial",
    "UnsupportedShape",
    "default_scene",
    "hex_to_color",
    "scene_to_request",
    "to_render_request",
    "wait_until_ready",
]
