"""Limits the render service enforces on incoming jobs."""

from __future__ import annotations

from ..errors import SceneRejected
from .model import Scene

MAX_DIM = 3000
MAX_SAMPLES = 500
MAX_DEPTH = 50


def check_service_limits(scene: Scene) -> None:
    """Raise :class:`SceneRejected` for scenes the service would answer with 400."""
    width, height = scene.image.width, scene.image.height
    if width > MAX_DIM or height > MAX_DIM:
        raise SceneRejected(f"Image {width}x{height} exceeds {MAX_DIM} pixels per side.")
    samples = scene.camera.samples_per_pixel
    if samples > MAX_SAMPLES:
        raise SceneRejected(f"Too many samples per pixel: {samples} (max {MAX_SAMPLES}).")
    depth = scene.camera.max_depth
    if depth > MAX_DEPTH:
        raise SceneRejected(f"Max depth too large: {depth} (max {MAX_DEPTH}).")
