"""Wire format for the render service."""

from __future__ import annotations

from .mapper import FOCUS_DIST, encode_request, scene_to_request, to_render_request

__all__ = ["FOCUS_DIST", "encode_request", "scene_to_request", "to_render_request"]
