"""Scene model, colors and presets."""

from __future__ import annotations

from .colors import Color, hex_to_color, is_color
from .limits import check_service_limits
from .model import (
    CameraConfig,
    Dielectric,
    ImageConfig,
    Lambertian,
    Material,
    Metal,
    Scene,
    Shape,
    Sphere,
    Vec3,
    WorldObject,
    scene_from_dict,
    scene_to_dict,
)
from .presets import default_scene, default_world_object

__all__ = [
    "CameraConfig",
    "Color",
    "Dielectric",
    "ImageConfig",
    "Lambertian",
    "Material",
    "Metal",
    "Scene",
    "Shape",
    "Sphere",
    "Vec3",
    "WorldObject",
    "check_service_limits",
    "default_scene",
    "default_world_object",
    "hex_to_color",
    "is_color",
    "scene_from_dict",
    "scene_to_dict",
]
