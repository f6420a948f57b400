"""Scene to render-service request mapping."""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from ..errors import UnsupportedMaterial, UnsupportedShape
from ..scene.colors import Color, hex_to_color
from ..scene.model import CameraConfig, Dielectric, ImageConfig, Lambertian, Metal, Scene, Sphere, Vec3, WorldObject

# Not user-configurable yet; the service treats it as the focal plane distance.
FOCUS_DIST = 10


def vec3_to_wire(vec: Vec3) -> dict[str, float]:
    return {"x": vec.x, "y": vec.y, "z": vec.z}


def color_to_wire(color: Color) -> dict[str, float]:
    return {"r": color.r, "g": color.g, "b": color.b}


def camera_to_wire(camera: CameraConfig) -> dict[str, Any]:
    return {
        "defocus_angle": camera.defocus_angle,
        "focus_dist": FOCUS_DIST,
        "look_at": vec3_to_wire(camera.look_at),
        "max_depth": camera.max_depth,
        "samples_per_pixel": camera.samples_per_pixel,
        "up": vec3_to_wire(camera.up),
        "pos": vec3_to_wire(camera.position),
    }


def material_to_wire(material: Any) -> dict[str, Any]:
    # The service spells the diffuse variant "Lambertain".
    if isinstance(material, Lambertian):
        return {"Lambertain": {"color": color_to_wire(hex_to_color(material.color))}}
    if isinstance(material, Dielectric):
        return {"Dielectric": {"index_of_refraction": material.index_of_refraction}}
    if isinstance(material, Metal):
        return {
            "Metal": {
                "color": color_to_wire(hex_to_color(material.color)),
                "fuzziness": material.fuzziness,
            }
        }
    raise UnsupportedMaterial(material)


def shape_to_wire(shape: Any) -> dict[str, Any]:
    if isinstance(shape, Sphere) and shape.stationary is True:
        return {
            "Sphere": {
                "Stationary": {
                    "center": vec3_to_wire(shape.center),
                    "radius": shape.radius,
                }
            }
        }
    raise UnsupportedShape(shape)


def object_to_wire(obj: WorldObject) -> dict[str, Any]:
    return {"material": material_to_wire(obj.material), "shape": shape_to_wire(obj.shape)}


def to_render_request(
    image: ImageConfig,
    camera: CameraConfig,
    world: Iterable[WorldObject],
) -> dict[str, Any]:
    return {
        "width": image.width,
        "height": image.height,
        "camera_config": camera_to_wire(camera),
        "objects": [object_to_wire(obj) for obj in world],
    }


def scene_to_request(scene: Scene) -> dict[str, Any]:
    return to_render_request(scene.image, scene.camera, scene.world)


def encode_request(request: Mapping[str, Any]) -> bytes:
    return json.dumps(request, separators=(",", ":"), allow_nan=False).encode("utf-8")
