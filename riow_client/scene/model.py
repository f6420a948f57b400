"""Scene description: image size, camera and the objects to render."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from ..errors import InvalidScene, UnsupportedMaterial, UnsupportedShape
from .colors import Color, hex_to_color

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
    "scene_from_dict",
    "scene_to_dict",
]


def _require_finite(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScene(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        raise InvalidScene(f"{name} is out of range, got a {value.bit_length()}-bit integer") from None
    if not math.isfinite(number):
        raise InvalidScene(f"{name} must be finite, got {value!r}")
    return number


def _require_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScene(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidScene(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Vec3:
    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        for axis in ("x", "y", "z"):
            object.__setattr__(self, axis, _require_finite(axis, getattr(self, axis)))


@dataclass(frozen=True)
class ImageConfig:
    width: int
    height: int

    def __post_init__(self) -> None:
        _require_positive_int("width", self.width)
        _require_positive_int("height", self.height)


@dataclass(frozen=True)
class CameraConfig:
    """Camera placement and sampling.

    ``up`` must not be parallel to ``look_at - position``; that is left to the
    render service to reject.
    """

    samples_per_pixel: int
    max_depth: int
    defocus_angle: float
    position: Vec3
    up: Vec3
    look_at: Vec3

    def __post_init__(self) -> None:
        _require_positive_int("samples_per_pixel", self.samples_per_pixel)
        _require_positive_int("max_depth", self.max_depth)
        angle = _require_finite("defocus_angle", self.defocus_angle)
        if angle < 0:
            raise InvalidScene(f"defocus_angle must be >= 0, got {angle}")
        object.__setattr__(self, "defocus_angle", angle)
        for name in ("position", "up", "look_at"):
            if not isinstance(getattr(self, name), Vec3):
                raise InvalidScene(f"{name} must be a Vec3")


@dataclass(frozen=True)
class Lambertian:
    color: str

    def __post_init__(self) -> None:
        hex_to_color(self.color)


@dataclass(frozen=True)
class Metal:
    color: str
    fuzziness: float = 0.0

    def __post_init__(self) -> None:
        hex_to_color(self.color)
        fuzziness = _require_finite("fuzziness", self.fuzziness)
        if not 0.0 <= fuzziness <= 1.0:
            raise InvalidScene(f"fuzziness must be within [0, 1], got {fuzziness}")
        object.__setattr__(self, "fuzziness", fuzziness)


@dataclass(frozen=True)
class Dielectric:
    index_of_refraction: float

    def __post_init__(self) -> None:
        index = _require_finite("index_of_refraction", self.index_of_refraction)
        if index <= 0:
            raise InvalidScene(f"index_of_refraction must be > 0, got {index}")
        object.__setattr__(self, "index_of_refraction", index)


Material = Union[Lambertian, Metal, Dielectric]


@dataclass(frozen=True)
class Sphere:
    center: Vec3
    radius: float
    # Only stationary spheres exist; the flag keeps room for moving ones.
    stationary: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.center, Vec3):
            raise InvalidScene("center must be a Vec3")
        radius = _require_finite("radius", self.radius)
        if radius <= 0:
            raise InvalidScene(f"radius must be > 0, got {radius}")
        object.__setattr__(self, "radius", radius)
        if self.stationary is not True:
            raise UnsupportedShape("moving sphere")


Shape = Sphere


@dataclass(frozen=True)
class WorldObject:
    material: Material
    shape: Shape


@dataclass(frozen=True)
class Scene:
    image: ImageConfig
    camera: CameraConfig
    world: tuple[WorldObject, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "world", tuple(self.world))

    def with_world(self, world: Iterable[WorldObject]) -> "Scene":
        return Scene(image=self.image, camera=self.camera, world=tuple(world))


# Editor (camelCase) form, as scene files and the web form store it.


def _field(payload: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(payload, Mapping):
        raise InvalidScene(f"{where} must be an object, got {type(payload).__name__}")
    if key not in payload:
        raise InvalidScene(f"{where}.{key} is required")
    return payload[key]


def _vec3_from_dict(payload: Any, where: str) -> Vec3:
    return Vec3(
        x=_field(payload, "x", where),
        y=_field(payload, "y", where),
        z=_field(payload, "z", where),
    )


def _material_from_dict(payload: Any, where: str) -> Material:
    kind = _field(payload, "materialType", where)
    if kind == "lambertain":
        return Lambertian(color=_field(payload, "color", where))
    if kind == "metal":
        return Metal(color=_field(payload, "color", where), fuzziness=_field(payload, "fuzziness", where))
    if kind == "dielectric":
        return Dielectric(index_of_refraction=_field(payload, "indexOfRefraction", where))
    raise UnsupportedMaterial(kind)


def _shape_from_dict(payload: Any, where: str) -> Shape:
    kind = _field(payload, "shapeType", where)
    if kind == "sphere":
        return Sphere(
            center=_vec3_from_dict(_field(payload, "center", where), f"{where}.center"),
            radius=_field(payload, "radius", where),
            stationary=payload.get("stationary", True),
        )
    raise UnsupportedShape(kind)


def scene_from_dict(payload: Mapping[str, Any]) -> Scene:
    """Build a :class:`Scene` from the editor's camelCase JSON form."""
    image = _field(payload, "imageConfig", "scene")
    camera = _field(payload, "cameraConfig", "scene")
    world = _field(payload, "world", "scene")
    if not isinstance(world, list):
        raise InvalidScene("scene.world must be a list")
    objects: list[WorldObject] = []
    for idx, item in enumerate(world):
        where = f"scene.world[{idx}]"
        objects.append(
            WorldObject(
                material=_material_from_dict(_field(item, "material", where), f"{where}.material"),
                shape=_shape_from_dict(_field(item, "shape", where), f"{where}.shape"),
            )
        )
    return Scene(
        image=ImageConfig(
            width=_field(image, "width", "imageConfig"),
            height=_field(image, "height", "imageConfig"),
        ),
        camera=CameraConfig(
            samples_per_pixel=_field(camera, "samplesPerPixel", "cameraConfig"),
            max_depth=_field(camera, "maxDepth", "cameraConfig"),
            defocus_angle=_field(camera, "defocusAngle", "cameraConfig"),
            position=_vec3_from_dict(_field(camera, "position", "cameraConfig"), "cameraConfig.position"),
            up=_vec3_from_dict(_field(camera, "up", "cameraConfig"), "cameraConfig.up"),
            look_at=_vec3_from_dict(_field(camera, "lookAt", "cameraConfig"), "cameraConfig.lookAt"),
        ),
        world=tuple(objects),
    )


def _vec3_to_dict(vec: Vec3) -> dict[str, float]:
    return {"x": vec.x, "y": vec.y, "z": vec.z}


def _material_to_dict(material: Material) -> dict[str, Any]:
    if isinstance(material, Lambertian):
        return {"materialType": "lambertain", "color": material.color}
    if isinstance(material, Metal):
        return {"materialType": "metal", "color": material.color, "fuzziness": material.fuzziness}
    if isinstance(material, Dielectric):
        return {"materialType": "dielectric", "indexOfRefraction": material.index_of_refraction}
    raise UnsupportedMaterial(material)


def _shape_to_dict(shape: Shape) -> dict[str, Any]:
    if isinstance(shape, Sphere):
        return {
            "shapeType": "sphere",
            "stationary": shape.stationary,
            "center": _vec3_to_dict(shape.center),
            "radius": shape.radius,
        }
    raise UnsupportedShape(shape)


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    camera = scene.camera
    return {
        "imageConfig": {"width": scene.image.width, "height": scene.image.height},
        "cameraConfig": {
            "samplesPerPixel": camera.samples_per_pixel,
            "maxDepth": camera.max_depth,
            "defocusAngle": camera.defocus_angle,
            "position": _vec3_to_dict(camera.position),
            "up": _vec3_to_dict(camera.up),
            "lookAt": _vec3_to_dict(camera.look_at),
        },
        "world": [
            {"material": _material_to_dict(obj.material), "shape": _shape_to_dict(obj.shape)}
            for obj in scene.world
        ],
    }
