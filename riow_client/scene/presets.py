"""Starter scenes."""

from __future__ import annotations

from .model import CameraConfig, Dielectric, ImageConfig, Lambertian, Metal, Scene, Sphere, Vec3, WorldObject


def default_world_object() -> WorldObject:
    return WorldObject(
        material=Lambertian(color="#f97923"),
        shape=Sphere(center=Vec3(0, 1, 0), radius=1),
    )


def default_scene() -> Scene:
    """Orange ground, then glass, purple matte and white mirror spheres in a row."""
    return Scene(
        image=ImageConfig(width=500, height=300),
        camera=CameraConfig(
            samples_per_pixel=50,
            max_depth=10,
            defocus_angle=0.6,
            position=Vec3(13, 2, 3),
            up=Vec3(0, 1, 0),
            look_at=Vec3(0, 0, 0),
        ),
        world=(
            WorldObject(
                material=Lambertian(color="#f97923"),
                shape=Sphere(center=Vec3(0, -1000, 0), radius=1000),
            ),
            WorldObject(
                material=Dielectric(index_of_refraction=1.5),
                shape=Sphere(center=Vec3(0, 1, 0), radius=1),
            ),
            WorldObject(
                material=Lambertian(color="#47059d"),
                shape=Sphere(center=Vec3(-4, 1, 0), radius=1),
            ),
            WorldObject(
                material=Metal(color="#ffffff", fuzziness=0.0),
                shape=Sphere(center=Vec3(4, 1, 0), radius=1),
            ),
        ),
    )
