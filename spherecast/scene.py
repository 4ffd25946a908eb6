"""
Scene container and the stock demo scene.

A Scene is itself Hittable: it resolves the nearest hit among its members.
It also owns the material arena. Hit records leaving the scene carry an
index into ``Scene.materials`` instead of a material reference.
"""

from __future__ import annotations
from typing import Iterator, Optional

from .vec3 import Color, Point3
from .ray import Ray
from .shapes import HitRecord, Hittable, Sphere
from .materials import Material, Lambertian, Metal, Dielectric


class Scene(Hittable):
    """An ordered collection of surfaces and their materials."""

    def __init__(self, objects: Optional[list[Sphere]] = None):
        self.objects: list[Sphere] = []
        self.materials: list[Material] = []
        for obj in objects or []:
            self.add(obj)

    def add(self, obj: Sphere) -> int:
        """Add a surface; returns the material id its hits will carry.

        Raises:
            ValueError: If the surface has no material
        """
        if obj.material is None:
            raise ValueError(f"Surface has no material: {obj!r}")
        self.objects.append(obj)
        self.materials.append(obj.material)
        return len(self.materials) - 1

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Each member is tested against the closest t found so far, so a later
        member only wins with a strictly nearer hit.
        """
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for index, obj in enumerate(self.objects):
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                hit_record.material_id = index
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def material(self, hit_record: HitRecord) -> Optional[Material]:
        """Look up the material a hit record points at."""
        if hit_record.material_id is None:
            return None
        return self.materials[hit_record.material_id]

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Sphere]:
        return iter(self.objects)


def create_default_scene() -> Scene:
    """Create the five-sphere demo scene.

    A matte sphere sits on a huge matte ground sphere, flanked by fuzzy gold
    metal on the right and a glass bubble on the left. The bubble is a
    glass sphere with a slightly smaller negative-radius glass sphere
    inside it.
    """
    return Scene([
        Sphere(Point3(0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.8, 0.3, 0.3))),
        Sphere(Point3(0.0, -100.5, -1.0), 100.0, Lambertian(Color(0.8, 0.8, 0.0))),
        Sphere(Point3(1.0, 0.0, -1.0), 0.5, Metal(Color(0.8, 0.6, 0.2), 0.3)),
        Sphere(Point3(-1.0, 0.0, -1.0), 0.5, Dielectric(1.5)),
        Sphere(Point3(-1.0, 0.0, -1.0), -0.45, Dielectric(1.5)),
    ])
