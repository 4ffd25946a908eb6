"""
Geometric shapes for the ray tracer.

Each shape must implement the Hittable protocol with a `hit` method.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        t: The ray parameter at intersection
        point: The intersection point in world space
        normal: Unit surface normal, (point - center) / radius for spheres
        material_id: Index into the owning scene's material arena; None
            until a Scene stamps it
    """
    t: float
    point: Point3
    normal: Vec3
    material_id: Optional[int] = None


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Exclusive lower bound on t (avoids self-intersection)
            t_max: Exclusive upper bound on t

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere. A negative radius flips the normal
                inward, which turns a dielectric sphere into a hollow shell.
            material: Material for shading
        """
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0,
        solved here with the half-b form a·t² + 2b·t + c = 0.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = b * b - a * c
        if discriminant <= 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Nearest root first, then the far side (ray starting inside the sphere)
        root = (-b - sqrtd) / a
        if not t_min < root < t_max:
            root = (-b + sqrtd) / a
            if not t_min < root < t_max:
                return None

        point = ray.at(root)
        return HitRecord(
            t=root,
            point=point,
            normal=(point - self.center) / self.radius,
        )

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"
