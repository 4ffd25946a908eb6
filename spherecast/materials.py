"""
Materials system.

Implements the three scattering laws the renderer knows about:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

Every random draw comes from the ``rng`` passed to ``scatter``, so a
material holds no mutable state and can be shared across render threads.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .vec3 import Color, RandomSource, random_in_unit_sphere, reflect, refract
from .ray import Ray
from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: RandomSource) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The intersection being shaded
            rng: Source of uniform floats in [0, 1)

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: RandomSource) -> Optional[ScatterResult]:
        scatter_direction = hit.normal + random_in_unit_sphere(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, scatter_direction),
            attenuation=self.albedo,
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the random perturbation added to the mirror
                direction (0 = mirror), clamped to [0, 1]
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: RandomSource) -> Optional[ScatterResult]:
        reflected = reflect(ray_in.direction.unit_vector(), hit.normal)
        if self.fuzz > 0:
            reflected = reflected + random_in_unit_sphere(rng) * self.fuzz

        # Grazing fuzzed reflections may point below the surface; they are kept
        return ScatterResult(
            scattered_ray=Ray(hit.point, reflected),
            attenuation=self.albedo,
        )

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, ref_idx: float = 1.5):
        """Create a dielectric material.

        Args:
            ref_idx: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: RandomSource) -> Optional[ScatterResult]:
        direction = ray_in.direction
        attenuation = Color(1.0, 1.0, 1.0)
        reflected = reflect(direction, hit.normal)

        # Leaving the medium when the ray travels along the normal
        d_dot_n = direction.dot(hit.normal)
        if d_dot_n > 0:
            outward_normal = -hit.normal
            ni_over_nt = self.ref_idx
            cosine = self.ref_idx * d_dot_n / direction.length()
        else:
            outward_normal = hit.normal
            ni_over_nt = 1.0 / self.ref_idx
            cosine = -d_dot_n / direction.length()

        refracted = refract(direction, outward_normal, ni_over_nt)
        if refracted is None:
            reflect_prob = 1.0
        else:
            reflect_prob = schlick(cosine, self.ref_idx)

        if rng.random() < reflect_prob:
            return ScatterResult(scattered_ray=Ray(hit.point, reflected), attenuation=attenuation)
        return ScatterResult(scattered_ray=Ray(hit.point, refracted), attenuation=attenuation)

    def __repr__(self) -> str:
        return f"Dielectric(ref_idx={self.ref_idx})"


def schlick(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)
