"""
spherecast - A Python Monte Carlo Ray Tracer

Renders scenes of spheres with:
- Diffuse, metal and glass materials
- Recursive path tracing under a procedural sky
- Per-row random streams for reproducible multi-threaded renders
- Gamma-corrected 0xRRGGBB frame buffers
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color, RandomSource, random_in_unit_sphere, reflect, refract
from .ray import Ray
from .shapes import HitRecord, Hittable, Sphere
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, schlick
from .scene import Scene, create_default_scene
from .camera import Camera
from .renderer import (
    Renderer, RenderSettings, ray_color, sky_color, sample_pixel,
    pack_color, buffer_to_rgb
)
