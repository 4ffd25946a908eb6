"""
Camera module for generating primary rays.

Pinhole perspective projection with a fixed vertical field of view and
aspect ratio, positioned via look-at. The defaults frame the demo scene:
eye at the origin looking down -z, image plane at z = -1 spanning
[-2, 2] x [-1, 1].
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera with perspective projection."""

    def __init__(
        self,
        look_from: Point3 = Point3(0, 0, 0),
        look_at: Point3 = Point3(0, 0, -1),
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 2.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
        """
        theta = math.radians(vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        focus_dist = (look_from - look_at).length()

        # Compute orthonormal camera basis
        self.w = (look_from - look_at).unit_vector()  # Points backward from camera
        self.u = vup.cross(self.w).unit_vector()       # Points right
        self.v = self.w.cross(self.u)                  # Points up

        self.origin = look_from
        self.look_at = look_at
        self.horizontal = self.u * viewport_width * focus_dist
        self.vertical = self.v * viewport_height * focus_dist
        self.lower_left_corner = (
            self.origin
            - self.horizontal / 2
            - self.vertical / 2
            - self.w * focus_dist
        )

    def get_ray(self, u: float, v: float) -> Ray:
        """Generate a ray for the given UV coordinates on the image plane.

        Args:
            u: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            v: Vertical coordinate [0, 1] (0 = bottom, 1 = top)

        Returns:
            A ray from the camera through the image-plane point; the
            direction is not normalized
        """
        direction = (
            self.lower_left_corner
            + self.horizontal * u
            + self.vertical * v
            - self.origin
        )
        return Ray(self.origin, direction)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, look_at={self.look_at})"
