"""
Vector3 class for 3D math operations.

This is the fundamental building block of the ray tracer, used for:
- Points in 3D space
- Direction vectors
- RGB color values

Nothing at the type level separates the three uses; ``Point3`` and
``Color`` are plain aliases.
"""

from __future__ import annotations
import math
from typing import Iterable, Optional, Protocol, Union
import numpy as np


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1).

    ``numpy.random.Generator`` and ``random.Random`` both qualify.
    """

    def random(self) -> float: ...


class Vec3:
    """A 3D vector class supporting common vector operations.

    Uses numpy internally for efficient computation while providing
    a clean, Pythonic API.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color operations
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return np.allclose(self._data, other._data)

    # Equality is approximate, so there is no hash consistent with it
    __hash__ = None

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        # Lets the builtin sum() start from 0
        return Vec3.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data / other._data)
        return Vec3.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __len__(self) -> int:
        return 3

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return float(np.linalg.norm(self._data))

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def unit_vector(self) -> Vec3:
        """Return a unit vector in the same direction.

        A zero-length vector has no direction: the result is NaN in every
        component rather than an error.
        """
        with np.errstate(divide='ignore', invalid='ignore'):
            return Vec3.from_array(self._data / self.length())

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    def clamp(self, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Clamp all components to the given range."""
        return Vec3.from_array(np.clip(self._data, min_val, max_val))

    def sqrt(self) -> Vec3:
        """Component-wise square root (gamma 2 correction for colors)."""
        return Vec3.from_array(np.sqrt(self._data))

    @staticmethod
    def sum(vectors: Iterable[Vec3]) -> Vec3:
        """Add up a sequence of vectors; an empty sequence sums to zero."""
        total = np.zeros(3, dtype=np.float64)
        for v in vectors:
            total += v._data
        return Vec3.from_array(total)


def random_in_unit_sphere(rng: RandomSource) -> Vec3:
    """Generate a random point inside the unit sphere.

    Rejection sampling: draw points in the [-1, 1] cube until one lands
    strictly inside the sphere.
    """
    while True:
        p = Vec3(rng.random(), rng.random(), rng.random()) * 2.0 - 1.0
        if p.length_squared() < 1.0:
            return p


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Mirror ``v`` about the plane with normal ``n``."""
    return v - n * (2.0 * v.dot(n))


def refract(v: Vec3, n: Vec3, ni_over_nt: float) -> Optional[Vec3]:
    """Bend ``v`` through a surface with normal ``n`` using Snell's law.

    Args:
        v: Incoming direction (need not be normalized)
        n: Surface normal on the incoming side
        ni_over_nt: Ratio of refractive indices (incident / transmitted)

    Returns:
        Refracted direction, or None on total internal reflection
    """
    uv = v.unit_vector()
    dt = uv.dot(n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    if discriminant < 0.0:
        return None
    return (uv - n * dt) * ni_over_nt - n * math.sqrt(discriminant)


# Convenience type aliases
Point3 = Vec3
Color = Vec3
