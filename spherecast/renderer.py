"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive radiance estimation with a fixed depth cap
- Monte Carlo pixel sampling with per-row random streams
- Multi-threaded row-based rendering
- Gamma correction and 0xRRGGBB packing into a frame buffer
- Image output through Pillow
"""

from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional
import numpy as np

from .vec3 import Vec3, Color, RandomSource
from .ray import Ray
from .camera import Camera
from .scene import Scene

logger = logging.getLogger(__name__)

WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 1000
    height: int = 500
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 0  # 0 = auto-detect
    t_min: float = 0.001
    seed: Optional[int] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must not be negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


def sky_color(ray: Ray) -> Color:
    """Generate a sky gradient background.

    Blends white to sky blue on the vertical component of the
    normalized ray direction.
    """
    unit_direction = ray.direction.unit_vector()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def ray_color(
    ray: Ray,
    scene: Scene,
    rng: RandomSource,
    depth: int = 0,
    max_depth: int = 50,
    t_min: float = 0.001
) -> Color:
    """Compute the color for a ray using path tracing.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        rng: Source of uniform floats in [0, 1)
        depth: Number of bounces already taken
        max_depth: Bounce count at which a path is cut off (returns black)
        t_min: Lower bound on hit distance, keeps bounced rays off
            their own surface

    Returns:
        The computed color for this ray
    """
    hit_record = scene.hit(ray, t_min, float('inf'))

    if hit_record is None:
        return sky_color(ray)

    if depth >= max_depth:
        return BLACK

    material = scene.material(hit_record)
    scatter_result = material.scatter(ray, hit_record, rng)
    if scatter_result is None:
        return BLACK

    return scatter_result.attenuation * ray_color(
        scatter_result.scattered_ray, scene, rng, depth + 1, max_depth, t_min
    )


def sample_pixel(
    i: int,
    j: int,
    scene: Scene,
    camera: Camera,
    rng: RandomSource,
    settings: RenderSettings
) -> Color:
    """Average ``samples_per_pixel`` jittered radiance samples for pixel (i, j).

    ``j`` counts rows from the bottom of the image plane.
    """
    width = settings.width
    height = settings.height

    def one_sample() -> Color:
        u = (i + rng.random()) / width
        v = (j + rng.random()) / height
        return ray_color(camera.get_ray(u, v), scene, rng, 0, settings.max_depth, settings.t_min)

    total = Vec3.sum(one_sample() for _ in range(settings.samples_per_pixel))
    return total / settings.samples_per_pixel


def pack_color(color: Color) -> int:
    """Gamma correct (gamma 2), quantize to 8 bits per channel and pack as 0xRRGGBB."""
    corrected = color.sqrt().clamp(0.0, 1.0)
    ir = int(255.99 * corrected.r)
    ig = int(255.99 * corrected.g)
    ib = int(255.99 * corrected.b)
    return (ir << 16) | (ig << 8) | ib


def buffer_to_rgb(buffer: np.ndarray, width: int, height: int) -> np.ndarray:
    """Unpack a 0xRRGGBB frame buffer into a (height, width, 3) uint8 array."""
    packed = np.asarray(buffer, dtype=np.uint32).reshape(height, width)
    rgb = np.empty((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = (packed >> 16) & 0xFF
    rgb[..., 1] = (packed >> 8) & 0xFF
    rgb[..., 2] = packed & 0xFF
    return rgb


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Scene, camera: Camera) -> np.ndarray:
        """Render the scene into a packed frame buffer.

        Args:
            scene: The scene to render
            camera: The camera to render from

        Returns:
            uint32 array of width * height 0xRRGGBB pixels, row-major,
            row 0 at the top of the image
        """
        width = self.settings.width
        height = self.settings.height
        buffer = np.zeros(width * height, dtype=np.uint32)

        # One independent stream per row, so output does not depend on threading
        seed_seq = np.random.SeedSequence(self.settings.seed)
        row_seeds = seed_seq.spawn(height)

        logger.info(
            "Rendering %dx%d, %d spp, depth %d, %d thread(s), seed entropy %s",
            width, height, self.settings.samples_per_pixel, self.settings.max_depth,
            self.settings.num_threads, seed_seq.entropy,
        )
        start_time = time.time()
        completed_rows = [0]  # Use list for mutable in closure
        progress_lock = threading.Lock()

        def render_row(j: int) -> None:
            rng = np.random.default_rng(row_seeds[j])
            start = (height - 1 - j) * width
            buffer[start:start + width] = self.render_row(j, scene, camera, rng)

            # Callback runs under the lock so fractions arrive in increasing order
            with progress_lock:
                completed_rows[0] += 1
                done = completed_rows[0]
                logger.debug("Row %d done (%d/%d)", j, done, height)
                if self._progress_callback:
                    self._progress_callback(done / height)

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                # list() re-raises any worker exception here
                list(executor.map(render_row, range(height)))
        else:
            for j in range(height):
                render_row(j)

        logger.info("Render finished in %.2f s", time.time() - start_time)
        return buffer

    def render_row(self, j: int, scene: Scene, camera: Camera, rng: RandomSource) -> list[int]:
        """Render image-plane row ``j`` (counted from the bottom) as packed pixels."""
        return [
            pack_color(sample_pixel(i, j, scene, camera, rng, self.settings))
            for i in range(self.settings.width)
        ]

    def to_image(self, buffer: np.ndarray):
        """Wrap a frame buffer in a Pillow RGB image."""
        from PIL import Image as PILImage

        rgb = buffer_to_rgb(buffer, self.settings.width, self.settings.height)
        return PILImage.fromarray(rgb)

    def save_image(self, buffer: np.ndarray, filename: str) -> None:
        """Save a frame buffer to file.

        Args:
            buffer: Packed frame buffer from render()
            filename: Output filename (extension determines format)
        """
        self.to_image(buffer).save(filename)
        logger.info("Saved %s", filename)

    def show(self, buffer: np.ndarray) -> None:
        """Hand a frame buffer to the platform image viewer."""
        self.to_image(buffer).show(title="spherecast")
