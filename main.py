#!/usr/bin/env python3
"""
spherecast - A Python Monte Carlo Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from spherecast.vec3 import Color, Point3
from spherecast.camera import Camera
from spherecast.materials import Lambertian
from spherecast.scene import Scene, create_default_scene
from spherecast.shapes import Sphere
from spherecast.renderer import Renderer, RenderSettings


def create_single_sphere_scene() -> Scene:
    """Create a scene with one matte sphere in front of the camera."""
    return Scene([Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.8, 0.3, 0.3)))])


SCENES = {
    'demo': create_default_scene,
    'single': create_single_sphere_scene,
    'empty': Scene,
}


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='spherecast - A Python Monte Carlo Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output render.png
  python main.py --width 400 --height 200 --samples 20 --seed 7 --output preview.png
  python main.py --scene single --show
        '''
    )

    parser.add_argument('--width', type=int, default=1000, help='Image width (default: 1000)')
    parser.add_argument('--height', type=int, default=500, help='Image height (default: 500)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for a reproducible image')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--show', action='store_true', help='Open the result in the image viewer')
    parser.add_argument('--scene', type=str, default='demo', choices=sorted(SCENES),
                        help='Scene to render (default: demo)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log per-row progress')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            num_threads=args.threads,
            seed=args.seed
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    # Print header
    print("=" * 60)
    print("spherecast Ray Tracer")
    print("=" * 60)
    print(f"CPU Cores: {os.cpu_count()}")

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")

    print(f"\nCreating scene: {args.scene}")
    world = SCENES[args.scene]()
    camera = Camera(aspect_ratio=settings.width / settings.height)
    print(f"  Objects in scene: {len(world)}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    buffer = renderer.render(world, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Rays per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    renderer.save_image(buffer, args.output)

    if args.show:
        renderer.show(buffer)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
