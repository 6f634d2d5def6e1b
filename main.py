#!/usr/bin/env python3
"""
StochRay - A Python Ray Tracing Renderer

Main entry point for rendering scene files.
"""

import argparse
import sys
from pathlib import Path

from stochray.renderer import Renderer, RenderSettings
from stochray.scene import SceneError
from stochray.scene_parser import SceneParser


def build_settings(args: argparse.Namespace, defaults: RenderSettings) -> RenderSettings:
    """Merge command line overrides onto the scene file's render settings."""
    pixel_width, pixel_height = (
        args.pixel_size if args.pixel_size else (defaults.pixel_width, defaults.pixel_height)
    )
    return RenderSettings(
        num_sections=args.samples if args.samples is not None else defaults.num_sections,
        pixel_width=pixel_width,
        pixel_height=pixel_height,
        jitter=defaults.jitter and not args.no_jitter,
        num_threads=args.threads if args.threads is not None else defaults.num_threads,
        seed=args.seed if args.seed is not None else defaults.seed
    )


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='StochRay - A Python Ray Tracing Renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py scenes/spheres.yaml --output render.png
  python main.py scenes/spheres.yaml --samples 4 --threads 8 --output hq.png
  python main.py scenes/spheres.yaml --samples 1 --no-jitter --output quick.png
        '''
    )

    parser.add_argument('scene', type=str, help='Scene file (.yaml, .yml or .json)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--samples', type=int, default=None,
                        help='Sampler grid divisions per axis (default: 3, i.e. 9 samples/pixel)')
    parser.add_argument('--threads', type=int, default=None, help='Number of worker threads (default: 4)')
    parser.add_argument('--pixel-size', type=float, nargs=2, metavar=('W', 'H'), default=None,
                        help='Jitter extent in pixels (default: 1.0 1.0)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the sample jitter')
    parser.add_argument('--no-jitter', action='store_true', help='Sample exactly at grid cell centers')

    args = parser.parse_args(argv)

    print("=" * 60)
    print("StochRay Ray Tracer")
    print("=" * 60)

    try:
        scene_parser = SceneParser()
        scene = scene_parser.parse_file(args.scene)
        settings = build_settings(args, scene_parser.settings or RenderSettings())
        sample_offsets = settings.make_sampler().sample_offsets()
    except (SceneError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nScene: {args.scene}")
    print(f"  Resolution: {scene.viewport.width}x{scene.viewport.height}")
    print(f"  Objects: {len(scene)}")
    print(f"  Lights: {len(scene.lights)}")
    print(f"\nRender Settings:")
    print(f"  Samples: {settings.num_sections}x{settings.num_sections}")
    print(f"  Pixel size: {settings.pixel_width}x{settings.pixel_height}")
    print(f"  Threads: {settings.num_threads}")

    renderer = Renderer(settings)

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
    result = renderer.render(scene, sample_offsets)
    print(f"\n{result.message}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    result.framebuffer.save(args.output)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
