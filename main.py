#!/usr/bin/env python3
"""
SoloTracer - A Python Ray Caster

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from solotracer.camera import Camera
from solotracer.renderer import Renderer, RenderSettings
from solotracer.image_io import downscale, save_image
from solotracer.scene_parser import SceneParseError, load_scene
from solotracer.scenes import BUILTIN_SCENES


def progress_bar():
    """Build a progress callback that redraws a text bar."""
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    return progress_callback


def render_to_file(scene, camera, light, settings: RenderSettings, output: str) -> None:
    """Render, downscale to the output size and save."""
    renderer = Renderer(settings)
    renderer.set_progress_callback(progress_bar())

    print(f"  Objects in scene: {len(scene)}")
    start_time = time.time()
    image = renderer.render(scene, camera, light)
    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")

    pixels = [tuple(int(c) for c in p) for p in image.reshape(-1, 3)]
    pixels = downscale(pixels, settings.width, settings.height,
                       settings.output_width, settings.output_height)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    print(f"Saving to: {output}")
    save_image(output_path, settings.output_width, settings.output_height, pixels, settings.max_value)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='SoloTracer - A Python Ray Caster',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene allobject --output allobject.ppm
  python main.py --scene othercam --width 400 --height 300 --output othercam.png
  python main.py --scene-file scenes/custom.json --output custom.ppm
  python main.py --all --output output/
        '''
    )

    parser.add_argument('--scene', type=str, default='allobject', choices=sorted(BUILTIN_SCENES),
                        help='Built-in scene to render (default: allobject)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='JSON/YAML scene description (overrides --scene)')
    parser.add_argument('--all', action='store_true',
                        help='Render every built-in scene into the --output directory')
    parser.add_argument('--width', type=int, default=None, help='Render width (default: 1600)')
    parser.add_argument('--height', type=int, default=None, help='Render height (default: 1200)')
    parser.add_argument('--output-width', type=int, default=None, help='Saved image width (default: 800)')
    parser.add_argument('--output-height', type=int, default=None, help='Saved image height (default: 600)')
    parser.add_argument('--max-depth', type=int, default=None, help='Max reflection bounces (default: 8)')
    parser.add_argument('--max-value', type=int, default=None, help='PPM max channel value')
    parser.add_argument('--output', type=str, default='output/render.ppm',
                        help='Output filename, or directory with --all')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    def settings_from(base: RenderSettings) -> RenderSettings:
        return RenderSettings(
            width=base.width if args.width is None else args.width,
            height=base.height if args.height is None else args.height,
            output_width=base.output_width if args.output_width is None else args.output_width,
            output_height=base.output_height if args.output_height is None else args.output_height,
            max_depth=base.max_depth if args.max_depth is None else args.max_depth,
            max_value=base.max_value if args.max_value is None else args.max_value
        )

    print("=" * 60)
    print("SoloTracer Ray Caster")
    print("=" * 60)

    try:
        if args.scene_file:
            print(f"\nLoading scene: {args.scene_file}")
            scene, camera, base_settings, light = load_scene(args.scene_file)
            settings = settings_from(base_settings)
            camera = Camera(camera.position, camera.angles, settings.width, settings.height)
            jobs = [(scene, camera, light, settings, args.output)]
        else:
            names = sorted(BUILTIN_SCENES) if args.all else [args.scene]
            jobs = []
            for name in names:
                builtin = BUILTIN_SCENES[name]
                settings = settings_from(RenderSettings(max_value=builtin.max_value))
                camera = Camera.from_degrees(builtin.camera_position, builtin.rotation_degrees,
                                             settings.width, settings.height)
                output = str(Path(args.output) / f"{name}.ppm") if args.all else args.output
                jobs.append((builtin.build(), camera, builtin.light, settings, output))
    except (SceneParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for scene, camera, light, settings, output in jobs:
        print(f"\nRender Settings:")
        print(f"  Resolution: {settings.width}x{settings.height} -> "
              f"{settings.output_width}x{settings.output_height}")
        print(f"  Max Depth: {settings.max_depth}")
        render_to_file(scene, camera, light, settings, output)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
