#!/usr/bin/env python3
"""Render one of the preset scenes to a PNG file.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene NAME        Preset scene (default: spheres)
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 600)
    --samples SAMPLES   Number of samples per pixel (default: 100)
    --depth DEPTH       Maximum path depth (default: 25)
    --output OUTPUT     Output file path (default: <scene>.png)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --scene glass_prism --samples 1000
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser.

    Scene names are checked after Taichi is initialized, see check_scene_name.
    """
    parser = argparse.ArgumentParser(
        description="Render a preset scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="spheres",
        help="Preset scene (default: spheres)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Image height in pixels (default: 600)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=25,
        help="Maximum path depth (default: 25)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path (default: <scene>.png)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def check_scene_name(parser: argparse.ArgumentParser, scene_name: str) -> None:
    """Exit with a usage error unless scene_name is a registered preset."""
    from pathtracer.scene.presets import PRESETS

    if scene_name not in PRESETS:
        parser.error(
            f"unknown scene {scene_name!r} (choose from {', '.join(sorted(PRESETS))})"
        )


def render_scene(
    scene_name: str = "spheres",
    width: int = 800,
    height: int = 600,
    num_samples: int = 100,
    max_depth: int = 25,
    output_path: str | None = None,
    quiet: bool = False,
) -> Path:
    """Build a preset scene, render it and save it as a PNG.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from pathtracer.core.render import RenderSettings, render
    from pathtracer.output.export import save_png
    from pathtracer.scene.presets import PRESETS, default_camera

    if not quiet:
        print(f"Building '{scene_name}' scene ({width}x{height})...")
    scene = PRESETS[scene_name]()
    camera = default_camera(width, height)

    settings = RenderSettings(max_depth=max_depth, num_samples=num_samples)
    if not quiet:
        print(f"Rendering {num_samples} samples per pixel, max depth {max_depth}...")

    start_time = time.time()
    image = render(scene, camera, settings=settings)

    output_file = Path(output_path or f"{scene_name}.png")
    save_png(image, output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")
    return output_file


def main() -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        # Taichi falls back to the CPU when no GPU backend is available
        ti.init(arch=ti.gpu)
    if not args.quiet:
        print(f"Using {ti.lang.impl.current_cfg().arch} backend")
    check_scene_name(parser, args.scene)

    try:
        render_scene(
            scene_name=args.scene,
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            max_depth=args.depth,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
