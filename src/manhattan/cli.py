"""Render the Manhattan surface to an image or an animated GIF.

Usage::

    manhattan-render --out manhattan.png
    manhattan-render --time 12.5 --width 320 --height 240
    manhattan-render --frames 48 --fps 12 --out orbit.gif
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import numpy as np

from manhattan.backend import get_array_module, is_cupy, to_numpy
from manhattan.camera.orbit import OrbitPath
from manhattan.fractal import FractalConfig
from manhattan.frame import build_renderer, camera_at, render_frame
from manhattan.shading.renderer import ShadingConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manhattan-render",
        description="Sphere-trace the Manhattan surface (3D quadratic Koch surface).",
    )
    parser.add_argument("--time", "-t", type=float, default=0.0, help="Elapsed time of the first frame")
    parser.add_argument("--width", type=int, default=240, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=180, help="Image height in pixels")
    parser.add_argument("--frames", "-n", type=int, default=1, help="Number of frames; more than one writes an animation")
    parser.add_argument("--fps", type=int, default=12, help="Frames per second of the animation")
    parser.add_argument("--scale", type=float, default=0.7, help="Fractal scale constant")
    parser.add_argument(
        "--occlusion-from-normal",
        action="store_true",
        help="Use the normal's vertical component as occlusion proxy",
    )
    parser.add_argument("--out", "-o", default="manhattan.png", help="Output file (.png for one frame, .gif for many)")
    parser.add_argument("--cuda", action="store_true", help="Use CuPy when available")
    parser.add_argument("--show", action="store_true", help="Open a window with the result")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    # Import late: selects the matplotlib backend on import
    from manhattan.viz.image import FramePlotter, RenderFrame, save_image

    xp = get_array_module(args.cuda)
    if args.cuda and not is_cupy(xp):
        logger.warning("CuPy not available, rendering with NumPy")

    try:
        renderer = build_renderer(
            xp,
            fractal_config=FractalConfig(scale=args.scale),
            shading_config=ShadingConfig(occlusion_from_normal=args.occlusion_from_normal),
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if min(args.width, args.height, args.frames, args.fps) <= 0:
        logger.error("--width, --height, --frames and --fps must be positive")
        return 2

    path = OrbitPath()
    frames: list[RenderFrame] = []
    for i in range(args.frames):
        t = args.time + i / float(args.fps)
        camera = camera_at(xp, path, t)
        logger.info("Rendering frame %d/%d at t=%.2f", i + 1, args.frames, t)
        img = render_frame(renderer, camera, args.width, args.height)
        frames.append(
            RenderFrame(
                img=to_numpy(xp, img),
                time=t,
                cam_pos=np.asarray(to_numpy(xp, camera.position)),
            ),
        )

    plotter = FramePlotter()
    if len(frames) == 1:
        save_image(args.out, frames[0].img)
        plotter.draw(frames[0])
    else:
        ani = plotter.animate(frames, interval_ms=int(1000 / args.fps))
        plotter.save_animation(ani, args.out, fps=args.fps)
    logger.info("Saved %s", args.out)

    if args.show:
        plotter.show()
    plotter.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
