from __future__ import annotations

import logging
import time as _time
from typing import TYPE_CHECKING, Any

from manhattan.camera.camera3d import Camera3D
from manhattan.fractal import FractalConfig, ManhattanSDF
from manhattan.scene import Scene, SceneBounds
from manhattan.shading.renderer import Renderer, ShadingConfig

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule
    from manhattan.camera.orbit import OrbitPath

logger = logging.getLogger(__name__)


def camera_at(xp: ArrayModule, path: OrbitPath, t: float) -> Camera3D:
    """Camera on *path* at time *t*, looking at the origin."""
    return Camera3D.look_at(position=path.position(t), target=(0.0, 0.0, 0.0), xp=xp)


def render_frame(renderer: Renderer, camera: Camera3D, width: int, height: int) -> Any:
    """Render one RGBA frame of shape (H, W, 4) with alpha fixed at 1."""
    if width <= 0 or height <= 0:
        msg = f"frame size must be positive, got {width}x{height}"
        raise ValueError(msg)

    xp = renderer.xp
    started = _time.perf_counter()

    rd0 = camera.ray_directions_grid(xp, width=width, height=height)
    rgb = renderer.render_batch(camera.position, rd0)
    alpha = xp.ones((height, width, 1), dtype=rgb.dtype)

    logger.debug("rendered %dx%d frame in %.2fs", width, height, _time.perf_counter() - started)
    return xp.concatenate([rgb, alpha], axis=-1)


def build_renderer(
        xp: ArrayModule,
        fractal_config: FractalConfig | None = None,
        shading_config: ShadingConfig | None = None,
        far_distance: float = 10.0,
) -> Renderer:
    """Wire the Manhattan surface into a scene and a renderer."""
    surface = ManhattanSDF(xp=xp, config=fractal_config if fractal_config is not None else FractalConfig())
    scene = Scene(surface=surface, bounds=SceneBounds(far_distance=far_distance))
    return Renderer(xp=xp, scene=scene, config=shading_config)
