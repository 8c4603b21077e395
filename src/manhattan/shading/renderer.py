from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from manhattan.backend import as_points
from manhattan.fractal import colorize, colorize_batch
from manhattan.math_utils import dot, ease, mix
from manhattan.raymarch.config import RayMarchConfig, ShadowConfig
from manhattan.raymarch.marcher import ImageMarcher, RayMarcher
from manhattan.raymarch.shadow import SoftShadow
from manhattan.shading.normals import calc_normal
from manhattan.shading.palette import cosine_palette

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule
    from manhattan.scene import Scene

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class ShadingConfig:
    """Lighting constants.

    Fields:
      light:
        Direction toward the key light; normalized on use.
      shadow_k:
        Penumbra sharpness passed to the soft shadow estimate.
      gamma:
        Exponent of the final per-channel encode.
      normal_eps:
        Central difference offset of the normal estimate.
      occlusion_from_normal:
        When set, the occlusion proxy is the normal's vertical component
        instead of the value carried by the trace sample. The default keeps
        the sample value, which :func:`colorize` always sets to zero, so sky
        fill and ambient terms vanish and only key and bounce light remain.
    """

    light: Color = (1.0, 0.9, 0.3)
    shadow_k: float = 64.0
    gamma: float = 0.4545
    normal_eps: float = 1e-3
    occlusion_from_normal: bool = False
    ground: Color = (0.15, 0.1, 0.05)
    sky: Color = (0.7, 0.9, 1.0)
    key_color: Color = (1.1, 0.85, 0.6)
    fill_color: Color = (0.1, 0.2, 0.4)
    bounce_color: Color = (1.0, 1.0, 1.0)
    ambient_color: Color = (0.15, 0.17, 0.2)

    def __post_init__(self) -> None:
        if math.hypot(*self.light) == 0.0:
            msg = "light direction must be non-zero"
            raise ValueError(msg)
        if not self.normal_eps > 0.0:
            msg = f"normal_eps must be positive, got {self.normal_eps}"
            raise ValueError(msg)

    @property
    def light_dir(self) -> Color:
        n = math.hypot(*self.light)
        return self.light[0] / n, self.light[1] / n, self.light[2] / n


class Renderer:
    """Turn camera rays into gamma-encoded RGB.

    Holds the scene and all lighting constants; every render call is a pure
    function of its rays.
    """

    def __init__(
            self,
            xp: ArrayModule,
            scene: Scene,
            config: ShadingConfig | None = None,
            march_config: RayMarchConfig | None = None,
            shadow_config: ShadowConfig | None = None,
    ) -> None:
        self.xp = xp
        self.scene = scene
        self.config = config if config is not None else ShadingConfig()
        march_config = march_config if march_config is not None else RayMarchConfig()

        self.ray_marcher = RayMarcher(xp=xp, config=march_config, scene=scene)
        self.image_marcher = ImageMarcher(xp=xp, config=march_config, scene=scene)
        self.shadow = SoftShadow(xp=xp, surface=scene.surface, config=shadow_config)
        self.light = xp.asarray(self.config.light_dir, dtype=xp.float64)

    def background(self, rd: Any) -> Any:
        """Vertical gradient from ground to sky, (..., 3) linear RGB."""
        xp = self.xp
        cfg = self.config
        w = xp.asarray(ease(xp, 0.5, rd[..., 1]))[..., None]
        return mix(xp.asarray(cfg.ground), xp.asarray(cfg.sky), w)

    def _shade(self, pos: Any, nor: Any, occlusion: Any, material: Any, shadow: Any) -> Any:
        xp = self.xp
        cfg = self.config

        if cfg.occlusion_from_normal:
            occlusion = nor[..., 1]
        incident = dot(xp, nor, self.light)

        def term(weight: Any, color: Color) -> Any:
            return xp.asarray(weight)[..., None] * xp.asarray(color, dtype=xp.float64)

        lin = term(1.00 * ease(xp, 0.1, incident) * shadow, cfg.key_color)
        lin = lin + term(0.50 * ease(xp, 0.5, nor[..., 1]) * occlusion, cfg.fill_color)
        lin = lin + term(0.50 * ease(xp, 0.4, -incident) * ease(xp, 0.5, occlusion), cfg.bounce_color)
        lin = lin + term(0.25 * xp.asarray(occlusion, dtype=xp.float64), cfg.ambient_color)

        return cosine_palette(xp, material) * lin

    def encode(self, color: Any) -> Any:
        return self.xp.power(self.xp.maximum(color, 0.0), self.config.gamma)

    def render(self, ro: Any, rd: Any) -> Any:
        """Colour of a single ray, shape (3,)."""
        xp = self.xp
        cfg = self.config
        ro = as_points(xp, ro)
        rd = as_points(xp, rd)

        color = self.background(rd)
        sample = colorize(self.ray_marcher.intersect(ro, rd))
        if sample.hit:
            pos = ro + rd * sample.distance
            nor = calc_normal(xp, self.scene.surface, pos, cfg.normal_eps)
            shadow = xp.asarray(self.shadow.estimate(pos, self.light, cfg.shadow_k))
            color = self._shade(
                pos,
                nor,
                xp.asarray(sample.occlusion),
                xp.asarray(sample.material),
                shadow,
            )
        return self.encode(color)

    def render_batch(self, ro: Any, rd: Any) -> Any:
        """Colours of many rays sharing one origin.

        ro: (3,)
        rd: (..., 3) normalized
        returns: (..., 3)
        """
        xp = self.xp
        cfg = self.config
        ro = as_points(xp, ro)
        rd = as_points(xp, rd)

        # non-finite rays miss and shade as the horizon colour
        finite = xp.all(xp.isfinite(rd), axis=-1, keepdims=True)
        color = self.background(xp.where(finite, rd, 0.0))
        res = self.image_marcher.march(ro, rd)
        tmat = colorize_batch(xp, res.t)
        hit = tmat[..., 0] > 0.0

        if bool(xp.any(hit)):
            th = tmat[hit]
            pos = ro + rd[hit] * th[:, 0:1]
            nor = calc_normal(xp, self.scene.surface, pos, cfg.normal_eps)
            shadow = self.shadow.estimate_batch(pos, self.light, cfg.shadow_k)
            color[hit] = self._shade(pos, nor, th[:, 1], th[:, 2], shadow)

        logger.debug("shaded %d of %d rays", int(xp.sum(hit)), int(hit.size))
        return self.encode(color)
