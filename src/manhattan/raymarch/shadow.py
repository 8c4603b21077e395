from __future__ import annotations

from typing import TYPE_CHECKING, Any

from manhattan.math_utils import clamp_float, ease
from manhattan.raymarch.config import ShadowConfig

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule
    from manhattan.protocols import SDF


class SoftShadow:
    """Penumbra estimate from a fixed-length march toward the light.

    At each sample the ratio k * h / t measures how narrowly the shadow ray
    misses an occluder; its running minimum becomes the light factor. The
    march never stops early, so every call costs exactly ``steps`` samples.
    """

    def __init__(self, xp: ArrayModule, surface: SDF, config: ShadowConfig | None = None) -> None:
        self.xp = xp
        self.surface = surface
        self.config = config if config is not None else ShadowConfig()

    def estimate(self, ro: Any, rd: Any, k: float) -> float:
        """Light factor in [floor, 1] for one shadow ray."""
        xp = self.xp
        cfg = self.config
        ro = xp.asarray(ro, dtype=xp.float64)
        rd = xp.asarray(rd, dtype=xp.float64)

        res = 1.0
        t = cfg.mint
        for _ in range(cfg.steps):
            h = float(self.surface.sdf(ro + rd * t))
            res = min(res, k * h / t)
            t += clamp_float(h, cfg.min_step, cfg.max_step)

        res = clamp_float(res, 0.0, 1.0)
        return max(0.0, cfg.floor + (1.0 - cfg.floor) * res)

    def estimate_batch(self, ro: Any, rd: Any, k: float) -> Any:
        """Vectorised :meth:`estimate`.

        ro: (..., 3) surface points
        rd: (3,) or (..., 3) directions toward the light
        returns: (...)
        """
        xp = self.xp
        cfg = self.config
        ro = xp.asarray(ro, dtype=xp.float64)
        rd = xp.asarray(rd, dtype=xp.float64)

        res = xp.ones(ro.shape[:-1], dtype=xp.float64)
        t = xp.full(ro.shape[:-1], cfg.mint, dtype=xp.float64)
        for _ in range(cfg.steps):
            h = self.surface.sdf(ro + rd * t[..., None])
            res = xp.minimum(res, k * h / t)
            t = t + xp.clip(h, cfg.min_step, cfg.max_step)

        res = xp.clip(res, 0.0, 1.0)
        return ease(xp, cfg.floor, res)
