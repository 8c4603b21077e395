from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from manhattan.backend import as_points
from manhattan.fractal import MISS
from manhattan.protocols import RayTracer
from manhattan.raymarch.config import ImageMarchResult, RayMarchConfig, RayMarchResult

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule
    from manhattan.scene import Scene

logger = logging.getLogger(__name__)


def _stack(xp: ArrayModule, points: list[Any]) -> Any:
    if not points:
        return xp.empty((0, 3), dtype=xp.float64)
    return xp.stack(points)


class RayMarcher(RayTracer):
    """Sphere tracer for a single ray.

    Advances by the sampled distance, which is safe as long as the surface
    distance estimate never exceeds the true distance.
    """

    def __init__(self, xp: ArrayModule, config: RayMarchConfig, scene: Scene) -> None:
        """Initialise the marcher."""
        self.xp = xp
        self.cfg = config
        self.scene = scene

    def _check_ray(self, origin: Any, direction: Any) -> tuple[Any, Any]:
        xp = self.xp
        ro = as_points(xp, origin)
        rd = as_points(xp, direction)
        if ro.shape != (3,) or rd.shape != (3,):
            msg = "RayMarcher traces one ray at a time; use ImageMarcher for batches"
            raise ValueError(msg)
        if not (bool(xp.all(xp.isfinite(ro))) and bool(xp.all(xp.isfinite(rd)))):
            msg = f"non-finite ray: origin={ro}, direction={rd}"
            raise ValueError(msg)
        return ro, rd

    def trace(self, origin: Any, direction: Any, *, keep_points: bool = True) -> RayMarchResult:
        """Trace a ray, optionally keeping the visited sample points."""
        xp = self.xp
        ro, rd = self._check_ray(origin, direction)
        sdf = self.scene.surface.sdf
        far = self.scene.bounds.far_distance

        points: list[Any] = []
        t = 0.0
        for step in range(self.cfg.max_steps):
            if t >= far:
                return RayMarchResult(
                    hit=False,
                    t=MISS,
                    steps=step,
                    termination="far",
                    points=_stack(xp, points),
                )

            p = ro + rd * t
            if keep_points:
                points.append(p)
            h = float(sdf(p))
            if h < self.cfg.eps:
                return RayMarchResult(
                    hit=True,
                    t=t,
                    steps=step + 1,
                    termination="hit",
                    points=_stack(xp, points),
                )
            t += h

        return RayMarchResult(
            hit=False,
            t=MISS,
            steps=self.cfg.max_steps,
            termination="max_steps",
            points=_stack(xp, points),
        )

    def intersect(self, origin: Any, direction: Any) -> float:
        """Return the hit distance along the ray, or ``MISS``."""
        return self.trace(origin, direction, keep_points=False).t


class ImageMarcher:
    """Vectorised sphere tracer for many directions sharing one origin."""

    def __init__(self, xp: ArrayModule, config: RayMarchConfig, scene: Scene) -> None:
        """Initialise the marcher."""
        self.xp = xp
        self.config = config
        self.scene = scene

    def march(self, ro: Any, rd0: Any) -> ImageMarchResult:
        """March.

        ro: (3,)
        rd0: (..., 3) normalized
        """
        xp = self.xp
        cfg = self.config
        far = float(self.scene.bounds.far_distance)

        ro = as_points(xp, ro)
        rd = as_points(xp, rd0)
        batch_shape = rd.shape[:-1]

        finite = xp.all(xp.isfinite(rd), axis=-1) & bool(xp.all(xp.isfinite(ro)))
        n_bad = int(xp.sum(~finite))
        if n_bad:
            logger.warning("%d non-finite rays reported as misses", n_bad)
        rd = xp.where(finite[..., None], rd, 0.0)

        t = xp.zeros(batch_shape, dtype=xp.float64)
        hit = xp.zeros(batch_shape, dtype=bool)
        done = ~finite

        steps = 0
        for steps in range(1, int(cfg.max_steps) + 1):  # noqa: B007
            done = done | (t >= far)
            active = ~done
            if not bool(xp.any(active)):
                steps -= 1
                break

            h = self.scene.surface.sdf(ro + rd * t[..., None])
            landed = active & (h < float(cfg.eps))
            hit = hit | landed
            done = done | landed

            t = t + xp.where(done, 0.0, h)

        t = xp.where(hit, t, MISS)
        logger.debug(
            "marched %d rays in %d steps, %d hits",
            int(hit.size),
            steps,
            int(xp.sum(hit)),
        )
        return ImageMarchResult(hit=hit, t=t, steps=steps)
