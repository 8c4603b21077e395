from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from manhattan.geometry import fold_abs, rect, sort_axes, tessellate

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule

MISS: float = -1.0
MATERIAL_ID: float = 0.25

# Cubie layout at unit scale, inside the fundamental domain (x <= y <= z).
_OUTER = ((0.0, 0.0, 0.0), 1.0)
_CAP = ((0.0, 0.0, 4.0 / 3.0), 1.0 / 3.0)
_NOTCH_TILE = (2.0 / 3.0, 2.0 / 3.0, 0.0)
_NOTCH = ((0.0, 0.0, 10.0 / 9.0), 1.0 / 9.0)
_NOTCH_SLAB = ((0.0, 0.0, 0.0), (1.0, 1.0, 2.0))
_EDGE_CUBIE = ((0.0, 4.0 / 9.0, 4.0 / 3.0), 1.0 / 9.0)
_TOP_CUBIE = ((0.0, 0.0, 16.0 / 9.0), 1.0 / 9.0)


@dataclass(frozen=True, slots=True)
class FractalConfig:
    """Self-similarity constant of the surface.

    The field is evaluated at unit size in the fundamental domain and rescaled
    by ``scale`` on the way in (divide) and out (multiply).
    """

    scale: float = 0.7

    def __post_init__(self) -> None:
        if not self.scale > 0.0:
            msg = f"scale must be positive, got {self.scale}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ManhattanSDF:
    """Distance estimate for the Manhattan surface (3D quadratic Koch surface).

    Every combination is a minimum of box distances except one intersection
    with a bounding slab, so the result never overestimates the distance to
    the surface. Distances are unsigned: points inside the solid map to zero.
    """

    xp: ArrayModule
    config: FractalConfig = FractalConfig()

    def sdf(self, p: Any) -> Any:
        xp = self.xp
        scale = self.config.scale

        q = sort_axes(xp, fold_abs(xp, p, scale))

        r = rect(xp, q, *_OUTER)
        r = xp.minimum(r, rect(xp, q, *_CAP))

        # notches stamped on a 3x3 grid over each face, clipped to the face slab
        t = tessellate(xp, q, _NOTCH_TILE)
        s = xp.maximum(rect(xp, t, *_NOTCH), rect(xp, q, *_NOTCH_SLAB))
        r = xp.minimum(r, s)

        r = xp.minimum(r, rect(xp, q, *_EDGE_CUBIE))
        r = xp.minimum(r, rect(xp, q, *_TOP_CUBIE))
        return scale * r

    def __call__(self, p: Any) -> Any:
        return self.sdf(p)


@dataclass(frozen=True, slots=True)
class DistanceSample:
    """Structured trace result consumed by the shader.

    Attributes
    ----------
    distance:
        Hit distance along the ray, or ``MISS``.
    occlusion:
        Occlusion proxy. Always zero for hits produced by :func:`colorize`.
    material:
        Palette phase of the hit material.
    miss_flag:
        One for misses, zero for hits.

    """

    distance: float
    occlusion: float
    material: float
    miss_flag: float

    @property
    def hit(self) -> bool:
        return self.distance > 0.0

    def as_tuple(self) -> tuple[float, float, float, float]:
        return self.distance, self.occlusion, self.material, self.miss_flag


def colorize(t: float) -> DistanceSample:
    """Pack a raw intersection distance into a DistanceSample."""
    if t == MISS:
        return DistanceSample(MISS, MISS, MISS, 1.0)
    return DistanceSample(abs(t), 0.0, MATERIAL_ID, 0.0)


def colorize_batch(xp: ArrayModule, t: Any) -> Any:
    """Vectorised :func:`colorize`; returns shape (..., 4)."""
    t = xp.asarray(t, dtype=xp.float64)
    miss = t == MISS
    zeros = xp.zeros_like(t)
    out = xp.stack(
        [
            xp.where(miss, MISS, xp.abs(t)),
            xp.where(miss, MISS, zeros),
            xp.where(miss, MISS, MATERIAL_ID),
            xp.where(miss, 1.0, zeros),
        ],
        axis=-1,
    )
    return out
