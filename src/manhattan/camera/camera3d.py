from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from manhattan.math_utils import cross, normalize_batch

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule


@dataclass(frozen=True, slots=True)
class Camera3D:
    """Pinhole camera mapping normalized screen coordinates to rays.

    Screen coordinates (u, v) lie in [-1, 1]; u is stretched by ``aspect``
    and the image plane sits ``focal`` units in front of the eye.
    """

    position: Any
    target: Any
    up: Any
    aspect: float = 1.33
    focal: float = 2.5

    def basis(self, xp: ArrayModule) -> tuple[Any, Any, Any]:
        ww = normalize_batch(xp, xp.asarray(self.target, dtype=xp.float64) - self.position)
        up_hint = xp.asarray(self.up, dtype=xp.float64)
        uu = normalize_batch(xp, cross(xp, up_hint, ww))
        vv = normalize_batch(xp, cross(xp, ww, uu))
        return ww, uu, vv

    def ray_direction(self, xp: ArrayModule, u: Any, v: Any) -> Any:
        """Normalized direction(s) for screen coordinates u, v (scalars or arrays)."""
        ww, uu, vv = self.basis(xp)
        u = xp.asarray(u, dtype=xp.float64)[..., None] * self.aspect
        v = xp.asarray(v, dtype=xp.float64)[..., None]
        return normalize_batch(xp, u * uu + v * vv + self.focal * ww)

    def ray_directions_grid(self, xp: ArrayModule, width: int, height: int) -> Any:
        """Return rd0 of shape (H, W, 3), normalized, rows top -> bottom.

        Pixel centres follow -1 + 2 * (i + 0.5) / n.
        """
        us = -1.0 + 2.0 * (xp.arange(width, dtype=xp.float64) + 0.5) / width
        vs = 1.0 - 2.0 * (xp.arange(height, dtype=xp.float64) + 0.5) / height
        return self.ray_direction(xp, us[None, :], vs[:, None])

    @classmethod
    def look_at(
            cls,
            position: Any,
            target: Any,
            xp: ArrayModule,
            up: Any = (0.0, 1.0, 0.0),
            aspect: float = 1.33,
            focal: float = 2.5,
    ) -> Camera3D:
        pos = xp.asarray(position, dtype=xp.float64)
        tgt = xp.asarray(target, dtype=xp.float64)
        return cls(position=pos, target=tgt, up=up, aspect=aspect, focal=focal)
