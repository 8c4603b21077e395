from __future__ import annotations

from typing import TYPE_CHECKING, Any

from manhattan.math_utils import normalize_batch

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule
    from manhattan.protocols import SDF


def calc_normal(xp: ArrayModule, surface: SDF, pos: Any, eps: float = 1e-3) -> Any:
    """Unit gradient of the distance field by central differences.

    pos: (3,) or (..., 3)
    returns: same shape as pos
    """
    pos = xp.asarray(pos, dtype=xp.float64)
    offsets = xp.eye(3, dtype=xp.float64) * eps
    grad = xp.stack(
        [surface.sdf(pos + offsets[i]) - surface.sdf(pos - offsets[i]) for i in range(3)],
        axis=-1,
    )
    return normalize_batch(xp, grad)
