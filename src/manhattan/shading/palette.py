from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule

PALETTE_PHASE = (0.0, 1.0, 2.0)


def cosine_palette(xp: ArrayModule, material: Any) -> Any:
    """RGB colour 0.5 + 0.5 * cos(phase + 2 * material).

    material: scalar or (...)
    returns: (3,) or (..., 3)
    """
    m = xp.asarray(material, dtype=xp.float64)
    phase = xp.asarray(PALETTE_PHASE, dtype=xp.float64)
    return 0.5 + 0.5 * xp.cos(phase + 2.0 * m[..., None])
