"""Box primitives and domain folding used by the fractal distance field.

Every function takes the array module ``xp`` first and works on point
arrays of shape ``(..., 3)``; scalar results have shape ``(...)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from manhattan.backend import ArrayModule


def rect(xp: ArrayModule, p: Any, center: Sequence[float], radius: Sequence[float] | float) -> Any:
    """Unsigned distance from p to an axis-aligned box.

    The box is centred at *center* with half-extents *radius*. Points inside
    the box map to zero, so the result is a distance to the solid rather than
    to its boundary.
    """
    c = xp.asarray(center, dtype=xp.float64)
    r = xp.asarray(radius, dtype=xp.float64)
    q = xp.maximum(xp.abs(p - c) - r, 0.0)
    return xp.linalg.norm(q, axis=-1)


def fold_abs(xp: ArrayModule, p: Any, scale: float = 1.0) -> Any:
    """Mirror p into the positive octant and divide by *scale*."""
    return xp.abs(p) / scale


def sort_axes(xp: ArrayModule, p: Any) -> Any:
    """Reorder coordinates ascending: (min, mid, max).

    Combined with :func:`fold_abs` this maps any point to its representative in
    the fundamental domain of the 48-element cube symmetry group.
    """
    x, y, z = p[..., 0], p[..., 1], p[..., 2]
    lo = xp.minimum(xp.minimum(x, y), z)
    hi = xp.maximum(xp.maximum(x, y), z)
    return xp.stack([lo, x + y + z - lo - hi, hi], axis=-1)


def tessellate(xp: ArrayModule, p: Any, tile: Sequence[float]) -> Any:
    """Repeat space with period tile[i] along each axis.

    Each repeated cell is centred on the origin. A zero period leaves that
    axis untouched.
    """
    comps = []
    for axis, period in enumerate(tile):
        c = p[..., axis]
        period = float(period)
        if period > 0.0:
            c = xp.mod(c - 0.5 * period, period) - 0.5 * period
        comps.append(c)
    return xp.stack(comps, axis=-1)
