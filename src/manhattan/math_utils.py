from __future__ import annotations

from typing import Any


def normalize_batch(xp: Any, v: Any) -> Any:
    """Normalize vectors along the last axis with division-by-zero guard."""
    n = xp.linalg.norm(v, axis=-1, keepdims=True)
    n = xp.maximum(n, xp.asarray(1e-12, dtype=xp.float64))
    return v / n


def clamp_float(x: float, lo: float, hi: float) -> float:
    """Clamp a Python float to [lo, hi]."""
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def cross(xp: Any, a: Any, b: Any) -> Any:
    """Cross product that works for NumPy/CuPy and array-likes."""
    if hasattr(xp, "cross"):
        return xp.cross(a, b)
    ax, ay, az = a[..., 0], a[..., 1], a[..., 2]
    bx, by, bz = b[..., 0], b[..., 1], b[..., 2]
    return xp.stack([ay * bz - az * by, az * bx - ax * bz, ax * by - ay * bx], axis=-1)


def dot(xp: Any, a: Any, b: Any) -> Any:
    """Dot product along the last axis."""
    return xp.sum(a * b, axis=-1)


def mix(a: Any, b: Any, w: Any) -> Any:
    """Linear interpolation a + (b - a) * w."""
    return a + (b - a) * w


def ease(xp: Any, t: float, value: Any) -> Any:
    """Biased ramp max(0, t + (1 - t) * value).

    Maps value = -1 to 2t - 1 (clipped at zero), value = 0 to t and
    value = 1 to 1, so small sharpness t pushes small inputs toward zero.
    """
    return xp.maximum(0.0, t + (1.0 - t) * value)
