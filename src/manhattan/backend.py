from __future__ import annotations

from typing import Any

import numpy as np

try:
    import cupy as cp  # type: ignore
except ImportError:  # pragma: no cover
    cp = None

ArrayModule = Any


def get_array_module(use_cuda: bool) -> ArrayModule:
    """Return numpy or cupy depending on availability and request."""
    if use_cuda and cp is not None:
        return cp
    return np


def is_cupy(xp: ArrayModule) -> bool:
    """Return True if xp is the CuPy module."""
    return cp is not None and xp is cp


def to_numpy(xp: ArrayModule, a: Any) -> np.ndarray:
    """Convert an xp array to NumPy for plotting and image output."""
    if is_cupy(xp):
        return cp.asnumpy(a)  # type: ignore[union-attr]
    return np.asarray(a)


def as_points(xp: ArrayModule, p: Any) -> Any:
    """Return *p* as a float64 xp array of shape (..., 3)."""
    arr = xp.asarray(p, dtype=xp.float64)
    if arr.shape[-1:] != (3,):
        msg = f"expected points of shape (..., 3), got {tuple(arr.shape)}"
        raise ValueError(msg)
    return arr
