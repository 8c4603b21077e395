from __future__ import annotations

import math
from dataclasses import dataclass

Vec3 = tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class OrbitPath:
    """Camera position as a function of time.

    position(t) = zoom * (offset + amplitude * (sin(fx t), cos(fy t), cos(fz t)))

    Each axis is periodic with period 2 pi / f and stays within
    zoom * amplitude of zoom * offset.
    """

    offset: Vec3 = (0.0, 1.0, 0.0)
    amplitude: Vec3 = (2.5, 1.0, 2.5)
    frequency: Vec3 = (0.25, 0.13, 0.25)
    zoom: float = 1.1

    def __post_init__(self) -> None:
        if any(f <= 0.0 for f in self.frequency):
            msg = f"frequencies must be positive, got {self.frequency}"
            raise ValueError(msg)

    def position(self, t: float) -> Vec3:
        ox, oy, oz = self.offset
        ax, ay, az = self.amplitude
        fx, fy, fz = self.frequency
        return (
            self.zoom * (ox + ax * math.sin(fx * t)),
            self.zoom * (oy + ay * math.cos(fy * t)),
            self.zoom * (oz + az * math.cos(fz * t)),
        )

    def period(self, axis: int) -> float:
        return 2.0 * math.pi / self.frequency[axis]
