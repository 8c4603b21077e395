from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


@dataclass(frozen=True, slots=True)
class RayMarchConfig:
    max_steps: int = 1000
    eps: float = 0.01

    def __post_init__(self) -> None:
        if self.max_steps <= 0:
            msg = f"max_steps must be positive, got {self.max_steps}"
            raise ValueError(msg)
        if not self.eps > 0.0:
            msg = f"eps must be positive, got {self.eps}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ShadowConfig:
    """Soft shadow march parameters.

    Fields:
      steps:
        Number of samples; all of them are always taken.
      mint:
        Start offset along the shadow ray, keeps the first sample off the surface.
      min_step, max_step:
        Clamp applied to each sampled distance before advancing.
      floor:
        Sharpness of the final ease; fully occluded points keep this much light.
    """

    steps: int = 32
    mint: float = 0.01
    min_step: float = 0.005
    max_step: float = 0.1
    floor: float = 0.1

    def __post_init__(self) -> None:
        if self.steps <= 0:
            msg = f"steps must be positive, got {self.steps}"
            raise ValueError(msg)
        if not self.mint > 0.0:
            msg = f"mint must be positive, got {self.mint}"
            raise ValueError(msg)
        if not 0.0 < self.min_step <= self.max_step:
            msg = f"expected 0 < min_step <= max_step, got {self.min_step}, {self.max_step}"
            raise ValueError(msg)
        if not 0.0 <= self.floor <= 1.0:
            msg = f"floor must lie in [0, 1], got {self.floor}"
            raise ValueError(msg)


Termination = Literal["hit", "far", "max_steps"]


@dataclass(frozen=True, slots=True)
class RayMarchResult:
    hit: bool
    t: float
    steps: int
    termination: Termination
    points: Any


@dataclass(frozen=True, slots=True)
class ImageMarchResult:
    hit: Any
    t: Any
    steps: int
