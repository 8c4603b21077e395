from __future__ import annotations

from dataclasses import dataclass

from manhattan.protocols import SDF


@dataclass(frozen=True, slots=True)
class SceneBounds:
    """Global scene limits."""

    far_distance: float = 10.0

    def __post_init__(self) -> None:
        if not self.far_distance > 0.0:
            msg = f"far_distance must be positive, got {self.far_distance}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Scene:
    """Complete scene definition."""

    surface: SDF
    bounds: SceneBounds = SceneBounds()
