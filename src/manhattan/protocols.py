from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from manhattan.raymarch.config import RayMarchResult


class SDF(Protocol):
    """Distance estimate contract.

    Implementations return a lower bound on the distance to their surface so
    that sphere tracing never steps over it.
    """

    def sdf(self, p: Any) -> Any:
        """Distance to surface at points p of shape (..., 3)."""
        ...


class RayTracer(Protocol):
    """Single-ray tracer interface producing a RayMarchResult."""

    def trace(self, origin: Any, direction: Any) -> RayMarchResult:
        ...
