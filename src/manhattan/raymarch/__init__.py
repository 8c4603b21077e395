from manhattan.raymarch.config import (
    ImageMarchResult,
    RayMarchConfig,
    RayMarchResult,
    ShadowConfig,
)
from manhattan.raymarch.marcher import ImageMarcher, RayMarcher
from manhattan.raymarch.shadow import SoftShadow

__all__ = [
    "ImageMarchResult",
    "ImageMarcher",
    "RayMarchConfig",
    "RayMarchResult",
    "RayMarcher",
    "ShadowConfig",
    "SoftShadow",
]
