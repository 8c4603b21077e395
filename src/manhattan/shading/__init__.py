from manhattan.shading.normals import calc_normal
from manhattan.shading.palette import cosine_palette
from manhattan.shading.renderer import Renderer, ShadingConfig

__all__ = [
    "Renderer",
    "ShadingConfig",
    "calc_normal",
    "cosine_palette",
]
