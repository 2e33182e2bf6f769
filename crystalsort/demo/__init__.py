from .pixels import DemoConfig, pixel_relations, random_pixels
from .runner import PixelSortRunner

__all__ = [
    "DemoConfig",
    "PixelSortRunner",
    "pixel_relations",
    "random_pixels",
]
