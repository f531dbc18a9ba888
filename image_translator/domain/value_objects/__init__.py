"""Value objects - immutable data with validation."""

from .geometry import Point, Rect, Bounds, BoundingBox, Quadrilateral
from .config import InpaintStrategy, InpaintMethod, InpaintOptions, TranslateImageOptions

__all__ = [
    'Point',
    'Rect',
    'Bounds',
    'BoundingBox',
    'Quadrilateral',
    'InpaintStrategy',
    'InpaintMethod',
    'InpaintOptions',
    'TranslateImageOptions',
]
