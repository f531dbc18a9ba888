"""Domain layer - pure business logic, no raster or I/O dependencies."""

from .entities.ocr_item import OCRItem, OCRResult, OCRStyle
from .entities.region import Region
from .entities.result import (
    DebugStats,
    DebugStep,
    OCRSize,
    TranslateImageDebug,
    TranslateImageInput,
    TranslateImageOutput,
)
from .value_objects.config import (
    InpaintMethod,
    InpaintOptions,
    InpaintStrategy,
    TranslateImageOptions,
)
from .value_objects.geometry import BoundingBox, Bounds, Point, Quadrilateral, Rect

__all__ = [
    # Entities
    'OCRItem',
    'OCRResult',
    'OCRStyle',
    'Region',
    'OCRSize',
    'DebugStep',
    'DebugStats',
    'TranslateImageDebug',
    'TranslateImageInput',
    'TranslateImageOutput',
    # Value Objects
    'InpaintMethod',
    'InpaintOptions',
    'InpaintStrategy',
    'TranslateImageOptions',
    'Point',
    'Rect',
    'Bounds',
    'BoundingBox',
    'Quadrilateral',
]
