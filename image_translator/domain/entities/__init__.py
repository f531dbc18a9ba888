"""Domain entities."""

from .ocr_item import OCRItem, OCRResult, OCRStyle
from .region import Region
from .result import (
    DebugStats,
    DebugStep,
    OCRSize,
    TranslateImageDebug,
    TranslateImageInput,
    TranslateImageOutput,
)

__all__ = [
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
]
