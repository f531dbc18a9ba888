"""OCR Engine port - interface for text recognizers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...core.canvas import ImageArray
from ...domain.entities.ocr_item import OCRResult


@runtime_checkable
class OCREngine(Protocol):
    """Port for OCR engines.
    
    Implementations: stored JSON results, Tesseract, PaddleOCR, etc.
    """
    
    @property
    def id(self) -> str:
        """Engine identifier (e.g. ``tesseract``)."""
        ...
    
    def load(self) -> None:
        """Load model into memory."""
        ...
    
    def destroy(self) -> None:
        """Release model resources."""
        ...
    
    def process(self, image: ImageArray) -> OCRResult:
        """Recognize text in an RGBA image.
        
        Args:
            image: HxWx4 image
            
        Returns:
            Recognized text with per-item geometry
        """
        ...
