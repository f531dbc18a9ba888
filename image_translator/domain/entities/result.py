"""Translate-image input and output entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from ..value_objects.geometry import Bounds
from .ocr_item import OCRItem
from .region import Region

if TYPE_CHECKING:
    from ...application.ports.translator import TextTranslator

ImageArray = npt.NDArray[np.uint8]  # HxWx4 RGBA


@dataclass(frozen=True, slots=True)
class OCRSize:
    """Dimensions of the raster the OCR engine actually saw."""
    width: int
    height: int


@dataclass(slots=True)
class TranslateImageInput:
    """Everything one translate-image call consumes."""
    original: ImageArray
    ocr_items: list[OCRItem]
    source_lang: str
    target_lang: str
    translator: 'TextTranslator'
    ocr_size: OCRSize
    engine_id: str = ""
    
    @property
    def width(self) -> int:
        return int(self.original.shape[1])
    
    @property
    def height(self) -> int:
        return int(self.original.shape[0])


@dataclass(frozen=True, slots=True)
class DebugStep:
    """A named intermediate raster snapshot."""
    label: str
    blob: bytes
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class DebugStats:
    """Region and mask statistics for one invocation."""
    image_width: int
    image_height: int
    ocr_width: int
    ocr_height: int
    scale_x: float
    scale_y: float
    region_count: int
    out_of_bounds_regions: int
    bounds: Bounds
    raw_mask_pixels: int
    dilated_mask_pixels: int
    
    def to_dict(self) -> dict:
        return {
            "imageWidth": self.image_width,
            "imageHeight": self.image_height,
            "ocrWidth": self.ocr_width,
            "ocrHeight": self.ocr_height,
            "scaleX": self.scale_x,
            "scaleY": self.scale_y,
            "regionCount": self.region_count,
            "outOfBoundsRegions": self.out_of_bounds_regions,
            "bounds": self.bounds.to_dict(),
            "rawMaskPixels": self.raw_mask_pixels,
            "dilatedMaskPixels": self.dilated_mask_pixels,
        }


@dataclass(slots=True)
class TranslateImageDebug:
    """Optional debug payload attached when requested."""
    regions: list[Region]
    steps: list[DebugStep] = field(default_factory=list)
    stats: DebugStats | None = None


@dataclass(frozen=True, slots=True)
class TranslateImageOutput:
    """Result of a successful translate-image call."""
    blob: bytes
    width: int
    height: int
    debug: TranslateImageDebug | None = None
