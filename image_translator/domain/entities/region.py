"""Region entity - a paragraph of OCR tokens translated as one unit."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..value_objects.geometry import Quadrilateral, Rect
from .ocr_item import OCRItem, OCRStyle


@dataclass(slots=True)
class Region:
    """A paragraph-level cluster of OCR items.
    
    Only ``translated_text`` is assigned after construction, once, by the
    orchestrator. An empty translation means "nothing to render".
    """
    id: str
    items: list[OCRItem]
    bbox: Rect
    quad: Quadrilateral
    source_lines: list[str] = field(default_factory=list)
    source_line_count: int = 0
    translated_text: str | None = None
    style: OCRStyle | None = None
    
    @property
    def source_text(self) -> str:
        """Source lines joined for the translator."""
        return "\n".join(self.source_lines).strip()
    
    @property
    def is_active(self) -> bool:
        """Check if the region has translated text to render."""
        return bool(self.translated_text and self.translated_text.strip())
    
    @property
    def min_side(self) -> float:
        return min(self.bbox.width, self.bbox.height)
    
    def to_dict(self) -> dict:
        data: dict = {
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
            "bbox": self.bbox.to_dict(),
            "quad": self.quad.to_list(),
            "sourceLines": list(self.source_lines),
            "sourceLineCount": self.source_line_count,
        }
        if self.translated_text is not None:
            data["translatedText"] = self.translated_text
        if self.style is not None:
            data["style"] = self.style.to_dict()
        return data
