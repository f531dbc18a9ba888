"""OCR item entities - the recognizer output consumed by the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from ..value_objects.geometry import Quadrilateral, Rect

RGB = tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class OCRStyle:
    """Optional colors sampled by the recognizer."""
    text: RGB | None = None
    bg: RGB | None = None
    
    @property
    def is_empty(self) -> bool:
        return self.text is None and self.bg is None
    
    def to_dict(self) -> dict[str, list[int]]:
        data: dict[str, list[int]] = {}
        if self.text is not None:
            data["text"] = list(self.text)
        if self.bg is not None:
            data["bg"] = list(self.bg)
        return data
    
    @classmethod
    def from_dict(cls, data: dict) -> OCRStyle:
        return cls(text=_parse_rgb(data.get("text")), bg=_parse_rgb(data.get("bg")))


@dataclass(frozen=True, slots=True)
class OCRItem:
    """A single recognized token with its geometry."""
    text: str
    bounding_box: Rect
    confidence: float = 0.0
    quad: Quadrilateral | None = None
    style: OCRStyle | None = None
    
    @property
    def is_empty(self) -> bool:
        """Check if item has no visible text."""
        return not self.text.strip()
    
    @property
    def outline(self) -> Quadrilateral:
        """The item's polygon: its quad when present, else its box corners."""
        if self.quad is not None:
            return self.quad
        return Quadrilateral.from_rect(self.bounding_box)
    
    def scaled(self, sx: float, sy: float) -> OCRItem:
        """Map the item's geometry into another raster's coordinate space."""
        return replace(
            self,
            bounding_box=self.bounding_box.scale(sx, sy),
            quad=self.quad.scale(sx, sy) if self.quad is not None else None,
        )
    
    def to_dict(self) -> dict:
        data: dict = {
            "text": self.text,
            "confidence": self.confidence,
            "boundingBox": self.bounding_box.to_dict(),
        }
        if self.quad is not None:
            data["quad"] = self.quad.to_list()
        if self.style is not None and not self.style.is_empty:
            data["style"] = self.style.to_dict()
        return data
    
    @classmethod
    def from_dict(cls, data: dict) -> OCRItem:
        """Parse the camelCase wire form produced by OCR engines.
        
        Raises:
            KeyError, TypeError, ValueError: If required fields are missing or malformed
        """
        box = data.get("boundingBox", data.get("bounding_box"))
        if box is None:
            raise KeyError("boundingBox")
        quad = data.get("quad")
        style = data.get("style")
        return cls(
            text=str(data.get("text", "")),
            bounding_box=Rect.from_dict(box),
            confidence=float(data.get("confidence", 0.0)),
            quad=Quadrilateral.from_points(quad) if quad else None,
            style=OCRStyle.from_dict(style) if style else None,
        )


@dataclass(frozen=True, slots=True)
class OCRResult:
    """What an OCR collaborator returns for one image."""
    text: str = ""
    items: list[OCRItem] = field(default_factory=list)
    
    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0


def _parse_rgb(value: object) -> RGB | None:
    if value is None:
        return None
    r, g, b = value  # type: ignore[misc]
    return (int(r), int(g), int(b))
