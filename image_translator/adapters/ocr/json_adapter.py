"""JSON OCR adapter - replays a stored OCR result."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ...core.canvas import ImageArray
from ...domain.entities.ocr_item import OCRItem, OCRResult
from ...domain.entities.result import OCRSize
from ...exceptions import OCRError

logger = logging.getLogger(__name__)


class JsonOCRAdapter:
    """Adapter that serves OCR items recorded in a JSON file.
    
    The file holds ``{"text", "items", "width", "height"}`` where ``width``
    and ``height`` are the dimensions the recognizer worked at. Items use the
    camelCase wire form (``boundingBox``, ``quad``, ``style``).
    """
    
    def __init__(self, path: Path | str, engine_id: str = "json"):
        self._path = Path(path)
        self._engine_id = engine_id
        self._result: OCRResult | None = None
        self._size: OCRSize | None = None
    
    @property
    def id(self) -> str:
        return self._engine_id
    
    @property
    def path(self) -> Path:
        return self._path
    
    def load(self) -> None:
        """Parse the JSON file.
        
        Raises:
            OCRError: If the file is missing or malformed
        """
        if self._result is not None:
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise OCRError(f"Cannot read OCR file {self._path}: {e}") from e
        
        if not isinstance(data, dict):
            raise OCRError(f"OCR file {self._path} must contain a JSON object")
        
        try:
            items = [OCRItem.from_dict(raw) for raw in data.get("items") or []]
        except (KeyError, TypeError, ValueError) as e:
            raise OCRError(f"Malformed OCR item in {self._path}: {e}") from e
        
        size = None
        if "width" in data and "height" in data:
            try:
                size = OCRSize(int(data["width"]), int(data["height"]))
            except (TypeError, ValueError) as e:
                raise OCRError(f"Invalid OCR dimensions in {self._path}: {e}") from e
        
        self._result = OCRResult(text=str(data.get("text", "")), items=items)
        self._size = size
        logger.info(f"Loaded {len(items)} OCR items from {self._path}")
    
    def destroy(self) -> None:
        self._result = None
        self._size = None
    
    def process(self, image: ImageArray) -> OCRResult:
        """Return the stored result; the image only supplies a default size."""
        self.load()
        if self._size is None:
            self._size = OCRSize(int(image.shape[1]), int(image.shape[0]))
        if self._result is None:
            raise OCRError(f"OCR engine {self.id} has no result loaded")
        return self._result
    
    @property
    def ocr_size(self) -> OCRSize | None:
        """Dimensions the stored result refers to, once known."""
        return self._size
