"""OCR adapters - implementations of the OCREngine port."""

from .json_adapter import JsonOCRAdapter

__all__ = ['JsonOCRAdapter']
