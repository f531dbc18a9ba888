"""Application services - use case orchestration."""

from .simple_writeback import write_back_image
from .translate_image import TranslateImageService, translate_image

__all__ = ['TranslateImageService', 'translate_image', 'write_back_image']
