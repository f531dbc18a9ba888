"""Image Translator - re-render the text inside an image in another language."""

__version__ = "1.0.0"

from .application.services.translate_image import TranslateImageService, translate_image
from .domain.entities import OCRItem, OCRStyle, Region, TranslateImageInput, TranslateImageOutput
from .domain.entities.result import OCRSize
from .domain.value_objects.config import InpaintOptions, InpaintStrategy, TranslateImageOptions
from .exceptions import (
    ImageTranslatorError,
    ValidationError,
    GeometryError,
    RenderError,
    EncodingError,
    TranslationError,
    OCRError,
)
from .utils.env import setup_logging

__all__ = [
    '__version__',
    'TranslateImageService',
    'translate_image',
    'TranslateImageInput',
    'TranslateImageOutput',
    'TranslateImageOptions',
    'InpaintOptions',
    'InpaintStrategy',
    'OCRItem',
    'OCRStyle',
    'OCRSize',
    'Region',
    'setup_logging',
    # Exceptions
    'ImageTranslatorError',
    'ValidationError',
    'GeometryError',
    'RenderError',
    'EncodingError',
    'TranslationError',
    'OCRError',
]
