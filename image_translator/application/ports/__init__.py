"""Ports - interfaces for external collaborators (Dependency Inversion)."""

from .event_publisher import EventPublisher, ProcessingEvent, SimpleEventPublisher
from .ocr_engine import OCREngine
from .translator import TextTranslator, TranslationRequest, TranslationResponse

__all__ = [
    'OCREngine',
    'TextTranslator',
    'TranslationRequest',
    'TranslationResponse',
    'EventPublisher',
    'ProcessingEvent',
    'SimpleEventPublisher',
]
