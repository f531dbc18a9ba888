"""Translator port - interface for text translation backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    """One text to translate."""
    from_lang: str
    to_lang: str
    text: str
    html: bool = False


@dataclass(frozen=True, slots=True)
class TranslationResponse:
    text: str


@runtime_checkable
class TextTranslator(Protocol):
    """Port for translation backends.
    
    ``translate`` is awaited once per region; failures propagate as exceptions.
    """
    
    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        ...
    
    def destroy(self) -> None:
        """Release backend resources."""
        ...
