"""Language helpers - script detection and font stack selection."""

from __future__ import annotations

from ...config import (
    ARABIC_FONT_STACK,
    CJK_FONT_STACK,
    CJK_PREFIXES,
    LATIN_FONT_STACK,
    RTL_PREFIXES,
    TESSERACT_LANGUAGE_MAP,
)


def _matches_prefix(code: str, prefixes: tuple[str, ...]) -> bool:
    normalized = code.strip().lower()
    return any(
        normalized == prefix or normalized.startswith(f"{prefix}-")
        for prefix in prefixes
    )


def is_cjk_language(code: str) -> bool:
    """Check for Chinese, Japanese or Korean codes, including subtags (``zh-Hans``)."""
    return _matches_prefix(code, CJK_PREFIXES)


def is_rtl_language(code: str) -> bool:
    """Check for right-to-left scripts (Arabic, Hebrew, Persian, Urdu)."""
    return _matches_prefix(code, RTL_PREFIXES)


def get_font_family(code: str) -> tuple[str, ...]:
    """Return the font stack used to render text in the given language."""
    normalized = code.strip().lower()
    if normalized.startswith(CJK_PREFIXES):
        return CJK_FONT_STACK
    if normalized.startswith("ar"):
        return ARABIC_FONT_STACK
    return LATIN_FONT_STACK


def normalize_language_code(code: str, engine_id: str = "") -> str:
    """Map an OCR engine's language identifier to a two-letter code.
    
    Tesseract uses traineddata names (``eng``, ``chi_sim``); other engines
    already report short codes and pass through lowercased.
    """
    normalized = code.strip().lower()
    if engine_id == "tesseract" or normalized in TESSERACT_LANGUAGE_MAP:
        return TESSERACT_LANGUAGE_MAP.get(normalized, normalized)
    return normalized
