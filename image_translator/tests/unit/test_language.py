"""Unit tests for language helpers."""

import pytest
from image_translator.config import ARABIC_FONT_STACK, CJK_FONT_STACK, LATIN_FONT_STACK
from image_translator.domain.services.language import (
    get_font_family,
    is_cjk_language,
    is_rtl_language,
    normalize_language_code,
)


class TestScriptDetection:
    """Tests for CJK and RTL detection."""
    
    @pytest.mark.parametrize("code", ["zh", "ja", "ko", "zh-Hans", "ZH-TW"])
    def test_cjk_codes(self, code):
        assert is_cjk_language(code)
    
    @pytest.mark.parametrize("code", ["en", "fr", "zhx", "jav"])
    def test_non_cjk_codes(self, code):
        assert not is_cjk_language(code)
    
    @pytest.mark.parametrize("code", ["ar", "he", "fa", "ur", "he-IL"])
    def test_rtl_codes(self, code):
        assert is_rtl_language(code)
    
    def test_ltr_code(self):
        assert not is_rtl_language("en")


class TestFontFamily:
    """Tests for font stack selection."""
    
    def test_cjk_stack(self):
        assert get_font_family("ja") == CJK_FONT_STACK
    
    def test_arabic_stack(self):
        assert get_font_family("ar") == ARABIC_FONT_STACK
    
    def test_latin_default(self):
        assert get_font_family("en") == LATIN_FONT_STACK


class TestNormalizeLanguageCode:
    """Tests for OCR language code normalization."""
    
    def test_tesseract_codes(self):
        assert normalize_language_code("eng") == "en"
        assert normalize_language_code("chi_sim") == "zh"
        assert normalize_language_code("jpn", "tesseract") == "ja"
    
    def test_short_codes_pass_through(self):
        assert normalize_language_code(" EN ") == "en"
    
    def test_unknown_tesseract_code_kept(self):
        assert normalize_language_code("xyz", "tesseract") == "xyz"
