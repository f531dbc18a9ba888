"""Tests for the simple solid-fill write-back."""

import asyncio

import numpy as np
import pytest

from ..adapters.translation.dictionary_translator import DictionaryTranslator
from ..application.services.simple_writeback import write_back_image
from ..core.fonts import FontResolver
from ..core.writeback import (
    WriteBackRegion,
    break_long_word,
    get_contrast_color,
    render_translation_to_image,
    sample_background_color,
    wrap_words,
)
from ..domain.entities.ocr_item import OCRItem
from ..domain.entities.result import OCRSize, TranslateImageInput
from ..domain.value_objects.geometry import Rect
from ..exceptions import TranslationError, ValidationError


def solid(height, width, rgb):
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[..., :3] = rgb
    image[..., 3] = 255
    return image


class TestWrapping:
    """Test word wrapping with a character-count measure."""
    
    def test_break_long_word(self):
        assert break_long_word("abcdefg", 3, len) == ["abc", "def", "g"]
    
    def test_wrap_breaks_only_long_words(self):
        assert wrap_words("aa bbbbbbb cc", 4, len) == ["aa", "bbbb", "bbb", "cc"]
    
    def test_wrap_short_text(self):
        assert wrap_words("a b", 10, len) == ["a b"]


class TestColors:
    """Test background sampling and contrast."""
    
    def test_contrast(self):
        assert get_contrast_color((255, 255, 255)) == (0, 0, 0)
        assert get_contrast_color((0, 0, 0)) == (255, 255, 255)
        assert get_contrast_color((255, 255, 0)) == (0, 0, 0)
    
    def test_uniform_background(self):
        image = solid(20, 20, (10, 20, 30))
        assert sample_background_color(image, Rect(2, 2, 10, 10)) == (10, 20, 30)
    
    def test_samples_clamped_to_image(self):
        image = solid(5, 5, (40, 40, 40))
        assert sample_background_color(image, Rect(3, 3, 50, 50)) == (40, 40, 40)


class TestRenderTranslation:
    """Test painting translations into boxes."""
    
    def test_text_drawn_in_contrast_color(self):
        image = solid(40, 100, (255, 255, 255))
        regions = [WriteBackRegion(Rect(10, 10, 60, 20), "Hi there")]
        result = render_translation_to_image(image, regions, resolver=FontResolver(search_dirs=()))
        assert result.shape == image.shape
        assert (result[10:30, 10:70, :3] < 128).any()
        assert np.all(image == 255)
        np.testing.assert_array_equal(result[35:, :], image[35:, :])
    
    def test_blank_translation_skipped(self):
        image = solid(40, 100, (200, 0, 0))
        image[15:25, 20:60] = (0, 0, 255, 255)
        regions = [WriteBackRegion(Rect(10, 10, 60, 20), " ")]
        result = render_translation_to_image(image, regions)
        np.testing.assert_array_equal(result, image)
    
    def test_scaled_boxes(self):
        image = solid(80, 200, (255, 255, 255))
        regions = [WriteBackRegion(Rect(10, 10, 60, 20), "Hello")]
        result = render_translation_to_image(
            image, regions, scale_x=2.0, scale_y=2.0, resolver=FontResolver(search_dirs=())
        )
        assert (result[20:60, 20:140, :3] < 128).any()
        assert np.all(result[:18, :, :3] == 255)


class FailingTranslator:
    async def translate(self, request):
        raise RuntimeError("offline")
    
    def destroy(self):
        pass


class TestWriteBackImage:
    """Test the write-back service."""
    
    def make_request(self, translator, items=None):
        return TranslateImageInput(
            original=solid(40, 100, (255, 255, 255)),
            ocr_items=items if items is not None else [OCRItem("Hi", bounding_box=Rect(5, 5, 25, 10))],
            source_lang="en",
            target_lang="fr",
            translator=translator,
            ocr_size=OCRSize(50, 20),
        )
    
    def test_produces_png(self):
        request = self.make_request(DictionaryTranslator({"Hi": "Salut"}))
        result = asyncio.run(write_back_image(request, FontResolver(search_dirs=())))
        assert result.blob.startswith(b"\x89PNG")
        assert (result.width, result.height) == (100, 40)
        assert result.debug is None
    
    def test_no_items(self):
        with pytest.raises(ValidationError, match="No OCR regions"):
            asyncio.run(write_back_image(self.make_request(DictionaryTranslator({}), items=[])))
    
    def test_translation_failure(self):
        with pytest.raises(TranslationError) as exc_info:
            asyncio.run(write_back_image(self.make_request(FailingTranslator())))
        assert exc_info.value.region_id == "paragraph-1"
