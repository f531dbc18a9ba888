"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from image_translator.domain.value_objects.config import (
    InpaintMethod, InpaintOptions, InpaintStrategy, TranslateImageOptions
)


class TestInpaintOptions:
    """Tests for InpaintOptions."""
    
    def test_default_values(self):
        options = InpaintOptions()
        assert options.strategy == InpaintStrategy.FLOOD_FILL
        assert options.method == InpaintMethod.TELEA
        assert options.max_union_area_ratio == 0.3
    
    def test_region_size_limit_defaults_to_image_fraction(self):
        assert InpaintOptions().region_size_limit(100, 100) == 4000
    
    def test_region_size_limit_override(self):
        assert InpaintOptions(max_region_size_px=500).region_size_limit(100, 100) == 500
    
    def test_strategy_from_string(self):
        assert InpaintOptions(strategy="opencv").strategy == InpaintStrategy.OPENCV
    
    def test_validation_radius_range(self):
        with pytest.raises(ValidationError):
            InpaintOptions(radius=0)


class TestTranslateImageOptions:
    """Tests for TranslateImageOptions."""
    
    def test_default_values(self):
        options = TranslateImageOptions()
        assert options.debug is False
        assert options.padding == 16
        assert options.noise_amount == 1.5
        assert options.seed is None
        assert options.max_debug_group_steps == 10
        assert options.max_debug_background_steps == 5
    
    def test_validation_padding_range(self):
        with pytest.raises(ValidationError):
            TranslateImageOptions(padding=-1)
    
    def test_validate_assignment(self):
        options = TranslateImageOptions()
        with pytest.raises(ValidationError):
            options.noise_amount = -2
    
    def test_blank_font_path_is_unset(self):
        assert TranslateImageOptions(font_path="   ").font_path is None
