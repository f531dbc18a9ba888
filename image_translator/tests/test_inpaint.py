"""Tests for background reconstruction."""

import numpy as np
import pytest

from ..core.inpaint import inpaint_flood_fill, inpaint_image, inpaint_radial
from ..domain.value_objects.config import InpaintOptions, InpaintStrategy
from ..domain.value_objects.geometry import Bounds

ALL_STRATEGIES = [
    InpaintStrategy.FLOOD_FILL,
    InpaintStrategy.RADIAL,
    InpaintStrategy.OPENCV,
    InpaintStrategy.AUTO,
]


@pytest.fixture
def red_on_gray():
    """32x32 gray image with a 12x8 red block marked for removal."""
    image = np.zeros((32, 32, 4), dtype=np.uint8)
    image[..., :3] = 128
    image[..., 3] = 200
    image[12:20, 10:22] = (255, 0, 0, 60)
    mask = np.zeros((32, 32), dtype=np.uint8)
    mask[12:20, 10:22] = 255
    return image, mask, Bounds(0, 0, 32, 32)


class TestInpaintImage:
    """Test the strategy dispatcher and shared guarantees."""
    
    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_red_text_removed(self, red_on_gray, strategy):
        """The block center is rebuilt close to the surrounding gray."""
        image, mask, bounds = red_on_gray
        result = inpaint_image(image, mask, bounds, InpaintOptions(strategy=strategy))
        center = result[16, 16, :3].astype(int)
        assert np.all(np.abs(center - 128) < 12)
    
    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_unmasked_pixels_preserved(self, red_on_gray, strategy):
        image, mask, bounds = red_on_gray
        result = inpaint_image(image, mask, bounds, InpaintOptions(strategy=strategy))
        keep = mask == 0
        np.testing.assert_array_equal(result[keep], image[keep])
    
    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_masked_alpha_opaque(self, red_on_gray, strategy):
        image, mask, bounds = red_on_gray
        result = inpaint_image(image, mask, bounds, InpaintOptions(strategy=strategy))
        assert np.all(result[mask > 0, 3] == 255)
    
    def test_input_not_modified(self, red_on_gray):
        image, mask, bounds = red_on_gray
        before = image.copy()
        inpaint_image(image, mask, bounds)
        np.testing.assert_array_equal(image, before)
    
    def test_empty_mask_returns_copy(self, red_on_gray):
        image, _, bounds = red_on_gray
        result = inpaint_image(image, np.zeros((32, 32), dtype=np.uint8), bounds)
        np.testing.assert_array_equal(result, image)
        assert result is not image
    
    def test_mask_shape_mismatch(self, red_on_gray):
        image, _, bounds = red_on_gray
        with pytest.raises(ValueError):
            inpaint_image(image, np.zeros((4, 4), dtype=np.uint8), bounds)
    
    def test_default_strategy_is_flood_fill(self, red_on_gray):
        image, mask, bounds = red_on_gray
        np.testing.assert_array_equal(
            inpaint_image(image, mask, bounds),
            inpaint_flood_fill(image, mask, bounds),
        )


class TestWindowedInpaint:
    """Test reconstruction restricted to a bounds window."""
    
    def test_pixels_outside_window_untouched(self, red_on_gray):
        image, full_mask, _ = red_on_gray
        bounds = Bounds(8, 10, 16, 12)
        mask = full_mask[10:22, 8:24].copy()
        for result in (
            inpaint_flood_fill(image, mask, bounds),
            inpaint_radial(image, mask, bounds),
        ):
            np.testing.assert_array_equal(result[:10], image[:10])
            np.testing.assert_array_equal(result[:, :8], image[:, :8])
            assert np.all(np.abs(result[16, 16, :3].astype(int) - 128) < 12)
    
    def test_flood_fill_uniform_border_is_exact(self):
        image = np.zeros((10, 10, 4), dtype=np.uint8)
        image[...] = (50, 100, 150, 255)
        image[4:6, 4:6, :3] = 0
        mask = np.zeros((10, 10), dtype=np.uint8)
        mask[4:6, 4:6] = 255
        result = inpaint_flood_fill(image, mask, Bounds(0, 0, 10, 10))
        assert tuple(result[4, 4]) == (50, 100, 150, 255)
    
    def test_fully_masked_window_keeps_colors(self):
        image = np.zeros((4, 4, 4), dtype=np.uint8)
        image[..., 0] = 90
        image[..., 3] = 10
        mask = np.full((4, 4), 255, dtype=np.uint8)
        result = inpaint_flood_fill(image, mask, Bounds(0, 0, 4, 4))
        assert np.all(result[..., 0] == 90)
        assert np.all(result[..., 3] == 255)
