"""Tests for mask rasterization and dilation."""

import numpy as np
import pytest

from ..core.mask import (
    box_sum,
    compute_dilation_radius,
    count_mask_pixels,
    dilate_mask,
    mask_to_image,
    rasterize_items_to_mask,
    rasterize_quads_to_mask,
    union_bounds,
    union_item_bounds,
)
from ..domain.entities.ocr_item import OCRItem
from ..domain.entities.region import Region
from ..domain.value_objects.geometry import Bounds, Point, Quadrilateral, Rect


def make_region(x, y, w, h):
    rect = Rect(x, y, w, h)
    return Region(id="r", items=[], bbox=rect, quad=Quadrilateral.from_rect(rect))


class TestUnionBounds:
    """Test padded union windows."""
    
    def test_no_regions(self):
        assert union_bounds([], 100, 100, 16) is None
        assert union_item_bounds([], 100, 100, 16) is None
    
    def test_padding(self):
        bounds = union_bounds([make_region(10, 10, 20, 20)], 100, 100, 5)
        assert bounds == Bounds(5, 5, 30, 30)
    
    def test_clamped_to_image(self):
        bounds = union_bounds([make_region(80, 80, 30, 30)], 100, 100, 16)
        assert bounds == Bounds(64, 64, 36, 36)
    
    def test_fully_outside_keeps_one_pixel(self):
        bounds = union_bounds([make_region(-10, -10, 5, 5)], 100, 100, 0)
        assert bounds == Bounds(0, 0, 1, 1)
    
    def test_item_quads_included(self):
        quad = Quadrilateral(Point(0, 0), Point(30, 0), Point(30, 25), Point(0, 25))
        items = [OCRItem("a", bounding_box=Rect(0, 0, 10, 10), quad=quad)]
        assert union_item_bounds(items, 100, 100, 0) == Bounds(0, 0, 30, 25)


class TestRasterize:
    """Test polygon rasterization."""
    
    def test_rect_quad_filled(self):
        mask = rasterize_quads_to_mask([Quadrilateral.from_bbox(2, 2, 4, 4)], Bounds(0, 0, 10, 10))
        assert mask.shape == (10, 10)
        assert mask.dtype == np.uint8
        assert mask[4, 4] == 255
        assert mask[0, 0] == 0
        assert mask[9, 9] == 0
    
    def test_window_offset(self):
        items = [OCRItem("a", bounding_box=Rect(22, 32, 4, 4))]
        mask = rasterize_items_to_mask(items, Bounds(20, 30, 10, 10))
        assert mask[4, 4] == 255
        assert mask[8, 8] == 0
    
    def test_no_quads(self):
        mask = rasterize_quads_to_mask([], Bounds(0, 0, 5, 5))
        assert count_mask_pixels(mask) == 0


class TestDilateMask:
    """Test square dilation."""
    
    def test_radius_zero_is_noop(self):
        mask = np.zeros((5, 5), dtype=np.uint8)
        mask[2, 2] = 255
        assert dilate_mask(mask, 0) is mask
    
    def test_single_pixel(self):
        mask = np.zeros((9, 9), dtype=np.uint8)
        mask[4, 4] = 255
        dilated = dilate_mask(mask, 2)
        assert count_mask_pixels(dilated) == 25
        assert dilated[2, 2] == 255
        assert dilated[1, 4] == 0
    
    def test_clipped_at_edges(self):
        mask = np.zeros((5, 5), dtype=np.uint8)
        mask[0, 0] = 255
        assert count_mask_pixels(dilate_mask(mask, 1)) == 4


class TestBoxSum:
    """Test summed-area window sums."""
    
    def test_ones(self):
        sums, areas = box_sum(np.ones((3, 3)), 1)
        assert sums[1, 1] == 9
        assert sums[0, 0] == 4
        np.testing.assert_array_equal(sums, areas)


class TestDilationRadius:
    """Test dilation radius scaling."""
    
    @pytest.mark.parametrize("size, expected", [(10, 3), (100, 6), (300, 16), (400, 16)])
    def test_scaled_and_clamped(self, size, expected):
        assert compute_dilation_radius([make_region(0, 0, size, size * 2)]) == expected


class TestMaskToImage:
    """Test debug rendering of masks."""
    
    def test_window_opaque(self):
        mask = np.full((2, 3), 255, dtype=np.uint8)
        image = mask_to_image(mask, Bounds(1, 1, 3, 2), 6, 4)
        assert image.shape == (4, 6, 4)
        assert image[1, 1, 3] == 255
        assert image[1, 1, 0] == 255
        assert image[0, 0, 3] == 0
