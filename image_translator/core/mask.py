"""Mask rasterization and dilation over a bounds window."""

from __future__ import annotations

import math
from typing import Iterable

import cv2
import numpy as np

from ..config import PIPELINE_CONFIG
from ..domain.entities.ocr_item import OCRItem
from ..domain.entities.region import Region
from ..domain.services.region_builder import median
from ..domain.value_objects.geometry import Bounds, Quadrilateral, Rect
from .canvas import ImageArray, MaskArray

# Sub-pixel precision bits for cv2.fillPoly
_SHIFT = 4


def _union_bounds(
    rects: list[Rect],
    image_width: int,
    image_height: int,
    padding: float,
) -> Bounds | None:
    if not rects:
        return None
    min_x = min(r.x for r in rects)
    min_y = min(r.y for r in rects)
    max_x = max(r.right for r in rects)
    max_y = max(r.bottom for r in rects)
    
    # Keep the origin inside the image so the window is never empty
    x = int(np.clip(math.floor(min_x - padding), 0, image_width - 1))
    y = int(np.clip(math.floor(min_y - padding), 0, image_height - 1))
    max_x_clamped = int(np.clip(math.ceil(max_x + padding), 0, image_width))
    max_y_clamped = int(np.clip(math.ceil(max_y + padding), 0, image_height))
    return Bounds(x, y, max(1, max_x_clamped - x), max(1, max_y_clamped - y))


def union_bounds(
    regions: list[Region],
    image_width: int,
    image_height: int,
    padding: float,
) -> Bounds | None:
    """Padded window covering every region box, clamped to the image.
    
    Returns:
        The window, or None when there are no regions
    """
    return _union_bounds([r.bbox for r in regions], image_width, image_height, padding)


def union_item_bounds(
    items: list[OCRItem],
    image_width: int,
    image_height: int,
    padding: float,
) -> Bounds | None:
    """Padded window covering every item box and quad, clamped to the image."""
    rects = []
    for item in items:
        rects.append(item.bounding_box)
        if item.quad is not None:
            rects.append(item.quad.bounding_box.to_rect())
    return _union_bounds(rects, image_width, image_height, padding)


def rasterize_quads_to_mask(quads: Iterable[Quadrilateral], bounds: Bounds) -> MaskArray:
    """Fill each quad as an anti-aliased polygon into a window-sized mask."""
    mask = np.zeros((bounds.height, bounds.width), dtype=np.uint8)
    scale = 1 << _SHIFT
    polygons = [
        np.array(
            [[(p.x - bounds.x) * scale, (p.y - bounds.y) * scale] for p in quad.points],
            dtype=np.float64,
        ).round().astype(np.int32)
        for quad in quads
    ]
    if polygons:
        cv2.fillPoly(mask, polygons, 255, lineType=cv2.LINE_AA, shift=_SHIFT)
    return mask


def rasterize_regions_to_mask(regions: list[Region], bounds: Bounds) -> MaskArray:
    return rasterize_quads_to_mask((r.quad for r in regions), bounds)


def rasterize_items_to_mask(items: list[OCRItem], bounds: Bounds) -> MaskArray:
    """Rasterize each item's quad (or box corners when it has none)."""
    return rasterize_quads_to_mask((item.outline for item in items), bounds)


def box_sum(values: np.ndarray, radius: int) -> tuple[np.ndarray, np.ndarray]:
    """Window sums and window areas over a (2r+1)^2 box clipped to the array.
    
    Uses a summed-area table so the cost is independent of ``radius``.
    """
    height, width = values.shape
    integral = np.zeros((height + 1, width + 1), dtype=np.int64)
    integral[1:, 1:] = values.astype(np.int64).cumsum(axis=0).cumsum(axis=1)
    
    ys = np.arange(height)
    xs = np.arange(width)
    y0 = np.maximum(0, ys - radius)
    y1 = np.minimum(height - 1, ys + radius) + 1
    x0 = np.maximum(0, xs - radius)
    x1 = np.minimum(width - 1, xs + radius) + 1
    
    sums = (
        integral[np.ix_(y1, x1)]
        - integral[np.ix_(y0, x1)]
        - integral[np.ix_(y1, x0)]
        + integral[np.ix_(y0, x0)]
    )
    areas = np.outer(y1 - y0, x1 - x0)
    return sums, areas


def dilate_mask(mask: MaskArray, radius: int) -> MaskArray:
    """Mark every pixel with a set pixel within ``radius`` (square window).
    
    A non-positive radius returns the input mask object unchanged.
    """
    if radius <= 0:
        return mask
    sums, _ = box_sum((mask > 0).astype(np.int64), radius)
    return np.where(sums > 0, 255, 0).astype(np.uint8)


def count_mask_pixels(mask: MaskArray) -> int:
    return int(np.count_nonzero(mask))


def compute_dilation_radius(regions: list[Region]) -> int:
    """Dilation radius scaled to the median text size of the regions."""
    cfg = PIPELINE_CONFIG
    size = median([r.min_side for r in regions])
    radius = math.floor(cfg.dilation_factor * size + 0.5) + 1
    return int(np.clip(radius, cfg.dilation_min, cfg.dilation_max))


def mask_to_image(mask: MaskArray, bounds: Bounds, width: int, height: int) -> ImageArray:
    """Render a window mask as an opaque grayscale patch on a transparent image."""
    image = np.zeros((height, width, 4), dtype=np.uint8)
    window = image[bounds.y:bounds.bottom, bounds.x:bounds.right]
    patch = mask[:window.shape[0], :window.shape[1]]
    window[..., 0] = patch
    window[..., 1] = patch
    window[..., 2] = patch
    window[..., 3] = 255
    return image
