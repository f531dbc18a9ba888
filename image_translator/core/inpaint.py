"""Background reconstruction under a text mask.

All strategies rewrite only masked pixels inside the bounds window, copy
every other pixel unchanged (alpha included) and make masked pixels opaque.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from ..domain.value_objects.config import InpaintMethod, InpaintOptions, InpaintStrategy
from ..domain.value_objects.geometry import Bounds
from .canvas import ImageArray, MaskArray

logger = logging.getLogger(__name__)

# Compass order starting north, clockwise: (dx, dy)
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)
RADIAL_RADII: tuple[int, ...] = (3, 7)
RADIAL_MIN_SAMPLES = 3

_CV2_FLAGS = {
    InpaintMethod.TELEA: cv2.INPAINT_TELEA,
    InpaintMethod.NAVIER_STOKES: cv2.INPAINT_NS,
}


def _round(values: np.ndarray) -> np.ndarray:
    """Round half up, as pixel averaging expects."""
    return np.floor(values + 0.5)


def _window(image: ImageArray, bounds: Bounds) -> np.ndarray:
    return image[bounds.y:bounds.bottom, bounds.x:bounds.right]


def _smooth_masked(
    output: ImageArray,
    masked: np.ndarray,
    bounds: Bounds,
    clamp_to_window: bool,
) -> None:
    """3x3 box blur applied to masked pixels only, in place.
    
    Neighbors are clamped to the window or to the whole image.
    """
    source = output.copy()
    ys, xs = np.nonzero(masked)
    if ys.size == 0:
        return
    gy = ys + bounds.y
    gx = xs + bounds.x
    if clamp_to_window:
        y_lo, y_hi = bounds.y, bounds.bottom - 1
        x_lo, x_hi = bounds.x, bounds.right - 1
    else:
        y_lo, y_hi = 0, output.shape[0] - 1
        x_lo, x_hi = 0, output.shape[1] - 1
    
    total = np.zeros((ys.size, 3), dtype=np.float64)
    for oy in (-1, 0, 1):
        for ox in (-1, 0, 1):
            sy = np.clip(gy + oy, y_lo, y_hi)
            sx = np.clip(gx + ox, x_lo, x_hi)
            total += source[sy, sx, :3]
    output[gy, gx, :3] = _round(total / 9).astype(np.uint8)
    output[gy, gx, 3] = 255


def inpaint_radial(original: ImageArray, mask: MaskArray, bounds: Bounds) -> ImageArray:
    """Average the first unmasked samples found along compass directions.
    
    Directions are tried per radius band (3 then 7), stepping r, 2r, 3r
    outward and keeping the first unmasked pixel. The first three samples
    are averaged; with fewer, the original pixel is kept. A 3x3 smoothing
    pass follows.
    """
    output = original.copy()
    height, width = original.shape[:2]
    masked = mask > 0
    ys, xs = np.nonzero(masked)
    if ys.size == 0:
        return output
    
    gy = ys + bounds.y
    gx = xs + bounds.x
    totals = np.zeros((ys.size, 3), dtype=np.float64)
    counts = np.zeros(ys.size, dtype=np.int32)
    
    def is_masked(sx: np.ndarray, sy: np.ndarray) -> np.ndarray:
        lx = sx - bounds.x
        ly = sy - bounds.y
        inside = (lx >= 0) & (ly >= 0) & (lx < bounds.width) & (ly < bounds.height)
        result = np.zeros(sx.shape, dtype=bool)
        result[inside] = masked[ly[inside], lx[inside]]
        return result
    
    for radius in RADIAL_RADII:
        for dx, dy in DIRECTIONS:
            pending = counts < RADIAL_MIN_SAMPLES
            found = np.zeros(ys.size, dtype=bool)
            for step in range(radius, radius * 3 + 1, radius):
                sx = gx + dx * step
                sy = gy + dy * step
                in_image = (sx >= 0) & (sy >= 0) & (sx < width) & (sy < height)
                sx_c = np.clip(sx, 0, width - 1)
                sy_c = np.clip(sy, 0, height - 1)
                hit = pending & ~found & in_image & ~is_masked(sx_c, sy_c)
                totals[hit] += original[sy_c[hit], sx_c[hit], :3]
                found |= hit
            counts += found
    
    filled = counts >= RADIAL_MIN_SAMPLES
    averaged = _round(totals[filled] / counts[filled][:, None]).astype(np.uint8)
    output[gy[filled], gx[filled], :3] = averaged
    
    _smooth_masked(output, masked, bounds, clamp_to_window=False)
    return output


def _neighbor_average(
    colors: np.ndarray,
    sources: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """Sum of source-pixel colors over the 8-neighborhood, and their count."""
    height, width = sources.shape
    weights = sources.astype(np.float64)
    padded_colors = np.pad(colors * weights[..., None], ((1, 1), (1, 1), (0, 0)))
    padded_weights = np.pad(weights, 1)
    
    sums = np.zeros(colors.shape, dtype=np.float64)
    counts = np.zeros(sources.shape, dtype=np.float64)
    for dx, dy in DIRECTIONS:
        sums += padded_colors[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]
        counts += padded_weights[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]
    return sums, counts


def inpaint_flood_fill(original: ImageArray, mask: MaskArray, bounds: Bounds) -> ImageArray:
    """Fill the mask inward from its boundary, one 8-connected ring at a time.
    
    Each ring takes the average of its already-filled neighbors inside the
    window, so the fill never samples across the mask interior. Masked
    pixels that no ring reaches keep their color. A 3x3 smoothing pass
    clamped to the window follows.
    """
    output = original.copy()
    masked = mask > 0
    if not masked.any():
        return output
    
    window = _window(output, bounds)
    colors = window[..., :3].astype(np.float64)
    filled = ~masked
    
    while True:
        sums, counts = _neighbor_average(colors, filled)
        ring = masked & ~filled & (counts > 0)
        if not ring.any():
            break
        colors[ring] = _round(sums[ring] / counts[ring][:, None])
        filled = filled | ring
    
    reached = masked & filled
    window[reached, :3] = colors[reached].astype(np.uint8)
    
    _smooth_masked(output, masked, bounds, clamp_to_window=True)
    return output


def inpaint_opencv(
    original: ImageArray,
    mask: MaskArray,
    bounds: Bounds,
    method: InpaintMethod = InpaintMethod.TELEA,
    radius: int = 3,
) -> ImageArray:
    """Native reconstruction with ``cv2.inpaint`` on the bounds window.
    
    Raises:
        cv2.error: If OpenCV rejects the input
    """
    output = original.copy()
    masked = mask > 0
    if not masked.any():
        return output
    
    window = _window(output, bounds)
    rgb = np.ascontiguousarray(window[..., :3])
    cv_mask = np.where(masked, 255, 0).astype(np.uint8)
    restored = cv2.inpaint(rgb, cv_mask, float(radius), _CV2_FLAGS[method])
    
    window[masked, :3] = restored[masked]
    window[masked, 3] = 255
    return output


def inpaint_image(
    original: ImageArray,
    mask: MaskArray,
    bounds: Bounds,
    options: InpaintOptions | None = None,
) -> ImageArray:
    """Reconstruct masked background pixels with the configured strategy.
    
    Args:
        original: Source RGBA image (not modified)
        mask: Window-sized mask, >0 marks pixels to rebuild
        bounds: Window position inside the image
        options: Strategy selection and OpenCV parameters
        
    Returns:
        A new RGBA image
    """
    options = options or InpaintOptions()
    strategy = options.strategy
    
    if mask.shape != (bounds.height, bounds.width):
        raise ValueError(
            f"Mask shape {mask.shape} does not match bounds {bounds.width}x{bounds.height}"
        )
    
    if strategy == InpaintStrategy.RADIAL:
        return inpaint_radial(original, mask, bounds)
    if strategy == InpaintStrategy.FLOOD_FILL:
        return inpaint_flood_fill(original, mask, bounds)
    if strategy == InpaintStrategy.OPENCV:
        return inpaint_opencv(original, mask, bounds, options.method, options.radius)
    
    # AUTO: native backend, flood fill when OpenCV rejects the window
    try:
        return inpaint_opencv(original, mask, bounds, options.method, options.radius)
    except cv2.error as e:
        logger.warning(f"OpenCV inpainting failed, using flood fill: {e}")
        return inpaint_flood_fill(original, mask, bounds)
