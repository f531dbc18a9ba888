"""Simple write-back - solid background fill with centered translated text.

The lightweight alternative to the inpainting pipeline: each box is painted
with its sampled background color and the translation is drawn on top.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from ..config import LATIN_FONT_STACK, WRITEBACK_CONFIG
from ..domain.value_objects.geometry import Rect
from .canvas import ImageArray, from_rgba_array, get_context_2d, to_rgba_array
from .fonts import FontResolver

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

# Box sample points as fractions of (width, height)
_SAMPLE_POINTS: tuple[tuple[float, float], ...] = (
    (0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0),
    (0.5, 0.0), (0.5, 1.0), (0.0, 0.5), (1.0, 0.5),
)


@dataclass(frozen=True, slots=True)
class WriteBackRegion:
    """A box (in OCR coordinates) and the text to write into it."""
    bounding_box: Rect
    translated_text: str


def sample_background_color(image: ImageArray, box: Rect) -> RGB:
    """Average color of the box corners and edge midpoints."""
    height, width = image.shape[:2]
    samples = []
    for fx, fy in _SAMPLE_POINTS:
        px = min(max(int(box.x + box.width * fx), 0), width - 1)
        py = min(max(int(box.y + box.height * fy), 0), height - 1)
        samples.append(image[py, px, :3].astype(int))
    n = len(samples)
    return tuple(math.floor(sum(int(s[c]) for s in samples) / n + 0.5) for c in range(3))  # type: ignore[return-value]


def get_contrast_color(color: RGB) -> RGB:
    """Black or white, whichever reads better on ``color`` (YIQ brightness)."""
    r, g, b = color
    yiq = (r * 299 + g * 587 + b * 114) / 1000
    return (0, 0, 0) if yiq >= 128 else (255, 255, 255)


def break_long_word(word: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Split a word into the longest character runs that fit ``max_width``."""
    pieces: list[str] = []
    current = ""
    for char in word:
        if current and measure(current + char) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_words(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Wrap on spaces; single words wider than the box are broken per character."""
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        if measure(word) > max_width:
            pieces = break_long_word(word, max_width, measure)
            if current:
                lines.append(current)
            lines.extend(pieces[:-1])
            current = pieces[-1] if pieces else ""
            continue
        candidate = f"{current} {word}" if current else word
        if not current or measure(candidate) < max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def render_translation_to_image(
    image: ImageArray,
    regions: list[WriteBackRegion],
    scale_x: float = 1.0,
    scale_y: float = 1.0,
    font_stack: tuple[str, ...] = LATIN_FONT_STACK,
    resolver: FontResolver | None = None,
) -> ImageArray:
    """Paint each region's box with its background and draw its translation.
    
    Args:
        image: Source RGBA image (not modified)
        regions: Boxes in OCR coordinates with their translations
        scale_x: OCR-to-image horizontal scale
        scale_y: OCR-to-image vertical scale
        font_stack: Font families for the translated text
        resolver: Font resolver (a fresh one by default)
        
    Returns:
        A new RGBA image
    """
    cfg = WRITEBACK_CONFIG
    resolver = resolver or FontResolver()
    canvas = from_rgba_array(image.copy())
    draw = get_context_2d(canvas)
    
    for region in regions:
        if not region.translated_text.strip():
            continue
        box = region.bounding_box.scale(scale_x, scale_y)
        
        bg = sample_background_color(image, box)
        draw.rectangle(
            (box.x, box.y, box.right, box.bottom),
            fill=(*bg, 255),
        )
        text_color = get_contrast_color(bg)
        
        font_size = max(cfg.min_font_size, math.floor(box.height * cfg.font_size_factor + 0.5))
        max_width = box.width * cfg.width_ratio
        
        def layout(size: int) -> tuple[list[str], object]:
            font = resolver.get(font_stack, size)
            lines = wrap_words(
                region.translated_text,
                max_width,
                lambda s: float(draw.textlength(s, font=font)),
            )
            return lines, font
        
        lines, font = layout(font_size)
        total_height = len(lines) * font_size * cfg.line_spacing
        if total_height > box.height * cfg.height_ratio and font_size > cfg.min_font_size:
            font_size = max(
                cfg.min_font_size,
                math.floor(font_size * (box.height * cfg.height_ratio / total_height) + 0.5),
            )
            lines, font = layout(font_size)
        
        step = font_size * cfg.line_spacing
        start_y = box.y + box.height / 2 - (len(lines) - 1) * step / 2
        for i, line in enumerate(lines):
            draw.text(
                (box.x + box.width / 2, start_y + i * step),
                line,
                fill=(*text_color, 255),
                font=font,
                anchor="mm",
            )
        logger.debug(f"Wrote {len(lines)} lines at {font_size}px into {box}")
    
    return to_rgba_array(canvas)
