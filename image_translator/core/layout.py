"""Text layout engine - wrapping, font-size search and glyph mask rendering."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from PIL import Image, ImageFilter, features

from ..config import LAYOUT_CONFIG
from .canvas import create_canvas, get_context_2d
from .fonts import FontResolver, FontType

logger = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r?\n")

_raqm_warning_logged = False


class TextAlignment(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class TextDirection(str, Enum):
    LTR = "ltr"
    RTL = "rtl"


@dataclass(frozen=True, slots=True)
class LayoutMetrics:
    """Chosen wrap and size for a box."""
    lines: list[str]
    font_size: int
    line_height: float


@dataclass(slots=True)
class TextLayoutResult:
    """Rendered white-on-transparent glyph and shadow canvases."""
    text_canvas: Image.Image
    shadow_canvas: Image.Image | None
    lines: list[str]
    font_size: int
    line_height: float
    width: int
    height: int


def wrap_text(
    text: str,
    max_width: float,
    measure: Callable[[str], float],
    is_cjk: bool,
) -> list[str]:
    """Greedy line wrapping.
    
    Explicit newlines always break; blank source lines are kept as ``''``.
    CJK text wraps per character, other scripts per whitespace-separated
    word. A token wider than ``max_width`` still gets a line of its own.
    """
    lines: list[str] = []
    for raw_line in _NEWLINE.split(text):
        trimmed = raw_line.strip()
        if not trimmed:
            lines.append("")
            continue
        tokens = list(trimmed) if is_cjk else trimmed.split()
        current = ""
        for token in tokens:
            if not current:
                candidate = token
            else:
                candidate = f"{current}{token}" if is_cjk else f"{current} {token}"
            if not current or measure(candidate) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = token
        if current:
            lines.append(current)
    return lines


def layout_direction(direction: TextDirection) -> str | None:
    """Pillow ``direction`` argument for the text direction.
    
    Right-to-left glyph order needs libraqm. Without it RTL text is only
    right-aligned and a warning is logged once.
    """
    global _raqm_warning_logged
    if direction != TextDirection.RTL:
        return None
    if features.check("raqm"):
        return "rtl"
    if not _raqm_warning_logged:
        logger.warning("libraqm is not available; RTL text is drawn in logical order")
        _raqm_warning_logged = True
    return None


def _measurer(font: FontType, direction: str | None = None) -> Callable[[str], float]:
    draw = get_context_2d(create_canvas(1, 1))
    return lambda s: float(draw.textlength(s, font=font, direction=direction))


def compute_layout(
    text: str,
    width: float,
    height: float,
    font_stack: tuple[str, ...],
    target_line_count: int,
    is_cjk: bool,
    resolver: FontResolver,
    direction: str | None = None,
) -> LayoutMetrics:
    """Binary-search the font size that fits the box.
    
    Among fitting sizes, the one whose line count is closest to
    ``target_line_count`` wins, then the larger one. When no size fits,
    the text is wrapped at the minimum size anyway. ``direction`` is passed
    to Pillow when measuring.
    """
    cfg = LAYOUT_CONFIG
    max_width = width * cfg.fit_ratio
    max_height = height * cfg.fit_ratio
    target = max(1, target_line_count)
    
    best_lines: list[str] = []
    best_size = cfg.min_font_size
    best_penalty = math.inf
    
    low = cfg.min_font_size
    high = max(cfg.min_font_size, math.floor(height))
    for _ in range(cfg.search_iterations):
        size = max(cfg.min_font_size, (low + high) // 2)
        measure = _measurer(resolver.get(font_stack, size), direction)
        lines = wrap_text(text, max_width, measure, is_cjk)
        line_height = size * cfg.line_height_factor
        widest = max((measure(line) for line in lines), default=0.0)
        fits = widest <= max_width and len(lines) * line_height <= max_height
        if fits:
            penalty = abs(len(lines) - target)
            if penalty < best_penalty or (penalty == best_penalty and size > best_size):
                best_penalty = penalty
                best_size = size
                best_lines = lines
            low = size + 1
        else:
            high = size - 1
    
    if not best_lines:
        measure = _measurer(resolver.get(font_stack, best_size), direction)
        best_lines = wrap_text(text, max_width, measure, is_cjk)
        logger.debug(f"No font size fits {width:.0f}x{height:.0f}; using {best_size}px")
    
    return LayoutMetrics(
        lines=best_lines,
        font_size=best_size,
        line_height=best_size * cfg.line_height_factor,
    )


def _draw_lines(
    canvas: Image.Image,
    lines: list[str],
    font: FontType,
    line_height: float,
    align: TextAlignment,
    direction: str | None = None,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> None:
    draw = get_context_2d(canvas)
    start_x = canvas.width if align == TextAlignment.RIGHT else 0
    anchor = "ra" if align == TextAlignment.RIGHT else "la"
    cursor_y = 0.0
    for line in lines:
        if line:
            draw.text(
                (start_x + offset_x, cursor_y + offset_y),
                line,
                fill=(255, 255, 255, 255),
                font=font,
                anchor=anchor,
                direction=direction,
            )
        cursor_y += line_height


def render_text_masks(
    text: str,
    width: int,
    height: int,
    font_stack: tuple[str, ...],
    align: TextAlignment = TextAlignment.LEFT,
    direction: TextDirection = TextDirection.LTR,
    target_line_count: int = 1,
    is_cjk: bool = False,
    shadow_blur: float = 0.0,
    shadow_offset_x: float = 0.0,
    shadow_offset_y: float = 0.0,
    resolver: FontResolver | None = None,
) -> TextLayoutResult:
    """Lay out ``text`` in a ``width`` x ``height`` box and render its masks.
    
    Glyphs are painted white from the top edge, softened by a slight blur.
    When ``shadow_blur`` is positive, a second offset copy is rendered and
    blurred into a soft shadow.
    
    Args:
        text: Text to render (newlines force breaks)
        width: Box width in pixels
        height: Box height in pixels
        font_stack: Font families, most preferred first
        align: RIGHT anchors lines to the right edge
        direction: RTL implies right alignment and right-to-left glyph order
        target_line_count: Preferred number of wrapped lines
        is_cjk: Wrap per character instead of per word
        shadow_blur: Gaussian radius of the shadow pass (0 disables it)
        shadow_offset_x: Horizontal shadow offset
        shadow_offset_y: Vertical shadow offset
        resolver: Font resolver (a fresh one by default)
        
    Returns:
        Layout result with both canvases
    """
    resolver = resolver or FontResolver()
    width = max(1, int(width))
    height = max(1, int(height))
    if direction == TextDirection.RTL:
        align = TextAlignment.RIGHT
    pillow_direction = layout_direction(direction)
    
    metrics = compute_layout(
        text, width, height, font_stack, target_line_count, is_cjk, resolver, pillow_direction,
    )
    font = resolver.get(font_stack, metrics.font_size)
    
    text_canvas = create_canvas(width, height)
    _draw_lines(text_canvas, metrics.lines, font, metrics.line_height, align, pillow_direction)
    text_canvas = text_canvas.filter(ImageFilter.GaussianBlur(LAYOUT_CONFIG.glyph_blur))
    
    shadow_canvas = None
    if shadow_blur > 0:
        base = create_canvas(width, height)
        _draw_lines(
            base, metrics.lines, font, metrics.line_height, align, pillow_direction,
            offset_x=shadow_offset_x, offset_y=shadow_offset_y,
        )
        shadow_canvas = base.filter(ImageFilter.GaussianBlur(shadow_blur))
    
    return TextLayoutResult(
        text_canvas=text_canvas,
        shadow_canvas=shadow_canvas,
        lines=metrics.lines,
        font_size=metrics.font_size,
        line_height=metrics.line_height,
        width=width,
        height=height,
    )
