"""Region builder - cluster OCR tokens into lines, then paragraphs."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from statistics import median as _median

from ...config import REGION_CONFIG
from ..entities.ocr_item import OCRItem, OCRStyle, RGB
from ..entities.region import Region
from ..value_objects.geometry import Point, Quadrilateral, Rect
from .language import is_cjk_language

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


@dataclass(slots=True)
class _Token:
    item: OCRItem
    text: str
    bbox: Rect
    
    @property
    def center_x(self) -> float:
        return self.bbox.x + self.bbox.width / 2
    
    @property
    def center_y(self) -> float:
        return self.bbox.y + self.bbox.height / 2


@dataclass(slots=True)
class _Line:
    tokens: list[_Token]
    bbox: Rect
    text: str = ""
    
    @property
    def center_y(self) -> float:
        return self.bbox.y + self.bbox.height / 2
    
    def add(self, token: _Token) -> None:
        self.tokens.append(token)
        self.bbox = self.bbox.union(token.bbox)


@dataclass(slots=True)
class _Paragraph:
    lines: list[_Line] = field(default_factory=list)
    
    @property
    def tokens(self) -> list[_Token]:
        return [token for line in self.lines for token in line.tokens]


def median(values: list[float], default: float = REGION_CONFIG.default_median) -> float:
    """Median of the values, or ``default`` for an empty list."""
    if not values:
        return default
    return float(_median(values))


def build_regions(
    items: list[OCRItem],
    source_lang: str,
    scale_x: float = 1.0,
    scale_y: float = 1.0,
) -> list[Region]:
    """Group OCR items into paragraph regions in the target raster's coordinates.
    
    Algorithm:
        1. Drop blank items and scale the rest by (scale_x, scale_y)
        2. Greedily assign tokens (sorted by center) to line bands
        3. Join each line left-to-right (no separator for CJK sources)
        4. Split the top-to-bottom line sequence on large vertical gaps
    
    Args:
        items: Raw OCR items in OCR-space coordinates
        source_lang: Language code of the recognized text
        scale_x: Horizontal OCR-to-image scale factor
        scale_y: Vertical OCR-to-image scale factor
        
    Returns:
        Regions with ids ``region-1``, ``region-2``, ... in reading order.
        An empty list when no item carries visible text.
    """
    scaled = [
        item.scaled(scale_x, scale_y)
        for item in items
        if not item.is_empty
    ]
    if not scaled:
        return []
    
    tokens = [_Token(item=item, text=item.text, bbox=item.bounding_box) for item in scaled]
    median_height = median([token.bbox.height for token in tokens])
    
    lines = _group_lines(tokens, median_height)
    is_cjk = is_cjk_language(source_lang)
    for line in lines:
        line.tokens.sort(key=lambda t: t.bbox.x)
        line.text = _line_text(line.tokens, is_cjk)
    
    paragraphs = _group_paragraphs(lines, median_height)
    regions = [_to_region(index, paragraph) for index, paragraph in enumerate(paragraphs)]
    
    logger.debug(
        f"Built {len(regions)} regions from {len(tokens)} tokens "
        f"({len(lines)} lines, median height {median_height:.1f})"
    )
    return regions


def _group_lines(tokens: list[_Token], median_height: float) -> list[_Line]:
    cfg = REGION_CONFIG
    lines: list[_Line] = []
    
    for token in sorted(tokens, key=lambda t: (t.center_y, t.center_x)):
        candidates = []
        for line in lines:
            overlap = token.bbox.vertical_overlap_ratio(line.bbox)
            near = abs(token.center_y - line.center_y) <= cfg.line_center_factor * median_height
            if (near or overlap >= cfg.line_overlap_ratio) and overlap >= cfg.line_min_overlap_ratio:
                candidates.append(line)
        
        if not candidates:
            lines.append(_Line(tokens=[token], bbox=token.bbox))
            continue
        
        # First candidate wins ties
        target = min(candidates, key=lambda line: abs(token.center_y - line.center_y))
        target.add(token)
    
    return lines


def _group_paragraphs(lines: list[_Line], median_height: float) -> list[_Paragraph]:
    ordered = sorted(lines, key=lambda line: (line.bbox.y, line.bbox.x))
    paragraphs: list[_Paragraph] = []
    current = _Paragraph()
    
    for line in ordered:
        if current.lines:
            previous = current.lines[-1]
            gap = line.bbox.y - previous.bbox.bottom
            if gap > REGION_CONFIG.paragraph_gap_factor * median_height:
                paragraphs.append(current)
                current = _Paragraph()
        current.lines.append(line)
    
    if current.lines:
        paragraphs.append(current)
    return paragraphs


def _line_text(tokens: list[_Token], is_cjk: bool) -> str:
    if is_cjk:
        return "".join(token.text for token in tokens)
    parts = (_WHITESPACE.sub(" ", token.text).strip() for token in tokens)
    return " ".join(part for part in parts if part)


def _to_region(index: int, paragraph: _Paragraph) -> Region:
    tokens = paragraph.tokens
    bbox = Rect.union_all(token.bbox for token in tokens)
    items = [token.item for token in tokens]
    return Region(
        id=f"region-{index + 1}",
        items=items,
        bbox=bbox,
        quad=_region_quad(items, bbox),
        source_lines=[line.text for line in paragraph.lines],
        source_line_count=len(paragraph.lines),
        style=_average_style(items),
    )


def _average_color(colors: list[RGB]) -> RGB | None:
    if not colors:
        return None
    n = len(colors)
    return (
        round(sum(c[0] for c in colors) / n),
        round(sum(c[1] for c in colors) / n),
        round(sum(c[2] for c in colors) / n),
    )


def _average_style(items: list[OCRItem]) -> OCRStyle | None:
    text = _average_color([i.style.text for i in items if i.style and i.style.text])
    bg = _average_color([i.style.bg for i in items if i.style and i.style.bg])
    if text is None and bg is None:
        return None
    return OCRStyle(text=text, bg=bg)


def _region_quad(items: list[OCRItem], bbox: Rect) -> Quadrilateral:
    """Pick the region outline.
    
    Axis-aligned text keeps the bbox corners. When the item quads are tilted
    beyond the rotation threshold, a single item keeps its own quad and a
    multi-item region gets the tightest rectangle aligned with the median
    text angle.
    """
    quads = [item.quad.normalized() for item in items if item.quad is not None]
    if not quads:
        return Quadrilateral.from_rect(bbox)
    
    angle = median([quad.angle for quad in quads], default=0.0)
    if abs(angle) <= REGION_CONFIG.rotation_threshold_deg:
        return Quadrilateral.from_rect(bbox)
    
    if len(items) == 1:
        return quads[0]
    
    points = [point for item in items for point in item.outline.points]
    return _oriented_rect(points, angle)


def _oriented_rect(points: list[Point], angle_deg: float) -> Quadrilateral:
    """Bounding rectangle of the points in a frame rotated by ``angle_deg``."""
    theta = math.radians(angle_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    
    us = [p.x * cos_t + p.y * sin_t for p in points]
    vs = [-p.x * sin_t + p.y * cos_t for p in points]
    min_u, max_u = min(us), max(us)
    min_v, max_v = min(vs), max(vs)
    
    def back(u: float, v: float) -> Point:
        return Point(u * cos_t - v * sin_t, u * sin_t + v * cos_t)
    
    return Quadrilateral(
        back(min_u, min_v),
        back(max_u, min_v),
        back(max_u, max_v),
        back(min_u, max_v),
    )
