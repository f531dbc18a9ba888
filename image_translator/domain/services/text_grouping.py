"""Text grouping service - group OCR items into lines and paragraphs.

A lighter-weight grouping than the region builder, used to build a single
translation string for a whole image and by the simple write-back mode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from statistics import median

from ...config import TEXT_GROUPING_CONFIG
from ..entities.ocr_item import OCRItem
from ..value_objects.geometry import Rect

_WHITESPACE = re.compile(r"\s+")


@dataclass(slots=True)
class OCRLine:
    """A row of items with its union box."""
    text: str
    bounding_box: Rect
    items: list[OCRItem]


@dataclass(slots=True)
class OCRParagraph:
    """Consecutive lines separated by small vertical gaps."""
    text: str
    bounding_box: Rect
    items: list[OCRItem]
    lines: list[OCRLine] = field(default_factory=list)


@dataclass(slots=True)
class _LineGroup:
    items: list[OCRItem]
    min_y: float
    max_y: float
    
    def fits(self, item: OCRItem) -> bool:
        box = item.bounding_box
        cfg = TEXT_GROUPING_CONFIG
        group_height = self.max_y - self.min_y
        center_delta = abs(box.center.y - (self.min_y + self.max_y) / 2)
        if center_delta < max(group_height, box.height) * cfg.line_center_threshold:
            return True
        overlap = max(0.0, min(self.max_y, box.bottom) - max(self.min_y, box.y))
        return overlap > min(group_height, box.height) * cfg.line_overlap_threshold
    
    def add(self, item: OCRItem) -> None:
        self.items.append(item)
        self.min_y = min(self.min_y, item.bounding_box.y)
        self.max_y = max(self.max_y, item.bounding_box.bottom)


def _visible(items: list[OCRItem]) -> list[OCRItem]:
    return [item for item in items if not item.is_empty]


def _line_groups(items: list[OCRItem]) -> list[list[OCRItem]]:
    groups: list[_LineGroup] = []
    for item in sorted(items, key=lambda i: i.bounding_box.center.y):
        for group in groups:
            if group.fits(item):
                group.add(item)
                break
        else:
            box = item.bounding_box
            groups.append(_LineGroup(items=[item], min_y=box.y, max_y=box.bottom))
    return [group.items for group in groups]


def group_items_into_lines(items: list[OCRItem]) -> list[OCRLine]:
    """Group items into rows sorted top to bottom, items left to right.
    
    Args:
        items: OCR items (blank ones are ignored)
        
    Returns:
        Lines with space-joined text and union bounding boxes
    """
    visible = _visible(items)
    if not visible:
        return []
    
    lines: list[OCRLine] = []
    for group in _line_groups(visible):
        group.sort(key=lambda i: i.bounding_box.x)
        lines.append(OCRLine(
            text=" ".join(item.text for item in group),
            bounding_box=Rect.union_all(item.bounding_box for item in group),
            items=group,
        ))
    lines.sort(key=lambda line: line.bounding_box.y)
    return lines


def _split_paragraphs(lines: list[OCRLine]) -> list[list[OCRLine]]:
    if not lines:
        return []
    median_height = median(line.bounding_box.height for line in lines)
    threshold = median_height * TEXT_GROUPING_CONFIG.paragraph_gap_threshold
    
    paragraphs: list[list[OCRLine]] = []
    current = [lines[0]]
    for previous, line in zip(lines, lines[1:]):
        gap = line.bounding_box.y - previous.bounding_box.bottom
        if gap > threshold:
            paragraphs.append(current)
            current = [line]
        else:
            current.append(line)
    paragraphs.append(current)
    return paragraphs


def group_items_into_paragraphs(items: list[OCRItem]) -> list[OCRParagraph]:
    """Group items into paragraphs of lines split on large vertical gaps."""
    paragraphs = []
    for lines in _split_paragraphs(group_items_into_lines(items)):
        paragraphs.append(OCRParagraph(
            text=" ".join(line.text for line in lines),
            bounding_box=Rect.union_all(line.bounding_box for line in lines),
            items=[item for line in lines for item in line.items],
            lines=lines,
        ))
    return paragraphs


def build_paragraph_text_for_translation(items: list[OCRItem]) -> str:
    """Format all items as one string for a single translation request.
    
    Lines inside a paragraph are joined with spaces and paragraphs are
    separated by a blank line.
    """
    normalized = [
        OCRItem(
            text=_WHITESPACE.sub(" ", item.text.strip()),
            bounding_box=item.bounding_box,
            confidence=item.confidence,
        )
        for item in _visible(items)
    ]
    if not normalized:
        return ""
    
    # Lines are ordered by their first (leftmost) item's top edge here
    lines = []
    for group in _line_groups(normalized):
        group.sort(key=lambda i: i.bounding_box.x)
        lines.append(OCRLine(
            text=" ".join(item.text for item in group),
            bounding_box=Rect.union_all(item.bounding_box for item in group),
            items=group,
        ))
    lines.sort(key=lambda line: line.items[0].bounding_box.y)
    
    paragraphs = _split_paragraphs(lines)
    return "\n\n".join(" ".join(line.text for line in paragraph) for paragraph in paragraphs)
