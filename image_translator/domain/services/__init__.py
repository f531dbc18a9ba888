"""Domain services - pure grouping and language logic."""

from .inpaint_grouping import InpaintGroup, RegionBounds, build_inpaint_groups
from .language import get_font_family, is_cjk_language, is_rtl_language, normalize_language_code
from .region_builder import build_regions, median
from .text_grouping import (
    OCRLine,
    OCRParagraph,
    build_paragraph_text_for_translation,
    group_items_into_lines,
    group_items_into_paragraphs,
)

__all__ = [
    'build_regions',
    'median',
    'build_inpaint_groups',
    'InpaintGroup',
    'RegionBounds',
    'is_cjk_language',
    'is_rtl_language',
    'get_font_family',
    'normalize_language_code',
    'OCRLine',
    'OCRParagraph',
    'group_items_into_lines',
    'group_items_into_paragraphs',
    'build_paragraph_text_for_translation',
]
