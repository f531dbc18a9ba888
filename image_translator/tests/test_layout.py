"""Tests for text wrapping, font fitting and glyph rendering."""

import logging

import numpy as np
import pytest
from PIL import features

from ..config import LATIN_FONT_STACK, LAYOUT_CONFIG
from ..core import layout as layout_module
from ..core.canvas import create_canvas, get_context_2d
from ..core.fonts import FontResolver
from ..core.layout import (
    TextAlignment,
    TextDirection,
    compute_layout,
    layout_direction,
    render_text_masks,
    wrap_text,
)


@pytest.fixture
def resolver():
    """Resolver that always falls back to Pillow's bundled font."""
    return FontResolver(search_dirs=())


class TestWrapText:
    """Test greedy wrapping with a character-count measure."""
    
    def test_words(self):
        assert wrap_text("aaa bbb ccc", 7, len, False) == ["aaa bbb", "ccc"]
    
    def test_explicit_newlines_and_blank_lines(self):
        assert wrap_text("a\n\nb", 10, len, False) == ["a", "", "b"]
    
    def test_cjk_per_character(self):
        assert wrap_text("你好世界", 2, len, True) == ["你好", "世界"]
    
    def test_overlong_token_gets_own_line(self):
        assert wrap_text("ab abcdefgh cd", 3, len, False) == ["ab", "abcdefgh", "cd"]
    
    def test_collapses_whitespace_between_words(self):
        assert wrap_text("  a   b  ", 10, len, False) == ["a b"]


class TestComputeLayout:
    """Test the font-size search."""
    
    def test_fit_within_box(self, resolver):
        width, height = 200, 60
        metrics = compute_layout("Hello brave new world", width, height, LATIN_FONT_STACK, 1, False, resolver)
        assert metrics.font_size >= LAYOUT_CONFIG.min_font_size
        
        font = resolver.get(LATIN_FONT_STACK, metrics.font_size)
        draw = get_context_2d(create_canvas(1, 1))
        for line in metrics.lines:
            assert draw.textlength(line, font=font) <= width * LAYOUT_CONFIG.fit_ratio
        assert len(metrics.lines) * metrics.line_height <= height * LAYOUT_CONFIG.fit_ratio
    
    def test_larger_box_gives_larger_font(self, resolver):
        small = compute_layout("Hi", 100, 20, LATIN_FONT_STACK, 1, False, resolver)
        large = compute_layout("Hi", 100, 60, LATIN_FONT_STACK, 1, False, resolver)
        assert large.font_size > small.font_size
    
    def test_nothing_fits_uses_minimum(self, resolver):
        metrics = compute_layout("A very long sentence here", 5, 5, LATIN_FONT_STACK, 1, False, resolver)
        assert metrics.font_size == LAYOUT_CONFIG.min_font_size
        assert metrics.lines


class TestRenderTextMasks:
    """Test glyph and shadow canvases."""
    
    def test_canvas_sizes(self, resolver):
        layout = render_text_masks("Hello", 120, 40, LATIN_FONT_STACK, resolver=resolver)
        assert layout.text_canvas.size == (120, 40)
        assert layout.shadow_canvas is None
        assert np.asarray(layout.text_canvas)[..., 3].any()
    
    def test_shadow_rendered_when_blurred(self, resolver):
        layout = render_text_masks("Hello", 120, 40, LATIN_FONT_STACK, shadow_blur=1.0, resolver=resolver)
        assert layout.shadow_canvas is not None
        assert layout.shadow_canvas.size == (120, 40)
    
    def test_rtl_is_right_aligned(self, resolver):
        ltr = render_text_masks("Hi", 300, 30, LATIN_FONT_STACK, resolver=resolver)
        rtl = render_text_masks(
            "Hi", 300, 30, LATIN_FONT_STACK,
            align=TextAlignment.LEFT, direction=TextDirection.RTL, resolver=resolver,
        )
        ltr_cols = np.nonzero(np.asarray(ltr.text_canvas)[..., 3].any(axis=0))[0]
        rtl_cols = np.nonzero(np.asarray(rtl.text_canvas)[..., 3].any(axis=0))[0]
        assert ltr_cols.max() < 150
        assert rtl_cols.min() > 150
    
    def test_degenerate_size_clamped(self, resolver):
        layout = render_text_masks("x", 0, 0, LATIN_FONT_STACK, resolver=resolver)
        assert (layout.width, layout.height) == (1, 1)


class TestLayoutDirection:
    """Test right-to-left glyph ordering."""
    
    def test_ltr_leaves_direction_to_pillow(self):
        assert layout_direction(TextDirection.LTR) is None
    
    def test_rtl_with_raqm(self, monkeypatch):
        monkeypatch.setattr(layout_module.features, "check", lambda name: True)
        assert layout_direction(TextDirection.RTL) == "rtl"
    
    def test_rtl_without_raqm_warns_once(self, monkeypatch, caplog):
        monkeypatch.setattr(layout_module.features, "check", lambda name: False)
        monkeypatch.setattr(layout_module, "_raqm_warning_logged", False)
        with caplog.at_level(logging.WARNING, logger=layout_module.__name__):
            assert layout_direction(TextDirection.RTL) is None
            assert layout_direction(TextDirection.RTL) is None
        warnings = [r for r in caplog.records if "libraqm" in r.getMessage()]
        assert len(warnings) == 1
    
    @pytest.mark.skipif(not features.check("raqm"), reason="libraqm not available")
    def test_rtl_reorders_glyphs(self, resolver):
        right = render_text_masks(
            "Hello!", 200, 30, LATIN_FONT_STACK,
            align=TextAlignment.RIGHT, resolver=resolver,
        )
        rtl = render_text_masks(
            "Hello!", 200, 30, LATIN_FONT_STACK,
            direction=TextDirection.RTL, resolver=resolver,
        )
        assert right.font_size == rtl.font_size
        assert not np.array_equal(
            np.asarray(right.text_canvas), np.asarray(rtl.text_canvas)
        )
