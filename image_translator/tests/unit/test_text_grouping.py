"""Unit tests for the simplified paragraph text builder."""

from image_translator.domain.entities.ocr_item import OCRItem
from image_translator.domain.services.text_grouping import (
    build_paragraph_text_for_translation,
    group_items_into_lines,
    group_items_into_paragraphs,
)
from image_translator.domain.value_objects.geometry import Rect


def item(text, x, y, w=30, h=10):
    return OCRItem(text=text, bounding_box=Rect(x, y, w, h))


class TestGroupItemsIntoLines:
    """Tests for line grouping."""
    
    def test_rows_and_order(self):
        lines = group_items_into_lines([
            item("b", 40, 1),
            item("c", 0, 30),
            item("a", 0, 0),
        ])
        assert [line.text for line in lines] == ["a b", "c"]
        assert lines[0].bounding_box == Rect(0, 0, 70, 11)
    
    def test_blank_items_ignored(self):
        assert group_items_into_lines([item("  ", 0, 0)]) == []


class TestGroupItemsIntoParagraphs:
    """Tests for paragraph grouping."""
    
    def test_gap_splits_paragraphs(self):
        paragraphs = group_items_into_paragraphs([
            item("Hello", 0, 0),
            item("world", 0, 14),
            item("Bye", 0, 60),
        ])
        assert [p.text for p in paragraphs] == ["Hello world", "Bye"]
        assert len(paragraphs[0].lines) == 2
        assert paragraphs[0].bounding_box == Rect(0, 0, 30, 24)
    
    def test_empty(self):
        assert group_items_into_paragraphs([]) == []


class TestBuildParagraphText:
    """Tests for the single-request translation text."""
    
    def test_paragraphs_separated_by_blank_line(self):
        text = build_paragraph_text_for_translation([
            item("Hello", 0, 0),
            item("world", 0, 14),
            item("Bye", 0, 60),
        ])
        assert text == "Hello world\n\nBye"
    
    def test_whitespace_normalized(self):
        text = build_paragraph_text_for_translation([item("  Hello   there ", 0, 0)])
        assert text == "Hello there"
    
    def test_no_items(self):
        assert build_paragraph_text_for_translation([item(" ", 0, 0)]) == ""
