"""Tests for font stack resolution."""

import pytest

from ..core.fonts import FontResolver
from ..exceptions import RenderError


class TestFontResolver:
    """Test family lookup and fallbacks."""
    
    def test_default_font_when_nothing_found(self):
        resolver = FontResolver(search_dirs=())
        assert resolver.find_stack(("Inter", "sans-serif")) is None
        font = resolver.get(("Inter", "sans-serif"), 20)
        assert font is not None
        assert resolver.get(("Inter", "sans-serif"), 20) is font
    
    def test_family_matched_by_stem(self, tmp_path):
        (tmp_path / "Inter-Bold.ttf").write_bytes(b"")
        (tmp_path / "Inter-Regular.ttf").write_bytes(b"")
        (tmp_path / "readme.txt").write_text("x")
        resolver = FontResolver(search_dirs=(str(tmp_path),))
        assert resolver.find_family("Inter") == tmp_path / "Inter-Regular.ttf"
        assert resolver.find_family("Roboto") is None
    
    def test_generic_family(self, tmp_path):
        nested = tmp_path / "truetype" / "dejavu"
        nested.mkdir(parents=True)
        (nested / "DejaVuSans.ttf").write_bytes(b"")
        resolver = FontResolver(search_dirs=(str(tmp_path),))
        assert resolver.find_stack(("Missing Font", "sans-serif")) == nested / "DejaVuSans.ttf"
    
    def test_explicit_font_path_wins(self, tmp_path):
        path = tmp_path / "custom.ttf"
        resolver = FontResolver(search_dirs=(), font_path=path)
        assert resolver.find_stack(("Inter",)) == path
    
    def test_unloadable_explicit_font_raises(self, tmp_path):
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"not a font")
        resolver = FontResolver(search_dirs=(), font_path=path)
        with pytest.raises(RenderError):
            resolver.get(("Inter",), 12)
    
    def test_unloadable_discovered_font_falls_back(self, tmp_path):
        (tmp_path / "Inter.ttf").write_bytes(b"not a font")
        resolver = FontResolver(search_dirs=(str(tmp_path),))
        assert resolver.get(("Inter",), 12) is not None
