"""Font stack resolution to Pillow fonts."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from PIL import ImageFont, features

from ..config import FONT_EXTENSIONS, FONT_SEARCH_DIRS
from ..exceptions import RenderError

logger = logging.getLogger(__name__)

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont

# Raqm adds bidi reordering and complex shaping when libraqm is installed
LAYOUT_ENGINE = ImageFont.Layout.RAQM if features.check("raqm") else ImageFont.Layout.BASIC

# Concrete families tried for CSS generic names
GENERIC_FAMILIES: dict[str, tuple[str, ...]] = {
    "sans-serif": ("DejaVu Sans", "Liberation Sans", "Noto Sans", "Arial", "Helvetica"),
    "serif": ("DejaVu Serif", "Liberation Serif", "Noto Serif", "Times New Roman"),
    "system-ui": ("Noto Sans", "DejaVu Sans", "Segoe UI"),
    "-apple-system": ("SF Pro", "Helvetica Neue"),
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _normalize(name: str) -> str:
    return _NON_ALNUM.sub("", name.lower())


class FontResolver:
    """Resolve font-family stacks to font files found on the system.
    
    Families are matched by normalized file stem prefix (``Noto Sans CJK``
    matches ``NotoSansCJK-Regular.ttc``), regular weights preferred. When
    nothing matches, Pillow's bundled scalable font is used.
    
    Example:
        >>> resolver = FontResolver()
        >>> font = resolver.get(("Inter", "Arial", "sans-serif"), 24)
    """
    
    def __init__(
        self,
        search_dirs: tuple[str, ...] = FONT_SEARCH_DIRS,
        font_path: str | Path | None = None,
    ):
        self._search_dirs = search_dirs
        self._font_path = Path(font_path) if font_path else None
        self._index: dict[str, Path] | None = None
        self._stack_cache: dict[tuple[str, ...], Path | None] = {}
        self._font_cache: dict[tuple[Path | None, int], FontType] = {}
    
    def _build_index(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for directory in self._search_dirs:
            root = Path(os.path.expanduser(directory))
            if not root.is_dir():
                continue
            for dirpath, _dirnames, filenames in os.walk(root):
                for filename in sorted(filenames):
                    path = Path(dirpath) / filename
                    if path.suffix.lower() in FONT_EXTENSIONS:
                        index.setdefault(_normalize(path.stem), path)
        logger.debug(f"Indexed {len(index)} font files")
        return index
    
    @property
    def index(self) -> dict[str, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index
    
    def find_family(self, family: str) -> Path | None:
        """Find a font file for a single family name."""
        candidates = GENERIC_FAMILIES.get(family.lower())
        if candidates is not None:
            for candidate in candidates:
                path = self.find_family(candidate)
                if path is not None:
                    return path
            return None
        
        key = _normalize(family)
        if not key:
            return None
        matches = sorted(stem for stem in self.index if stem.startswith(key))
        if not matches:
            return None
        # Prefer the exact or regular-weight file
        for preferred in (key, f"{key}regular"):
            if preferred in matches:
                return self.index[preferred]
        return self.index[matches[0]]
    
    def find_stack(self, stack: tuple[str, ...]) -> Path | None:
        """First font file matching any family of the stack."""
        if self._font_path is not None:
            return self._font_path
        if stack not in self._stack_cache:
            path = None
            for family in stack:
                path = self.find_family(family)
                if path is not None:
                    break
            if path is None:
                logger.warning(f"No font found for {', '.join(stack)}; using Pillow default")
            self._stack_cache[stack] = path
        return self._stack_cache[stack]
    
    def get(self, stack: tuple[str, ...], size: int) -> FontType:
        """Load the stack's font at ``size`` pixels.
        
        Raises:
            RenderError: If an explicitly configured font file cannot be loaded
        """
        size = max(1, int(size))
        path = self.find_stack(stack)
        key = (path, size)
        if key in self._font_cache:
            return self._font_cache[key]
        
        if path is None:
            font: FontType = ImageFont.load_default(size)
        else:
            try:
                font = ImageFont.truetype(str(path), size=size, layout_engine=LAYOUT_ENGINE)
            except OSError as e:
                if path == self._font_path:
                    raise RenderError(f"Failed to load font {path}: {e}") from e
                logger.warning(f"Failed to load font {path}: {e}")
                font = ImageFont.load_default(size)
        
        self._font_cache[key] = font
        return font
