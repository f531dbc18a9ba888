"""Canvas shim - Pillow drawing surfaces and RGBA array conversion."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image, ImageDraw

from ..exceptions import EncodingError, RenderError

logger = logging.getLogger(__name__)

# Type aliases
ImageArray = npt.NDArray[np.uint8]  # HxWx4 RGBA
MaskArray = npt.NDArray[np.uint8]  # HxW


def create_canvas(width: int, height: int) -> Image.Image:
    """Create a transparent RGBA drawing surface.
    
    Raises:
        RenderError: If either dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise RenderError("Canvas creation is not available.")
    return Image.new("RGBA", (int(width), int(height)), (0, 0, 0, 0))


def get_context_2d(canvas: Image.Image) -> ImageDraw.ImageDraw:
    """Return a 2D drawing context for the canvas."""
    if canvas.mode != "RGBA":
        raise RenderError("Canvas 2D context is not available.")
    return ImageDraw.Draw(canvas)


def to_rgba_array(image: Image.Image) -> ImageArray:
    """Copy a Pillow image into an owned HxWx4 uint8 array."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def from_rgba_array(data: ImageArray) -> Image.Image:
    """Wrap an HxWx4 array as an RGBA Pillow image.
    
    Raises:
        ValueError: If the array is not HxWx4
    """
    if data.ndim != 3 or data.shape[2] != 4:
        raise ValueError(f"Expected an HxWx4 array, got shape {data.shape}")
    return Image.fromarray(np.ascontiguousarray(data, dtype=np.uint8))


def load_image(path: Path | str) -> ImageArray:
    """Decode an image file into an RGBA array.
    
    Raises:
        RenderError: If the file cannot be opened or decoded
    """
    try:
        with Image.open(path) as img:
            return to_rgba_array(img)
    except (OSError, ValueError) as e:
        raise RenderError(f"Failed to load image {path}: {e}") from e


def encode_png(data: ImageArray) -> bytes:
    """Encode an RGBA array as PNG bytes.
    
    Raises:
        EncodingError: If the encoder rejects the data
    """
    buffer = io.BytesIO()
    try:
        from_rgba_array(data).save(buffer, format="PNG")
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"PNG encoding failed: {e}")
        raise EncodingError("Failed to encode translated image.") from e
    return buffer.getvalue()
