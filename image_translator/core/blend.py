"""Local texture sampling and glyph layer compositing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
import numpy.typing as npt

from ..config import PIPELINE_CONFIG
from ..domain.value_objects.geometry import Bounds
from .canvas import ImageArray
from .mask import box_sum

RGB = tuple[int, int, int]


class BlendMode(str, Enum):
    """Composite modes for rendered layers."""
    TEXT = "text"
    SHADOW = "shadow"


@dataclass(frozen=True, slots=True)
class TextureData:
    """Luma micro-contrast over a window plus its mean luma in [0, 1]."""
    bounds: Bounds
    tex: npt.NDArray[np.int16]
    avg_luma: float
    
    @property
    def width(self) -> int:
        return self.bounds.width
    
    @property
    def height(self) -> int:
        return self.bounds.height
    
    def sample(self, x0: int, y0: int, x1: int, y1: int) -> npt.NDArray[np.int16]:
        """Texture over the global window [x0, x1) x [y0, y1), zero outside."""
        out = np.zeros((y1 - y0, x1 - x0), dtype=np.int16)
        ix0, iy0 = max(x0, self.bounds.x), max(y0, self.bounds.y)
        ix1, iy1 = min(x1, self.bounds.right), min(y1, self.bounds.bottom)
        if ix0 < ix1 and iy0 < iy1:
            out[iy0 - y0:iy1 - y0, ix0 - x0:ix1 - x0] = self.tex[
                iy0 - self.bounds.y:iy1 - self.bounds.y,
                ix0 - self.bounds.x:ix1 - self.bounds.x,
            ]
        return out


def luma(r: float, g: float, b: float) -> float:
    """Perceptual luminance (Rec. 601 weights)."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def _luma_array(rgb: np.ndarray) -> np.ndarray:
    rgb = rgb.astype(np.float64)
    return 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]


def box_blur(values: np.ndarray, radius: int) -> np.ndarray:
    """Rounded mean over a clipped (2r+1)^2 window."""
    sums, areas = box_sum(values, radius)
    return np.floor(sums / areas + 0.5).astype(np.int64)


def prepare_texture(image: ImageArray, bounds: Bounds) -> TextureData:
    """Sample luma texture (luma minus its local blur) inside ``bounds``.
    
    The window is clipped to the image first.
    """
    height, width = image.shape[:2]
    x0, y0 = max(0, bounds.x), max(0, bounds.y)
    x1, y1 = min(width, bounds.right), min(height, bounds.bottom)
    clipped = Bounds(x0, y0, max(0, x1 - x0), max(0, y1 - y0))
    if clipped.area == 0:
        return TextureData(bounds=clipped, tex=np.zeros((0, 0), dtype=np.int16), avg_luma=0.0)
    
    values = _luma_array(image[y0:y1, x0:x1, :3])
    rounded = np.floor(values + 0.5).astype(np.int64)
    blurred = box_blur(rounded, PIPELINE_CONFIG.texture_blur_radius)
    tex = (rounded - blurred).astype(np.int16)
    avg = float(values.sum() / (clipped.area * 255))
    return TextureData(bounds=clipped, tex=tex, avg_luma=avg)


def blend_layer(
    target: ImageArray,
    layer: ImageArray,
    bounds: Bounds,
    color: RGB,
    mode: BlendMode,
    text_is_dark: bool,
    texture: TextureData | None = None,
) -> None:
    """Composite a rendered layer's alpha onto ``target`` in place.
    
    Args:
        target: Image being painted (modified)
        layer: RGBA layer, only its alpha channel is used
        bounds: Position of the layer's top-left pixel in ``target``
        color: Paint color
        mode: SHADOW lerps toward the color; TEXT multiplies (dark text) or
            screens (light text) the background
        text_is_dark: Selects the TEXT sub-mode
        texture: Optional grain modulation applied to TEXT alpha
    """
    height, width = target.shape[:2]
    x0, y0 = max(0, bounds.x), max(0, bounds.y)
    x1 = min(width, bounds.x + layer.shape[1])
    y1 = min(height, bounds.y + layer.shape[0])
    if x0 >= x1 or y0 >= y1:
        return
    
    alpha = layer[y0 - bounds.y:y1 - bounds.y, x0 - bounds.x:x1 - bounds.x, 3] / 255.0
    if mode == BlendMode.TEXT and texture is not None:
        tex = texture.sample(x0, y0, x1, y1).astype(np.float64)
        alpha = np.clip(alpha * (1 + tex / 255 * PIPELINE_CONFIG.texture_strength), 0.0, 1.0)
    
    painted = alpha > 0
    if not painted.any():
        return
    
    region = target[y0:y1, x0:x1]
    bg = region[..., :3][painted].astype(np.float64)
    a = alpha[painted][:, None]
    tint = np.asarray(color, dtype=np.float64)
    
    if mode == BlendMode.SHADOW:
        out = bg * (1 - a) + tint * a
    elif text_is_dark:
        out = bg * (1 - a) + bg * (tint / 255) * a
    else:
        screen = 255 - (255 - bg) * (255 - tint) / 255
        out = bg * (1 - a) + screen * a
    
    region[painted, :3] = np.clip(np.floor(out + 0.5), 0, 255).astype(np.uint8)
