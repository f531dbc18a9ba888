"""Core raster operations."""

from .blend import BlendMode, TextureData, blend_layer, luma, prepare_texture
from .canvas import (
    ImageArray,
    MaskArray,
    create_canvas,
    encode_png,
    from_rgba_array,
    get_context_2d,
    load_image,
    to_rgba_array,
)
from .fonts import FontResolver
from .inpaint import inpaint_flood_fill, inpaint_image, inpaint_opencv, inpaint_radial
from .layout import (
    TextAlignment,
    TextDirection,
    TextLayoutResult,
    compute_layout,
    layout_direction,
    render_text_masks,
    wrap_text,
)
from .mask import (
    compute_dilation_radius,
    count_mask_pixels,
    dilate_mask,
    mask_to_image,
    rasterize_items_to_mask,
    rasterize_regions_to_mask,
    union_bounds,
    union_item_bounds,
)
from .warp import (
    apply_homography,
    compute_homography,
    invert_matrix3,
    is_rect_quad,
    point_in_quad,
    warp_mask_to_quad,
)
from .writeback import WriteBackRegion, break_long_word, render_translation_to_image

__all__ = [
    # Canvas
    'ImageArray',
    'MaskArray',
    'create_canvas',
    'get_context_2d',
    'to_rgba_array',
    'from_rgba_array',
    'load_image',
    'encode_png',
    'FontResolver',
    # Mask
    'union_bounds',
    'union_item_bounds',
    'rasterize_regions_to_mask',
    'rasterize_items_to_mask',
    'dilate_mask',
    'count_mask_pixels',
    'compute_dilation_radius',
    'mask_to_image',
    # Inpaint
    'inpaint_image',
    'inpaint_radial',
    'inpaint_flood_fill',
    'inpaint_opencv',
    # Blend
    'BlendMode',
    'TextureData',
    'prepare_texture',
    'blend_layer',
    'luma',
    # Layout
    'TextAlignment',
    'TextDirection',
    'TextLayoutResult',
    'wrap_text',
    'compute_layout',
    'layout_direction',
    'render_text_masks',
    # Warp
    'compute_homography',
    'invert_matrix3',
    'apply_homography',
    'point_in_quad',
    'is_rect_quad',
    'warp_mask_to_quad',
    # Write-back
    'WriteBackRegion',
    'break_long_word',
    'render_translation_to_image',
]
