"""Translate-image service - orchestrates the in-place translation pipeline.

Stages: build regions, translate them concurrently, inpaint the original
text away group by group, composite each translation, add grain, encode.
Raster stages run strictly in order; only translation requests overlap.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field

import numpy as np

from ...config import PIPELINE_CONFIG
from ...core.blend import BlendMode, TextureData, blend_layer, luma, prepare_texture
from ...core.canvas import ImageArray, encode_png, to_rgba_array
from ...core.fonts import FontResolver
from ...core.inpaint import inpaint_image
from ...core.layout import TextAlignment, TextDirection, render_text_masks
from ...core.mask import (
    compute_dilation_radius,
    count_mask_pixels,
    dilate_mask,
    mask_to_image,
    rasterize_items_to_mask,
    union_item_bounds,
)
from ...core.warp import is_rect_quad, warp_mask_to_quad
from ...domain.entities.region import Region
from ...domain.entities.result import (
    DebugStats,
    DebugStep,
    TranslateImageDebug,
    TranslateImageInput,
    TranslateImageOutput,
)
from ...domain.services.inpaint_grouping import InpaintGroup, RegionBounds, build_inpaint_groups
from ...domain.services.language import get_font_family, is_cjk_language, is_rtl_language
from ...domain.services.region_builder import build_regions
from ...domain.value_objects.config import TranslateImageOptions
from ...domain.value_objects.geometry import Bounds
from ...exceptions import TranslationError, ValidationError
from ..ports.event_publisher import EventPublisher, ProcessingEvent, SimpleEventPublisher
from ..ports.translator import TranslationRequest

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

# Progress reported after each raster stage
STAGE_PROGRESS: dict[str, float] = {"inpaint": 0.7, "composite": 0.9, "encode": 0.95}


class DebugRecorder:
    """Collects PNG snapshots of intermediate rasters when enabled."""
    
    def __init__(self, enabled: bool):
        self.enabled = enabled
        self.steps: list[DebugStep] = []
    
    def push(self, label: str, image: ImageArray) -> None:
        if not self.enabled:
            return
        self.steps.append(DebugStep(
            label=label,
            blob=encode_png(image),
            width=int(image.shape[1]),
            height=int(image.shape[0]),
        ))


@dataclass
class PipelineContext:
    """Context passed through pipeline steps."""
    input: TranslateImageInput
    options: TranslateImageOptions
    output: ImageArray
    debug: DebugRecorder
    resolver: FontResolver
    scale_x: float = 1.0
    scale_y: float = 1.0
    regions: list[Region] = field(default_factory=list)
    active: list[Region] = field(default_factory=list)
    dilation: int = 0
    groups: list[InpaintGroup] = field(default_factory=list)
    stats: DebugStats | None = None
    blob: bytes = b""
    
    @property
    def width(self) -> int:
        return int(self.output.shape[1])
    
    @property
    def height(self) -> int:
        return int(self.output.shape[0])


class PipelineStep:
    """Base class for raster pipeline steps."""
    
    def __init__(self, name: str):
        self.name = name
    
    def execute(self, ctx: PipelineContext) -> PipelineContext:
        """Execute this step and return updated context."""
        raise NotImplementedError


class BuildRegionsStep(PipelineStep):
    """Step 1: Cluster OCR items into paragraph regions."""
    
    def __init__(self):
        super().__init__("regions")
    
    def execute(self, ctx: PipelineContext) -> PipelineContext:
        ctx.regions = build_regions(
            ctx.input.ocr_items,
            source_lang=ctx.input.source_lang,
            scale_x=ctx.scale_x,
            scale_y=ctx.scale_y,
        )
        if not ctx.regions:
            raise ValidationError("No OCR regions available for translation.", field="ocr_items")
        logger.info(f"Built {len(ctx.regions)} regions from {len(ctx.input.ocr_items)} OCR items")
        return ctx


class PlanInpaintStep(PipelineStep):
    """Step 3: Dilation radius, inpaint groups and mask statistics."""
    
    def __init__(self):
        super().__init__("plan")
    
    def execute(self, ctx: PipelineContext) -> PipelineContext:
        opts = ctx.options
        ctx.dilation = compute_dilation_radius(ctx.active)
        entries = [
            RegionBounds(region, Bounds.from_rect(region.bbox, ctx.width, ctx.height))
            for region in ctx.active
        ]
        ctx.groups = build_inpaint_groups(entries, opts.inpaint.group_distance)
        logger.info(
            f"{len(ctx.active)} active regions in {len(ctx.groups)} inpaint groups "
            f"(dilation {ctx.dilation}px)"
        )
        
        if ctx.debug.enabled:
            self._collect_stats(ctx)
        return ctx
    
    def _collect_stats(self, ctx: PipelineContext) -> None:
        items = [item for region in ctx.active for item in region.items]
        bounds = union_item_bounds(items, ctx.width, ctx.height, ctx.options.padding)
        if bounds is None:
            raise ValidationError("Unable to compute translation bounds.")
        raw = rasterize_items_to_mask(items, bounds)
        dilated = dilate_mask(raw, ctx.dilation)
        
        out_of_bounds = sum(
            1 for r in ctx.active
            if r.bbox.right < 0 or r.bbox.bottom < 0
            or r.bbox.x > ctx.width or r.bbox.y > ctx.height
        )
        ctx.stats = DebugStats(
            image_width=ctx.width,
            image_height=ctx.height,
            ocr_width=ctx.input.ocr_size.width,
            ocr_height=ctx.input.ocr_size.height,
            scale_x=ctx.scale_x,
            scale_y=ctx.scale_y,
            region_count=len(ctx.active),
            out_of_bounds_regions=out_of_bounds,
            bounds=bounds,
            raw_mask_pixels=count_mask_pixels(raw),
            dilated_mask_pixels=count_mask_pixels(dilated),
        )
        ctx.debug.push("Mask (raw)", mask_to_image(raw, bounds, ctx.width, ctx.height))
        ctx.debug.push("Mask (dilated)", mask_to_image(dilated, bounds, ctx.width, ctx.height))


class InpaintStep(PipelineStep):
    """Step 4: Erase source text, one group or region at a time."""
    
    def __init__(self):
        super().__init__("inpaint")
    
    def execute(self, ctx: PipelineContext) -> PipelineContext:
        opts = ctx.options
        size_limit = opts.inpaint.region_size_limit(ctx.width, ctx.height)
        group_count = len(ctx.groups)
        
        for index, group in enumerate(ctx.groups, start=1):
            items = [item for region in group.regions for item in region.items]
            bounds = union_item_bounds(items, ctx.width, ctx.height, opts.padding)
            if bounds is None:
                continue
            raw = rasterize_items_to_mask(items, bounds)
            density = count_mask_pixels(raw) / bounds.area if bounds.area > 0 else 0.0
            use_union = len(group) > 1 and (
                group.has_overlap
                or (density >= opts.inpaint.max_union_area_ratio and bounds.area <= size_limit)
            )
            
            if use_union:
                logger.debug(
                    f"Group {index}: union inpaint of {len(group)} regions "
                    f"(overlap={group.has_overlap}, density={density:.2f})"
                )
                self._inpaint(
                    ctx, raw, bounds, f"group {index}",
                    show_masks=group_count <= opts.max_debug_group_steps,
                    show_background=group_count <= opts.max_debug_background_steps,
                )
                continue
            
            for region in group.regions:
                region_bounds = union_item_bounds(region.items, ctx.width, ctx.height, opts.padding)
                if region_bounds is None:
                    continue
                self._inpaint(
                    ctx,
                    rasterize_items_to_mask(region.items, region_bounds),
                    region_bounds,
                    region.id,
                    show_masks=len(group) <= opts.max_debug_group_steps,
                    show_background=len(group) <= opts.max_debug_background_steps,
                )
        
        ctx.debug.push("Background (final)", ctx.output)
        return ctx
    
    def _inpaint(
        self,
        ctx: PipelineContext,
        raw: np.ndarray,
        bounds: Bounds,
        label: str,
        show_masks: bool,
        show_background: bool,
    ) -> None:
        mask = dilate_mask(raw, ctx.dilation)
        if show_masks:
            ctx.debug.push(f"Mask (raw {label})", mask_to_image(raw, bounds, ctx.width, ctx.height))
            ctx.debug.push(f"Mask (dilated {label})", mask_to_image(mask, bounds, ctx.width, ctx.height))
        ctx.output = inpaint_image(ctx.output, mask, bounds, ctx.options.inpaint)
        if show_background:
            ctx.debug.push(f"Background (inpainted {label})", ctx.output)


def choose_text_color(avg_luma: float) -> RGB:
    """Dark text on light backgrounds, light text on dark ones."""
    cfg = PIPELINE_CONFIG
    return cfg.dark_text_color if avg_luma > cfg.light_background_luma else cfg.light_text_color


class CompositeStep(PipelineStep):
    """Step 5: Lay out, warp and blend each region's translation."""
    
    def __init__(self):
        super().__init__("composite")
    
    def execute(self, ctx: PipelineContext) -> PipelineContext:
        target = ctx.input.target_lang
        font_stack = get_font_family(target)
        rtl = is_rtl_language(target)
        is_cjk = is_cjk_language(target)
        
        for region in ctx.active:
            self._render_region(ctx, region, font_stack, rtl, is_cjk)
        return ctx
    
    def _render_region(
        self,
        ctx: PipelineContext,
        region: Region,
        font_stack: tuple[str, ...],
        rtl: bool,
        is_cjk: bool,
    ) -> None:
        opts = ctx.options
        bounds = Bounds.from_rect(region.bbox, ctx.width, ctx.height)
        texture = prepare_texture(ctx.output, bounds)
        
        if region.style is not None and region.style.text is not None:
            text_color = region.style.text
        else:
            text_color = choose_text_color(texture.avg_luma)
        text_is_dark = luma(*text_color) < 128
        shadow_color: RGB = (255, 255, 255) if text_is_dark else (0, 0, 0)
        
        rect = is_rect_quad(region.quad, bounds)
        if rect:
            box_width, box_height = bounds.width, bounds.height
        else:
            box_width = max(1, math.floor(region.quad.edge_width + 0.5))
            box_height = max(1, math.floor(region.quad.edge_height + 0.5))
        
        layout = render_text_masks(
            text=region.translated_text or "",
            width=box_width,
            height=box_height,
            font_stack=font_stack,
            align=TextAlignment.RIGHT if rtl else TextAlignment.LEFT,
            direction=TextDirection.RTL if rtl else TextDirection.LTR,
            target_line_count=region.source_line_count,
            is_cjk=is_cjk,
            shadow_blur=opts.shadow_blur,
            shadow_offset_x=opts.shadow_offset_x,
            shadow_offset_y=opts.shadow_offset_y,
            resolver=ctx.resolver,
        )
        logger.debug(
            f"{region.id}: {len(layout.lines)} lines at {layout.font_size}px "
            f"in {box_width}x{box_height} ({'rect' if rect else 'warped'})"
        )
        
        if layout.shadow_canvas is not None:
            self._blend(
                ctx, region, to_rgba_array(layout.shadow_canvas), bounds, rect,
                shadow_color, BlendMode.SHADOW, text_is_dark, None,
            )
        ctx.debug.push(f"After shadow: {region.id}", ctx.output)
        
        self._blend(
            ctx, region, to_rgba_array(layout.text_canvas), bounds, rect,
            text_color, BlendMode.TEXT, text_is_dark, texture,
        )
        ctx.debug.push(f"After text: {region.id}", ctx.output)
    
    def _blend(
        self,
        ctx: PipelineContext,
        region: Region,
        layer: ImageArray,
        bounds: Bounds,
        rect: bool,
        color: RGB,
        mode: BlendMode,
        text_is_dark: bool,
        texture: TextureData | None,
    ) -> None:
        if not rect:
            layer, bounds = warp_mask_to_quad(layer, region.quad)
            if mode == BlendMode.TEXT:
                texture = prepare_texture(ctx.output, bounds)
        blend_layer(ctx.output, layer, bounds, color, mode, text_is_dark, texture)


class FinalizeStep(PipelineStep):
    """Step 6: Add grain and encode the result."""
    
    def __init__(self):
        super().__init__("encode")
    
    def execute(self, ctx: PipelineContext) -> PipelineContext:
        amount = ctx.options.noise_amount
        if amount > 0:
            add_noise(ctx.output, amount, np.random.default_rng(ctx.options.seed))
        ctx.debug.push("Final (noise)", ctx.output)
        ctx.blob = encode_png(ctx.output)
        return ctx


def add_noise(image: ImageArray, amount: float, rng: np.random.Generator) -> None:
    """Add uniform +/-amount grain in place, the same offset on R, G and B."""
    height, width = image.shape[:2]
    noise = (rng.random((height, width)) * 2 - 1) * amount
    rgb = image[..., :3].astype(np.float64) + noise[..., None]
    image[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


class TranslateImageService:
    """Service for translating the text embedded in an image.
    
    Example:
        >>> service = TranslateImageService(TranslateImageOptions(seed=1))
        >>> result = asyncio.run(service.translate(request))
    """
    
    def __init__(
        self,
        options: TranslateImageOptions | None = None,
        events: EventPublisher | None = None,
        resolver: FontResolver | None = None,
    ):
        self._options = options or TranslateImageOptions()
        self._events = events or SimpleEventPublisher()
        self._resolver = resolver
        self._raster_pipeline = self._build_pipeline()
    
    def _build_pipeline(self) -> list[PipelineStep]:
        """Build the raster stages that follow translation."""
        return [
            PlanInpaintStep(),
            InpaintStep(),
            CompositeStep(),
            FinalizeStep(),
        ]
    
    @property
    def options(self) -> TranslateImageOptions:
        return self._options
    
    def subscribe_to_events(self, callback) -> None:
        """Subscribe to processing events."""
        self._events.subscribe(callback)
    
    def _publish(self, stage: str, message: str, progress: float | None = None) -> None:
        self._events.publish(ProcessingEvent(stage=stage, message=message, progress=progress))
    
    def _prepare(self, request: TranslateImageInput) -> PipelineContext:
        if not request.ocr_items:
            raise ValidationError("No OCR regions available for translation.", field="ocr_items")
        if request.ocr_size.width <= 0 or request.ocr_size.height <= 0:
            raise ValidationError("Invalid OCR dimensions.", field="ocr_size")
        original = request.original
        if original.ndim != 3 or original.shape[2] != 4 or original.dtype != np.uint8:
            raise ValidationError("Original image must be an HxWx4 uint8 array.", field="original")
        
        ctx = PipelineContext(
            input=request,
            options=self._options,
            output=original.copy(),
            debug=DebugRecorder(self._options.debug),
            resolver=self._resolver or FontResolver(font_path=self._options.font_path),
            scale_x=request.width / request.ocr_size.width,
            scale_y=request.height / request.ocr_size.height,
        )
        ctx.debug.push("Original", ctx.output)
        return ctx
    
    async def _translate_regions(self, ctx: PipelineContext) -> None:
        """Translate every region concurrently; any failure aborts the call."""
        request = ctx.input
        
        async def translate_one(region: Region) -> None:
            text = region.source_text
            if not text:
                region.translated_text = ""
                return
            response = await request.translator.translate(TranslationRequest(
                from_lang=request.source_lang,
                to_lang=request.target_lang,
                text=text,
            ))
            region.translated_text = response.text
        
        results = await asyncio.gather(
            *(translate_one(region) for region in ctx.regions),
            return_exceptions=True,
        )
        for region, result in zip(ctx.regions, results):
            if isinstance(result, BaseException):
                logger.error(f"Translation failed for {region.id}: {result}")
                raise TranslationError(
                    f"Translation failed: {result}",
                    region_id=region.id,
                ) from result
        
        ctx.active = [region for region in ctx.regions if region.is_active]
        if not ctx.active:
            raise ValidationError("No translated text to render.")
    
    async def translate(self, request: TranslateImageInput) -> TranslateImageOutput:
        """Translate the text in ``request.original`` and re-render it in place.
        
        Args:
            request: Image, OCR items, languages and translator
            
        Returns:
            PNG blob and, when enabled, debug artifacts
            
        Raises:
            ValidationError: Missing regions, bad OCR dimensions or nothing to render
            TranslationError: The translator failed for some region
            GeometryError: A region quad cannot be warped
            EncodingError: PNG encoding failed
        """
        self._publish("start", "Starting image translation", 0.0)
        ctx = self._prepare(request)
        
        ctx = BuildRegionsStep().execute(ctx)
        self._publish("regions", f"Built {len(ctx.regions)} regions", 0.1)
        
        await self._translate_regions(ctx)
        self._publish("translate", f"Translated {len(ctx.active)} regions", 0.4)
        
        for step in self._raster_pipeline:
            ctx = step.execute(ctx)
            if step.name in STAGE_PROGRESS:
                self._publish(step.name, f"Finished {step.name}", STAGE_PROGRESS[step.name])
        
        self._publish("complete", "Translation complete", 1.0)
        
        debug = None
        if ctx.debug.enabled:
            debug = TranslateImageDebug(regions=ctx.active, steps=ctx.debug.steps, stats=ctx.stats)
        return TranslateImageOutput(
            blob=ctx.blob,
            width=ctx.width,
            height=ctx.height,
            debug=debug,
        )


async def translate_image(
    request: TranslateImageInput,
    options: TranslateImageOptions | None = None,
    events: EventPublisher | None = None,
) -> TranslateImageOutput:
    """Translate an image with a one-off service instance."""
    return await TranslateImageService(options, events).translate(request)
