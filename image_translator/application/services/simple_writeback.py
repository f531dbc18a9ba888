"""Simple write-back service - translate paragraphs and paint them over solid boxes.

No inpainting: each paragraph box is filled with its sampled background
color and the translation is centered on top.
"""

from __future__ import annotations

import asyncio
import logging

from ...core.canvas import encode_png
from ...core.fonts import FontResolver
from ...core.writeback import WriteBackRegion, render_translation_to_image
from ...domain.entities.result import TranslateImageInput, TranslateImageOutput
from ...domain.services.language import get_font_family
from ...domain.services.text_grouping import OCRParagraph, group_items_into_paragraphs
from ...exceptions import TranslationError, ValidationError
from ..ports.translator import TranslationRequest

logger = logging.getLogger(__name__)


async def _translate_paragraphs(
    request: TranslateImageInput,
    paragraphs: list[OCRParagraph],
) -> list[str]:
    async def translate_one(paragraph: OCRParagraph) -> str:
        response = await request.translator.translate(TranslationRequest(
            from_lang=request.source_lang,
            to_lang=request.target_lang,
            text=paragraph.text,
        ))
        return response.text
    
    results = await asyncio.gather(
        *(translate_one(p) for p in paragraphs),
        return_exceptions=True,
    )
    for index, result in enumerate(results, start=1):
        if isinstance(result, BaseException):
            raise TranslationError(
                f"Translation failed: {result}",
                region_id=f"paragraph-{index}",
            ) from result
    return list(results)  # type: ignore[arg-type]


async def write_back_image(
    request: TranslateImageInput,
    resolver: FontResolver | None = None,
) -> TranslateImageOutput:
    """Translate each OCR paragraph and render it into its box.
    
    Raises:
        ValidationError: No visible OCR items or bad OCR dimensions
        TranslationError: The translator failed for some paragraph
    """
    if request.ocr_size.width <= 0 or request.ocr_size.height <= 0:
        raise ValidationError("Invalid OCR dimensions.", field="ocr_size")
    paragraphs = group_items_into_paragraphs(request.ocr_items)
    if not paragraphs:
        raise ValidationError("No OCR regions available for translation.", field="ocr_items")
    
    translations = await _translate_paragraphs(request, paragraphs)
    regions = [
        WriteBackRegion(bounding_box=p.bounding_box, translated_text=text)
        for p, text in zip(paragraphs, translations)
    ]
    logger.info(f"Writing back {len(regions)} paragraphs")
    
    image = render_translation_to_image(
        request.original,
        regions,
        scale_x=request.width / request.ocr_size.width,
        scale_y=request.height / request.ocr_size.height,
        font_stack=get_font_family(request.target_lang),
        resolver=resolver,
    )
    return TranslateImageOutput(
        blob=encode_png(image),
        width=int(image.shape[1]),
        height=int(image.shape[0]),
    )
