"""Command-line interface for translating text in a single image."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import re
import sys
from pathlib import Path

from ...adapters.ocr.json_adapter import JsonOCRAdapter
from ...adapters.translation.dictionary_translator import DictionaryTranslator
from ...application.ports.event_publisher import ProcessingEvent
from ...application.services.simple_writeback import write_back_image
from ...application.services.translate_image import TranslateImageService
from ...config import DEFAULT_LOG_FILE
from ...core.canvas import load_image
from ...core.fonts import FontResolver
from ...domain.entities.result import OCRSize, TranslateImageInput, TranslateImageOutput
from ...domain.services.language import normalize_language_code
from ...domain.value_objects.config import (
    InpaintMethod,
    InpaintOptions,
    InpaintStrategy,
    TranslateImageOptions,
)
from ...exceptions import ImageTranslatorError
from ...utils.env import resolve_log_level, setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="image-translator",
        description="Replace the text in an image with its translation"
    )
    
    parser.add_argument("image", type=Path, help="Input image")
    parser.add_argument(
        "--ocr",
        type=Path,
        required=True,
        help="OCR result JSON ({text, items, width, height})"
    )
    parser.add_argument("--from", dest="source_lang", required=True, help="Source language code")
    parser.add_argument("--to", dest="target_lang", required=True, help="Target language code")
    parser.add_argument(
        "--translations",
        type=Path,
        help="JSON object mapping source text to translated text"
    )
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output PNG file")
    
    # Rendering options
    render_group = parser.add_argument_group("Rendering options")
    render_group.add_argument(
        "--strategy",
        choices=[s.value for s in InpaintStrategy],
        default=InpaintStrategy.FLOOD_FILL.value,
        help="Background reconstruction strategy (default: flood-fill)"
    )
    render_group.add_argument(
        "--method",
        choices=[m.value for m in InpaintMethod],
        default=InpaintMethod.TELEA.value,
        help="OpenCV inpainting algorithm (default: telea)"
    )
    render_group.add_argument(
        "--seed",
        type=int,
        help="Seed for the grain noise (random if not specified)"
    )
    render_group.add_argument(
        "--noise",
        type=float,
        default=1.5,
        help="Grain noise amplitude, 0 disables it (default: 1.5)"
    )
    render_group.add_argument("--font", type=Path, help="Font file used for every region")
    render_group.add_argument(
        "--writeback",
        action="store_true",
        help="Paint translations over solid boxes instead of inpainting"
    )
    
    parser.add_argument(
        "--debug-dir",
        type=Path,
        help="Write intermediate steps, stats.json and regions.json here"
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to stderr only"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )
    
    return parser


def build_options(parsed: argparse.Namespace) -> TranslateImageOptions:
    """Build pipeline options from parsed arguments."""
    return TranslateImageOptions(
        debug=parsed.debug_dir is not None,
        inpaint=InpaintOptions(
            strategy=InpaintStrategy(parsed.strategy),
            method=InpaintMethod(parsed.method),
        ),
        noise_amount=parsed.noise,
        seed=parsed.seed,
        font_path=str(parsed.font) if parsed.font else None,
    )


def _slug(label: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", label).strip("_").lower() or "step"


def write_debug(result: TranslateImageOutput, debug_dir: Path) -> None:
    """Dump debug steps as numbered PNGs alongside stats and regions."""
    if result.debug is None:
        return
    debug_dir.mkdir(parents=True, exist_ok=True)
    
    for index, step in enumerate(result.debug.steps):
        (debug_dir / f"{index:03d}_{_slug(step.label)}.png").write_bytes(step.blob)
    
    if result.debug.stats is not None:
        (debug_dir / "stats.json").write_text(
            json.dumps(result.debug.stats.to_dict(), indent=2), encoding="utf-8"
        )
    regions = [region.to_dict() for region in result.debug.regions]
    (debug_dir / "regions.json").write_text(
        json.dumps(regions, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    logger.info(f"Wrote {len(result.debug.steps)} debug steps to {debug_dir}")


def _log_event(event: ProcessingEvent) -> None:
    if event.progress is not None:
        logger.debug(f"[{event.progress:.0%}] {event.stage}: {event.message}")
    else:
        logger.debug(f"{event.stage}: {event.message}")


def run(parsed: argparse.Namespace) -> TranslateImageOutput:
    """Load inputs, run the pipeline and write the outputs."""
    original = load_image(parsed.image)
    height, width = original.shape[:2]
    
    ocr = JsonOCRAdapter(parsed.ocr)
    if parsed.translations:
        translator = DictionaryTranslator.from_file(parsed.translations)
    else:
        translator = DictionaryTranslator({})
    
    try:
        ocr_result = ocr.process(original)
        ocr_size = ocr.ocr_size or OCRSize(width, height)
        request = TranslateImageInput(
            original=original,
            ocr_items=ocr_result.items,
            source_lang=normalize_language_code(parsed.source_lang, ocr.id),
            target_lang=normalize_language_code(parsed.target_lang, ocr.id),
            translator=translator,
            ocr_size=ocr_size,
            engine_id=ocr.id,
        )
        
        if parsed.writeback:
            resolver = FontResolver(font_path=parsed.font) if parsed.font else None
            result = asyncio.run(write_back_image(request, resolver))
        else:
            service = TranslateImageService(build_options(parsed))
            service.subscribe_to_events(_log_event)
            result = asyncio.run(service.translate(request))
    finally:
        ocr.destroy()
        translator.destroy()
    
    parsed.output.parent.mkdir(parents=True, exist_ok=True)
    parsed.output.write_bytes(result.blob)
    logger.info(f"Saved: {parsed.output} ({result.width}x{result.height})")
    
    if parsed.debug_dir is not None:
        write_debug(result, parsed.debug_dir)
    return result


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)
    
    setup_logging(
        resolve_log_level(parsed.verbose),
        log_file=None if parsed.no_log_file else DEFAULT_LOG_FILE,
    )
    
    if not parsed.image.exists():
        logger.error(f"Input not found: {parsed.image}")
        return 1
    
    try:
        run(parsed)
    except ImageTranslatorError as e:
        logger.error(f"Translation failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
