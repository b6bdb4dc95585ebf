"""
Command-line interface for image translation
"""
import os
import sys
import argparse
import asyncio
import logging

from linguavision.config import (
    ALLOWED_IMAGE_MIME_TYPES,
    CLAUDE_MODEL_ID,
    DEBUG_MODE,
    MAX_RETRIES,
    OUTPUT_DIR,
    TranslationConfig
)
from linguavision.core.export import write_item
from linguavision.core.models import ImagePayload, ItemStatus, ModelProvider, SourceLanguage
from linguavision.core.orchestrator import BatchOrchestrator
from linguavision.utils.image_utils import detect_image_mime

logger = logging.getLogger('translate')


def load_images(paths):
    """Read the input files, skipping the ones that are not supported images"""
    images = []
    for path in paths:
        with open(path, 'rb') as f:
            data = f.read()
        mime_type = detect_image_mime(data)
        if mime_type not in ALLOWED_IMAGE_MIME_TYPES:
            logger.warning(f"Skipping {path}: not a PNG, JPEG or WEBP image")
            continue
        images.append(ImagePayload(filename=os.path.basename(path), data=data, mime_type=mime_type))
    return images


async def translate_images(images, language, provider, config, output_dir):
    """
    Translate a batch and write one text artifact per successful image

    Returns:
        list: Final BatchItems in input order
    """
    orchestrator = BatchOrchestrator(
        config,
        on_credentials_required=lambda error: logger.error(
            f"{error.message} (pass it with --{error.provider}_api_key or set it in .env)"
        )
    )
    items = await orchestrator.add_files(images, language, provider)
    await orchestrator.wait_for_pending()

    finished = []
    for item in items:
        final = orchestrator.get(item.id)
        finished.append(final)
        if final.status is ItemStatus.SUCCESS:
            path = write_item(final, output_dir)
            logger.info(f"{final.filename}: {len(final.result.segments)} segment(s) -> {path}")
        else:
            logger.error(f"{final.filename}: {final.error}")
    return finished


def main(argv=None):
    parser = argparse.ArgumentParser(description="Translate the text of Korean or Spanish images into English.")
    parser.add_argument("-i", "--input", required=True, nargs='+', help="Image files (PNG, JPEG or WEBP).")
    parser.add_argument("-o", "--output", default=OUTPUT_DIR, help=f"Output directory (default: {OUTPUT_DIR}).")
    parser.add_argument("-sl", "--source_lang", default="auto", choices=["korean", "spanish", "auto"],
                        help="Source language hint (default: auto).")
    parser.add_argument("--provider", default="gemini", choices=[p.value for p in ModelProvider],
                        help="Translation provider (default: gemini). Text extraction always uses Gemini.")
    parser.add_argument("--gemini_api_key", default='', help="Google Gemini API key (default: GEMINI_API_KEY).")
    parser.add_argument("--gemini_pro_api_key", default='', help="Key for the premium Gemini model (default: GEMINI_PRO_API_KEY).")
    parser.add_argument("--claude_api_key", default='', help="Anthropic API key (default: CLAUDE_API_KEY).")
    parser.add_argument("--claude_model", default=CLAUDE_MODEL_ID, help=f"Claude model (default: {CLAUDE_MODEL_ID}).")
    parser.add_argument("--max_retries", type=int, default=MAX_RETRIES, help=f"Retries on quota errors (default: {MAX_RETRIES}).")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if DEBUG_MODE else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    images = load_images(args.input)
    if not images:
        parser.error("no supported image among the input files")

    config = TranslationConfig.from_cli_args(args)
    language = SourceLanguage.from_value(args.source_lang)
    provider = ModelProvider.from_value(args.provider)

    logger.info(f"Translating {len(images)} image(s) with {provider.display_name} (source: {language.value})")
    items = asyncio.run(translate_images(images, language, provider, config, args.output))

    failed = [item for item in items if item.status is not ItemStatus.SUCCESS]
    logger.info(f"Done: {len(items) - len(failed)} succeeded, {len(failed)} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
