"""
Image validation for uploads and CLI input
"""
import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

FORMAT_MIME_TYPES = {
    'PNG': 'image/png',
    'JPEG': 'image/jpeg',
    'WEBP': 'image/webp',
}


def detect_image_mime(image_data: bytes) -> Optional[str]:
    """
    Identify an image from its bytes using Pillow.

    Args:
        image_data: Raw file bytes

    Returns:
        MIME type for PNG, JPEG or WEBP data; None for anything else,
        including truncated or corrupt images
    """
    try:
        with Image.open(io.BytesIO(image_data)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        logger.debug(f"Rejected image data: {e}")
        return None
    return FORMAT_MIME_TYPES.get(image_format)
