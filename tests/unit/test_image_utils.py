"""Unit tests for image validation."""

import io

from conftest import png_bytes
from linguavision.utils.image_utils import detect_image_mime
from PIL import Image


def encode(image_format):
    buffer = io.BytesIO()
    Image.new('RGB', (4, 4), (0, 0, 0)).save(buffer, format=image_format)
    return buffer.getvalue()


class TestDetectImageMime:
    """Test detect_image_mime."""

    def test_png(self):
        assert detect_image_mime(png_bytes()) == 'image/png'

    def test_jpeg(self):
        assert detect_image_mime(encode('JPEG')) == 'image/jpeg'

    def test_unsupported_format(self):
        """Valid images outside PNG/JPEG/WEBP are refused."""
        assert detect_image_mime(encode('BMP')) is None

    def test_not_an_image(self):
        assert detect_image_mime(b"just some text") is None
        assert detect_image_mime(b"") is None

    def test_truncated_png(self):
        assert detect_image_mime(png_bytes()[:20]) is None
