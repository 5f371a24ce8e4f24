"""
Logo decoding for uploaded brand marks.
"""

import base64
import logging
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

import pillow_heif

pillow_heif.register_heif_opener()

logger = logging.getLogger()

MAX_LOGO_PIXELS = 4096 * 4096


class LogoDecodeFailure(ValueError):
    """Raised when uploaded logo bytes are not a decodable image."""


@dataclass(frozen=True)
class Logo:
    image: Image.Image
    png_bytes: bytes

    @property
    def data_url(self) -> str:
        return "data:image/png;base64," + base64.b64encode(self.png_bytes).decode("ascii")


def decode_logo(raw: bytes) -> Logo:
    """Decode uploaded logo bytes; PNG input is kept byte-for-byte."""
    if not raw:
        raise LogoDecodeFailure("Logo upload is empty")

    try:
        img: Image.Image = Image.open(BytesIO(raw))
    except (
        Image.DecompressionBombError,
        UnidentifiedImageError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        raise LogoDecodeFailure(f"Could not decode logo: {exc}") from exc

    # Header size is known before any pixel data is decoded.
    width, height = img.size
    if width * height > MAX_LOGO_PIXELS:
        raise LogoDecodeFailure(f"Logo is too large ({width}x{height})")

    source_format = img.format
    try:
        if getattr(img, "is_animated", False):
            img.seek(0)
        img.load()
    except (OSError, SyntaxError, ValueError) as exc:
        raise LogoDecodeFailure(f"Could not decode logo: {exc}") from exc

    img = ImageOps.exif_transpose(img)

    if "A" not in img.getbands() and "transparency" not in img.info:
        logger.warning("Logo has no transparency (mode %s)", img.mode)

    img = img.convert("RGBA")

    if source_format == "PNG":
        png_bytes = raw
    else:
        logger.info("Re-encoding %s logo as PNG", source_format)
        buffer = BytesIO()
        img.save(buffer, format="PNG", optimize=True)
        png_bytes = buffer.getvalue()

    return Logo(image=img, png_bytes=png_bytes)
