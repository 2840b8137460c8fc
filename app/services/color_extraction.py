# app/services/color_extraction.py

import io
import logging
from dataclasses import dataclass
from typing import List

from PIL import Image, UnidentifiedImageError

from app.services.color_space import Rgb

logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4  # RGBA
DEFAULT_DOMINANT_COLOR = "#000000"


class ImageDecodeError(ValueError):
    """The uploaded bytes are not an image Pillow can read."""


class PixelOutOfBoundsError(ValueError):
    """A sample coordinate lies outside the image."""


@dataclass(frozen=True)
class PixelBuffer:
    data: bytes
    width: int
    height: int


def load_pixels(image_bytes: bytes) -> PixelBuffer:
    """Decodes an image into a flat RGBA buffer, row by row."""
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img = img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e

    width, height = img.size
    return PixelBuffer(data=img.tobytes(), width=width, height=height)


def get_pixel_at(buffer: PixelBuffer, x: int, y: int) -> Rgb:
    if not (0 <= x < buffer.width and 0 <= y < buffer.height):
        raise PixelOutOfBoundsError(
            f"Coordinate ({x}, {y}) is outside the {buffer.width}x{buffer.height} image"
        )
    index = (y * buffer.width + x) * BYTES_PER_PIXEL
    return Rgb(buffer.data[index], buffer.data[index + 1], buffer.data[index + 2])


def rgb_to_hex(rgb) -> str:
    return '#%02x%02x%02x' % tuple(rgb)


def rgb_css(rgb: Rgb) -> str:
    return f"rgb({rgb.r},{rgb.g},{rgb.b})"


def get_palette_hex(image_bytes: bytes, num_colors: int = 5) -> List[str]:
    """
    Finds the dominant colors of an image with Pillow's adaptive quantization
    and returns them as hex strings, most common first.
    """
    try:
        img = Image.open(io.BytesIO(image_bytes)).convert("RGB")

        # Resize image for faster processing
        img = img.resize((100, 100))

        quantized = img.convert("P", palette=Image.Palette.ADAPTIVE, colors=num_colors)
        palette = quantized.getpalette()

        # getcolors() yields (count, palette index) pairs for a "P" image
        counts = sorted(quantized.getcolors(), key=lambda item: item[0], reverse=True)

        return [
            rgb_to_hex(palette[index * 3:index * 3 + 3])
            for _, index in counts[:num_colors]
        ]

    except Exception as e:
        logger.warning(f"Error extracting dominant colors: {e}")
        return []


def dominant_color(palette: List[str]) -> str:
    return palette[0] if palette else DEFAULT_DOMINANT_COLOR
