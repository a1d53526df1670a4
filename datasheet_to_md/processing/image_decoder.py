"""Decoding of raw PDF image streams into RGBA bitmaps.

``decode_image`` is total: whatever the stream holds, the caller gets back a
valid RGBA ``PIL.Image.Image``. Inputs that cannot be decoded (unsupported
filters, bit depths or color spaces, absurd dimensions) map to a flat
light-gray placeholder instead of an exception.
"""

import io
import logging

import numpy as np
from PIL import Image

from .models import ImageResource


logger = logging.getLogger(__name__)


MAX_IMAGE_WIDTH = 10000
MAX_IMAGE_HEIGHT = 10000
MAX_IMAGE_PIXELS = 4_000_000
DEFAULT_IMAGE_WIDTH = 200
DEFAULT_IMAGE_HEIGHT = 150
PLACEHOLDER_COLOR = (240, 240, 240, 255)

# Abbreviated filter names allowed in inline images
_FILTER_ALIASES = {
    "DCT": "DCTDecode",
    "Fl": "FlateDecode",
    "CCF": "CCITTFaxDecode",
}

_RGB_SPACES = {"DeviceRGB", "RGB", "CalRGB"}
_GRAY_SPACES = {"DeviceGray", "Gray", "G", "CalGray"}
_CMYK_SPACES = {"DeviceCMYK", "CMYK"}


def create_placeholder(width: int, height: int) -> Image.Image:
    """Return a flat light-gray RGBA image of the given size."""
    if width <= 0 or height <= 0:
        width, height = DEFAULT_IMAGE_WIDTH, DEFAULT_IMAGE_HEIGHT
    return Image.new("RGBA", (width, height), PLACEHOLDER_COLOR)


def normalize_filter(filter_name: str) -> str:
    """Normalize a PDF filter name, e.g. ``/Fl`` -> ``FlateDecode``."""
    name = (filter_name or "").strip().lstrip("/")
    return _FILTER_ALIASES.get(name, name)


def bytes_per_pixel(color_space: str) -> int:
    """Number of 8-bit samples per pixel for a color space name.

    ICC-based and unrecognized spaces are treated as RGB.
    """
    name = (color_space or "").strip().lstrip("/")
    if name in _GRAY_SPACES:
        return 1
    if name in _CMYK_SPACES:
        return 4
    if name not in _RGB_SPACES:
        logger.debug(f"Color space {name or '<none>'} treated as RGB")
    return 3


def decode_image(resource: ImageResource) -> Image.Image:
    """Decode an image resource, falling back to a placeholder.

    Args:
        resource: Raw stream bytes plus width/height/color space/bit depth/filter.

    Returns:
        An RGBA image. Never raises.
    """
    filter_name = normalize_filter(resource.filter_name)
    try:
        if filter_name == "DCTDecode":
            return _decode_jpeg(resource)
        if filter_name == "CCITTFaxDecode":
            logger.debug(f"CCITT fax image {resource.name or resource.xref}, using placeholder")
            return create_placeholder(resource.width, resource.height)
        if filter_name not in ("", "FlateDecode"):
            logger.debug(f"Unknown filter {filter_name}, attempting raw decode")
        return decode_raw(
            resource.data,
            resource.width,
            resource.height,
            resource.color_space,
            resource.bits_per_component,
        )
    except Exception as e:
        logger.warning(
            f"Unexpected failure decoding image {resource.name or resource.xref}: {e}, "
            "using placeholder"
        )
        return create_placeholder(resource.width, resource.height)


def _decode_jpeg(resource: ImageResource) -> Image.Image:
    try:
        with Image.open(io.BytesIO(resource.data)) as img:
            img.load()
            return img.convert("RGBA")
    except Exception as e:
        logger.debug(f"Failed to decode JPEG directly: {e}")
    return decode_raw(
        resource.data,
        resource.width,
        resource.height,
        resource.color_space,
        resource.bits_per_component,
    )


def decode_raw(
    data: bytes,
    width: int,
    height: int,
    color_space: str = "DeviceRGB",
    bits_per_component: int = 8,
) -> Image.Image:
    """Decode uncompressed pixel data to RGBA.

    Short buffers decode as far as the data goes; pixels beyond the end stay
    fully transparent black.

    Args:
        data: Decompressed sample bytes, row-major.
        width: Declared width in pixels.
        height: Declared height in pixels.
        color_space: PDF color space name.
        bits_per_component: 1 or 8; anything else gives a placeholder.

    Returns:
        An RGBA image of ``width`` x ``height`` (or a placeholder).
    """
    if width <= 0 or height <= 0 or width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        logger.warning(f"Invalid image dimensions {width}x{height}, using placeholder")
        return create_placeholder(DEFAULT_IMAGE_WIDTH, DEFAULT_IMAGE_HEIGHT)

    if width * height > MAX_IMAGE_PIXELS:
        logger.warning(
            f"Image too large ({width}x{height} = {width * height} pixels), using placeholder"
        )
        return create_placeholder(width, height)

    if bits_per_component == 1:
        return _decode_1bit(data, width, height)
    if bits_per_component != 8:
        logger.debug(f"Unsupported bits per component: {bits_per_component}, using placeholder")
        return create_placeholder(width, height)

    return _decode_8bit(data, width, height, bytes_per_pixel(color_space))


def _decode_8bit(data: bytes, width: int, height: int, bpp: int) -> Image.Image:
    total = width * height
    samples = np.frombuffer(data, dtype=np.uint8)
    n_pixels = min(len(samples) // bpp, total)
    if n_pixels < total:
        logger.debug(
            f"Insufficient image data: got {len(samples)} bytes, "
            f"expected {total * bpp}, decoding {n_pixels} pixels"
        )

    pixels = samples[: n_pixels * bpp].reshape(n_pixels, bpp)
    out = np.zeros((total, 4), dtype=np.uint8)

    if bpp == 4:
        cmyk = pixels.astype(np.float64) / 255.0
        k = cmyk[:, 3:4]
        rgb = 255.0 * (1.0 - cmyk[:, :3]) * (1.0 - k)
        out[:n_pixels, :3] = rgb.astype(np.uint8)
    else:
        # Gray broadcasts its single channel over R, G and B
        out[:n_pixels, :3] = pixels
    out[:n_pixels, 3] = 255

    return Image.fromarray(out.reshape(height, width, 4))


def _decode_1bit(data: bytes, width: int, height: int) -> Image.Image:
    # Rows are padded to whole bytes
    row_bytes = (width + 7) // 8
    available = np.frombuffer(data[: row_bytes * height], dtype=np.uint8)

    padded = np.zeros(row_bytes * height, dtype=np.uint8)
    padded[: len(available)] = available
    bits = np.unpackbits(padded.reshape(height, row_bytes), axis=1)[:, :width]

    # 1 is black, 0 is white
    values = np.where(bits == 1, 0, 255).astype(np.uint8)

    out = np.zeros((height, width, 4), dtype=np.uint8)
    out[..., :3] = values[..., np.newaxis]
    out[..., 3] = 255

    byte_index = (
        np.arange(height)[:, np.newaxis] * row_bytes
        + (np.arange(width) // 8)[np.newaxis, :]
    )
    out[byte_index >= len(available)] = 0

    return Image.fromarray(out)
