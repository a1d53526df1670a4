"""Processing module for PDF content extraction and image decoding."""

from .document_loader import PDFDocument, validate_pdf_path
from .image_decoder import create_placeholder, decode_image, decode_raw
from .models import (
    BatchResult,
    BoundingBox,
    ConversionError,
    ConversionResult,
    Diagram,
    DiagramType,
    ExtractedImage,
    ImageOutcome,
    ImageResource,
    Page,
)
from .resource_walker import ResourceWalker, image_filename

__all__ = [
    "PDFDocument",
    "validate_pdf_path",
    "ResourceWalker",
    "image_filename",
    "decode_image",
    "decode_raw",
    "create_placeholder",
    "BatchResult",
    "BoundingBox",
    "ConversionError",
    "ConversionResult",
    "Diagram",
    "DiagramType",
    "ExtractedImage",
    "ImageOutcome",
    "ImageResource",
    "Page",
]
