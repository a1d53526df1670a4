"""Datasheet-to-MD: PDF to Markdown conversion with image extraction."""

from .config import ConverterConfig
from .errors import ConfigError, ConversionFailure, DocumentError
from .pipeline import ConversionPipeline, convert_pdf
from .processing import (
    BatchResult,
    ConversionError,
    ConversionResult,
    Diagram,
    DiagramType,
    ExtractedImage,
    Page,
    PDFDocument,
)
from .reporting import format_batch_result, format_conversion_result

__version__ = "1.0.0"

__all__ = [
    # Pipeline
    "ConversionPipeline",
    "ConverterConfig",
    "convert_pdf",
    # Models
    "BatchResult",
    "ConversionError",
    "ConversionResult",
    "Diagram",
    "DiagramType",
    "ExtractedImage",
    "Page",
    "PDFDocument",
    # Errors
    "ConfigError",
    "ConversionFailure",
    "DocumentError",
    # Summaries
    "format_conversion_result",
    "format_batch_result",
]
