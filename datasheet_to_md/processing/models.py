"""Data models for PDF to Markdown conversion."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class DiagramType(Enum):
    """Heuristic diagram category assigned to an extracted image."""
    UNKNOWN = "unknown"
    FLOWCHART = "flowchart"
    BLOCK = "block"
    CIRCUIT = "circuit"
    NETWORK = "network"
    SEQUENCE = "sequence"
    CLASS = "class"
    ER = "er"


@dataclass(frozen=True)
class BoundingBox:
    """Region of an image covered by a diagram, in pixels."""
    x0: int = 0
    y0: int = 0
    x1: int = 400
    y1: int = 300

    def to_dict(self) -> dict:
        return {"x0": self.x0, "y0": self.y0, "x1": self.x1, "y1": self.y1}


@dataclass
class Diagram:
    """A diagram classification materialized for one image."""
    type: DiagramType
    confidence: float
    markup: str  # PlantUML source
    image_path: str
    bounding_box: BoundingBox = field(default_factory=BoundingBox)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "confidence": self.confidence,
            "markup": self.markup,
            "image_path": self.image_path,
            "bounding_box": self.bounding_box.to_dict(),
        }


@dataclass
class ImageResource:
    """Raw image stream plus the metadata needed to decode it."""
    data: bytes
    width: int
    height: int
    color_space: str = "DeviceRGB"
    bits_per_component: int = 8
    filter_name: str = ""
    xref: int = 0
    name: str = ""


@dataclass
class ExtractedImage:
    """An image pulled from a page and saved next to the Markdown file."""
    filename: str
    width: int
    height: int
    bitmap: Optional[Any] = None  # PIL.Image.Image, dropped once written
    diagrams: list[Diagram] = field(default_factory=list)

    def release(self) -> None:
        """Drop the pixel buffer; only the filename is needed afterwards."""
        self.bitmap = None

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "width": self.width,
            "height": self.height,
            "diagrams": [d.to_dict() for d in self.diagrams],
        }


@dataclass
class ImageOutcome:
    """Result of processing a single image resource on a page."""
    filename: str
    image: Optional[ExtractedImage] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.image is not None and self.error is None


@dataclass
class Page:
    """Content extracted from one PDF page."""
    number: int
    text: str = ""
    images: list[ExtractedImage] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "text": self.text,
            "images": [i.to_dict() for i in self.images],
        }


@dataclass(frozen=True)
class ConversionResult:
    """Result of converting one PDF to a Markdown directory."""
    output_dir: str
    markdown_file: str
    image_count: int
    page_count: int

    def to_dict(self) -> dict:
        return {
            "output_dir": self.output_dir,
            "markdown_file": self.markdown_file,
            "image_count": self.image_count,
            "page_count": self.page_count,
        }


@dataclass(frozen=True)
class ConversionError:
    """A document that failed to convert during a batch run."""
    pdf_path: str
    message: str

    def to_dict(self) -> dict:
        return {"pdf_path": self.pdf_path, "message": self.message}


@dataclass
class BatchResult:
    """Aggregated results of converting every PDF in a directory."""
    input_dir: str
    output_base_dir: str
    results: list[ConversionResult] = field(default_factory=list)
    errors: list[ConversionError] = field(default_factory=list)
    file_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    total_page_count: int = 0
    total_image_count: int = 0

    def record_success(self, result: ConversionResult) -> None:
        self.results.append(result)
        self.success_count += 1
        self.total_page_count += result.page_count
        self.total_image_count += result.image_count

    def record_failure(self, pdf_path: str, message: str) -> None:
        self.errors.append(ConversionError(pdf_path=pdf_path, message=message))
        self.failure_count += 1

    def to_dict(self) -> dict:
        return {
            "input_dir": self.input_dir,
            "output_base_dir": self.output_base_dir,
            "results": [r.to_dict() for r in self.results],
            "errors": [e.to_dict() for e in self.errors],
            "file_count": self.file_count,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "total_page_count": self.total_page_count,
            "total_image_count": self.total_image_count,
        }
