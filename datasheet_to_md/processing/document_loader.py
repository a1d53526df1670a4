"""PDF document access built on PyMuPDF.

Validates a source path, opens it, and gives page-by-page access to plain
text and to the image XObjects registered in each page's resources.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

import pymupdf

from ..errors import (
    DocumentNotFoundError,
    DocumentOpenError,
    InvalidExtensionError,
    NotAFileError,
)
from .models import ImageResource


logger = logging.getLogger(__name__)


_NAME_PATTERN = re.compile(r"/([A-Za-z0-9]+)")
_XOBJECT_ENTRY = re.compile(r"/([^\s/<>\[\]()]+)\s*(\d+)\s+\d+\s+R")


def validate_pdf_path(pdf_path: Union[str, Path]) -> Path:
    """Check that a path points at an existing .pdf file.

    Args:
        pdf_path: Candidate path.

    Returns:
        The path as a Path object.

    Raises:
        DocumentNotFoundError: Path is empty or does not exist.
        NotAFileError: Path is a directory.
        InvalidExtensionError: Path does not end in .pdf.
    """
    if not str(pdf_path).strip():
        raise DocumentNotFoundError("PDF path cannot be empty")

    path = Path(pdf_path)
    if not path.exists():
        raise DocumentNotFoundError(f"PDF file does not exist: {path}")
    if path.is_dir():
        raise NotAFileError(f"path is a directory, not a file: {path}")
    if path.suffix.lower() != ".pdf":
        raise InvalidExtensionError(f"file does not have a .pdf extension: {path}")
    return path


class PDFDocument:
    """An opened PDF with 1-based page access."""

    def __init__(self, path: Path, doc: "pymupdf.Document"):
        self.path = path
        self._doc = doc

    @classmethod
    def open(cls, pdf_path: Union[str, Path]) -> "PDFDocument":
        """Validate and open a PDF file.

        Raises:
            DocumentError: See ``validate_pdf_path``; DocumentOpenError when
                the file cannot be parsed as a PDF.
        """
        path = validate_pdf_path(pdf_path)
        try:
            doc = pymupdf.open(str(path), filetype="pdf")
        except Exception as e:
            raise DocumentOpenError(f"failed to open PDF: {e}") from e

        if not doc.is_pdf:
            doc.close()
            raise DocumentOpenError(f"failed to open PDF: not a PDF document: {path}")

        logger.info(f"PDF opened successfully, {doc.page_count} pages found")
        return cls(path, doc)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page_text(self, number: int) -> str:
        """Plain text of a page, or "" if extraction fails."""
        try:
            return self._doc[number - 1].get_text("text")
        except Exception as e:
            logger.warning(f"Failed to extract text from page {number}: {e}")
            return ""

    def image_resources(self, number: int) -> list[tuple[str, int]]:
        """XObjects of a page as ``(name, xref)`` pairs, in resource order.

        Entries are read from the page's ``/Resources/XObject`` dictionary, so
        form XObjects are listed too; ``is_image`` tells them apart. Pages that
        inherit their resources fall back to PyMuPDF's image list. A page
        without resources has no images; that is not an error.
        """
        page = self._doc[number - 1]
        xobjects = self._resolve(page.xref, "Resources/XObject")
        if xobjects:
            found = [(name, int(xref)) for name, xref in _XOBJECT_ENTRY.findall(xobjects)]
        else:
            found = [(item[7], item[0]) for item in page.get_images(full=True)]

        entries = []
        seen = set()
        for name, xref in found:
            if xref in seen:
                continue
            seen.add(xref)
            entries.append((name, xref))
        if not entries:
            logger.debug(f"No image resources found on page {number}")
        return entries

    def is_image(self, xref: int) -> bool:
        """True if the object is an XObject with /Subtype /Image."""
        kind, value = self._doc.xref_get_key(xref, "Subtype")
        return kind == "name" and value == "/Image"

    def load_image_resource(self, xref: int, name: str = "") -> ImageResource:
        """Read an image stream and the metadata needed to decode it.

        DCT-only streams are returned raw (JPEG bytes); everything else is
        returned decompressed, falling back to the raw stream.
        """
        width = self._int_key(xref, "Width", 0)
        height = self._int_key(xref, "Height", 0)
        bits = self._int_key(xref, "BitsPerComponent", 8)
        if bits <= 0:
            bits = 8

        color_space = self._name_key(xref, "ColorSpace") or "DeviceRGB"
        filters = self._names_key(xref, "Filter")
        filter_name = filters[-1] if filters else ""

        if filters == ["DCTDecode"]:
            data = self._doc.xref_stream_raw(xref)
        else:
            try:
                data = self._doc.xref_stream(xref)
            except Exception as e:
                logger.debug(f"Could not decompress image stream {xref}: {e}, using raw bytes")
                data = self._doc.xref_stream_raw(xref)

        logger.debug(
            f"Extracting image {name or xref}: {width}x{height}, "
            f"colorspace: {color_space}, bits: {bits}, filter: {filter_name or 'none'}"
        )
        return ImageResource(
            data=data or b"",
            width=width,
            height=height,
            color_space=color_space,
            bits_per_component=bits,
            filter_name=filter_name,
            xref=xref,
            name=name,
        )

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    def __enter__(self) -> "PDFDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _int_key(self, xref: int, key: str, default: int) -> int:
        kind, value = self._doc.xref_get_key(xref, key)
        if kind == "xref":
            value = self._doc.xref_object(int(value.split()[0]), compressed=True)
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return default

    def _resolve(self, xref: int, key: str) -> Optional[str]:
        kind, value = self._doc.xref_get_key(xref, key)
        if kind == "null":
            return None
        if kind == "xref":
            return self._doc.xref_object(int(value.split()[0]), compressed=True)
        return value

    def _name_key(self, xref: int, key: str) -> str:
        # "[/ICCBased 12 0 R]" -> "ICCBased"
        value = self._resolve(xref, key)
        if not value:
            return ""
        match = _NAME_PATTERN.search(value)
        return match.group(1) if match else ""

    def _names_key(self, xref: int, key: str) -> list[str]:
        value = self._resolve(xref, key)
        if not value:
            return []
        return _NAME_PATTERN.findall(value)
