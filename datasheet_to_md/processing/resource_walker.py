"""Per-page image extraction with per-image fault isolation."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from .document_loader import PDFDocument
from .image_decoder import (
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    create_placeholder,
    decode_image,
)
from .models import ExtractedImage, ImageOutcome

if TYPE_CHECKING:
    from ..post_processing.diagram_classifier import DiagramClassifier


logger = logging.getLogger(__name__)


def image_filename(page_number: int, index: int) -> str:
    return f"page_{page_number}_image_{index}.png"


class ResourceWalker:
    """Extracts, saves and classifies the images of a page.

    Every image resource is processed inside its own fault boundary. A
    stream that cannot be read is replaced by a placeholder bitmap; a
    failure to save or classify is logged and reported as a failed
    ImageOutcome, and extraction moves on to the next resource.
    """

    def __init__(self, classifier: Optional["DiagramClassifier"] = None):
        """Initialize the walker.

        Args:
            classifier: Diagram classifier run on each saved image (optional).
        """
        self.classifier = classifier

    def walk_page(
        self,
        document: PDFDocument,
        page_number: int,
        output_dir: Union[str, Path],
    ) -> list[ImageOutcome]:
        """Process every image resource of a page.

        Args:
            document: The opened document.
            page_number: 1-based page number.
            output_dir: Directory the PNG files are written to.

        Returns:
            One ImageOutcome per image resource, in resource order.
        """
        output_dir = Path(output_dir)
        logger.debug(f"Extracting images from page {page_number}")

        try:
            entries = document.image_resources(page_number)
        except Exception as e:
            logger.warning(f"Failed to list image resources on page {page_number}: {e}")
            return []

        outcomes = []
        index = 0
        for name, xref in entries:
            try:
                if not document.is_image(xref):
                    logger.debug(f"Resource {name} on page {page_number} is not an image, skipping")
                    continue
            except Exception as e:
                logger.warning(f"Could not inspect resource {name} on page {page_number}: {e}")
                continue

            index += 1
            filename = image_filename(page_number, index)
            outcomes.append(self._process_image(document, xref, name, filename, output_dir))

        extracted = sum(1 for o in outcomes if o.ok)
        if extracted:
            logger.info(f"Extracted {extracted} images from page {page_number}")
        else:
            logger.debug(f"No images found on page {page_number}")
        return outcomes

    def _process_image(
        self,
        document: PDFDocument,
        xref: int,
        name: str,
        filename: str,
        output_dir: Path,
    ) -> ImageOutcome:
        image_path = output_dir / filename
        try:
            resource = document.load_image_resource(xref, name)
        except Exception as e:
            logger.warning(f"Failed to read image stream {name or xref}: {e}, using placeholder")
            bitmap = create_placeholder(DEFAULT_IMAGE_WIDTH, DEFAULT_IMAGE_HEIGHT)
        else:
            bitmap = decode_image(resource)

        try:
            bitmap.save(image_path, format="PNG")
            logger.debug(f"Successfully saved image: {image_path}")

            image = ExtractedImage(
                filename=filename,
                width=bitmap.width,
                height=bitmap.height,
                bitmap=bitmap,
            )
            if self.classifier is not None:
                image.diagrams = self.classifier.detect(str(image_path))
                if image.diagrams:
                    logger.info(f"Found {len(image.diagrams)} diagram(s) in {filename}")
            image.release()
            return ImageOutcome(filename=filename, image=image)
        except Exception as e:
            logger.warning(f"Failed to process image {filename} ({name}): {e}")
            return ImageOutcome(filename=filename, error=str(e))
