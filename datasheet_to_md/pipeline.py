"""Conversion pipeline orchestrating PDF to Markdown conversion."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .config import ConverterConfig
from .errors import InputDirectoryError, MarkdownWriteError, OutputDirectoryError
from .post_processing import (
    DiagramClassifier,
    DiagramClassifierConfig,
    MarkdownSynthesizer,
    SynthesizerConfig,
)
from .processing import (
    BatchResult,
    ConversionResult,
    Page,
    PDFDocument,
    ResourceWalker,
)


logger = logging.getLogger(__name__)


MARKDOWN_FILENAME = "README.md"
OUTPUT_DIR_PREFIX = "MARKDOWN_"


class ConversionPipeline:
    """Converts PDFs into ``MARKDOWN_<name>`` directories.

    Pipeline stages, per document:
    1. Validation and opening - path checks, PDF parse
    2. Output directory - ``<base>/MARKDOWN_<stem>``
    3. Page extraction - text plus images (decoded, saved as PNG, classified)
    4. Markdown synthesis - TOC, page sections, image/diagram references
    5. Output - ``README.md`` next to the images
    """

    def __init__(self, config: Optional[ConverterConfig] = None):
        """Initialize the pipeline.

        Args:
            config: Converter configuration.
        """
        self.config = config or ConverterConfig()
        self.classifier = DiagramClassifier(
            DiagramClassifierConfig(
                enabled=self.config.detect_diagrams,
                confidence_threshold=self.config.diagram_confidence,
                style=self.config.plantuml_style,
                color_scheme=self.config.plantuml_color_scheme,
            )
        )
        self.walker = ResourceWalker(self.classifier)
        self.synthesizer = MarkdownSynthesizer(
            SynthesizerConfig(
                include_toc=self.config.include_toc,
                base_header_level=self.config.base_header_level,
            ),
            classifier=self.classifier,
        )

    def convert(
        self,
        pdf_path: Union[str, Path],
        output_base_dir: Optional[Union[str, Path]] = None,
    ) -> ConversionResult:
        """Convert one PDF.

        Args:
            pdf_path: Path to the PDF file.
            output_base_dir: Base directory for the output (defaults to config).

        Returns:
            ConversionResult with output paths and counts.

        Raises:
            ConversionFailure: If the document cannot be converted.
        """
        base_dir = self._resolve_base_dir(output_base_dir)
        logger.info(f"Starting PDF conversion: {pdf_path}")

        with PDFDocument.open(pdf_path) as document:
            output_dir = self.create_output_directory(document.path, base_dir)
            pages, image_count = self.extract_pages(document, output_dir)

        markdown = self.synthesizer.synthesize(pages)
        markdown_path = output_dir / MARKDOWN_FILENAME
        self.write_markdown(markdown_path, markdown)

        logger.info("PDF conversion completed successfully")
        return ConversionResult(
            output_dir=str(output_dir),
            markdown_file=str(markdown_path),
            image_count=image_count,
            page_count=len(pages),
        )

    def extract_pages(
        self,
        document: PDFDocument,
        output_dir: Path,
    ) -> tuple[list[Page], int]:
        """Extract text and images from every page, in order.

        Returns:
            The pages and the total number of images saved.
        """
        pages = []
        total_images = 0
        for number in range(1, document.page_count + 1):
            logger.debug(f"Processing page {number}/{document.page_count}")
            page = Page(number=number, text=document.page_text(number))

            if self.config.extract_images:
                outcomes = self.walker.walk_page(document, number, output_dir)
                page.images = [o.image for o in outcomes if o.ok]
                total_images += len(page.images)

            pages.append(page)

        logger.info(f"Extracted content from {len(pages)} pages, {total_images} images total")
        return pages, total_images

    def create_output_directory(self, pdf_path: Path, base_dir: Path) -> Path:
        output_dir = base_dir / f"{OUTPUT_DIR_PREFIX}{pdf_path.stem}"
        logger.debug(f"Creating output directory: {output_dir}")
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(
                f"failed to create output directory {output_dir}: {e}"
            ) from e
        return output_dir

    def write_markdown(self, markdown_path: Path, markdown: str) -> None:
        logger.debug(f"Writing Markdown file: {markdown_path}")
        try:
            with open(markdown_path, "w", encoding="utf-8") as f:
                f.write(markdown)
        except OSError as e:
            raise MarkdownWriteError(f"failed to write Markdown file {markdown_path}: {e}") from e
        logger.info(f"Markdown file written successfully: {markdown_path}")

    def convert_directory(
        self,
        input_dir: Union[str, Path],
        output_base_dir: Optional[Union[str, Path]] = None,
    ) -> BatchResult:
        """Convert every PDF below a directory.

        A failing document is recorded as a ConversionError; the remaining
        documents are still converted.

        Args:
            input_dir: Directory searched recursively for .pdf files.
            output_base_dir: Base directory for the outputs (defaults to config).

        Returns:
            BatchResult with per-document results, errors and totals.

        Raises:
            InputDirectoryError: If the input directory cannot be read.
        """
        input_path = Path(input_dir)
        base_dir = self._resolve_base_dir(output_base_dir)
        logger.info(f"Starting batch PDF conversion from directory: {input_path}")

        pdf_files = self.find_pdf_files(input_path)
        batch = BatchResult(input_dir=str(input_path), output_base_dir=str(base_dir))
        batch.file_count = len(pdf_files)

        if not pdf_files:
            logger.warning(f"No PDF files found in directory: {input_path}")
            return batch

        logger.info(f"Found {len(pdf_files)} PDF files to process")
        for i, pdf_file in enumerate(pdf_files, start=1):
            logger.info(f"Processing PDF file ({i}/{len(pdf_files)}): {pdf_file.name}")
            try:
                result = self.convert(pdf_file, base_dir)
            except Exception as e:
                logger.error(f"Failed to convert PDF {pdf_file}: {e}")
                batch.record_failure(str(pdf_file), str(e))
            else:
                logger.info(f"Successfully converted PDF: {pdf_file.name}")
                batch.record_success(result)

        logger.info(
            f"Batch conversion completed: {batch.success_count} successful, "
            f"{batch.failure_count} failed"
        )
        return batch

    def find_pdf_files(self, input_dir: Path) -> list[Path]:
        """Recursively find .pdf files (any case), sorted, as absolute paths."""
        if not input_dir.exists():
            raise InputDirectoryError(f"input directory does not exist: {input_dir}")
        if not input_dir.is_dir():
            raise InputDirectoryError(f"input path is not a directory: {input_dir}")

        def _on_error(error: OSError) -> None:
            if error.filename is None or Path(error.filename) == input_dir:
                raise InputDirectoryError(f"cannot read input directory {input_dir}: {error}")
            logger.warning(f"Error accessing path {error.filename}: {error}")

        pdf_files = []
        for root, _dirs, files in os.walk(input_dir, onerror=_on_error):
            for name in files:
                if name.lower().endswith(".pdf"):
                    pdf_files.append((Path(root) / name).resolve())
        return sorted(pdf_files)

    def _resolve_base_dir(self, output_base_dir: Optional[Union[str, Path]]) -> Path:
        base = output_base_dir if output_base_dir else self.config.output_base_dir
        if not str(base).strip():
            raise OutputDirectoryError("output base directory cannot be empty")
        return Path(base)


def convert_pdf(
    pdf_path: Union[str, Path],
    output_base_dir: Optional[Union[str, Path]] = None,
    config: Optional[ConverterConfig] = None,
) -> ConversionResult:
    """Quick conversion function for simple use cases.

    Args:
        pdf_path: Path to PDF file.
        output_base_dir: Base output directory (defaults to config).
        config: Converter configuration (defaults to built-in defaults).

    Returns:
        ConversionResult for the document.
    """
    return ConversionPipeline(config).convert(pdf_path, output_base_dir)
