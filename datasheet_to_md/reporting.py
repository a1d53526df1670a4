"""Human-readable summaries of conversion results."""

from pathlib import Path

from .processing.models import BatchResult, ConversionResult


def image_extraction_note(image_count: int) -> str:
    if image_count == 0:
        return "No images were found in the PDF or image extraction was disabled."
    if image_count == 1:
        return "One image was extracted and saved as a PNG file."
    return f"All {image_count} images were extracted and saved as PNG files."


def format_conversion_result(result: ConversionResult) -> str:
    """Summarize a single-document conversion."""
    return (
        "PDF Conversion Completed Successfully\n"
        "\n"
        f"Output Directory: {result.output_dir}\n"
        f"Markdown File: {Path(result.markdown_file).name}\n"
        f"Pages Processed: {result.page_count}\n"
        f"Images Extracted: {result.image_count}\n"
        "\n"
        "The PDF has been converted to Markdown format with all text content "
        "preserved and structured with appropriate headers. "
        f"{image_extraction_note(result.image_count)}"
    )


def format_batch_result(batch: BatchResult) -> str:
    """Summarize a directory conversion, listing failures if there were any."""
    lines = [
        "Batch PDF Conversion Completed",
        "",
        f"Input Directory: {batch.input_dir}",
        f"Output Directory: {batch.output_base_dir}",
        f"PDF Files Found: {batch.file_count}",
        f"Successfully Converted: {batch.success_count}",
        f"Failed Conversions: {batch.failure_count}",
        f"Total Pages Processed: {batch.total_page_count}",
        f"Total Images Extracted: {batch.total_image_count}",
        "",
        image_extraction_note(batch.total_image_count),
    ]
    if batch.failure_count > 0:
        lines.append("")
        lines.append("Errors occurred during processing:")
        for error in batch.errors:
            lines.append(f"- {Path(error.pdf_path).name}: {error.message}")
    return "\n".join(lines)
