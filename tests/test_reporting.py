from datasheet_to_md.processing.models import BatchResult, ConversionResult
from datasheet_to_md.reporting import (
    format_batch_result,
    format_conversion_result,
    image_extraction_note,
)


def test_image_extraction_note():
    assert image_extraction_note(0).startswith("No images were found")
    assert image_extraction_note(1) == "One image was extracted and saved as a PNG file."
    assert image_extraction_note(4) == "All 4 images were extracted and saved as PNG files."


def test_single_conversion_summary():
    result = ConversionResult(
        output_dir="/out/MARKDOWN_lm317",
        markdown_file="/out/MARKDOWN_lm317/README.md",
        image_count=3,
        page_count=12,
    )
    text = format_conversion_result(result)
    assert text.startswith("PDF Conversion Completed Successfully\n")
    assert "Output Directory: /out/MARKDOWN_lm317\n" in text
    assert "Markdown File: README.md\n" in text
    assert "Pages Processed: 12\n" in text
    assert "Images Extracted: 3\n" in text
    assert text.endswith("All 3 images were extracted and saved as PNG files.")


def test_batch_summary_lists_errors():
    batch = BatchResult(input_dir="/in", output_base_dir="/out", file_count=2)
    batch.record_success(ConversionResult("/out/MARKDOWN_a", "/out/MARKDOWN_a/README.md", 1, 4))
    batch.record_failure("/in/sub/b.pdf", "failed to open PDF: broken xref")

    text = format_batch_result(batch)
    assert "PDF Files Found: 2\n" in text
    assert "Successfully Converted: 1\n" in text
    assert "Failed Conversions: 1\n" in text
    assert "Total Pages Processed: 4\n" in text
    assert "Total Images Extracted: 1\n" in text
    assert "Errors occurred during processing:\n- b.pdf: failed to open PDF: broken xref" in text


def test_batch_summary_without_errors():
    batch = BatchResult(input_dir="/in", output_base_dir="/out")
    assert "Errors occurred" not in format_batch_result(batch)
