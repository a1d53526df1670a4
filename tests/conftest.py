import io

import pymupdf
import pytest
from PIL import Image


CONFIG_ENV_VARS = [
    "PDF_INPUT_DIR", "OUTPUT_BASE_DIR", "IMAGE_MAX_DPI", "IMAGE_FORMAT",
    "PRESERVE_ASPECT_RATIO", "DETECT_DIAGRAMS", "DIAGRAM_CONFIDENCE",
    "PLANTUML_STYLE", "PLANTUML_COLOR_SCHEME", "INCLUDE_TOC", "BASE_HEADER_LEVEL",
    "EXTRACT_TABLES", "EXTRACT_IMAGES", "LOG_LEVEL",
]


def png_bytes(color=(200, 30, 30), size=(16, 12)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def write_pdf(path, pages, images_per_page=None):
    """Write a PDF with one text block per page and optional PNG images.

    Args:
        path: Output path.
        pages: Text for each page.
        images_per_page: Mapping of 0-based page index to number of images.
    """
    images_per_page = images_per_page or {}
    doc = pymupdf.open()
    for index, text in enumerate(pages):
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=11)
        for n in range(images_per_page.get(index, 0)):
            rect = pymupdf.Rect(72, 200 + n * 120, 172, 300 + n * 120)
            page.insert_image(rect, stream=png_bytes(color=(40 * n % 255, 120, 200)))
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def clean_env(monkeypatch):
    for key in CONFIG_ENV_VARS:
        # monkeypatch restores each key on teardown
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def sample_pdf(tmp_path):
    return write_pdf(
        tmp_path / "datasheet.pdf",
        ["FEATURES\nLow supply current\nWide supply range", "Second page body text"],
        images_per_page={0: 1},
    )


@pytest.fixture
def make_pdf():
    return write_pdf
