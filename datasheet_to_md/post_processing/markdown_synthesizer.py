"""Markdown generation from extracted pages, images and diagrams."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..processing.models import Page
from .diagram_classifier import DiagramClassifier
from .whitespace_normalizer import WhitespaceConfig, WhitespaceNormalizer


logger = logging.getLogger(__name__)


MAX_HEADER_LENGTH = 60
SHORT_HEADER_LENGTH = 40
MAX_HEADER_WORDS = 5

SECTION_KEYWORDS = (
    "OVERVIEW",
    "DESCRIPTION",
    "FEATURES",
    "SPECIFICATIONS",
    "PARAMETERS",
    "APPLICATIONS",
    "CHARACTERISTICS",
    "OPERATION",
    "CONFIGURATION",
)


def _ends_with_colon(line: str) -> bool:
    return line.endswith(":")


def _is_short_caps(line: str) -> bool:
    return (
        len(line) < SHORT_HEADER_LENGTH
        and line.upper() == line
        and len(line.split()) <= MAX_HEADER_WORDS
    )


def _has_section_keyword(line: str) -> bool:
    upper = line.upper()
    return any(keyword in upper for keyword in SECTION_KEYWORDS)


# A line is a header if any rule matches; lines over MAX_HEADER_LENGTH never are.
HEADER_RULES: list[tuple[str, Callable[[str], bool]]] = [
    ("colon", _ends_with_colon),
    ("short_caps", _is_short_caps),
    ("keyword", _has_section_keyword),
]


def looks_like_header(line: str) -> bool:
    """Heuristically decide whether a line of datasheet text is a sub-header."""
    line = line.strip()
    if not line or len(line) > MAX_HEADER_LENGTH:
        return False
    return any(rule(line) for _, rule in HEADER_RULES)


@dataclass
class SynthesizerConfig:
    """Configuration for Markdown synthesis."""
    include_toc: bool = True
    base_header_level: int = 1
    title: str = "PDF Document"


class MarkdownSynthesizer:
    """Builds a single Markdown document from processed pages.

    Output layout:
    - Document title
    - Optional table of contents linking to #page-<n>
    - One section per page with reflowed text, image embeds and diagrams
    - ``---`` rules between pages
    """

    def __init__(
        self,
        config: Optional[SynthesizerConfig] = None,
        classifier: Optional[DiagramClassifier] = None,
    ):
        """Initialize the synthesizer.

        Args:
            config: Synthesis options.
            classifier: Used to render diagrams attached to images.
        """
        self.config = config or SynthesizerConfig()
        self.classifier = classifier or DiagramClassifier()
        self.normalizer = WhitespaceNormalizer(WhitespaceConfig(max_consecutive_blanks=1))

    def synthesize(self, pages: list[Page]) -> str:
        """Render pages as Markdown.

        Args:
            pages: Pages in document order.

        Returns:
            The Markdown document.
        """
        parts = [f"# {self.config.title}\n\n"]

        if self.config.include_toc:
            parts.append(self.table_of_contents(pages))
            parts.append("\n")

        page_hashes = "#" * (self.config.base_header_level + 1)
        for position, page in enumerate(pages):
            parts.append(f"{page_hashes} Page {page.number}\n\n")

            text = self.format_text(page.text)
            if text:
                parts.append(text)
                parts.append("\n\n")

            for image in page.images:
                parts.append(f"![Image](./{image.filename})\n\n")
                for diagram in image.diagrams:
                    parts.append(self.classifier.to_markdown(diagram))

            if position < len(pages) - 1:
                parts.append("---\n\n")

        return "".join(parts)

    def table_of_contents(self, pages: list[Page]) -> str:
        lines = ["## Table of Contents", ""]
        for page in pages:
            lines.append(f"- [Page {page.number}](#page-{page.number})")
        return "\n".join(lines) + "\n\n"

    def format_text(self, text: str) -> str:
        """Reflow raw page text, promoting header-like lines.

        Blank lines are dropped; detected headers get a blank line on each
        side and ``base_header_level + 2`` hashes.
        """
        if not text:
            return ""

        header_hashes = "#" * (self.config.base_header_level + 2)
        formatted: list[str] = []
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            if looks_like_header(line):
                if formatted:
                    formatted.append("")
                formatted.append(f"{header_hashes} {line}")
                formatted.append("")
            else:
                formatted.append(line)

        return self.normalizer.normalize("\n".join(formatted)).rstrip("\n")
