"""Whitespace normalization post-processor for collapsing excessive newlines."""

import logging
import re
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass
class WhitespaceConfig:
    """Configuration for whitespace normalization."""
    # Maximum consecutive blank lines allowed
    max_consecutive_blanks: int = 1


class WhitespaceNormalizer:
    """Collapses runs of blank lines in extracted text."""

    def __init__(self, config: Optional[WhitespaceConfig] = None):
        """Initialize the normalizer.

        Args:
            config: Whitespace configuration options.
        """
        self.config = config or WhitespaceConfig()
        limit = self.config.max_consecutive_blanks + 1
        self._pattern = re.compile(r"\n{%d,}" % (limit + 1))
        self._replacement = "\n" * limit

    def normalize(self, text: str) -> str:
        """Collapse 3+ newlines into 2 (one blank line) with the default config.

        Args:
            text: Input text.

        Returns:
            Text with normalized paragraph breaks.
        """
        if not text:
            return ""

        return self._pattern.sub(self._replacement, text)
