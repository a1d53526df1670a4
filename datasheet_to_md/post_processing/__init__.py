"""Post-processing module: diagram classification and Markdown synthesis."""

from .diagram_classifier import DiagramClassifier, DiagramClassifierConfig
from .markdown_synthesizer import (
    MarkdownSynthesizer,
    SynthesizerConfig,
    looks_like_header,
)
from .whitespace_normalizer import WhitespaceConfig, WhitespaceNormalizer

__all__ = [
    "DiagramClassifier",
    "DiagramClassifierConfig",
    "MarkdownSynthesizer",
    "SynthesizerConfig",
    "looks_like_header",
    "WhitespaceNormalizer",
    "WhitespaceConfig",
]
