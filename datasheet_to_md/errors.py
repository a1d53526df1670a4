"""Typed exceptions for document conversion and configuration."""


class ConversionFailure(Exception):
    """Base class for errors that abort the conversion of one document."""


class DocumentError(ConversionFailure):
    """Base class for errors raised while opening a source document."""


class DocumentNotFoundError(DocumentError):
    """Raised when the source path does not exist."""


class NotAFileError(DocumentError):
    """Raised when the source path is a directory."""


class InvalidExtensionError(DocumentError):
    """Raised when the source path does not end in .pdf."""


class DocumentOpenError(DocumentError):
    """Raised when the PDF structure cannot be parsed."""


class OutputDirectoryError(ConversionFailure):
    """Raised when the per-document output directory cannot be created."""


class MarkdownWriteError(ConversionFailure):
    """Raised when README.md cannot be written."""


class InputDirectoryError(ConversionFailure):
    """Raised when a batch input directory cannot be read."""


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""
