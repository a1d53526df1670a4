"""Converter configuration loaded from environment variables."""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from .errors import ConfigError


logger = logging.getLogger(__name__)


VALID_IMAGE_FORMATS = ("png", "jpg")
VALID_LOG_LEVELS = ("debug", "info", "warn", "error")
VALID_PLANTUML_STYLES = ("default", "blueprint", "modern")
VALID_COLOR_SCHEMES = ("mono", "color", "auto")

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


@dataclass
class ConverterConfig:
    """Settings for PDF extraction, diagram detection and Markdown output."""
    # Input/output
    pdf_input_dir: str = ""
    output_base_dir: str = "./output"

    # Image extraction
    image_max_dpi: int = 300
    image_format: str = "png"
    preserve_aspect_ratio: bool = True
    extract_images: bool = True

    # Diagram detection
    detect_diagrams: bool = False
    diagram_confidence: float = 0.7
    plantuml_style: str = "default"
    plantuml_color_scheme: str = "auto"

    # Markdown generation
    include_toc: bool = True
    base_header_level: int = 1
    extract_tables: bool = True

    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConverterConfig":
        """Build a validated configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``).

        Returns:
            A validated ConverterConfig.

        Raises:
            ConfigError: If a value is out of its allowed range.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        config = cls(
            pdf_input_dir=_get_str(env, "PDF_INPUT_DIR", defaults.pdf_input_dir),
            output_base_dir=_get_str(env, "OUTPUT_BASE_DIR", defaults.output_base_dir),
            image_max_dpi=_get_int(env, "IMAGE_MAX_DPI", defaults.image_max_dpi),
            image_format=_get_str(env, "IMAGE_FORMAT", defaults.image_format),
            preserve_aspect_ratio=_get_bool(
                env, "PRESERVE_ASPECT_RATIO", defaults.preserve_aspect_ratio
            ),
            extract_images=_get_bool(env, "EXTRACT_IMAGES", defaults.extract_images),
            detect_diagrams=_get_bool(env, "DETECT_DIAGRAMS", defaults.detect_diagrams),
            diagram_confidence=_get_float(
                env, "DIAGRAM_CONFIDENCE", defaults.diagram_confidence
            ),
            plantuml_style=_get_str(env, "PLANTUML_STYLE", defaults.plantuml_style),
            plantuml_color_scheme=_get_str(
                env, "PLANTUML_COLOR_SCHEME", defaults.plantuml_color_scheme
            ),
            include_toc=_get_bool(env, "INCLUDE_TOC", defaults.include_toc),
            base_header_level=_get_int(env, "BASE_HEADER_LEVEL", defaults.base_header_level),
            extract_tables=_get_bool(env, "EXTRACT_TABLES", defaults.extract_tables),
            log_level=_get_str(env, "LOG_LEVEL", defaults.log_level),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check every setting, raising ConfigError on the first invalid one."""
        if not 72 <= self.image_max_dpi <= 600:
            raise ConfigError(
                f"IMAGE_MAX_DPI must be between 72 and 600, got {self.image_max_dpi}"
            )
        if self.image_format not in VALID_IMAGE_FORMATS:
            raise ConfigError(
                f"IMAGE_FORMAT must be 'png' or 'jpg', got '{self.image_format}'"
            )
        if not 0.0 <= self.diagram_confidence <= 1.0:
            raise ConfigError(
                "DIAGRAM_CONFIDENCE must be between 0.0 and 1.0, "
                f"got {self.diagram_confidence}"
            )
        if not 1 <= self.base_header_level <= 6:
            raise ConfigError(
                f"BASE_HEADER_LEVEL must be between 1 and 6, got {self.base_header_level}"
            )
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigError(
                f"LOG_LEVEL must be one of {list(VALID_LOG_LEVELS)}, got '{self.log_level}'"
            )
        if self.plantuml_style not in VALID_PLANTUML_STYLES:
            raise ConfigError(
                f"PLANTUML_STYLE must be one of {list(VALID_PLANTUML_STYLES)}, "
                f"got '{self.plantuml_style}'"
            )
        if self.plantuml_color_scheme not in VALID_COLOR_SCHEMES:
            raise ConfigError(
                f"PLANTUML_COLOR_SCHEME must be one of {list(VALID_COLOR_SCHEMES)}, "
                f"got '{self.plantuml_color_scheme}'"
            )

    def to_dict(self) -> dict:
        return asdict(self)


def load_env_file(path: Union[str, Path]) -> int:
    """Load variables from a dotenv file into ``os.environ``.

    Variables already set in the environment win over the file.

    Args:
        path: Path to the env file.

    Returns:
        Number of variables that were set.
    """
    env_path = Path(path)
    count = 0
    for key, value in dotenv_values(env_path, encoding="utf-8").items():
        if value is None or key in os.environ:
            continue
        os.environ[key] = value
        count += 1
    logger.debug(f"Loaded {count} variables from {env_path}")
    return count


def _get_str(env: Mapping[str, str], key: str, default: str) -> str:
    value = env.get(key, "")
    return value if value != "" else default


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key, "")
    if value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={value!r}, using {default}")
        return default


def _get_float(env: Mapping[str, str], key: str, default: float) -> float:
    value = env.get(key, "")
    if value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {key}={value!r}, using {default}")
        return default


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key, "").strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default
