"""Command-line interface for datasheet-to-md converter."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import ConverterConfig, load_env_file
from .errors import ConfigError, ConversionFailure
from .pipeline import ConversionPipeline
from .reporting import format_batch_result, format_conversion_result


logger = logging.getLogger(__name__)


DEFAULT_ENV_FILE = "pdf_md_mcp.env"

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(level: str = "info", verbose: bool = False) -> None:
    """Configure logging."""
    log_level = logging.DEBUG if verbose else _LOG_LEVELS.get(level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def cmd_convert(args: argparse.Namespace, config: ConverterConfig) -> int:
    """Handle the convert command."""
    pipeline = ConversionPipeline(config)

    try:
        result = pipeline.convert(args.input, args.output_dir)
    except ConversionFailure as e:
        logger.error(f"Conversion failed: {e}")
        return 1

    print(format_conversion_result(result))
    return 0


def cmd_batch(args: argparse.Namespace, config: ConverterConfig) -> int:
    """Handle the batch command for directory processing."""
    input_dir = args.input_dir or config.pdf_input_dir
    if not input_dir:
        logger.error("No input directory given and PDF_INPUT_DIR is not set")
        return 1

    pipeline = ConversionPipeline(config)

    try:
        batch = pipeline.convert_directory(input_dir, args.output_dir)
    except ConversionFailure as e:
        logger.error(f"Batch conversion failed: {e}")
        return 1

    print(format_batch_result(batch))
    return 0 if batch.failure_count == 0 else 1


def cmd_config(args: argparse.Namespace, config: ConverterConfig) -> int:
    """Handle the config command: print the effective configuration."""
    print(json.dumps(config.to_dict(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='datasheet-to-md',
        description='Convert PDF datasheets to Markdown with extracted images'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--env-file',
        default=None,
        help=f'Environment file with configuration (default: {DEFAULT_ENV_FILE} if present)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Convert command
    convert_parser = subparsers.add_parser(
        'convert',
        help='Convert a single PDF file'
    )
    convert_parser.add_argument(
        'input',
        help='Path to input PDF file'
    )
    convert_parser.add_argument(
        '-o', '--output-dir',
        help='Base output directory (default: OUTPUT_BASE_DIR)'
    )
    convert_parser.set_defaults(func=cmd_convert)

    # Batch command
    batch_parser = subparsers.add_parser(
        'batch',
        help='Convert all PDFs in a directory tree'
    )
    batch_parser.add_argument(
        'input_dir',
        nargs='?',
        help='Directory containing PDF files (default: PDF_INPUT_DIR)'
    )
    batch_parser.add_argument(
        '-o', '--output-dir',
        help='Base output directory (default: OUTPUT_BASE_DIR)'
    )
    batch_parser.set_defaults(func=cmd_batch)

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Show the effective configuration'
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    env_file = args.env_file or DEFAULT_ENV_FILE
    if Path(env_file).is_file():
        load_env_file(env_file)
    elif args.env_file:
        print(f"Error: env file not found: {env_file}", file=sys.stderr)
        return 1

    try:
        config = ConverterConfig.from_env()
    except ConfigError as e:
        print(f"Error: configuration validation failed: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, args.verbose)
    return args.func(args, config)


if __name__ == '__main__':
    sys.exit(main())
