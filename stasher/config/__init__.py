"""Configuration and CLI handling."""

from stasher.config.settings import (
    MOVIES_FOLDER,
    SERIES_FOLDER,
    DIGIT_BUCKET,
    SYMBOL_BUCKET,
    SYNOPSIS_FILENAME,
    POSTER_FILENAME,
    SIDECAR_FILENAMES,
    PREVIEW_ROOT_NAME,
    PREVIEW_SELECTOR_DEPTH,
    SENTINEL_VALUE,
    DEFAULT_DATABASE_PATH,
)
from stasher.config.cli import (
    CLIArgs,
    create_parser,
    parse_arguments,
    args_to_cli_args,
    validate_directories,
)

__all__ = [
    "MOVIES_FOLDER",
    "SERIES_FOLDER",
    "DIGIT_BUCKET",
    "SYMBOL_BUCKET",
    "SYNOPSIS_FILENAME",
    "POSTER_FILENAME",
    "SIDECAR_FILENAMES",
    "PREVIEW_ROOT_NAME",
    "PREVIEW_SELECTOR_DEPTH",
    "SENTINEL_VALUE",
    "DEFAULT_DATABASE_PATH",
    "CLIArgs",
    "create_parser",
    "parse_arguments",
    "args_to_cli_args",
    "validate_directories",
]
