"""API key validation."""

import os
from typing import Optional

from loguru import logger

from stasher.ui.console import ConsoleUI


def get_api_key(key_name: str) -> Optional[str]:
    """
    Read an API key from the environment.

    Args:
        key_name: Environment variable name.

    Returns:
        The key, or None if not set.
    """
    return os.getenv(key_name)


def validate_api_keys(console: Optional[ConsoleUI] = None) -> bool:
    """
    Check that the TMDB API key is present.

    Jikan needs no key. Without a TMDB key, movies and western series can
    only be named from their filenames.

    Args:
        console: Optional ConsoleUI for messages.

    Returns:
        True if TMDB_API_KEY is set, False otherwise.
    """
    if get_api_key("TMDB_API_KEY"):
        return True

    logger.error("Missing API key: TMDB_API_KEY")
    if console:
        console.print_error("Missing API key: TMDB_API_KEY")
        console.print_warning("Add it to the .env file or use --offline")
    return False

