"""Text processing utilities for media titles and filenames."""

import re

# Characters that are not allowed in a path segment on common file systems
INVALID_PATH_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

GENERIC_EPISODE_TITLE = re.compile(r'^(?:episode|ep|e)\s*\.?\s*\d+$', re.IGNORECASE)


def normalize_title_key(title: str) -> str:
    """
    Normalize a title into its cache lookup form.

    Lowercases, removes punctuation (apostrophes are kept), collapses
    whitespace and trims.

    Args:
        title: Raw or parsed title.

    Returns:
        Normalized title text, or empty string for empty input.

    Examples:
        >>> normalize_title_key("Show.Name!")
        'showname'
        >>> normalize_title_key("  Grey's   Anatomy ")
        "grey's anatomy"
    """
    if not title:
        return ""

    text = re.sub(r"[^\w\s']", "", title.lower())
    text = text.replace("_", " ")
    return re.sub(r"\s+", " ", text).strip()


def capitalize_words(text: str) -> str:
    """
    Capitalize the first letter of every space-separated word.

    Unlike str.title(), the rest of each word is left untouched, so
    "McDonald's" and "NCIS" survive unchanged.

    Args:
        text: Input text.

    Returns:
        Text with each word's first letter uppercased.

    Examples:
        >>> capitalize_words("the office")
        'The Office'
        >>> capitalize_words("grey's anatomy")
        "Grey's Anatomy"
    """
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def sanitize_segment(text: str) -> str:
    """
    Make text safe to use as a single path segment.

    Invalid characters become spaces (apostrophes are valid and kept),
    runs of spaces or underscores collapse into one space, and trailing
    dots and spaces are trimmed.

    Args:
        text: Folder or file name candidate.

    Returns:
        Sanitized path segment.

    Examples:
        >>> sanitize_segment("Mission: Impossible")
        'Mission Impossible'
    """
    if not text:
        return ""

    result = INVALID_PATH_CHARS.sub(" ", text)
    result = re.sub(r"[ _]{2,}", " ", result)
    return result.strip().rstrip(". ")


def is_generic_episode_title(title: str) -> bool:
    """
    Check whether an episode title is a numbering placeholder.

    Args:
        title: Episode title from a provider.

    Returns:
        True for titles like "Episode 5", "Ep 5" or "E5".
    """
    return bool(GENERIC_EPISODE_TITLE.match(title.strip()))
