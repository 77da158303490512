"""Filename classification and title text helpers.

The filename parser lives in stasher.classification.filename_parser; it is
not re-exported here because the models package depends on these helpers.
"""

from stasher.classification.text_processing import (
    normalize_title_key,
    capitalize_words,
    sanitize_segment,
    is_generic_episode_title,
)

__all__ = [
    "normalize_title_key",
    "capitalize_words",
    "sanitize_segment",
    "is_generic_episode_title",
]
