"""Tests for title text helpers."""

import pytest

from stasher.classification.text_processing import (
    capitalize_words,
    is_generic_episode_title,
    normalize_title_key,
    sanitize_segment,
)


class TestNormalizeTitleKey:
    """Tests for normalize_title_key function."""

    def test_lowercases_and_strips_punctuation(self):
        """Punctuation is removed and text lowercased."""
        assert normalize_title_key("Show: The Name!") == "show the name"

    def test_keeps_apostrophes(self):
        """Apostrophes survive normalization."""
        assert normalize_title_key("Grey's Anatomy") == "grey's anatomy"

    def test_collapses_whitespace(self):
        """Runs of whitespace become one space and ends are trimmed."""
        assert normalize_title_key("  The   Office \t US ") == "the office us"

    def test_underscores_are_separators(self):
        """Underscores count as spaces."""
        assert normalize_title_key("show_name") == "show name"

    def test_empty(self):
        """Empty input gives an empty key."""
        assert normalize_title_key("") == ""

    def test_case_and_punctuation_variants_match(self):
        """Surface variants of one title share a key."""
        assert normalize_title_key("Mr. Robot") == normalize_title_key("MR ROBOT")


class TestCapitalizeWords:
    """Tests for capitalize_words function."""

    def test_capitalizes_each_word(self):
        """First letter of each word is uppercased."""
        assert capitalize_words("the office") == "The Office"

    def test_leaves_rest_untouched(self):
        """Remaining letters keep their case."""
        assert capitalize_words("NCIS los angeles") == "NCIS Los Angeles"
        assert capitalize_words("mcDonald's") == "McDonald's"

    def test_articles_not_lowered(self):
        """Articles are capitalized like any word."""
        assert capitalize_words("lord of the rings") == "Lord Of The Rings"


class TestSanitizeSegment:
    """Tests for sanitize_segment function."""

    def test_replaces_invalid_characters(self):
        """Invalid path characters become single spaces."""
        assert sanitize_segment("AC/DC: Live") == "AC DC Live"

    def test_keeps_apostrophes(self):
        """Apostrophes are valid in paths."""
        assert sanitize_segment("Grey's Anatomy") == "Grey's Anatomy"

    def test_collapses_underscores_and_spaces(self):
        """Runs of spaces or underscores collapse."""
        assert sanitize_segment("Show__Name   Here") == "Show Name Here"

    def test_trims_trailing_dots(self):
        """Trailing dots and spaces are trimmed."""
        assert sanitize_segment("Whatever Works...") == "Whatever Works"

    def test_control_characters(self):
        """Control characters are removed."""
        assert sanitize_segment("Tab\tTitle") == "Tab Title"

    def test_empty(self):
        """Empty input stays empty."""
        assert sanitize_segment("") == ""


class TestIsGenericEpisodeTitle:
    """Tests for is_generic_episode_title function."""

    @pytest.mark.parametrize("title", ["Episode 5", "episode 12", "Ep 3", "Ep. 3", "E5", "e 07"])
    def test_generic(self, title):
        """Numbering placeholders are generic."""
        assert is_generic_episode_title(title)

    @pytest.mark.parametrize("title", ["Pilot", "The Episode", "Episode of Doom", "5"])
    def test_not_generic(self, title):
        """Real titles are not generic."""
        assert not is_generic_episode_title(title)
