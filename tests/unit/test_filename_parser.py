"""Tests for filename parsing."""

import pytest

from stasher.classification.filename_parser import (
    clean_filename,
    extract_season_episode,
    extract_title,
    extract_year,
    is_anime_name,
    parse,
    strip_extension,
    strip_release_group,
)
from stasher.models.media import MediaType, NormalizedKey, ParsedInfo


class TestStripExtension:
    """Tests for strip_extension function."""

    def test_removes_extension(self):
        """Removes a regular extension."""
        assert strip_extension("Anaconda.1997.BluRay.mkv") == "Anaconda.1997.BluRay"

    def test_keeps_non_extension_suffix(self):
        """Keeps a dotted suffix that is not an extension."""
        assert strip_extension("Show.Name.S01E02") == "Show.Name.S01E02"

    def test_no_extension(self):
        """Leaves names without dot untouched."""
        assert strip_extension("Movie") == "Movie"


class TestExtractYear:
    """Tests for extract_year function."""

    def test_finds_year(self):
        """Finds a dotted year token."""
        assert extract_year("Anaconda.1997.BluRay") == 1997

    def test_last_year_wins(self):
        """The last year-like token is the release year."""
        assert extract_year("2001.A.Space.Odyssey.1968") == 1968

    def test_ignores_resolution(self):
        """Resolution tokens are not years."""
        assert extract_year("Show.1080p.x264") is None

    def test_ignores_out_of_range(self):
        """Only 19xx and 20xx are years."""
        assert extract_year("Movie.1850") is None

    def test_underscore_separator(self):
        """Underscores separate the year too."""
        assert extract_year("Movie_2010_720p") == 2010


class TestStripReleaseGroup:
    """Tests for strip_release_group function."""

    def test_strips_group_after_codec(self):
        """A group after a codec tag is removed."""
        assert strip_release_group("Show.S01E02.x264-GROUP") == "Show.S01E02.x264"

    def test_strips_group_after_known_tag(self):
        """A group after a denylisted tag is removed."""
        assert strip_release_group("Movie.2010.BluRay-FGT") == "Movie.2010.BluRay"

    def test_keeps_hyphenated_title(self):
        """Hyphenated title words are kept."""
        assert strip_release_group("Spider-Man") == "Spider-Man"
        assert strip_release_group("The.Spider-Man") == "The.Spider-Man"


class TestCleanFilename:
    """Tests for clean_filename function."""

    def test_removes_quality_tags(self):
        """Drops resolution, source and codec tags."""
        assert clean_filename("Movie.Name.2010.1080p.BluRay.x264") == "Movie Name 2010"

    def test_removes_bracket_and_parenthesis_groups(self):
        """Drops bracketed and parenthesized groups."""
        assert clean_filename("[Group] Title (1080p)") == "Title"

    def test_removes_dotted_audio_and_codec_tags(self):
        """Tags containing dots still match after separator replacement."""
        assert clean_filename("Title.DDP5.1.H.264") == "Title"

    def test_drops_unknown_digit_tokens(self):
        """Tokens mixing digits and letters are dropped."""
        assert clean_filename("Title abc123") == "Title"

    def test_keeps_allowed_numeric_tokens(self):
        """Episode markers, years and plain numbers survive."""
        assert clean_filename("Show.2010.S01E02.1x02.24") == "Show 2010 S01E02 1x02 24"

    def test_short_tags_are_case_sensitive(self):
        """Short tags only match with their own casing."""
        assert clean_filename("It.2017") == "It 2017"
        assert clean_filename("Movie.iT.2017") == "Movie 2017"

    @pytest.mark.parametrize("name,expected", [
        ("Child's.Play.1988", "Child's Play 1988"),
        ("Stan.and.Ollie.2018", "Stan and Ollie 2018"),
        ("Winter's.Bone.2010", "Winter's Bone 2010"),
        ("Hulu.Originals.Mubi.Picks", "Hulu Originals Mubi Picks"),
    ])
    def test_streaming_tags_spare_title_words(self, name, expected):
        """Streaming service tags only match in their own casing."""
        assert clean_filename(name) == expected

    def test_removes_streaming_tags(self):
        """Streaming service tags in release casing are dropped."""
        assert clean_filename("Show.S01E01.AMZN.HULU.STAN.PLAY.WEB-DL") == "Show S01E01"

    def test_removes_version_token(self):
        """Drops release version markers."""
        assert clean_filename("Frieren - 05v2") == "Frieren - 05"


class TestExtractSeasonEpisode:
    """Tests for extract_season_episode function."""

    def test_sxxexx(self):
        """Reads S01E02."""
        season, episode, start = extract_season_episode("Show Name S01E02")
        assert (season, episode, start) == (1, 2, 10)

    def test_lowercase_sxxexx(self):
        """Reads s03e10."""
        assert extract_season_episode("show s03e10")[:2] == (3, 10)

    def test_nxnn(self):
        """Reads 2x03."""
        assert extract_season_episode("The Office US 2x03")[:2] == (2, 3)

    def test_dash_fallback_is_season_one(self):
        """A trailing dash number is season 1."""
        assert extract_season_episode("Frieren - 12")[:2] == (1, 12)

    def test_no_match(self):
        """No numbering leaves everything unset."""
        assert extract_season_episode("Anaconda 1997") == (None, None, None)

    def test_first_pattern_wins(self):
        """SxxExx beats the dash fallback."""
        assert extract_season_episode("Show S02E05 - 12")[:2] == (2, 5)


class TestExtractTitle:
    """Tests for extract_title function."""

    def test_cuts_before_match(self):
        """Title stops before the episode marker."""
        assert extract_title("Show Name - S01E02", 12, None) == ("Show Name", None)

    def test_removes_year(self):
        """The captured year is removed from the title."""
        assert extract_title("Anaconda 1997", None, 1997) == ("Anaconda", 1997)

    def test_year_only_title(self):
        """A title made only of the year keeps it as title."""
        assert extract_title("1917", None, 1917) == ("1917", None)


class TestIsAnimeName:
    """Tests for is_anime_name function."""

    @pytest.mark.parametrize("name", [
        "[SubsPlease] Frieren - 05 (1080p)",
        "My.Anime.Show.S01E03",
        "Show.Name.S01E01.Crunchyroll",
        "Show.CR.S01E01",
        "Show.S01E05.720p.HEVC",
    ])
    def test_detects_anime(self, name):
        """Keywords, brackets, fansub tags and the codec heuristic flag anime."""
        assert is_anime_name(name) is True

    @pytest.mark.parametrize("name", [
        "Anaconda.1997.BluRay",
        "Crash.2004",
        "Show.S01E05.1080p.HEVC",
        "Show.Name.S01E02.1080p.WEBRip.x264-GROUP",
    ])
    def test_rejects_non_anime(self, name):
        """Ordinary release names are not anime."""
        assert is_anime_name(name) is False


class TestParse:
    """Tests for parse function."""

    def test_series_release_name(self):
        """A scene series release parses to title, season and episode."""
        assert parse("Show.Name.S01E02.1080p.WEBRip.x264-GROUP.mkv") == ParsedInfo(
            title="Show Name",
            media_type=MediaType.SERIES,
            season=1,
            episode=2,
            year=None,
        )

    def test_movie_release_name(self):
        """A movie release parses to title and year."""
        parsed = parse("Anaconda.1997.BluRay.mkv")
        assert parsed.title == "Anaconda"
        assert parsed.media_type is MediaType.MOVIE
        assert parsed.year == 1997
        assert parsed.season is None
        assert parsed.episode is None

    def test_anime_release_name(self):
        """A fansub release is anime with dash numbering."""
        parsed = parse("[Erai-raws] Frieren - 05v2 [1080p].mkv")
        assert parsed.title == "Frieren"
        assert parsed.media_type is MediaType.ANIME
        assert (parsed.season, parsed.episode) == (1, 5)

    def test_nxnn_series(self):
        """2x03 numbering gives a series."""
        parsed = parse("The.Office.US.2x03.HDTV.mkv")
        assert parsed.title == "The Office US"
        assert parsed.media_type is MediaType.SERIES
        assert (parsed.season, parsed.episode) == (2, 3)

    def test_dash_numbering_without_anime_marker(self):
        """Dash numbering alone gives a season 1 series."""
        parsed = parse("Show - 12.mkv")
        assert parsed.media_type is MediaType.SERIES
        assert (parsed.title, parsed.season, parsed.episode) == ("Show", 1, 12)

    def test_title_with_two_years(self):
        """A year at the start of the title survives."""
        parsed = parse("2001.A.Space.Odyssey.1968.mkv")
        assert parsed.title == "2001 A Space Odyssey"
        assert parsed.year == 1968

    def test_year_title(self):
        """A year-only title is kept as title."""
        parsed = parse("1917.mkv")
        assert parsed.title == "1917"
        assert parsed.year is None

    def test_title_word_shared_with_a_streaming_tag(self):
        """A title word spelled like a streaming tag is kept."""
        parsed = parse("Child's.Play.1988.1080p.AMZN.WEB-DL.mkv")
        assert parsed.title == "Child's Play"
        assert parsed.year == 1988

    def test_apostrophe_kept(self):
        """Apostrophes are part of the title."""
        assert parse("Grey's.Anatomy.S02E05.mkv").title == "Grey's Anatomy"

    def test_unparseable_name(self):
        """A name made only of tags gives an empty title."""
        parsed = parse("1080p.x264.mkv")
        assert parsed.title == ""
        assert parsed.is_unparseable

    def test_accepts_path(self, tmp_path):
        """Only the file name of a path is parsed."""
        parsed = parse(tmp_path / "2010" / "Anaconda.1997.mkv")
        assert parsed.title == "Anaconda"
        assert parsed.year == 1997

    def test_parse_is_deterministic(self, sample_media_names):
        """Parsing the same name twice gives equal results."""
        for name in sample_media_names:
            assert parse(name) == parse(name)

    def test_separator_styles_share_a_key(self):
        """Names differing only in separators and case share a lookup key."""
        names = [
            "Show.Name.S01E02.mkv",
            "show_name_s01e02.mkv",
            "Show Name - S01E02.mkv",
            "SHOW.NAME.S01E02.720p.mkv",
        ]
        keys = {NormalizedKey.from_parsed(parse(name)) for name in names}
        assert keys == {NormalizedKey("show name", MediaType.SERIES, 1, 2)}
