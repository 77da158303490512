"""Filename parsing: recover title, season, episode, year and anime flag."""

import re
from pathlib import Path
from typing import List, Optional, Pattern, Tuple, Union

from loguru import logger

from stasher.config.settings import (
    ANIME_GROUP_TAGS,
    ANIME_KEYWORDS,
    KNOWN_GARBAGE_WORDS,
    STREAMING_SERVICE_TAGS,
)
from stasher.models.media import MediaType, ParsedInfo

SEASON_EPISODE_REGEX = re.compile(
    r'\b[Ss](\d{1,2})[Ee](\d{1,2})\b|\b(\d{1,2})[xX](\d{1,2})\b'
)

# "Show - 02" anime-style numbering, read as season 1
DASH_EPISODE_REGEX = re.compile(r'-\s*(\d{1,2})$')

YEAR_REGEX = re.compile(r'(?<![A-Za-z0-9])((?:19|20)\d{2})(?![A-Za-z0-9])')

VERSION_REGEX = re.compile(r'(?<![A-Za-z])v\d+(?![A-Za-z0-9])', re.IGNORECASE)

EXTENSION_REGEX = re.compile(r'^\.[A-Za-z0-9]{1,5}$')

# "x264-GROUP" style suffix naming the release group
RELEASE_GROUP_REGEX = re.compile(r'(?<=[.\s_])([^.\s_]+)-([A-Za-z0-9]+)$')

ALLOWED_NUMERIC_TOKENS = re.compile(
    r'\d{4}|[Ss]\d{1,2}[Ee]\d{1,2}|\d{1,2}[xX]\d{1,2}|\d+|\d+\.\d+'
)

ANIME_TAG_REGEX = re.compile(
    r'(?<![a-z0-9])(?:' + '|'.join(re.escape(tag) for tag in ANIME_GROUP_TAGS) + r')(?![a-z0-9])'
)

EPISODE_TOKEN_REGEX = re.compile(r'\b(?:ep|s\d+e\d+)\b')


def _word_pattern(word: str) -> str:
    """Regex for a denylisted word, with '.' and ' ' interchangeable."""
    escaped = re.escape(word).replace(r'\.', '[ .]').replace(r'\ ', '[ .]')
    return r'(?<![A-Za-z0-9])' + escaped + r'(?![A-Za-z0-9])'


def _build_garbage_patterns(
    words: List[str],
    exact_words: List[str]
) -> Tuple[Pattern, Pattern]:
    """
    Compile the denylist into a case-sensitive and a case-insensitive regex.

    Short purely alphabetic tags ("iT", "MA", "TS") and the tags listed in
    exact_words only match with their exact casing, so titles like "It",
    "Child's Play" or "Stan and Ollie" survive cleaning.
    """
    ordered = sorted(set(words), key=len, reverse=True)
    exact = [w for w in ordered if (len(w) <= 3 and w.isalpha()) or w in exact_words]
    loose = [w for w in ordered if w not in exact]
    exact_regex = re.compile('|'.join(_word_pattern(w) for w in exact))
    loose_regex = re.compile('|'.join(_word_pattern(w) for w in loose), re.IGNORECASE)
    return exact_regex, loose_regex


GARBAGE_EXACT_REGEX, GARBAGE_LOOSE_REGEX = _build_garbage_patterns(
    KNOWN_GARBAGE_WORDS, STREAMING_SERVICE_TAGS
)
GARBAGE_WORDS_LOWER = {w.lower() for w in KNOWN_GARBAGE_WORDS}


def strip_extension(file_name: str) -> str:
    """
    Remove a file extension.

    Suffixes that do not look like an extension ("Show.S01E02") are kept.

    Args:
        file_name: File name, with or without extension.

    Returns:
        File name without its extension.
    """
    path = Path(file_name)
    if EXTENSION_REGEX.match(path.suffix):
        return path.stem
    return path.name


def extract_year(name: str) -> Optional[int]:
    """
    Find the release year in a raw name.

    The last year-like token wins, so "2001.A.Space.Odyssey.1968" gives 1968.

    Args:
        name: File name without extension.

    Returns:
        Four-digit year (19xx/20xx), or None.
    """
    matches = YEAR_REGEX.findall(name)
    return int(matches[-1]) if matches else None


def strip_release_group(name: str) -> str:
    """Drop a trailing "-GROUP" when it follows a release tag."""
    match = RELEASE_GROUP_REGEX.search(name)
    if not match:
        return name
    tag = match.group(1)
    if tag.lower() in GARBAGE_WORDS_LOWER or any(c.isdigit() for c in tag):
        return name[:match.start(1) + len(tag)]
    return name


def clean_filename(name: str) -> str:
    """
    Remove release noise while keeping title and numbering tokens.

    Args:
        name: File name without extension.

    Returns:
        Cleaned text, tokens joined by single spaces.
    """
    name = strip_release_group(name)
    name = VERSION_REGEX.sub(' ', name)
    name = re.sub(r'\([^)]*\)', ' ', name)
    name = re.sub(r'\[[^\]]*\]', ' ', name)
    name = name.replace('.', ' ').replace('_', ' ')
    name = GARBAGE_LOOSE_REGEX.sub(' ', name)
    name = GARBAGE_EXACT_REGEX.sub(' ', name)

    tokens = [
        token for token in name.split()
        if not any(c.isdigit() for c in token) or ALLOWED_NUMERIC_TOKENS.fullmatch(token)
    ]
    return ' '.join(tokens)


def extract_season_episode(cleaned: str) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    """
    Find season and episode numbers in cleaned text.

    Args:
        cleaned: Output of clean_filename().

    Returns:
        Tuple of (season, episode, match_start); all None when not found.
    """
    match = SEASON_EPISODE_REGEX.search(cleaned)
    if match:
        if match.group(1) is not None:
            return int(match.group(1)), int(match.group(2)), match.start()
        return int(match.group(3)), int(match.group(4)), match.start()

    match = DASH_EPISODE_REGEX.search(cleaned)
    if match:
        return 1, int(match.group(1)), match.start()

    return None, None, None


def is_anime_name(name: str) -> bool:
    """
    Guess whether a raw file name belongs to an anime release.

    Args:
        name: File name without extension.

    Returns:
        True when a keyword, bracketed tag or fansub group is present.
    """
    lower = name.lower()
    if any(keyword in lower for keyword in ANIME_KEYWORDS):
        return True
    if re.search(r'\[.*?\]', lower):
        return True
    if ANIME_TAG_REGEX.search(lower):
        return True
    return bool(EPISODE_TOKEN_REGEX.search(lower)) and '720p' in lower and 'hevc' in lower


def extract_title(cleaned: str, match_start: Optional[int], year: Optional[int]) -> Tuple[str, Optional[int]]:
    """
    Cut the title out of cleaned text.

    Args:
        cleaned: Output of clean_filename().
        match_start: Start of the season/episode match, if any.
        year: Year found in the raw name.

    Returns:
        Tuple of (title, year). The year is dropped when it is the whole
        title ("1917.mkv").
    """
    title = cleaned[:match_start] if match_start is not None else cleaned
    title = re.sub(r'[-._\s]+$', '', title).strip()

    if year is not None:
        without_year = re.sub(rf'\b{year}\b', ' ', title)
        without_year = re.sub(r'\s{2,}', ' ', without_year)
        without_year = re.sub(r'[-._\s]+$', '', without_year).strip()
        if without_year:
            title = without_year
        elif title:
            year = None

    return title, year


def parse(file_path: Union[str, Path]) -> ParsedInfo:
    """
    Parse a media filename into structured information.

    Never raises; an empty title marks the file as unparseable.

    Args:
        file_path: Path or file name of the media file.

    Returns:
        ParsedInfo with title, type, season, episode and year.

    Examples:
        >>> parse("Show.Name.S01E02.1080p.WEBRip.x264-GROUP.mkv")
        ParsedInfo(title='Show Name', media_type=<MediaType.SERIES: 'Series'>, season=1, episode=2, year=None)
    """
    name = strip_extension(Path(file_path).name)
    year = extract_year(name)

    cleaned = clean_filename(name)
    season, episode, match_start = extract_season_episode(cleaned)
    title, year = extract_title(cleaned, match_start, year)

    if is_anime_name(name):
        media_type = MediaType.ANIME
    elif season is not None and episode is not None:
        media_type = MediaType.SERIES
    else:
        media_type = MediaType.MOVIE

    if not title:
        logger.debug(f"No title recovered from '{Path(file_path).name}'")

    return ParsedInfo(
        title=title,
        media_type=media_type,
        season=season,
        episode=episode,
        year=year,
    )
