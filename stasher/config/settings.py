"""Configuration settings and constants for the stasher package."""

from pathlib import Path
from typing import Dict, FrozenSet, List

# Library layout
MOVIES_FOLDER: str = "Movies"
SERIES_FOLDER: str = "TV Series"
DIGIT_BUCKET: str = "1 - 1000"
SYMBOL_BUCKET: str = "#"
DEFAULT_SEASON: int = 1

# Sidecar files written next to each title folder
SYNOPSIS_FILENAME: str = "synopsis.txt"
POSTER_FILENAME: str = "poster.jpg"
SIDECAR_FILENAMES: FrozenSet[str] = frozenset({SYNOPSIS_FILENAME, POSTER_FILENAME})

# Preview tree
PREVIEW_ROOT_NAME: str = "PREVIEW DESTINATION"
# Depth of the title folder: root (0) / category (1) / bucket (2) / title (3)
PREVIEW_SELECTOR_DEPTH: int = 3

# Cache storage sentinel for "season/episode not applicable"
SENTINEL_VALUE: int = -1

# Default database location (metadata cache + move history)
DEFAULT_DATABASE_PATH: Path = Path.home() / ".stasher" / "stasher.db"

# Request timeout in seconds
REQUEST_TIMEOUT_SECONDS: int = 10
USER_AGENT: str = "stasher/1.0"

# Jikan applies aggressive rate limiting
JIKAN_REQUEST_DELAY_SECONDS: float = 0.3
JIKAN_MAX_EPISODE_PAGES: int = 10
JIKAN_SEARCH_LIMIT: int = 5

# Number of cast members kept in metadata
CAST_LIMIT: int = 3

TMDB_IMAGE_BASE_URL: str = "https://image.tmdb.org/t/p/w500"

# Streaming service tags, matched with their exact casing only
STREAMING_SERVICE_TAGS: List[str] = [
    "NF", "AMZN", "HMAX", "DSNP", "HULU", "iT", "ATVP", "PCOK", "STAN",
    "MUBI", "PLAY", "BONE",
]

# Release tags dropped from filenames before title extraction
KNOWN_GARBAGE_WORDS: List[str] = [
    # Resolutions
    "1080p", "720p", "480p", "2160p", "4K",
    # Sources and release groups
    "WEBRip", "WEB-DL", "WEB", "BluRay", "BRRip", "BDRip", "DVDRip", "HDTV",
    "CAM", "TS", "TC", "SCREENER",
    # Encoding and codecs
    "x264", "x265", "HEVC", "AVC", "H.264", "H.265", "10bit", "8bit",
    # Audio
    "DDP5.1", "DD5.1", "AAC", "AAC2.0", "TrueHD", "Atmos", "Opus", "DTS-HD",
    "MA", "FLAC", "MP3", "OGG",
    # Miscellaneous
    "YIFY", "RARBG", "PSA", "GalaxyRG", "Joy", "Subbed", "Dual Audio",
    "Multi Sub", "Subs", "FanDub", "FanSub", "EngDub", "JapDub",
    # Editions
    "Remux", "REPACK", "PROPER", "LIMITED", "EXTENDED", "UNRATED",
    "Director's Cut",
    # Video quality
    "HDR", "HDR10", "HDR10+", "SDR", "DV", "DoVi", "DolbyVision",
    # Language markers
    "H", "English",
] + STREAMING_SERVICE_TAGS

# Substrings that flag a filename as anime
ANIME_KEYWORDS: List[str] = ["anime", "fansub", "subbed", "japan", "crunchyroll"]

# Whole-token fansub groups and anime distributors
ANIME_GROUP_TAGS: List[str] = [
    "cr", "funimation", "hidive", "horriblesubs", "erai-raws", "subsplease",
]

# US certification to local classification board rating
CONTENT_RATING_MAP: Dict[str, str] = {
    # Movie ratings
    "G": "A",
    "PG": "PG",
    "PG-13": "13",
    "R": "16",
    "NC-17": "18",
    "X": "X18",
    "XX": "XX",
    "MATURE": "16",
    # TV ratings
    "TV-Y": "A",
    "TV-Y7": "7",
    "TV-G": "PG",
    "TV-PG": "13",
    "TV-14": "16",
    "TV-MA": "18",
    # MyAnimeList ratings
    "R+": "18",
    "RX": "X18",
}
DEFAULT_CONTENT_RATING: str = "PG"
