"""File system operations: discovery, destination paths, moves and sidecars."""

from stasher.filesystem.discovery import get_files, list_files, count_files, is_sidecar
from stasher.filesystem.file_ops import (
    move_file_if_absent,
    write_sidecar_if_absent,
    download_poster,
    format_synopsis,
)
from stasher.filesystem.paths import (
    derive_path,
    bucket_for,
    title_basis,
    episode_file_name,
)

__all__ = [
    "get_files",
    "list_files",
    "count_files",
    "is_sidecar",
    "move_file_if_absent",
    "write_sidecar_if_absent",
    "download_poster",
    "format_synopsis",
    "derive_path",
    "bucket_for",
    "title_basis",
    "episode_file_name",
]
