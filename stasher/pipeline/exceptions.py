"""Per-file errors raised inside the organize pipeline."""

from pathlib import Path
from typing import Optional


class OrganizeError(Exception):
    """Base class for errors contained to a single file."""

    def __init__(self, message: str, source: Optional[Path] = None) -> None:
        super().__init__(message)
        self.source = source


class UnparseableFilenameError(OrganizeError):
    """No title could be recovered from the filename."""

    pass


class NoMetadataResolvedError(OrganizeError):
    """Neither the cache, the providers nor the title lookup gave metadata."""

    pass


class DestinationConflictError(OrganizeError):
    """The destination file already exists."""

    pass


class MoveFailedError(OrganizeError):
    """The file could not be moved."""

    pass
