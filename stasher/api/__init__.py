"""Metadata providers and the metadata cache."""

from stasher.api.base import MetadataProvider
from stasher.api.cache_db import MetadataCache
from stasher.api.exceptions import (
    APIError,
    APIConfigurationError,
    ProviderUnavailableError,
    APIConnectionError,
    APIResponseError,
)
from stasher.api.jikan_client import JikanClient
from stasher.api.tmdb_client import TmdbClient

__all__ = [
    "MetadataProvider",
    "MetadataCache",
    "APIError",
    "APIConfigurationError",
    "ProviderUnavailableError",
    "APIConnectionError",
    "APIResponseError",
    "JikanClient",
    "TmdbClient",
]
