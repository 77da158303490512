"""Data models for media organization."""

from stasher.models.media import (
    MediaType,
    ParsedInfo,
    NormalizedKey,
    ResolvedMetadata,
    DestinationPlan,
    MoveHistoryRecord,
)
from stasher.models.preview import PreviewNode, PreviewTree
from stasher.models.state import ResolutionState

__all__ = [
    "MediaType",
    "ParsedInfo",
    "NormalizedKey",
    "ResolvedMetadata",
    "DestinationPlan",
    "MoveHistoryRecord",
    "PreviewNode",
    "PreviewTree",
    "ResolutionState",
]
