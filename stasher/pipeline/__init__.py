"""Organize pipeline: metadata resolution, preview and execution."""

from stasher.pipeline.exceptions import (
    OrganizeError,
    UnparseableFilenameError,
    NoMetadataResolvedError,
    DestinationConflictError,
    MoveFailedError,
)
from stasher.pipeline.resolver import DisplayTitleResolver, MetadataResolver
from stasher.pipeline.preview import DryRunTreeBuilder
from stasher.pipeline.executor import (
    OrganizeExecutor,
    OrganizeReport,
    FileOutcome,
    OutcomeStatus,
)

__all__ = [
    "OrganizeError",
    "UnparseableFilenameError",
    "NoMetadataResolvedError",
    "DestinationConflictError",
    "MoveFailedError",
    "DisplayTitleResolver",
    "MetadataResolver",
    "DryRunTreeBuilder",
    "OrganizeExecutor",
    "OrganizeReport",
    "FileOutcome",
    "OutcomeStatus",
]
