"""Data models for SlipDeck."""

from slipdeck.models.migration import (
    AssignEdit,
    EpisodeMigrationPreview,
    ExecuteMigrationInput,
    FileMigrationPreview,
    FileOverride,
    IgnoreEdit,
    ManualEdit,
    MigrationPreview,
    MigrationSummary,
    MovieMigrationPreview,
    SeasonMigrationPreview,
    TVShowMigrationPreview,
    UnassignEdit,
    VisibleFileIds,
)
from slipdeck.models.portal import (
    MatchInfo,
    PortalDownload,
    QueueItem,
    QueueMediaType,
    Request,
    RequestMediaType,
    RequestStatus,
)

__all__ = [
    "QueueItem",
    "QueueMediaType",
    "Request",
    "RequestMediaType",
    "RequestStatus",
    "MatchInfo",
    "PortalDownload",
    "FileMigrationPreview",
    "MovieMigrationPreview",
    "EpisodeMigrationPreview",
    "SeasonMigrationPreview",
    "TVShowMigrationPreview",
    "MigrationSummary",
    "MigrationPreview",
    "ManualEdit",
    "IgnoreEdit",
    "AssignEdit",
    "UnassignEdit",
    "FileOverride",
    "ExecuteMigrationInput",
    "VisibleFileIds",
]
