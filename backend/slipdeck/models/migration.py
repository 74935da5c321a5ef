"""Slot migration preview models.

The preview tree is produced by the server's dry-run; manual edits are
client-side overrides keyed by file id.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from slipdeck.models.base import WireModel


class SlotRejection(WireModel):
    """Why a file did not match a specific slot."""

    slot_id: int
    slot_name: str
    reasons: list[str] = []


class FileMigrationPreview(WireModel):
    """Proposed slot assignment for one existing media file."""

    file_id: int
    path: str = ""
    quality: str = ""
    size: int = 0
    proposed_slot_id: int | None = None
    proposed_slot_name: str | None = None
    match_score: float = 0.0  # 0-100
    needs_review: bool = False
    conflict: str | None = None
    slot_rejections: list[SlotRejection] | None = None

    @property
    def has_issue(self) -> bool:
        """True if the file carries a conflict or needs review."""
        return bool(self.conflict) or self.needs_review


class MovieMigrationPreview(WireModel):
    movie_id: int
    title: str
    year: int | None = None
    files: list[FileMigrationPreview] = []
    has_conflict: bool = False
    conflicts: list[str] | None = None


class EpisodeMigrationPreview(WireModel):
    episode_id: int
    episode_number: int
    title: str | None = None
    files: list[FileMigrationPreview] = []
    has_conflict: bool = False


class SeasonMigrationPreview(WireModel):
    season_number: int
    episodes: list[EpisodeMigrationPreview] = []
    total_files: int = 0
    has_conflict: bool = False


class TVShowMigrationPreview(WireModel):
    series_id: int
    title: str
    seasons: list[SeasonMigrationPreview] = []
    total_files: int = 0
    has_conflict: bool = False


class MigrationSummary(WireModel):
    total_movies: int = 0
    total_tv_shows: int = 0
    total_files: int = 0
    files_with_slots: int = 0
    files_needing_review: int = 0
    conflicts: int = 0


class MigrationPreview(WireModel):
    """Complete dry-run preview: movies, shows, and summary counts."""

    movies: list[MovieMigrationPreview] = []
    tv_shows: list[TVShowMigrationPreview] = []
    summary: MigrationSummary = Field(default_factory=MigrationSummary)


# Manual edits


class IgnoreEdit(WireModel):
    """Exclude the file from migration."""

    type: Literal["ignore"] = "ignore"


class AssignEdit(WireModel):
    """Force the file into a specific slot."""

    type: Literal["assign"] = "assign"
    slot_id: int
    slot_name: str | None = None


class UnassignEdit(WireModel):
    """Clear the file's slot and flag it for review."""

    type: Literal["unassign"] = "unassign"


ManualEdit = Annotated[Union[IgnoreEdit, AssignEdit, UnassignEdit], Field(discriminator="type")]


class FileOverride(WireModel):
    """Wire form of a manual edit sent with the migration-execution request."""

    file_id: int
    type: Literal["ignore", "assign", "unassign"]
    slot_id: int | None = None  # Required when type is "assign"


class ExecuteMigrationInput(WireModel):
    overrides: list[FileOverride] = []


class VisibleFileIds(WireModel):
    """File ids shown under a filter, used to bulk-select the visible rows."""

    movie_file_ids: list[int] = []
    tv_file_ids: list[int] = []
