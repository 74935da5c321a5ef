"""Manual edits over a slot migration preview.

The server computes a dry-run preview of how existing files would be
assigned to version slots. Users override individual files before
executing; this module applies those overrides and re-derives every
conflict flag and summary count from the edited files. The result is for
display only: execution sends the original preview's file ids with the
edit map (see ``MigrationEditSession.execute_input``).
"""

import logging

from slipdeck.core.errors import PreviewNotLoadedError
from slipdeck.models import (
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
)

logger = logging.getLogger(__name__)


def apply_edit_to_file(
    file: FileMigrationPreview, edit: ManualEdit | None
) -> FileMigrationPreview:
    """Return the file as it looks with the manual edit applied.

    Unedited files are returned as-is. An unassigned file always needs
    review, even if the server had no issue with it.
    """
    if edit is None:
        return file

    if isinstance(edit, IgnoreEdit):
        update = {
            "proposed_slot_id": None,
            "proposed_slot_name": None,
            "needs_review": False,
            "conflict": None,
            "match_score": 0.0,
        }
    elif isinstance(edit, AssignEdit):
        update = {
            "proposed_slot_id": edit.slot_id,
            "proposed_slot_name": edit.slot_name,
            "needs_review": False,
            "conflict": None,
            "match_score": 100.0,
        }
    elif isinstance(edit, UnassignEdit):
        update = {
            "proposed_slot_id": None,
            "proposed_slot_name": None,
            "needs_review": True,
            "conflict": None,
            "match_score": 0.0,
        }
    else:
        return file

    return file.model_copy(update=update)


def _any_issue(files: list[FileMigrationPreview]) -> bool:
    return any(f.has_issue for f in files)


def _edit_files(
    files: list[FileMigrationPreview], edits: dict[int, ManualEdit]
) -> list[FileMigrationPreview]:
    return [apply_edit_to_file(f, edits.get(f.file_id)) for f in files]


def _edit_movie(
    movie: MovieMigrationPreview, edits: dict[int, ManualEdit]
) -> MovieMigrationPreview:
    files = _edit_files(movie.files, edits)
    return movie.model_copy(update={"files": files, "has_conflict": _any_issue(files)})


def _edit_episode(
    episode: EpisodeMigrationPreview, edits: dict[int, ManualEdit]
) -> EpisodeMigrationPreview:
    files = _edit_files(episode.files, edits)
    return episode.model_copy(update={"files": files, "has_conflict": _any_issue(files)})


def _edit_season(
    season: SeasonMigrationPreview, edits: dict[int, ManualEdit]
) -> SeasonMigrationPreview:
    episodes = [_edit_episode(ep, edits) for ep in season.episodes]
    return season.model_copy(
        update={"episodes": episodes, "has_conflict": any(ep.has_conflict for ep in episodes)}
    )


def _edit_show(
    show: TVShowMigrationPreview, edits: dict[int, ManualEdit]
) -> TVShowMigrationPreview:
    seasons = [_edit_season(season, edits) for season in show.seasons]
    return show.model_copy(
        update={"seasons": seasons, "has_conflict": any(s.has_conflict for s in seasons)}
    )


def iter_files(movies: list[MovieMigrationPreview], tv_shows: list[TVShowMigrationPreview]):
    """Yield every file in the tree: movie files first, then show files in tree order."""
    for movie in movies:
        yield from movie.files
    for show in tv_shows:
        for season in show.seasons:
            for episode in season.episodes:
                yield from episode.files


def compute_summary(
    movies: list[MovieMigrationPreview], tv_shows: list[TVShowMigrationPreview]
) -> MigrationSummary:
    """Count files by category. A conflict outranks a review flag."""
    total = with_slots = needing_review = conflicts = 0
    for f in iter_files(movies, tv_shows):
        total += 1
        if f.conflict:
            conflicts += 1
        elif f.needs_review:
            needing_review += 1
        elif f.proposed_slot_id is not None:
            with_slots += 1

    return MigrationSummary(
        total_movies=len(movies),
        total_tv_shows=len(tv_shows),
        total_files=total,
        files_with_slots=with_slots,
        files_needing_review=needing_review,
        conflicts=conflicts,
    )


def compute_edited_preview(
    preview: MigrationPreview | None, edits: dict[int, ManualEdit]
) -> MigrationPreview | None:
    """Apply manual edits to a preview and recompute its derived state.

    Args:
        preview: Server preview, or None if not loaded yet
        edits: Manual edits keyed by file id

    Returns:
        None when preview is None, the same preview object when there are
        no edits, otherwise a rebuilt preview. Edits for file ids absent
        from the tree have no effect. The input is never modified.
    """
    if preview is None:
        return None
    if not edits:
        return preview

    movies = [_edit_movie(movie, edits) for movie in preview.movies]
    tv_shows = [_edit_show(show, edits) for show in preview.tv_shows]
    summary = compute_summary(movies, tv_shows)

    logger.debug(
        f"Recomputed migration preview with {len(edits)} edit(s): "
        f"{summary.files_with_slots} with slots, {summary.files_needing_review} need review, "
        f"{summary.conflicts} conflicts"
    )
    return MigrationPreview(movies=movies, tv_shows=tv_shows, summary=summary)


def to_file_override(file_id: int, edit: ManualEdit) -> FileOverride:
    """Wire form of an edit for the migration-execution request."""
    slot_id = edit.slot_id if isinstance(edit, AssignEdit) else None
    return FileOverride(file_id=file_id, type=edit.type, slot_id=slot_id)


class MigrationEditSession:
    """State container for one migration preview dialog.

    Holds the server preview and the manual edit map. The edit map is
    replaced on every change, never mutated in place.
    """

    def __init__(self) -> None:
        self.preview: MigrationPreview | None = None
        self.edits: dict[int, ManualEdit] = {}

    @property
    def is_loaded(self) -> bool:
        return self.preview is not None

    @property
    def edited_preview(self) -> MigrationPreview | None:
        return compute_edited_preview(self.preview, self.edits)

    def load(self, preview: MigrationPreview) -> None:
        """Start a session with a freshly generated server preview."""
        self.preview = preview
        self.edits = {}
        logger.info(
            f"Loaded migration preview: {preview.summary.total_movies} movies, "
            f"{preview.summary.total_tv_shows} shows, {preview.summary.total_files} files"
        )

    def close(self) -> None:
        """Discard the preview and edits (dialog closed or migration executed)."""
        self.preview = None
        self.edits = {}

    def set_edit(self, file_id: int, edit: ManualEdit) -> None:
        """Record an edit for a file, replacing any earlier edit for it."""
        self._require_preview()
        self.edits = {**self.edits, file_id: edit}

    def remove_edit(self, file_id: int) -> None:
        self.edits = {fid: e for fid, e in self.edits.items() if fid != file_id}

    def clear_edits(self) -> None:
        self.edits = {}

    def execute_input(self) -> ExecuteMigrationInput:
        """Build the execution request body for the original server preview."""
        self._require_preview()
        overrides = [to_file_override(fid, self.edits[fid]) for fid in sorted(self.edits)]
        return ExecuteMigrationInput(overrides=overrides)

    def _require_preview(self) -> None:
        if self.preview is None:
            raise PreviewNotLoadedError("No migration preview is loaded")


# Singleton instance
migration_session = MigrationEditSession()
