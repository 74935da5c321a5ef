"""Core pytest fixtures: queue, request and migration preview builders."""

import pytest

from slipdeck.models import (
    EpisodeMigrationPreview,
    FileMigrationPreview,
    MigrationPreview,
    MovieMigrationPreview,
    QueueItem,
    Request,
    SeasonMigrationPreview,
    TVShowMigrationPreview,
)
from slipdeck.services.migration_editor import compute_summary


def make_queue_item(
    item_id: str = "abc123", title: str = "Some.Release.1080p", **kwargs
) -> QueueItem:
    """Build a queue item with sensible defaults."""
    defaults = dict(
        id=item_id, client_id=1, client_name="qBittorrent", title=title, media_type="movie"
    )
    defaults.update(kwargs)
    return QueueItem(**defaults)


def make_request(request_id: int = 1, title: str = "Some Title", **kwargs) -> Request:
    """Build a portal request with sensible defaults."""
    defaults = dict(id=request_id, title=title, media_type="movie")
    defaults.update(kwargs)
    return Request(**defaults)


def make_file(file_id: int, **kwargs) -> FileMigrationPreview:
    """Build a file proposal; defaults to a clean assignment to slot 1."""
    defaults = dict(
        file_id=file_id,
        path=f"/media/file_{file_id}.mkv",
        quality="Bluray-1080p",
        size=4 * 1024**3,
        proposed_slot_id=1,
        proposed_slot_name="Primary",
        match_score=85.0,
        needs_review=False,
        conflict=None,
    )
    defaults.update(kwargs)
    return FileMigrationPreview(**defaults)


def build_preview(
    movies: list[MovieMigrationPreview], tv_shows: list[TVShowMigrationPreview]
) -> MigrationPreview:
    """Assemble a preview whose summary matches its files, as the server sends it."""
    summary = compute_summary(movies, tv_shows)
    return MigrationPreview(movies=movies, tv_shows=tv_shows, summary=summary)


@pytest.fixture
def sample_preview() -> MigrationPreview:
    """Two movies and one show with two seasons.

    File states:
        10  movie 1, clean
        11  movie 2, conflict
        12  movie 2, clean
        40  S01E01, clean
        41  S01E01, clean (second version)
        42  S01E02, clean
        43  S02E01, needs review
        44  S02E02, conflict and needs review
    """
    movies = [
        MovieMigrationPreview(movie_id=1, title="The Matrix", year=1999, files=[make_file(10)]),
        MovieMigrationPreview(
            movie_id=2,
            title="Heat",
            year=1995,
            files=[
                make_file(11, conflict="Slot Primary already assigned to file 12"),
                make_file(12),
            ],
            has_conflict=True,
        ),
    ]
    season_1 = SeasonMigrationPreview(
        season_number=1,
        episodes=[
            EpisodeMigrationPreview(
                episode_id=100,
                episode_number=1,
                files=[make_file(40), make_file(41, proposed_slot_id=2, proposed_slot_name="4K")],
            ),
            EpisodeMigrationPreview(episode_id=101, episode_number=2, files=[make_file(42)]),
        ],
        total_files=3,
    )
    season_2 = SeasonMigrationPreview(
        season_number=2,
        episodes=[
            EpisodeMigrationPreview(
                episode_id=200,
                episode_number=1,
                files=[
                    make_file(
                        43,
                        proposed_slot_id=None,
                        proposed_slot_name=None,
                        needs_review=True,
                        match_score=0.0,
                    )
                ],
                has_conflict=True,
            ),
            EpisodeMigrationPreview(
                episode_id=201,
                episode_number=2,
                files=[make_file(44, needs_review=True, conflict="Two files claim slot Primary")],
                has_conflict=True,
            ),
        ],
        total_files=2,
        has_conflict=True,
    )
    show = TVShowMigrationPreview(
        series_id=7,
        title="The Wire",
        seasons=[season_1, season_2],
        total_files=5,
        has_conflict=True,
    )
    return build_preview(movies, [show])
