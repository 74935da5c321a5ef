"""Filtered views of a migration preview.

Backs the preview dialog's tabs: everything, cleanly assigned files,
conflicts, and files with no matching slot.
"""

from collections.abc import Callable
from enum import Enum

from slipdeck.models import (
    EpisodeMigrationPreview,
    FileMigrationPreview,
    MigrationPreview,
    MovieMigrationPreview,
    SeasonMigrationPreview,
    TVShowMigrationPreview,
)


class FilterType(str, Enum):
    ALL = "all"
    ASSIGNED = "assigned"
    CONFLICTS = "conflicts"
    NOMATCH = "nomatch"


def is_cleanly_assigned(file: FileMigrationPreview) -> bool:
    return file.proposed_slot_id is not None and not file.needs_review and not file.conflict


def has_conflict(file: FileMigrationPreview) -> bool:
    return bool(file.conflict)


def is_no_match(file: FileMigrationPreview) -> bool:
    return file.needs_review and not file.conflict


def episode_all_assigned(episode: EpisodeMigrationPreview) -> bool:
    return all(is_cleanly_assigned(f) for f in episode.files)


def episode_has_conflict(episode: EpisodeMigrationPreview) -> bool:
    return any(has_conflict(f) for f in episode.files)


def _rebuild_season(
    season: SeasonMigrationPreview, episodes: list[EpisodeMigrationPreview]
) -> SeasonMigrationPreview | None:
    if not episodes:
        return None
    return season.model_copy(
        update={"episodes": episodes, "total_files": sum(len(e.files) for e in episodes)}
    )


def _rebuild_show(
    show: TVShowMigrationPreview, seasons: list[SeasonMigrationPreview]
) -> TVShowMigrationPreview | None:
    if not seasons:
        return None
    return show.model_copy(
        update={"seasons": seasons, "total_files": sum(s.total_files for s in seasons)}
    )


def _filter_show_episodes(
    show: TVShowMigrationPreview,
    predicate: Callable[[EpisodeMigrationPreview], bool],
) -> TVShowMigrationPreview | None:
    seasons = []
    for season in show.seasons:
        rebuilt = _rebuild_season(season, [ep for ep in season.episodes if predicate(ep)])
        if rebuilt is not None:
            seasons.append(rebuilt)
    return _rebuild_show(show, seasons)


def _filter_show_files(
    show: TVShowMigrationPreview,
    predicate: Callable[[FileMigrationPreview], bool],
) -> TVShowMigrationPreview | None:
    seasons = []
    for season in show.seasons:
        episodes = []
        for episode in season.episodes:
            files = [f for f in episode.files if predicate(f)]
            if files:
                episodes.append(episode.model_copy(update={"files": files}))
        rebuilt = _rebuild_season(season, episodes)
        if rebuilt is not None:
            seasons.append(rebuilt)
    return _rebuild_show(show, seasons)


def filter_movies(
    preview: MigrationPreview | None, filter_type: FilterType
) -> list[MovieMigrationPreview]:
    """Movies visible under a filter.

    The no-match view trims each movie down to its unmatched files.
    """
    if preview is None:
        return []
    if filter_type == FilterType.ALL:
        return preview.movies
    if filter_type == FilterType.ASSIGNED:
        return [m for m in preview.movies if all(is_cleanly_assigned(f) for f in m.files)]
    if filter_type == FilterType.CONFLICTS:
        return [m for m in preview.movies if any(has_conflict(f) for f in m.files)]

    movies = []
    for movie in preview.movies:
        files = [f for f in movie.files if is_no_match(f)]
        if files:
            movies.append(movie.model_copy(update={"files": files}))
    return movies


def filter_tv_shows(
    preview: MigrationPreview | None, filter_type: FilterType
) -> list[TVShowMigrationPreview]:
    """Shows visible under a filter, with empty seasons and episodes pruned.

    Assigned and conflict views keep or drop whole episodes; the no-match
    view trims episodes down to their unmatched files.
    """
    if preview is None:
        return []
    if filter_type == FilterType.ALL:
        return preview.tv_shows

    if filter_type == FilterType.ASSIGNED:
        shows = (_filter_show_episodes(s, episode_all_assigned) for s in preview.tv_shows)
    elif filter_type == FilterType.CONFLICTS:
        shows = (_filter_show_episodes(s, episode_has_conflict) for s in preview.tv_shows)
    else:
        shows = (_filter_show_files(s, is_no_match) for s in preview.tv_shows)
    return [s for s in shows if s is not None]


def visible_movie_file_ids(preview: MigrationPreview | None, filter_type: FilterType) -> list[int]:
    """File ids shown in the movie list under a filter, for bulk selection."""
    return [f.file_id for movie in filter_movies(preview, filter_type) for f in movie.files]


def visible_tv_file_ids(preview: MigrationPreview | None, filter_type: FilterType) -> list[int]:
    """File ids shown in the show list under a filter, for bulk selection."""
    return [
        f.file_id
        for show in filter_tv_shows(preview, filter_type)
        for season in show.seasons
        for episode in season.episodes
        for f in episode.files
    ]


def apply_filter(preview: MigrationPreview, filter_type: FilterType) -> MigrationPreview:
    """Preview restricted to a filter. The summary still covers the full tree."""
    if filter_type == FilterType.ALL:
        return preview
    return preview.model_copy(
        update={
            "movies": filter_movies(preview, filter_type),
            "tv_shows": filter_tv_shows(preview, filter_type),
        }
    )
