"""Request-download matching for the request portal.

Associates items in the live download queue with outstanding portal
requests so a user can see which download satisfies which request. The
server does not tag that relationship, so it is derived here from library
media ids, falling back to release-title heuristics while a request is
still waiting for its media id.
"""

import logging
import re
import time

from slipdeck.models import (
    MatchInfo,
    PortalDownload,
    QueueItem,
    QueueMediaType,
    Request,
    RequestMediaType,
)

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[._-]")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

# Queue media type each request type may match
_COMPATIBLE_TYPES = {
    RequestMediaType.MOVIE: QueueMediaType.MOVIE,
    RequestMediaType.SERIES: QueueMediaType.SERIES,
    RequestMediaType.SEASON: QueueMediaType.SERIES,
}


def normalize_title(title: str) -> str:
    """Normalize a title for fuzzy comparison.

    Lowercases, turns ``.``, ``_`` and ``-`` into spaces, strips anything
    that is not a letter, digit or whitespace, and collapses whitespace.

    >>> normalize_title("The.Matrix_1999")
    'the matrix 1999'
    """
    title = _SEPARATORS.sub(" ", title.lower())
    title = _NON_ALNUM.sub("", title)
    return _WHITESPACE.sub(" ", title).strip()


def is_type_compatible(request: Request, item: QueueItem) -> bool:
    """Movie requests match movie downloads; series and season requests match series."""
    return _COMPATIBLE_TYPES.get(request.media_type) == item.media_type


def _match_info(request: Request, by_media_id: bool) -> MatchInfo:
    return MatchInfo(
        request_id=request.id,
        request_title=request.title,
        request_media_id=request.media_id if by_media_id else None,
        tmdb_id=request.tmdb_id,
        tvdb_id=request.tvdb_id,
    )


def find_matching_request(item: QueueItem, requests: list[Request]) -> MatchInfo | None:
    """Find the request a queue item satisfies.

    Args:
        item: Queue item to match
        requests: Candidate requests, in priority order

    Returns:
        MatchInfo for the first matching request, or None
    """
    # Media id pass: authoritative, first request in list order wins
    item_media_id = item.resolved_media_id()
    if item_media_id is not None:
        for request in requests:
            if (
                request.media_id is not None
                and request.media_id == item_media_id
                and is_type_compatible(request, item)
            ):
                return _match_info(request, by_media_id=True)

    # Title pass: only requests still waiting for a media id
    item_title = normalize_title(item.title)
    for request in requests:
        if request.media_id is not None:
            continue
        request_title = normalize_title(request.title)
        if not request_title:
            continue
        if item_title.startswith(request_title) or request_title in item_title:
            if is_type_compatible(request, item):
                return _match_info(request, by_media_id=False)

    return None


class PortalDownloadsStore:
    """State container for the download queue and its request matches.

    The queue, request list and match table are only ever replaced as a
    whole. Matches for queue items that persist across queue updates are
    carried over unchanged; a new request list re-matches everything.
    """

    def __init__(self) -> None:
        self.queue: list[QueueItem] = []
        self.matches: dict[str, MatchInfo] = {}
        self.user_requests: list[Request] = []
        self.last_update_time: float = 0.0

    def set_queue(self, items: list[QueueItem]) -> None:
        """Replace the queue snapshot, matching only newly seen items."""
        current_ids = {item.id for item in items}
        matches = {
            item_id: match for item_id, match in self.matches.items() if item_id in current_ids
        }
        dropped = len(self.matches) - len(matches)
        if dropped:
            logger.debug(f"Dropped {dropped} match(es) for items no longer queued")

        for item in items:
            if item.id in matches:
                continue
            match = find_matching_request(item, self.user_requests)
            if match:
                logger.debug(
                    f"Queue item {item.id} ({item.title!r}) matched request {match.request_id}"
                )
                matches[item.id] = match

        self.queue = list(items)
        self.matches = matches
        self.last_update_time = time.time()

    def set_user_requests(self, requests: list[Request]) -> None:
        """Replace the request list and re-match every queued item."""
        matches: dict[str, MatchInfo] = {}
        for item in self.queue:
            match = find_matching_request(item, requests)
            if match:
                matches[item.id] = match

        logger.debug(
            f"Re-matched {len(self.queue)} queue item(s) against {len(requests)} request(s): "
            f"{len(matches)} match(es)"
        )
        self.user_requests = list(requests)
        self.matches = matches

    def add_request(self, request: Request) -> None:
        """Add a newly created request ahead of the next request list refresh.

        A queue update can arrive before the refreshed request list does;
        adding the request immediately lets its download match right away.
        """
        if any(existing.id == request.id for existing in self.user_requests):
            return
        self.set_user_requests([*self.user_requests, request])

    def get_matched_downloads(self) -> list[PortalDownload]:
        """Matched queue items joined with their request, in queue order."""
        downloads = []
        for item in self.queue:
            match = self.matches.get(item.id)
            if match is None:
                continue
            downloads.append(
                PortalDownload(
                    **item.model_dump(exclude={"media_id"}),
                    **match.model_dump(),
                )
            )
        return downloads


# Singleton instance
portal_downloads = PortalDownloadsStore()
