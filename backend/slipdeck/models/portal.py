"""Request portal and download queue models."""

from enum import Enum

from pydantic import ConfigDict

from slipdeck.models.base import WireModel


class QueueMediaType(str, Enum):
    """Media type reported for a download queue item."""

    MOVIE = "movie"
    SERIES = "series"
    UNKNOWN = "unknown"


class RequestMediaType(str, Enum):
    """Media type of a portal request."""

    MOVIE = "movie"
    SERIES = "series"
    SEASON = "season"
    EPISODE = "episode"


class RequestStatus(str, Enum):
    """Lifecycle state of a portal request."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    DOWNLOADING = "downloading"
    AVAILABLE = "available"
    CANCELLED = "cancelled"


class QueueItem(WireModel):
    """One transfer currently reported by a download client."""

    id: str  # Unique within its originating client
    client_id: int
    client_name: str = ""
    title: str  # Release name as reported by the client
    media_type: QueueMediaType = QueueMediaType.UNKNOWN
    status: str = "queued"  # queued, downloading, paused, completed, failed
    progress: float = 0.0
    size: int = 0
    downloaded_size: int = 0
    download_speed: int = 0
    eta: int = 0

    # Library cross-references (set when the client tagged the download)
    media_id: int | None = None
    movie_id: int | None = None
    series_id: int | None = None

    # Episode context
    season: int | None = None
    episode: int | None = None
    season_number: int | None = None
    is_season_pack: bool = False

    def resolved_media_id(self) -> int | None:
        """Library row id this download belongs to, if known."""
        if self.media_type == QueueMediaType.MOVIE:
            return self.movie_id if self.movie_id is not None else self.media_id
        if self.media_type == QueueMediaType.SERIES:
            return self.series_id if self.series_id is not None else self.media_id
        return None


class Request(WireModel):
    """A user's outstanding ask for content."""

    id: int
    title: str
    media_type: RequestMediaType
    media_id: int | None = None  # Set once the library resolves the title
    tmdb_id: int | None = None
    tvdb_id: int | None = None
    status: RequestStatus = RequestStatus.PENDING
    year: int | None = None
    season_number: int | None = None
    episode_number: int | None = None


class MatchInfo(WireModel):
    """Queue item X currently corresponds to request Y."""

    model_config = ConfigDict(frozen=True)

    request_id: int
    request_title: str
    request_media_id: int | None = None  # Only set for media id matches
    tmdb_id: int | None = None
    tvdb_id: int | None = None


class PortalDownload(WireModel):
    """A queue item joined with the request it satisfies, for display."""

    id: str
    client_id: int
    client_name: str
    title: str
    media_type: QueueMediaType
    status: str
    progress: float
    size: int
    downloaded_size: int
    download_speed: int
    eta: int
    season: int | None = None
    episode: int | None = None
    movie_id: int | None = None
    series_id: int | None = None
    season_number: int | None = None
    is_season_pack: bool = False

    request_id: int
    request_title: str
    request_media_id: int | None = None
    tmdb_id: int | None = None
    tvdb_id: int | None = None
