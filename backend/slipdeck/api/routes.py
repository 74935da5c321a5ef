"""REST API routes for SlipDeck."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import RootModel

from slipdeck.api.websocket import manager
from slipdeck.core.errors import PreviewNotLoadedError
from slipdeck.models import (
    ExecuteMigrationInput,
    ManualEdit,
    MigrationPreview,
    PortalDownload,
    QueueItem,
    Request,
    VisibleFileIds,
)
from slipdeck.services.download_matcher import PortalDownloadsStore, portal_downloads
from slipdeck.services.event_broadcaster import EventBroadcaster
from slipdeck.services.migration_editor import MigrationEditSession, migration_session
from slipdeck.services.migration_filters import (
    FilterType,
    apply_filter,
    visible_movie_file_ids,
    visible_tv_file_ids,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_broadcaster = EventBroadcaster(manager)


# Dependencies (overridden in tests)
def get_downloads_store() -> PortalDownloadsStore:
    return portal_downloads


def get_migration_session() -> MigrationEditSession:
    return migration_session


def get_broadcaster() -> EventBroadcaster:
    return _broadcaster


# Request/Response Models
class ManualEditBody(RootModel[ManualEdit]):
    """A single manual edit, discriminated by its ``type`` field."""


# Portal downloads
@router.get("/portal/downloads", response_model=list[PortalDownload], tags=["portal"])
async def list_portal_downloads(
    store: PortalDownloadsStore = Depends(get_downloads_store),
) -> list[PortalDownload]:
    """Queue items that satisfy an outstanding request."""
    return store.get_matched_downloads()


@router.put("/portal/queue", response_model=list[PortalDownload], tags=["portal"])
async def replace_queue(
    items: list[QueueItem],
    store: PortalDownloadsStore = Depends(get_downloads_store),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> list[PortalDownload]:
    """Replace the queue snapshot (polling fallback for the queue:state message)."""
    store.set_queue(items)
    downloads = store.get_matched_downloads()
    await broadcaster.broadcast_portal_downloads(downloads)
    return downloads


@router.put("/portal/requests", response_model=list[PortalDownload], tags=["portal"])
async def replace_requests(
    requests: list[Request],
    store: PortalDownloadsStore = Depends(get_downloads_store),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> list[PortalDownload]:
    """Replace the request list and re-match the whole queue."""
    store.set_user_requests(requests)
    downloads = store.get_matched_downloads()
    await broadcaster.broadcast_portal_downloads(downloads)
    return downloads


@router.post("/portal/requests", response_model=list[PortalDownload], tags=["portal"])
async def add_request(
    request: Request,
    store: PortalDownloadsStore = Depends(get_downloads_store),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> list[PortalDownload]:
    """Register a just-created request before the request list refreshes."""
    store.add_request(request)
    downloads = store.get_matched_downloads()
    await broadcaster.broadcast_portal_downloads(downloads)
    return downloads


# Slot migration preview
@router.put("/slots/migration/preview", response_model=MigrationPreview, tags=["migration"])
async def load_migration_preview(
    preview: MigrationPreview,
    session: MigrationEditSession = Depends(get_migration_session),
) -> MigrationPreview:
    """Start an edit session with a freshly generated server preview."""
    session.load(preview)
    return preview


@router.delete("/slots/migration/preview", tags=["migration"])
async def close_migration_preview(
    session: MigrationEditSession = Depends(get_migration_session),
) -> dict:
    """Discard the preview and its edits."""
    session.close()
    return {"status": "closed"}


@router.get("/slots/migration/preview", response_model=MigrationPreview, tags=["migration"])
async def get_migration_preview(
    filter_type: FilterType = Query(FilterType.ALL, alias="filter"),
    session: MigrationEditSession = Depends(get_migration_session),
) -> MigrationPreview:
    """The preview with manual edits applied, optionally filtered."""
    preview = session.edited_preview
    if preview is None:
        raise HTTPException(status_code=404, detail="No migration preview loaded")
    return apply_filter(preview, filter_type)


@router.get(
    "/slots/migration/visible-file-ids", response_model=VisibleFileIds, tags=["migration"]
)
async def get_visible_file_ids(
    filter_type: FilterType = Query(FilterType.ALL, alias="filter"),
    session: MigrationEditSession = Depends(get_migration_session),
) -> VisibleFileIds:
    """File ids shown under a filter, for selecting every visible row at once."""
    preview = session.edited_preview
    if preview is None:
        raise HTTPException(status_code=404, detail="No migration preview loaded")
    return VisibleFileIds(
        movie_file_ids=visible_movie_file_ids(preview, filter_type),
        tv_file_ids=visible_tv_file_ids(preview, filter_type),
    )


@router.put("/slots/migration/edits/{file_id}", response_model=MigrationPreview, tags=["migration"])
async def set_file_edit(
    file_id: int,
    body: ManualEditBody,
    session: MigrationEditSession = Depends(get_migration_session),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> MigrationPreview:
    """Override the automatic proposal for one file."""
    try:
        session.set_edit(file_id, body.root)
    except PreviewNotLoadedError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    preview = session.edited_preview
    await broadcaster.broadcast_migration_preview_changed(preview)
    return preview


@router.delete(
    "/slots/migration/edits/{file_id}", response_model=MigrationPreview, tags=["migration"]
)
async def remove_file_edit(
    file_id: int,
    session: MigrationEditSession = Depends(get_migration_session),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> MigrationPreview:
    """Drop a file's manual edit, restoring the automatic proposal."""
    if not session.is_loaded:
        raise HTTPException(status_code=404, detail="No migration preview loaded")
    session.remove_edit(file_id)
    preview = session.edited_preview
    await broadcaster.broadcast_migration_preview_changed(preview)
    return preview


@router.delete("/slots/migration/edits", response_model=MigrationPreview, tags=["migration"])
async def clear_file_edits(
    session: MigrationEditSession = Depends(get_migration_session),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> MigrationPreview:
    """Drop every manual edit."""
    if not session.is_loaded:
        raise HTTPException(status_code=404, detail="No migration preview loaded")
    session.clear_edits()
    preview = session.edited_preview
    await broadcaster.broadcast_migration_preview_changed(preview)
    return preview


@router.get(
    "/slots/migration/execute-input",
    response_model=ExecuteMigrationInput,
    response_model_exclude_none=True,
    tags=["migration"],
)
async def get_execute_input(
    session: MigrationEditSession = Depends(get_migration_session),
) -> ExecuteMigrationInput:
    """Overrides to send with the migration-execution request."""
    try:
        return session.execute_input()
    except PreviewNotLoadedError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
