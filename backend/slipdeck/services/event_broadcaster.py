"""Domain-specific event broadcasting layer.

Provides semantic event methods that wrap WebSocket broadcasting, so the
routes and message handlers never build wire messages themselves.
"""

from slipdeck.api.websocket import ConnectionManager
from slipdeck.models import MigrationPreview, PortalDownload


class EventBroadcaster:
    """Domain-specific WebSocket event broadcasting."""

    def __init__(self, ws_manager: ConnectionManager):
        self._ws = ws_manager

    # --- Portal Events ---

    async def broadcast_portal_downloads(self, downloads: list[PortalDownload]):
        """Broadcast the matched download list after a queue or request change."""
        await self._ws.broadcast_portal_downloads(
            [d.model_dump(mode="json", by_alias=True) for d in downloads]
        )

    # --- Migration Events ---

    async def broadcast_migration_preview_changed(self, preview: MigrationPreview | None):
        """Broadcast migration summary counts after edits change."""
        if preview is None:
            return
        await self._ws.broadcast_migration_summary(
            preview.summary.model_dump(mode="json", by_alias=True)
        )
