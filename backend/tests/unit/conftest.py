"""Shared fixtures for unit tests.

Routes and the WebSocket endpoint get fresh state containers per test via
FastAPI dependency overrides, so no test touches the process singletons.
"""

import pytest

from slipdeck.api.routes import get_broadcaster, get_downloads_store, get_migration_session
from slipdeck.api.websocket import ConnectionManager
from slipdeck.main import app
from slipdeck.services.download_matcher import PortalDownloadsStore
from slipdeck.services.event_broadcaster import EventBroadcaster
from slipdeck.services.migration_editor import MigrationEditSession


@pytest.fixture
def downloads_store():
    return PortalDownloadsStore()


@pytest.fixture
def edit_session():
    return MigrationEditSession()


@pytest.fixture
def ws_manager():
    return ConnectionManager()


@pytest.fixture(autouse=True)
def isolate_state(downloads_store, edit_session, ws_manager):
    """Point every route dependency at per-test instances."""
    app.dependency_overrides[get_downloads_store] = lambda: downloads_store
    app.dependency_overrides[get_migration_session] = lambda: edit_session
    app.dependency_overrides[get_broadcaster] = lambda: EventBroadcaster(ws_manager)

    yield

    app.dependency_overrides.clear()
