"""FastAPI application entry point for SlipDeck."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.websockets import WebSocketState
from loguru import logger

from slipdeck import __version__
from slipdeck.api import MessageDispatcher
from slipdeck.api import manager as ws_manager
from slipdeck.api.routes import get_broadcaster, get_downloads_store
from slipdeck.api.routes import router as api_router
from slipdeck.api.websocket import parse_message
from slipdeck.config import settings
from slipdeck.core.errors import MessagePayloadError
from slipdeck.core.logging import setup_logging
from slipdeck.services.download_matcher import PortalDownloadsStore
from slipdeck.services.event_broadcaster import EventBroadcaster


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    setup_logging()
    logger.info(f"Starting SlipDeck {__version__}...")

    yield

    logger.info("Shutting down SlipDeck...")


app = FastAPI(
    title="SlipDeck API",
    description="Request-download matching and slot migration preview editing",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    store: PortalDownloadsStore = Depends(get_downloads_store),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
):
    """WebSocket endpoint: inbound queue state, outbound portal updates."""
    await ws_manager.connect(websocket)
    dispatcher = MessageDispatcher(store)
    try:
        while True:
            data = await websocket.receive_text()
            try:
                changed = dispatcher.dispatch(parse_message(data))
            except MessagePayloadError as e:
                logger.warning(f"Rejected WebSocket message: {e}")
                continue
            if changed:
                await broadcaster.broadcast_portal_downloads(store.get_matched_downloads())
    except WebSocketDisconnect:
        await ws_manager.disconnect(websocket)
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        await ws_manager.disconnect(websocket)
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close(code=1011)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint - API status."""
    return {"name": "SlipDeck", "version": __version__, "status": "running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, reload=False)
