"""API module."""

from slipdeck.api.websocket import ConnectionManager, MessageDispatcher, manager

__all__ = ["ConnectionManager", "MessageDispatcher", "manager"]
