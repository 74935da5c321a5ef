"""Core infrastructure for SlipDeck."""

from slipdeck.core.errors import (
    MessagePayloadError,
    PreviewNotLoadedError,
    SlipdeckError,
)

__all__ = [
    "SlipdeckError",
    "MessagePayloadError",
    "PreviewNotLoadedError",
]
