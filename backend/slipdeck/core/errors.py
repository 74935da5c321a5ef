"""Error handling framework for SlipDeck.

The reconciliation engines have no error states of their own; these types
cover the boundary around them (inbound messages and session operations).
"""

import inspect
import logging
from functools import wraps

logger = logging.getLogger(__name__)


class SlipdeckError(Exception):
    """Base exception for all SlipDeck-specific errors."""

    pass


class MessagePayloadError(SlipdeckError):
    """An inbound WebSocket message carried a payload that failed validation."""

    pass


class PreviewNotLoadedError(SlipdeckError):
    """A migration session operation needs a loaded preview.

    Raised by session operations that have nothing meaningful to return
    before ``load()``; computing an edited preview never raises.
    """

    pass


def handle_errors(
    *,
    error_types: tuple[type[Exception], ...],
    default_message: str,
    log_level: str = "error",
    wrap_as: type[SlipdeckError] | None = None,
):
    """Decorator for standardized error handling.

    Args:
        error_types: Tuple of exception types to catch
        default_message: Message to log when error occurs
        log_level: Logging level (error, warning, info, debug)
        wrap_as: Optionally wrap the caught exception in a SlipdeckError subclass

    Example:
        @handle_errors(
            error_types=(ValidationError,),
            default_message="Invalid queue payload",
            wrap_as=MessagePayloadError,
        )
        def parse_queue(payload):
            ...
    """

    def _log(e: Exception) -> None:
        log_func = getattr(logger, log_level)
        log_func(f"{default_message}: {e}", exc_info=(log_level == "error"))

    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except error_types as e:
                _log(e)
                if wrap_as:
                    raise wrap_as(f"{default_message}: {e}") from e
                raise

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except error_types as e:
                _log(e)
                if wrap_as:
                    raise wrap_as(f"{default_message}: {e}") from e
                raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


class error_context:
    """Context manager for error handling in specific code blocks.

    Example:
        with error_context(
            error_types=(json.JSONDecodeError,),
            default_message="Malformed WebSocket frame",
            wrap_as=MessagePayloadError,
        ):
            message = json.loads(raw)
    """

    def __init__(
        self,
        *,
        error_types: tuple[type[Exception], ...],
        default_message: str,
        log_level: str = "error",
        wrap_as: type[SlipdeckError] | None = None,
    ):
        self.error_types = error_types
        self.default_message = default_message
        self.log_level = log_level
        self.wrap_as = wrap_as

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None and issubclass(exc_type, self.error_types):
            log_func = getattr(logger, self.log_level)
            log_func(
                f"{self.default_message}: {exc_val}",
                exc_info=(self.log_level == "error"),
            )
            if self.wrap_as:
                raise self.wrap_as(f"{self.default_message}: {exc_val}") from exc_val
            return False
        return False
