"""eventwait - Await the next matching event from a callback-based source.

This package adapts subscribe/unsubscribe style event sources into
one-shot ``asyncio`` futures, with optional filtering, timeouts and
progress logging.
"""

__version__ = "0.1.0"

from loguru import logger

# Disable all eventwait logging by default.  Users opt in with:
#     from loguru import logger
#     logger.enable("eventwait")
logger.disable("eventwait")

from eventwait.events import Event
from eventwait.exceptions import (
    TIMEOUT_MESSAGE,
    EventValidationError,
    UnsupportedEventSourceError,
    WaitError,
    WaitOptionsError,
    WaitTimeoutError,
)
from eventwait.options import WaitOptions
from eventwait.sources import (
    EventEmitter,
    EventSource,
    EventTarget,
    ListenerAdapter,
    as_event_source,
)
from eventwait.waiter import EventWaiter, wait_for_event

__all__ = [
    # Version
    "__version__",
    # Waiting
    "wait_for_event",
    "EventWaiter",
    "WaitOptions",
    # Event sources
    "Event",
    "EventSource",
    "EventEmitter",
    "EventTarget",
    "ListenerAdapter",
    "as_event_source",
    # Exception classes
    "TIMEOUT_MESSAGE",
    "WaitError",
    "WaitTimeoutError",
    "WaitOptionsError",
    "EventValidationError",
    "UnsupportedEventSourceError",
]
