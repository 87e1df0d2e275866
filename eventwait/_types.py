"""Shared type definitions for eventwait.

All type aliases use PEP 695 ``type`` statement syntax.
"""

from collections.abc import Awaitable, Callable, Hashable
from typing import Any

type EventName = Hashable
"""Key under which handlers are subscribed, usually a ``str``."""

type Handler = Callable[[Any], Any]
"""Callback invoked by an event source with the emitted event."""

type EventFilter = Callable[[Any], Any | Awaitable[Any]]
"""Predicate over an event.

The result (or the awaited result, for coroutine filters) is judged by
truthiness: falsy keeps the waiter listening, truthy settles it.
"""
