"""One-shot waiting on a named event.

:func:`wait_for_event` subscribes a single handler to an event source and
returns an :class:`asyncio.Future` that settles exactly once:

- with the first event the filter accepts (any event without a filter),
- with the exception the filter raised, unchanged,
- or with :class:`~eventwait.exceptions.WaitTimeoutError` once the
  configured timeout elapses.

The handler is unsubscribed before the future settles on every path.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Mapping
from typing import Any

from loguru import logger

from eventwait._types import EventFilter, EventName
from eventwait.exceptions import WaitTimeoutError
from eventwait.options import WaitOptions, resolve_call
from eventwait.sources import as_event_source
from eventwait.utils import callable_name, describe_timeout

log = logger.bind(source=__name__)


class EventWaiter:
    """State of a single wait on one event name.

    Each instance subscribes at most once and settles its future at most
    once.  Use :func:`wait_for_event` unless the waiter itself is needed,
    e.g. to inspect :attr:`subscribed`.
    """

    def __init__(
        self,
        source: Any,
        event_name: EventName,
        event_filter: EventFilter | None = None,
        options: WaitOptions | None = None,
    ) -> None:
        """Prepare a waiter without subscribing.

        Args:
            source: Event source, see :func:`~eventwait.sources.as_event_source`.
            event_name: Name to wait for.
            event_filter: Filter; falls back to ``options.filter``.
            options: Timeout/logger/filter options.

        Raises:
            UnsupportedEventSourceError: If source cannot be subscribed to.
        """
        self.source = as_event_source(source)
        self.event_name = event_name
        self.options = options if options is not None else WaitOptions()
        self.event_filter = (
            event_filter if event_filter is not None else self.options.filter
        )
        self._future: asyncio.Future[Any] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._verdicts: set[asyncio.Task[None]] = set()
        self._subscribed = False
        # One bound method object, so unsubscribe sees the same handler.
        self._handler = self._on_event

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    def start(self) -> asyncio.Future[Any]:
        """Subscribe and arm the timer.

        Must be called from a coroutine or callback on a running loop.

        Returns:
            Future settled by the first matching event, filter error or
            timeout.

        Raises:
            RuntimeError: If no loop is running or the waiter was started.
        """
        if self._future is not None:
            raise RuntimeError("EventWaiter has already been started")
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        # Report before subscribing: a failing sink leaves nothing behind.
        self._report(f"Waiting for event: {self.event_name}")
        self.source.subscribe(self.event_name, self._handler)
        self._subscribed = True
        self._future = future
        future.add_done_callback(self._on_done)

        timeout = self.options.timeout
        if timeout:
            self._timer = loop.call_later(timeout / 1000, self._on_timeout)

        log.debug(
            "Waiting for {!r} (filter={}, timeout={})",
            self.event_name,
            callable_name(self.event_filter),
            describe_timeout(timeout),
        )
        return future

    # -- handler side --------------------------------------------------------

    def _on_event(self, event: Any) -> None:
        """Handle one delivery from the source."""
        if self._future is None or self._future.done():
            return
        if self.event_filter is None:
            self._settle(result=event)
            return

        try:
            self._report(f"Filtering for event: {self.event_name}")
            verdict = self.event_filter(event)
        except Exception as exc:
            self._settle(error=exc)
            return

        if inspect.isawaitable(verdict):
            task = asyncio.ensure_future(self._await_verdict(event, verdict))
            self._verdicts.add(task)
            task.add_done_callback(self._verdicts.discard)
        elif verdict:
            self._settle(result=event)

    async def _await_verdict(self, event: Any, verdict: Awaitable[Any]) -> None:
        """Finish a filter evaluation that suspended."""
        try:
            matched = await verdict
        except Exception as exc:
            self._settle(error=exc)
            return
        if matched:
            self._settle(result=event)

    def _on_timeout(self) -> None:
        self._timer = None
        self._settle(error=WaitTimeoutError())

    # -- settlement ----------------------------------------------------------

    def _settle(
        self, *, result: Any = None, error: BaseException | None = None
    ) -> None:
        """Tear down, then settle the future; later calls are no-ops.

        Errors from unsubscribing or from the logger sink settle the future
        in place of the pending outcome.
        """
        future = self._future
        if future is None or future.done():
            log.debug("Ignoring late settlement for {!r}", self.event_name)
            return
        try:
            self._teardown()
        except Exception as exc:
            log.debug("Unsubscribe from {!r} failed: {}", self.event_name, exc)
            future.set_exception(exc)
            return

        if error is not None:
            log.debug(
                "Wait for {!r} failed with {}", self.event_name, type(error).__name__
            )
            future.set_exception(error)
        else:
            log.debug("Wait for {!r} matched", self.event_name)
            try:
                self._report(f"Got matching event: {self.event_name}")
            except Exception as exc:
                log.debug("Logger sink for {!r} failed: {}", self.event_name, exc)
                future.set_exception(exc)
                return
            future.set_result(result)

    def _teardown(self) -> None:
        """Cancel the timer and unsubscribe, at most once."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._subscribed:
            self._subscribed = False
            self.source.unsubscribe(self.event_name, self._handler)

    def _on_done(self, future: asyncio.Future[Any]) -> None:
        # Only reached with a live subscription when the caller cancelled.
        if future.cancelled():
            log.debug("Wait for {!r} cancelled", self.event_name)
            self._teardown()

    def _report(self, message: str) -> None:
        sink = self.options.logger
        if sink is not None:
            sink(message)


def wait_for_event(
    source: Any,
    event_name: EventName,
    filter_or_options: EventFilter | WaitOptions | Mapping[str, Any] | None = None,
    options: WaitOptions | Mapping[str, Any] | None = None,
) -> asyncio.Future[Any]:
    """Wait for the next *event_name* event accepted by an optional filter.

    The handler is subscribed before this function returns, so events
    emitted right after the call are seen even if the future is awaited
    later.  Events emitted earlier are not buffered.

    Example::

        emitter = EventEmitter()
        ready = wait_for_event(emitter, "ready", lambda e: e["ok"], {"timeout": 500})
        emitter.emit("ready", {"ok": True})
        event = await ready

    Args:
        source: Object with ``subscribe``/``unsubscribe`` (or
            ``on``/``remove_listener``) keyed by event name.
        event_name: Name to wait for.
        filter_or_options: Filter callable, or an options record when not
            callable.
        options: Options record (``timeout`` in milliseconds, ``logger``,
            ``filter``).  Set fields of a third-argument record win.

    Returns:
        Future resolving to the matching event.

    Raises:
        UnsupportedEventSourceError: If source cannot be subscribed to.
        WaitOptionsError: If the options are invalid.
        RuntimeError: If called without a running event loop.
    """
    event_filter, resolved = resolve_call(filter_or_options, options)
    waiter = EventWaiter(source, event_name, event_filter, resolved)
    return waiter.start()
