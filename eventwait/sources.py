"""Event sources understood by eventwait.

A waiter only needs ``subscribe(event_name, handler)`` and
``unsubscribe(event_name, handler)``; :class:`EventSource` spells that out
as a runtime-checkable protocol.  Two implementations ship here:

- :class:`EventEmitter` delivers ``emit(name, event)`` to handlers
  subscribed under ``name``.
- :class:`EventTarget` delivers ``dispatch(event)`` to handlers subscribed
  under ``event.name``.

Emitters following the ``on``/``remove_listener`` convention (pyee and
friends) are wrapped by :class:`ListenerAdapter` via :func:`as_event_source`.
"""

from collections import defaultdict
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from eventwait._types import EventName, Handler
from eventwait.events import Event
from eventwait.exceptions import UnsupportedEventSourceError
from eventwait.utils import callable_name

log = logger.bind(source=__name__)


@runtime_checkable
class EventSource(Protocol):
    """Capability required from anything a waiter listens to."""

    def subscribe(self, event_name: EventName, handler: Handler) -> Any: ...

    def unsubscribe(self, event_name: EventName, handler: Handler) -> Any: ...


class _HandlerTable:
    """Handler lists keyed by event name, shared by the bundled sources.

    Handlers for one name are kept in subscription order.  The same handler
    may be subscribed several times; each subscription is removed
    separately.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[EventName, list[Handler]] = defaultdict(list)

    def subscribe(self, event_name: EventName, handler: Handler) -> None:
        """Register *handler* for *event_name*.

        Raises:
            TypeError: If handler is not callable.
        """
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {type(handler).__name__}")
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: EventName, handler: Handler) -> None:
        """Remove the most recent subscription of *handler* for *event_name*.

        Unknown handlers are ignored.  Other handlers for the same name are
        left untouched.
        """
        handlers = self._handlers.get(event_name)
        if not handlers:
            return
        for index in range(len(handlers) - 1, -1, -1):
            if handlers[index] == handler:
                del handlers[index]
                break
        # Clean up empty list
        if not handlers:
            del self._handlers[event_name]

    on = subscribe
    off = unsubscribe

    def listener_count(self, event_name: EventName | None = None) -> int:
        """Count subscriptions for one name, or for all names when None."""
        if event_name is None:
            return sum(len(handlers) for handlers in self._handlers.values())
        return len(self._handlers.get(event_name, ()))

    def event_names(self) -> list[EventName]:
        """Return names that currently have at least one handler."""
        return list(self._handlers)

    def remove_all_listeners(self, event_name: EventName | None = None) -> None:
        """Drop every handler for *event_name*, or for all names when None."""
        if event_name is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_name, None)

    def _deliver(self, event_name: EventName, event: Any) -> bool:
        """Call each handler subscribed under *event_name* with *event*.

        Iterates over a snapshot, so handlers may (un)subscribe while the
        delivery is in progress.  Handler exceptions propagate.

        Returns:
            True if at least one handler was called.
        """
        handlers = list(self._handlers.get(event_name, ()))
        log.debug("Deliver {!r} to {} handler(s)", event_name, len(handlers))
        for handler in handlers:
            handler(event)
        return bool(handlers)


class EventEmitter(_HandlerTable):
    """Named-event source.

    Example::

        emitter = EventEmitter()
        emitter.subscribe("ready", print)
        emitter.emit("ready", {"ok": True})
    """

    def emit(self, event_name: EventName, event: Any = None) -> bool:
        """Deliver *event* to the handlers subscribed under *event_name*.

        Args:
            event_name: Name to emit.
            event: Value passed to each handler unchanged.

        Returns:
            True if at least one handler was called.
        """
        return self._deliver(event_name, event)


class EventTarget(_HandlerTable):
    """Dispatch-style source routing :class:`Event` objects by their name."""

    def dispatch(self, event: Event) -> bool:
        """Deliver *event* to the handlers subscribed under ``event.name``.

        Args:
            event: Event to dispatch; handlers receive this same object.

        Returns:
            True if at least one handler was called.

        Raises:
            TypeError: If event is not an :class:`Event`.
        """
        if not isinstance(event, Event):
            raise TypeError(f"dispatch() expects an Event, got {type(event).__name__}")
        return self._deliver(event.name, event)


class ListenerAdapter:
    """Expose an ``on``/``remove_listener`` emitter as an :class:`EventSource`.

    ``off`` is used when the wrapped object has no ``remove_listener``.
    """

    def __init__(self, emitter: Any) -> None:
        self.emitter = emitter
        self._add = emitter.on
        self._remove = getattr(emitter, "remove_listener", None) or emitter.off

    def subscribe(self, event_name: EventName, handler: Handler) -> None:
        self._add(event_name, handler)

    def unsubscribe(self, event_name: EventName, handler: Handler) -> None:
        self._remove(event_name, handler)

    def __repr__(self) -> str:
        return f"ListenerAdapter({self.emitter!r})"


def as_event_source(obj: Any) -> EventSource:
    """Return *obj* as something a waiter can subscribe to.

    Args:
        obj: Candidate event source.

    Returns:
        *obj* itself when it satisfies :class:`EventSource`, otherwise a
        :class:`ListenerAdapter` around it.

    Raises:
        UnsupportedEventSourceError: If obj offers neither capability set.
    """
    if isinstance(obj, EventSource):
        return obj
    on = getattr(obj, "on", None)
    remove = getattr(obj, "remove_listener", None) or getattr(obj, "off", None)
    if callable(on) and callable(remove):
        log.debug(
            "Adapting {} through its on/remove_listener methods",
            callable_name(type(obj)),
        )
        return ListenerAdapter(obj)
    raise UnsupportedEventSourceError(
        f"{type(obj).__name__} has no subscribe/unsubscribe "
        "or on/remove_listener methods"
    )
