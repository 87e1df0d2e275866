"""Tests for the bundled event sources."""

import pytest
from conftest import LegacyEmitter
from pydantic import ValidationError

from eventwait import (
    Event,
    EventEmitter,
    EventSource,
    EventTarget,
    EventValidationError,
    ListenerAdapter,
    UnsupportedEventSourceError,
    as_event_source,
)


class TestEvent:
    def test_extra_fields(self):
        """Keywords besides name become attributes."""
        event = Event(name="login", user_id=123)
        assert event.name == "login"
        assert event.user_id == 123

    def test_validation_wraps_pydantic(self):
        """Missing or non-string names raise EventValidationError."""
        with pytest.raises(EventValidationError):
            Event()  # type: ignore[call-arg]
        with pytest.raises(EventValidationError):
            Event(name=1)

    def test_frozen(self):
        event = Event(name="login")
        with pytest.raises(ValidationError):
            event.name = "logout"  # type: ignore[misc]


class TestEventEmitter:
    def test_emit_calls_handlers_in_order(self):
        emitter = EventEmitter()
        calls = []
        emitter.subscribe("a", lambda e: calls.append(("first", e)))
        emitter.subscribe("a", lambda e: calls.append(("second", e)))
        assert emitter.emit("a", 1) is True
        assert calls == [("first", 1), ("second", 1)]

    def test_emit_without_handlers(self):
        assert EventEmitter().emit("nobody", 1) is False

    def test_unsubscribe_only_that_handler(self):
        """Other handlers on the same name are unaffected."""
        emitter = EventEmitter()
        calls = []

        def h1(e):
            calls.append("h1")

        def h2(e):
            calls.append("h2")

        emitter.subscribe("a", h1)
        emitter.subscribe("a", h2)
        emitter.unsubscribe("a", h1)
        emitter.emit("a", None)
        assert calls == ["h2"]

    def test_duplicate_subscriptions_removed_one_at_a_time(self):
        emitter = EventEmitter()

        def h(e): ...

        emitter.subscribe("a", h)
        emitter.subscribe("a", h)
        emitter.unsubscribe("a", h)
        assert emitter.listener_count("a") == 1
        emitter.unsubscribe("a", h)
        assert emitter.listener_count("a") == 0
        assert emitter.event_names() == []

    def test_unknown_unsubscribe_is_noop(self):
        emitter = EventEmitter()
        emitter.unsubscribe("a", print)
        emitter.subscribe("a", len)
        emitter.unsubscribe("a", print)
        assert emitter.listener_count() == 1

    def test_unsubscribe_during_emit(self):
        """A handler removing itself still lets the others run."""
        emitter = EventEmitter()
        calls = []

        def once(e):
            emitter.unsubscribe("a", once)
            calls.append("once")

        emitter.subscribe("a", once)
        emitter.subscribe("a", lambda e: calls.append("always"))
        emitter.emit("a", None)
        emitter.emit("a", None)
        assert calls == ["once", "always", "always"]

    def test_handler_errors_propagate(self):
        emitter = EventEmitter()

        def boom(e):
            raise RuntimeError("handler failed")

        emitter.on("a", boom)
        with pytest.raises(RuntimeError, match="handler failed"):
            emitter.emit("a", None)
        emitter.off("a", boom)
        assert emitter.listener_count() == 0

    def test_rejects_non_callable_handler(self):
        with pytest.raises(TypeError, match="must be callable"):
            EventEmitter().subscribe("a", 42)  # type: ignore[arg-type]

    def test_remove_all_listeners(self):
        emitter = EventEmitter()
        emitter.subscribe("a", len)
        emitter.subscribe("b", len)
        emitter.remove_all_listeners("a")
        assert emitter.event_names() == ["b"]
        emitter.remove_all_listeners()
        assert emitter.listener_count() == 0


class TestEventTarget:
    def test_dispatch_routes_by_name(self):
        target = EventTarget()
        received = []
        target.subscribe("login", received.append)
        event = Event(name="login")
        assert target.dispatch(event) is True
        assert target.dispatch(Event(name="logout")) is False
        assert received == [event]

    def test_dispatch_requires_event(self):
        with pytest.raises(TypeError, match="expects an Event"):
            EventTarget().dispatch({"name": "login"})  # type: ignore[arg-type]


class TestAsEventSource:
    def test_protocol_objects_returned_as_is(self):
        emitter = EventEmitter()
        assert isinstance(emitter, EventSource)
        assert as_event_source(emitter) is emitter

    def test_on_remove_listener_wrapped(self):
        legacy = LegacyEmitter()
        source = as_event_source(legacy)
        assert isinstance(source, ListenerAdapter)
        calls = []
        source.subscribe("a", calls.append)
        legacy.emit("a", 1)
        source.unsubscribe("a", calls.append)
        legacy.emit("a", 2)
        assert calls == [1]

    def test_on_off_wrapped(self):
        """off is used when remove_listener is missing."""

        class OnOff:
            def __init__(self):
                self.removed = []

            def on(self, name, handler): ...

            def off(self, name, handler):
                self.removed.append(name)

        obj = OnOff()
        source = as_event_source(obj)
        source.unsubscribe("a", len)
        assert obj.removed == ["a"]

    @pytest.mark.parametrize("obj", [object(), 42, None, {"on": len}])
    def test_unsupported(self, obj):
        with pytest.raises(UnsupportedEventSourceError):
            as_event_source(obj)
        assert issubclass(UnsupportedEventSourceError, TypeError)
