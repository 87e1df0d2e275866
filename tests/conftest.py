"""Shared fixtures and helpers for eventwait tests."""

import asyncio
import uuid

import pytest

from eventwait import EventEmitter


@pytest.fixture
def emitter():
    """Fresh emitter; every test must leave it without listeners."""
    source = EventEmitter()
    yield source
    assert source.listener_count() == 0, "emitter was not cleaned up"


@pytest.fixture
def event_name() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def emitted_event() -> dict:
    return {}


async def assert_stays_pending(future: asyncio.Future, delay: float = 0.01) -> None:
    """Check *future* is still unsettled after *delay*, then cancel it."""
    await asyncio.sleep(delay)
    assert not future.done(), f"expected to stay pending, got {future!r}"
    future.cancel()
    # Let the cancellation callbacks run.
    await asyncio.sleep(0)


class LegacyEmitter:
    """Emitter using the on/remove_listener naming."""

    def __init__(self) -> None:
        self.handlers: dict[str, list] = {}

    def on(self, name, handler):
        self.handlers.setdefault(name, []).append(handler)

    def remove_listener(self, name, handler):
        self.handlers[name].remove(handler)

    def emit(self, name, event):
        for handler in list(self.handlers.get(name, [])):
            handler(event)
