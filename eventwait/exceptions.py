"""Exception hierarchy for eventwait.

All custom exceptions inherit from WaitError base class.  Errors raised by
user filters are never wrapped and so are not part of this hierarchy.
"""

TIMEOUT_MESSAGE = "Timed out waiting for event"


class WaitError(Exception):
    """Base exception for all eventwait errors."""


class WaitTimeoutError(WaitError, TimeoutError):
    """No matching event arrived before the configured timeout elapsed.

    The message is always :data:`TIMEOUT_MESSAGE`.  Subclasses the builtin
    ``TimeoutError`` so callers can catch either.
    """

    def __init__(self, message: str = TIMEOUT_MESSAGE) -> None:
        super().__init__(message)


class WaitOptionsError(WaitError, ValueError):
    """Wait options failed validation.

    This wraps pydantic.ValidationError to provide a package-specific
    exception type.
    """


class EventValidationError(WaitError, ValueError):
    """Event fields failed pydantic validation."""


class UnsupportedEventSourceError(WaitError, TypeError):
    """Object cannot be used as an event source.

    Raised when an object offers neither ``subscribe``/``unsubscribe`` nor
    an ``on``/``remove_listener`` (or ``off``) pair.
    """
