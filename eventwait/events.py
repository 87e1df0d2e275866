"""Event model for dispatch-style sources.

:class:`~eventwait.sources.EventTarget` routes events by the name they
carry, so events handed to it must be :class:`Event` instances.  Events
given to :class:`~eventwait.sources.EventEmitter` or awaited through
:func:`~eventwait.waiter.wait_for_event` can be any value.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from eventwait.exceptions import EventValidationError


class Event(BaseModel):
    """Named event carrying arbitrary extra fields.

    Instances are immutable (frozen).  Any keyword besides ``name`` is
    stored as an extra field.

    Example:
        >>> event = Event(name="login", user_id=123)
        >>> event.user_id
        123

    Raises:
        EventValidationError: If ``name`` is missing or not a string.
    """

    model_config = ConfigDict(frozen=True, extra="allow", strict=True)

    name: str

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into EventValidationError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise EventValidationError(str(exc)) from exc
