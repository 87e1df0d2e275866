"""Per-call configuration for event waiters.

``wait_for_event`` accepts either a filter or an options record as its
third argument, and an options record as its fourth.  This module holds
the :class:`WaitOptions` model and the rules that turn those call shapes
into a single filter plus a single options record.
"""

from collections.abc import Callable, Mapping
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from eventwait._types import EventFilter
from eventwait.exceptions import WaitOptionsError


class WaitOptions(BaseModel):
    """Options recognised by :func:`~eventwait.waiter.wait_for_event`.

    Attributes:
        timeout: Milliseconds to wait before failing with
            :class:`~eventwait.exceptions.WaitTimeoutError`.  ``None`` or
            ``0`` disables the timer.
        logger: Sink receiving progress messages.  A logger object that is
            not itself callable (loguru, ``logging.Logger``) is accepted and
            its ``debug`` method is used.
        filter: Filter used when none is passed positionally.

    Raises:
        WaitOptionsError: If fields fail pydantic validation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    timeout: Annotated[float, Field(ge=0)] | None = None
    logger: Callable[[str], Any] | None = None
    filter: Callable[[Any], Any] | None = None

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into WaitOptionsError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise WaitOptionsError(str(exc)) from exc

    @field_validator("logger", mode="before")
    @classmethod
    def _use_debug_method(cls, value: Any) -> Any:
        if value is not None and not callable(value):
            debug = getattr(value, "debug", None)
            if callable(debug):
                return debug
        return value

    @classmethod
    def from_value(cls, value: "WaitOptions | Mapping[str, Any] | None") -> Self:
        """Coerce a user-supplied options record.

        Args:
            value: An existing instance, a mapping of option fields, or None.

        Returns:
            WaitOptions instance (default options for None).

        Raises:
            WaitOptionsError: If value is not an options record or fails
                validation.
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(**value)
        raise WaitOptionsError(
            f"expected a filter or an options mapping, got {type(value).__name__}"
        )

    def merge(self, override: "WaitOptions") -> "WaitOptions":
        """Layer *override* on top of this record.

        Only fields explicitly set on *override* replace values here.

        Args:
            override: Options whose set fields win.

        Returns:
            New merged WaitOptions.
        """
        data = {name: getattr(self, name) for name in self.model_fields_set}
        data.update(
            {name: getattr(override, name) for name in override.model_fields_set}
        )
        return WaitOptions(**data)


def resolve_call(
    filter_or_options: EventFilter | WaitOptions | Mapping[str, Any] | None,
    options: WaitOptions | Mapping[str, Any] | None,
) -> tuple[EventFilter | None, WaitOptions]:
    """Resolve the flexible third/fourth arguments of ``wait_for_event``.

    A callable third argument is the filter and the fourth is the options
    record.  Otherwise the third argument is an options record layered over
    the fourth.  A positional filter always beats ``options.filter``.

    Args:
        filter_or_options: Filter callable or options record.
        options: Options record.

    Returns:
        Tuple of (filter or None, resolved options).

    Raises:
        WaitOptionsError: If an options record is malformed.
    """
    if callable(filter_or_options):
        return filter_or_options, WaitOptions.from_value(options)

    resolved = WaitOptions.from_value(options).merge(
        WaitOptions.from_value(filter_or_options)
    )
    return resolved.filter, resolved
