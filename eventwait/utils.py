from typing import Any


def callable_name(cb: Any) -> str:
    """Return a human-readable name for a callable, safe for logging.

    Falls back through ``__qualname__``, ``__name__``, and ``repr()``
    so that ``functools.partial``, callable instances, and other exotic
    callables never raise ``AttributeError``.

    Args:
        cb: Any callable object, or None.

    Returns:
        Display name string (``"<none>"`` for None).
    """
    if cb is None:
        return "<none>"
    return (
        getattr(cb, "__qualname__", None) or getattr(cb, "__name__", None) or repr(cb)
    )


def describe_timeout(timeout: float | None) -> str:
    """Format a millisecond timeout for log records."""
    if not timeout:
        return "none"
    return f"{timeout:g}ms"
