"""Cooperative cancellation for long extractions."""

from typing import Protocol


class CancelToken(Protocol):
    """Anything with an ``is_set()`` flag, typically ``threading.Event``."""

    def is_set(self) -> bool: ...


def is_cancelled(cancel: CancelToken | None) -> bool:
    """True when a cancel token was given and has been set."""
    return cancel is not None and cancel.is_set()
