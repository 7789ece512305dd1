from __future__ import annotations

import typing


class EventualError(Exception):
    """Base class for errors raised by eventual itself."""


class UnwrapError(EventualError):
    """unwrap()/unwrap_err() called on the wrong variant."""

    operation: str
    payload: typing.Any

    def __init__(self, operation: str, payload: typing.Any = None, *, message: str | None = None) -> None:
        self.operation = operation
        self.payload = payload
        if message is None:
            message = f"Called {operation} on {payload!r}"
        super().__init__(message)


__all__ = ("EventualError", "UnwrapError")
