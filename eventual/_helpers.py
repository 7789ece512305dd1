"""Internal helpers for eventual.

Common functions used across multiple modules. Not part of the public API."""

from __future__ import annotations

from collections.abc import Iterable

from .result import Err, Ok, Result


def identity[T](x: T) -> T:
    """Identity function: returns its argument unchanged."""
    return x


def partition_results[T, E](results: Iterable[Result[T, E]]) -> tuple[list[T], list[E]]:
    """
    Split Results into (values, errors), each in input order.

    Usage:
        values, errors = partition_results([Ok(0), Err(1), Err(2)])
        # values == [0], errors == [1, 2]
    """
    values: list[T] = []
    errors: list[E] = []

    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)

    return values, errors


__all__ = (
    "identity",
    "partition_results",
)
