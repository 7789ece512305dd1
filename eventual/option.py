"""
Option - optional value
=======================

Every Option is either Some and holds a value, or Nothing and holds none.
Variants are separate classes, so a Nothing can never carry a stale payload.

    match find_user(42):
        case Some(user):
            greet(user)
        case Nothing():
            sign_up()
"""

from __future__ import annotations

import abc
import typing
from collections.abc import Callable
from dataclasses import dataclass

from ._errors import UnwrapError
from ._types import Predicate

if typing.TYPE_CHECKING:
    from .result import Result


class Option[T](abc.ABC):
    """Presence or absence of a value. Immutable."""

    __slots__ = ()

    @staticmethod
    def from_optional[V](value: V | None) -> Option[V]:
        """None becomes Nothing, anything else becomes Some(value)."""
        if value is None:
            return nothing()
        return Some(value)

    @abc.abstractmethod
    def is_some(self) -> bool:
        """True for Some."""

    @abc.abstractmethod
    def is_none(self) -> bool:
        """True for Nothing."""

    @abc.abstractmethod
    def unwrap(self) -> T:
        """
        Return the contained value.

        Raises UnwrapError on Nothing. The only operation that raises.
        """

    @abc.abstractmethod
    def unwrap_or(self, default: T, /) -> T:
        """Return the contained value or `default`."""

    @abc.abstractmethod
    def unwrap_or_else(self, f: Callable[[], T], /) -> T:
        """Return the contained value or compute one. `f` runs only on Nothing."""

    @abc.abstractmethod
    def map[U](self, f: Callable[[T], U], /) -> Option[U]:
        """Some(v) -> Some(f(v)); Nothing stays Nothing and `f` is not called."""

    @abc.abstractmethod
    def filter(self, predicate: Predicate[T], /) -> Option[T]:
        """Keep Some only if `predicate(value)` holds."""

    @abc.abstractmethod
    def or_(self, other: Option[T], /) -> Option[T]:
        """Return self if Some, otherwise `other`."""

    @abc.abstractmethod
    def or_else(self, f: Callable[[], Option[T]], /) -> Option[T]:
        """Return self if Some, otherwise `f()`. `f` is lazy."""

    @abc.abstractmethod
    def and_[U](self, other: Option[U], /) -> Option[U]:
        """Return `other` if self is Some, otherwise Nothing."""

    @abc.abstractmethod
    def and_then[U](self, f: Callable[[T], Option[U]], /) -> Option[U]:
        """
        Monadic bind.

        Some(v) -> f(v), which may itself be Nothing.
        Nothing -> Nothing without calling `f`.
        """

    @abc.abstractmethod
    def match[U](self, some: Callable[[T], U], none: Callable[[], U]) -> U:
        """Run exactly one branch depending on the variant and return its result."""

    @abc.abstractmethod
    def ok_or[E](self, error: E, /) -> Result[T, E]:
        """Some(v) -> Ok(v), Nothing -> Err(error)."""

    @abc.abstractmethod
    def ok_or_else[E](self, f: Callable[[], E], /) -> Result[T, E]:
        """Like ok_or, but the error is computed only on Nothing."""


@dataclass(frozen=True, slots=True)
class Some[T](Option[T]):
    """Option holding a value."""

    value: T

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T, /) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[], T], /) -> T:
        return self.value

    def map[U](self, f: Callable[[T], U], /) -> Option[U]:
        return Some(f(self.value))

    def filter(self, predicate: Predicate[T], /) -> Option[T]:
        if predicate(self.value):
            return self
        return nothing()

    def or_(self, other: Option[T], /) -> Option[T]:
        return self

    def or_else(self, f: Callable[[], Option[T]], /) -> Option[T]:
        return self

    def and_[U](self, other: Option[U], /) -> Option[U]:
        return other

    def and_then[U](self, f: Callable[[T], Option[U]], /) -> Option[U]:
        return f(self.value)

    def match[U](self, some: Callable[[T], U], none: Callable[[], U]) -> U:
        return some(self.value)

    def ok_or[E](self, error: E, /) -> Result[T, E]:
        from .result import Ok

        return Ok(self.value)

    def ok_or_else[E](self, f: Callable[[], E], /) -> Result[T, E]:
        from .result import Ok

        return Ok(self.value)


class Nothing(Option[typing.Never]):
    """
    Option holding no value.

    There is exactly one instance, NOTHING; Nothing() returns it.
    It carries no payload, so the same object serves every Option[T].
    """

    __slots__ = ()
    __match_args__ = ()

    def __new__(cls) -> Nothing:
        return NOTHING

    def __repr__(self) -> str:
        return "Nothing()"

    def __reduce__(self) -> tuple[type[Nothing], tuple[()]]:
        return (Nothing, ())

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True

    def unwrap(self) -> typing.Never:
        raise UnwrapError("Option.unwrap", message="Called Option.unwrap on Nothing")

    def unwrap_or[T](self, default: T, /) -> T:
        return default

    def unwrap_or_else[T](self, f: Callable[[], T], /) -> T:
        return f()

    def map[U](self, f: Callable[[typing.Never], U], /) -> Option[U]:
        return nothing()

    def filter(self, predicate: Predicate[typing.Never], /) -> Option[typing.Never]:
        return self

    def or_[T](self, other: Option[T], /) -> Option[T]:
        return other

    def or_else[T](self, f: Callable[[], Option[T]], /) -> Option[T]:
        return f()

    def and_[U](self, other: Option[U], /) -> Option[U]:
        return nothing()

    def and_then[U](self, f: Callable[[typing.Never], Option[U]], /) -> Option[U]:
        return nothing()

    def match[U](self, some: Callable[[typing.Never], U], none: Callable[[], U]) -> U:
        return none()

    def ok_or[E](self, error: E, /) -> Result[typing.Never, E]:
        from .result import Err

        return Err(error)

    def ok_or_else[E](self, f: Callable[[], E], /) -> Result[typing.Never, E]:
        from .result import Err

        return Err(f())


NOTHING: typing.Final[Nothing] = object.__new__(Nothing)


def nothing[T]() -> Option[T]:
    """Nothing, typed for any T."""
    return typing.cast(Option[T], NOTHING)


__all__ = ("Option", "Some", "Nothing", "NOTHING", "nothing")
