"""
Result - success or failure
===========================

Every Result is either Ok and holds a value, or Err and holds an error.
Errors are ordinary data here: nothing in this module raises them, except
unwrap()/unwrap_err() when asked for the wrong variant.

    match parse_port(raw):
        case Ok(port):
            listen(port)
        case Err(reason):
            log.warning("bad port: %s", reason)
"""

from __future__ import annotations

import abc
import typing
from collections.abc import Callable
from dataclasses import dataclass

from ._errors import UnwrapError
from .option import Option, Some, nothing


class Result[T, E](abc.ABC):
    """Success (Ok) or failure (Err) of a computation. Immutable."""

    __slots__ = ()

    @abc.abstractmethod
    def is_ok(self) -> bool:
        """True for Ok."""

    @abc.abstractmethod
    def is_err(self) -> bool:
        """True for Err."""

    @abc.abstractmethod
    def unwrap(self) -> T:
        """
        Return the success value.

        Raises UnwrapError on Err. The error payload is kept on the raised
        exception as `payload` and, when it is an exception itself, chained
        as `__cause__`.
        """

    @abc.abstractmethod
    def unwrap_err(self) -> E:
        """Return the error payload. Raises UnwrapError on Ok."""

    @abc.abstractmethod
    def unwrap_or(self, default: T, /) -> T:
        """Return the success value or `default`."""

    @abc.abstractmethod
    def unwrap_or_else(self, f: Callable[[E], T], /) -> T:
        """Return the success value or `f(error)`. `f` runs only on Err."""

    @abc.abstractmethod
    def map[U](self, f: Callable[[T], U], /) -> Result[U, E]:
        """Ok(v) -> Ok(f(v)); Err passes through untouched."""

    @abc.abstractmethod
    def map_err[F](self, f: Callable[[E], F], /) -> Result[T, F]:
        """Err(e) -> Err(f(e)); Ok passes through untouched."""

    @abc.abstractmethod
    def or_[F](self, other: Result[T, F], /) -> Result[T, F]:
        """Return self if Ok, otherwise `other`."""

    @abc.abstractmethod
    def or_else[F](self, f: Callable[[E], Result[T, F]], /) -> Result[T, F]:
        """Return self if Ok, otherwise `f(error)`."""

    @abc.abstractmethod
    def and_[U](self, other: Result[U, E], /) -> Result[U, E]:
        """Return `other` if self is Ok, otherwise self's Err."""

    @abc.abstractmethod
    def and_then[U](self, f: Callable[[T], Result[U, E]], /) -> Result[U, E]:
        """
        Monadic bind.

        - On Ok: returns f(value)
        - On Err: short-circuit, `f` is not called
        """

    @abc.abstractmethod
    def match[U](self, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Run exactly one branch depending on the variant and return its result."""

    @abc.abstractmethod
    def ok_option(self) -> Option[T]:
        """Some(value) for Ok, Nothing for Err."""

    @abc.abstractmethod
    def err_option(self) -> Option[E]:
        """Some(error) for Err, Nothing for Ok."""


@dataclass(frozen=True, slots=True)
class Ok[T](Result[T, typing.Never]):
    """Successful Result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> typing.Never:
        raise UnwrapError("Result.unwrap_err", self.value)

    def unwrap_or(self, default: T, /) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[typing.Any], T], /) -> T:
        return self.value

    def map[U](self, f: Callable[[T], U], /) -> Result[U, typing.Never]:
        return Ok(f(self.value))

    def map_err[F](self, f: Callable[[typing.Never], F], /) -> Result[T, F]:
        return self

    def or_[F](self, other: Result[T, F], /) -> Result[T, F]:
        return self

    def or_else[F](self, f: Callable[[typing.Never], Result[T, F]], /) -> Result[T, F]:
        return self

    def and_[U, E](self, other: Result[U, E], /) -> Result[U, E]:
        return other

    def and_then[U, E](self, f: Callable[[T], Result[U, E]], /) -> Result[U, E]:
        return f(self.value)

    def match[U](self, ok: Callable[[T], U], err: Callable[[typing.Never], U]) -> U:
        return ok(self.value)

    def ok_option(self) -> Option[T]:
        return Some(self.value)

    def err_option(self) -> Option[typing.Never]:
        return nothing()


@dataclass(frozen=True, slots=True)
class Err[E](Result[typing.Never, E]):
    """Failed Result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> typing.Never:
        exc = UnwrapError("Result.unwrap", self.error)
        if isinstance(self.error, BaseException):
            raise exc from self.error
        raise exc

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or[T](self, default: T, /) -> T:
        return default

    def unwrap_or_else[T](self, f: Callable[[E], T], /) -> T:
        return f(self.error)

    def map[U](self, f: Callable[[typing.Never], U], /) -> Result[U, E]:
        return self

    def map_err[F](self, f: Callable[[E], F], /) -> Result[typing.Never, F]:
        return Err(f(self.error))

    def or_[T, F](self, other: Result[T, F], /) -> Result[T, F]:
        return other

    def or_else[T, F](self, f: Callable[[E], Result[T, F]], /) -> Result[T, F]:
        return f(self.error)

    def and_[U](self, other: Result[U, E], /) -> Result[U, E]:
        return self

    def and_then[U](self, f: Callable[[typing.Never], Result[U, E]], /) -> Result[U, E]:
        return self

    def match[U](self, ok: Callable[[typing.Never], U], err: Callable[[E], U]) -> U:
        return err(self.error)

    def ok_option(self) -> Option[typing.Never]:
        return nothing()

    def err_option(self) -> Option[E]:
        return Some(self.error)


# Convenience Constructors
def ok[T](value: T) -> Result[T, typing.Never]:
    """Successful Result holding `value`."""
    return Ok(value)


def err[E](error: E) -> Result[typing.Never, E]:
    """Failed Result holding `error`."""
    return Err(error)


__all__ = ("Result", "Ok", "Err", "ok", "err")
