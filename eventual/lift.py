"""
Lifting in and out of eventual types.

Bridges between exception-based code, the kungfu library, and this
package's Result / Future:

    from eventual import lift as L

    L.catching(lambda: json.loads(raw), on_error=str)              # Result
    L.from_kungfu(kungfu_result)                                   # Result
    L.to_kungfu(result)                                            # kungfu.Result
    L.from_lazy(fetch_user(42))                                    # Future
    L.to_lazy(future)                                              # kungfu.LazyCoroResult
"""

from __future__ import annotations

from collections.abc import Callable

import kungfu
from kungfu import Error, LazyCoroResult

from ._helpers import identity
from .future import Future
from .policy import SettlePolicy
from .result import Err, Ok, Result


def catching[T, E](
    thunk: Callable[[], T],
    *,
    on_error: Callable[[Exception], E] = identity,
) -> Result[T, E]:
    """
    Execute sync thunk, catch exceptions and convert to Err.

    **When to use:** Bridge from exception-based code (stdlib, third-party
    libraries) into Result-based code.

    Example:
        from eventual import lift as L

        port = L.catching(lambda: int(raw), on_error=lambda e: f"bad port: {e}")

    NOTE: Catches Exception subclasses only. KeyboardInterrupt and friends
          still propagate.
    """
    try:
        return Ok(thunk())
    except Exception as exc:
        return Err(on_error(exc))


def from_kungfu[T, E](result: kungfu.Result[T, E]) -> Result[T, E]:
    """kungfu Ok/Error -> eventual Ok/Err."""
    match result:
        case kungfu.Ok(value):
            return Ok(value)
        case Error(error):
            return Err(error)
        case _:
            raise TypeError(f"Expected a kungfu Result, got {result!r}")


def to_kungfu[T, E](result: Result[T, E]) -> kungfu.Result[T, E]:
    """eventual Ok/Err -> kungfu Ok/Error."""
    match result:
        case Ok(value):
            return kungfu.Ok(value)
        case Err(error):
            return Error(error)
        case _:
            raise TypeError(f"Expected an eventual Result, got {result!r}")


def from_lazy[T, E](
    lazy: LazyCoroResult[T, E],
    *,
    policy: SettlePolicy = SettlePolicy(),
) -> Future[T, E]:
    """
    Run a kungfu LazyCoroResult as a Future.

    The lazy computation starts immediately (a running event loop is
    required). Native exceptions follow `policy`, as in Future.parse.
    """

    async def run() -> Result[T, E]:
        return from_kungfu(await lazy())

    return Future.parse(run(), policy=policy)


def to_lazy[T, E](future: Future[T, E]) -> LazyCoroResult[T, E]:
    """
    Expose a Future as a kungfu LazyCoroResult.

    Every run awaits the same Future, so the result is computed once.
    """

    async def run() -> kungfu.Result[T, E]:
        return to_kungfu(await future)

    return LazyCoroResult(run)


__all__ = (
    "catching",
    "from_kungfu",
    "to_kungfu",
    "from_lazy",
    "to_lazy",
)
