"""
Future - asynchronous Result
============================

A Future is an awaitable that settles exactly once, and always to a
Result[T, E]. Both channels of the underlying asyncio primitive (value and
exception) are funnelled into that single Result, so an async failure has
the same shape as a sync Err:

    result = await Future.from_awaitable(fetch_user(42))
    match result:
        case Ok(user): ...
        case Err(exc): ...

States: pending -> settled (holds a Result) or pending -> failed (holds a
native exception). Both are terminal. "failed" is reachable only through
the paths that deliberately let native failures through:

- parse()/join() when the wrapped awaitable raises (unless the policy folds)
- an executor that raises before settling
- map()/map_err()/and_then() callbacks that raise

Awaiting a failed Future re-raises the stored exception.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import types
import typing
from collections.abc import Awaitable, Callable, Generator, Iterable

from ._helpers import partition_results
from ._types import Executor
from .option import Option, Some, nothing
from .policy import SettlePolicy
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)

type _State = typing.Literal["pending", "settled", "failed"]
type _DoneCallback = Callable[[Future[typing.Any, typing.Any]], None]

# Strong references to tasks driving Futures, dropped when each task finishes.
_background: set[asyncio.Future[typing.Any]] = set()


def _keep_alive(task: asyncio.Future[typing.Any]) -> None:
    _background.add(task)
    task.add_done_callback(_background.discard)


def _task_exception(task: asyncio.Future[typing.Any]) -> BaseException | None:
    """Exception of a finished task; cancellation counts as CancelledError."""
    if task.cancelled():
        return asyncio.CancelledError()
    return task.exception()


def _noop_executor(settle_ok: Callable[[typing.Any], None], settle_err: Callable[[typing.Any], None]) -> None:
    _ = (settle_ok, settle_err)


def _require_awaitable(awaitable: object, operation: str) -> None:
    if not inspect.isawaitable(awaitable):
        raise TypeError(f"{operation} expected an awaitable, got {awaitable!r}")


def _wake(waiter: asyncio.Future[None]) -> None:
    if not waiter.done():
        waiter.set_result(None)


class Future[T, E]:
    """
    Awaitable that settles once to Result[T, E].

    Awaiting never raises for a domain failure: Err comes back as a value.
    A Future can be awaited any number of times, by any number of tasks.
    """

    __slots__ = ("_state", "_result", "_exception", "_traceback", "_callbacks")

    def __init__(self, executor: Executor[T, E], /) -> None:
        """
        Create Future driven by `executor`.

        The executor is called once, right here, with (settle_ok, settle_err).
        Only the first settlement counts; later calls are ignored.
        """
        self._state: _State = "pending"
        self._result: Result[T, E] | None = None
        self._exception: BaseException | None = None
        self._traceback: types.TracebackType | None = None
        self._callbacks: list[_DoneCallback] = []

        def settle_ok(value: T) -> None:
            self._settle(Ok(value))

        def settle_err(reason: E) -> None:
            self._settle(Err(reason))

        try:
            executor(settle_ok, settle_err)
        except Exception as exc:
            if self._state == "pending":
                logger.debug("Future executor raised before settling: %r", exc)
                self._fail(exc)
            else:
                logger.debug("Future executor raised after settling, ignored: %r", exc)

    # Factories

    @staticmethod
    def ok[V](value: V) -> Future[V, typing.Never]:
        """Future already settled to Ok(value). Needs no event loop."""

        def executor(settle_ok: Callable[[V], None], settle_err: Callable[[typing.Never], None]) -> None:
            settle_ok(value)

        return Future(executor)

    @staticmethod
    def err[F](reason: F) -> Future[typing.Never, F]:
        """Future already settled to Err(reason). Needs no event loop."""

        def executor(settle_ok: Callable[[typing.Never], None], settle_err: Callable[[F], None]) -> None:
            settle_err(reason)

        return Future(executor)

    @staticmethod
    def from_awaitable[V](awaitable: Awaitable[V], /) -> Future[V, BaseException]:
        """
        Adapt a plain awaitable (coroutine, task, asyncio future).

        - returns value -> Ok(value)
        - raises exc    -> Err(exc)
        - cancelled     -> Err(CancelledError())

        Raises TypeError for a non-awaitable. Must be called with a running
        event loop; the awaitable is scheduled immediately.
        """
        _require_awaitable(awaitable, "Future.from_awaitable")
        loop = asyncio.get_running_loop()

        def executor(
            settle_ok: Callable[[V], None],
            settle_err: Callable[[BaseException], None],
        ) -> None:
            def on_done(task: asyncio.Future[V]) -> None:
                exc = _task_exception(task)
                if exc is None:
                    settle_ok(task.result())
                else:
                    settle_err(exc)

            task = asyncio.ensure_future(awaitable, loop=loop)
            _keep_alive(task)
            task.add_done_callback(on_done)

        return Future(executor)

    @staticmethod
    def parse[V, F](
        awaitable: Awaitable[Result[V, F]],
        /,
        *,
        policy: SettlePolicy = SettlePolicy(),
    ) -> Future[V, F]:
        """
        Adapt an awaitable that itself yields a Result.

        Ok -> settles ok, Err -> settles err. If the awaitable raises instead,
        the default policy lets that exception through: the Future fails and
        awaiting it re-raises. SettlePolicy(native_failures="fold") turns the
        exception into Err(exc) instead.
        """
        _require_awaitable(awaitable, "Future.parse")
        loop = asyncio.get_running_loop()
        future: Future[V, F] = Future._pending()

        def on_done(task: asyncio.Future[Result[V, F]]) -> None:
            exc = _task_exception(task)
            if exc is None:
                result = task.result()
                if isinstance(result, Result):
                    future._settle(result)
                    return
                exc = TypeError(f"Future.parse expected a Result, got {result!r}")
            future._native_failure(exc, policy)

        task = asyncio.ensure_future(awaitable, loop=loop)
        _keep_alive(task)
        task.add_done_callback(on_done)
        return future

    @staticmethod
    def join[V, F](
        futures: Iterable[Future[V, F]],
        /,
        *,
        policy: SettlePolicy = SettlePolicy(),
    ) -> Future[list[V], list[F]]:
        """
        Wait for every Future, then partition by input position.

        - all Ok         -> Ok([values...])
        - any Err        -> Err([errors...]), errors in input order
        - native failure -> the joined Future fails at once with it,
                            or, with a folding policy, the exception takes
                            its place in the error list

        An Err does not stop the wait; only a native failure does.
        Needs a running event loop unless `futures` is empty.
        """
        pending = list(futures)
        if not pending:
            return Future.ok([])

        joined: Future[list[V], list[F]] = Future._pending()

        def on_done(gathered: asyncio.Future[list[typing.Any]]) -> None:
            exc = _task_exception(gathered)
            if exc is not None:
                logger.debug("Future.join: constituent failed natively: %r", exc)
                joined._fail(exc)
                return

            # with return_exceptions=True native failures arrive in place
            results: list[Result[V, F]] = [
                outcome if isinstance(outcome, Result) else Err(outcome)
                for outcome in gathered.result()
            ]
            values, errors = partition_results(results)
            if errors:
                joined._settle(Err(errors))
            else:
                joined._settle(Ok(values))

        gathered = asyncio.gather(*pending, return_exceptions=policy.folds)
        _keep_alive(gathered)
        gathered.add_done_callback(on_done)
        return joined

    # State

    def is_pending(self) -> bool:
        return self._state == "pending"

    def is_settled(self) -> bool:
        """True once settled to a Result (not for a native failure)."""
        return self._state == "settled"

    def peek(self) -> Option[Result[T, E]]:
        """Settled Result without waiting; Nothing while pending or failed."""
        if self._result is None:
            return nothing()
        return Some(self._result)

    # Derived Futures

    def map[U](self, f: Callable[[T], U], /) -> Future[U, E]:
        """Apply `f` to the Ok value once settled. Err passes through."""
        return self._derive(lambda result: result.map(f))

    def map_err[F](self, f: Callable[[E], F], /) -> Future[T, F]:
        """Apply `f` to the Err payload once settled. Ok passes through."""
        return self._derive(lambda result: result.map_err(f))

    def and_then[U](self, f: Callable[[T], Future[U, E]], /) -> Future[U, E]:
        """
        Chain another Future on Ok.

        - On Ok: settles like f(value)
        - On Err: short-circuit, `f` is not called
        """
        derived: Future[U, E] = Future._pending()

        def forward(source: Future[T, E]) -> None:
            if source._exception is not None:
                derived._fail(source._exception)
                return
            match source._result:
                case Ok(value):
                    try:
                        follow = f(value)
                        if not isinstance(follow, Future):
                            raise TypeError(f"Future.and_then expected a Future, got {follow!r}")
                    except Exception as exc:
                        derived._fail(exc)
                        return
                    follow._add_done_callback(derived._copy_from)
                case Err() as failed:
                    derived._settle(failed)

        self._add_done_callback(forward)
        return derived

    # Protocol methods

    def __await__(self) -> Generator[typing.Any, None, Result[T, E]]:
        """Suspend until settled, then return the Result."""
        if self._state == "pending":
            waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()

            def wake(_: Future[T, E]) -> None:
                _wake(waiter)

            self._add_done_callback(wake)
            try:
                yield from waiter
            finally:
                # drop the waiter of a cancelled await
                if wake in self._callbacks:
                    self._callbacks.remove(wake)
        return self._outcome()

    def __repr__(self) -> str:
        match self._state:
            case "pending":
                return "Future(<pending>)"
            case "settled":
                return f"Future({self._result!r})"
            case "failed":
                return f"Future(<failed: {self._exception!r}>)"

    # Internals

    @staticmethod
    def _pending[V, F]() -> Future[V, F]:
        """Unsettled Future, driven from outside via _settle/_fail."""
        return Future(_noop_executor)

    def _outcome(self) -> Result[T, E]:
        if self._exception is not None:
            raise self._exception.with_traceback(self._traceback)
        if self._result is None:
            raise RuntimeError("Future is still pending")
        return self._result

    def _settle(self, result: Result[T, E]) -> None:
        if self._state != "pending":
            logger.debug("Ignoring settlement %r of finished %r", result, self)
            return
        self._state = "settled"
        self._result = result
        self._run_callbacks()

    def _fail(self, exc: BaseException) -> None:
        if self._state != "pending":
            logger.debug("Ignoring native failure %r of finished %r", exc, self)
            return
        self._state = "failed"
        self._exception = exc
        self._traceback = exc.__traceback__
        self._run_callbacks()

    def _native_failure(self, exc: BaseException, policy: SettlePolicy) -> None:
        if policy.folds:
            self._settle(typing.cast(Result[T, E], Err(exc)))
        else:
            logger.debug("Native failure bypasses the Result channel: %r", exc)
            self._fail(exc)

    def _copy_from(self, source: Future[T, E]) -> None:
        if source._exception is not None:
            self._fail(source._exception)
        elif source._result is not None:
            self._settle(source._result)

    def _derive[U, F](self, transform: Callable[[Result[T, E]], Result[U, F]]) -> Future[U, F]:
        derived: Future[U, F] = Future._pending()

        def forward(source: Future[T, E]) -> None:
            if source._exception is not None:
                derived._fail(source._exception)
                return
            try:
                result = transform(typing.cast(Result[T, E], source._result))
            except Exception as exc:
                derived._fail(exc)
                return
            derived._settle(result)

        self._add_done_callback(forward)
        return derived

    def _add_done_callback(self, callback: _DoneCallback) -> None:
        if self._state == "pending":
            self._callbacks.append(callback)
        else:
            callback(self)

    def _run_callbacks(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception("Future done callback %r raised", callback)


__all__ = ("Future",)
