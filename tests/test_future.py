"""Future boundary tests.

Covers construction, the awaitable adapters, join, and the deliberate
asymmetry where native failures bypass the Result channel.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from eventual import NOTHING, Future, Ok, Result, SettlePolicy, Some, err, ok


async def _value[T](value: T, delay: float = 0.0) -> T:
    await asyncio.sleep(delay)
    return value


async def _raise(exc: BaseException, delay: float = 0.0) -> Any:
    await asyncio.sleep(delay)
    raise exc


async def _result[T, E](result: Result[T, E], delay: float = 0.0) -> Result[T, E]:
    await asyncio.sleep(delay)
    return result


# =============================================================================
# Construction
# =============================================================================


class TestConstructor:
    """Executor-driven construction and single settlement."""

    def test_executor_runs_synchronously(self) -> None:
        calls: list[str] = []

        def executor(settle_ok: Callable[[int], None], settle_err: Callable[[str], None]) -> None:
            calls.append("called")
            settle_ok(1)

        future = Future(executor)
        assert calls == ["called"]
        assert future.is_settled()
        assert future.peek() == Some(Ok(1))

    def test_only_first_settlement_counts(self) -> None:
        def executor(settle_ok: Callable[[int], None], settle_err: Callable[[int], None]) -> None:
            settle_ok(1)
            settle_ok(2)
            settle_err(3)

        assert Future(executor).peek() == Some(ok(1))

    def test_err_first_then_ok_is_ignored(self) -> None:
        def executor(settle_ok: Callable[[int], None], settle_err: Callable[[str], None]) -> None:
            settle_err("first")
            settle_ok(2)

        assert Future(executor).peek() == Some(err("first"))

    def test_pending_until_settled(self) -> None:
        future: Future[int, str] = Future(lambda settle_ok, settle_err: None)
        assert future.is_pending()
        assert not future.is_settled()
        assert future.peek() is NOTHING
        assert repr(future) == "Future(<pending>)"

    @pytest.mark.asyncio
    async def test_await_suspends_until_settled(self) -> None:
        callbacks: dict[str, Callable[[str], None]] = {}

        def executor(settle_ok: Callable[[str], None], settle_err: Callable[[str], None]) -> None:
            callbacks["ok"] = settle_ok

        future = Future(executor)
        asyncio.get_running_loop().call_later(0.01, callbacks["ok"], "done")
        assert await future == ok("done")

    @pytest.mark.asyncio
    async def test_executor_raising_before_settling_fails_natively(self) -> None:
        def executor(settle_ok: Callable[[int], None], settle_err: Callable[[str], None]) -> None:
            raise ValueError("broken executor")

        future = Future(executor)
        assert not future.is_pending()
        assert not future.is_settled()
        assert future.peek() is NOTHING
        with pytest.raises(ValueError, match="broken executor"):
            await future

    @pytest.mark.asyncio
    async def test_executor_raising_after_settling_is_ignored(self) -> None:
        def executor(settle_ok: Callable[[int], None], settle_err: Callable[[str], None]) -> None:
            settle_ok(1)
            raise ValueError("too late")

        assert await Future(executor) == ok(1)

    @pytest.mark.asyncio
    async def test_can_be_awaited_many_times(self) -> None:
        future = Future.from_awaitable(_value("shared", delay=0.01))
        first, second = await asyncio.gather(future, future)
        assert first == second == ok("shared")
        assert await future == ok("shared")


# =============================================================================
# Settled factories
# =============================================================================


class TestSettledFactories:
    def test_ok_needs_no_event_loop(self) -> None:
        assert Future.ok(42).peek() == Some(ok(42))
        assert repr(Future.ok(42)) == "Future(Ok(value=42))"

    @pytest.mark.asyncio
    async def test_ok(self) -> None:
        result = await Future.ok(42)
        assert result == ok(42)
        assert result != ok(13)
        assert result != err(42)

    @pytest.mark.asyncio
    async def test_err(self) -> None:
        result = await Future.err("error")
        assert result == err("error")
        assert result != err("other error")
        assert result != ok("error")


# =============================================================================
# Adapters
# =============================================================================


class TestFromAwaitable:
    """Both channels of a plain awaitable land in the Result."""

    @pytest.mark.asyncio
    async def test_value_becomes_ok(self) -> None:
        future = Future.from_awaitable(_value(1))
        assert isinstance(future, Future)
        assert await future == ok(1)

    @pytest.mark.asyncio
    async def test_exception_becomes_err(self) -> None:
        boom = ValueError("boom")
        result = await Future.from_awaitable(_raise(boom))
        assert result == err(boom)

    @pytest.mark.asyncio
    async def test_asyncio_future_with_exception(self) -> None:
        native: asyncio.Future[int] = asyncio.get_running_loop().create_future()
        future = Future.from_awaitable(native)
        boom = KeyError("missing")
        native.set_exception(boom)
        assert await future == err(boom)

    @pytest.mark.asyncio
    async def test_cancellation_becomes_err(self) -> None:
        task = asyncio.create_task(asyncio.sleep(10))
        future = Future.from_awaitable(task)
        task.cancel()
        result = await future
        assert result.is_err()
        assert isinstance(result.unwrap_err(), asyncio.CancelledError)

    def test_requires_running_loop(self) -> None:
        coro = _value(1)
        try:
            with pytest.raises(RuntimeError):
                Future.from_awaitable(coro)
        finally:
            coro.close()


class TestParse:
    @pytest.mark.asyncio
    async def test_inner_ok(self) -> None:
        result = await Future.parse(_result(ok("ok")))
        assert result == ok("ok")
        assert result != ok(1)

    @pytest.mark.asyncio
    async def test_inner_err(self) -> None:
        result = await Future.parse(_result(err("error")))
        assert result == err("error")
        assert result != ok("error")

    @pytest.mark.asyncio
    async def test_native_failure_bypasses_result(self) -> None:
        future = Future.parse(_raise(ValueError("native")))
        with pytest.raises(ValueError, match="native"):
            await future
        assert not future.is_settled()
        assert "failed" in repr(future)

    @pytest.mark.asyncio
    async def test_fold_policy_catches_native_failure(self) -> None:
        boom = ValueError("native")
        future = Future.parse(_raise(boom), policy=SettlePolicy(native_failures="fold"))
        assert await future == err(boom)

    @pytest.mark.asyncio
    async def test_non_result_value_is_a_native_failure(self) -> None:
        future = Future.parse(_value(5))  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="expected a Result"):
            await future


# =============================================================================
# Join
# =============================================================================


class TestJoin:
    """All-settled aggregation, ordered by input position."""

    @pytest.mark.asyncio
    async def test_all_ok(self) -> None:
        result = await Future.join([Future.ok(1), Future.ok(2)])
        assert result == ok([1, 2])
        assert result != ok([1, 3])
        assert result != err([1, 2])

    @pytest.mark.asyncio
    async def test_errors_collected_in_input_order(self) -> None:
        result = await Future.join([Future.ok(0), Future.err(1), Future.err(2)])
        assert result == err([1, 2])
        assert result != err([1, 3])
        assert result != ok([1, 2])

    @pytest.mark.asyncio
    async def test_order_ignores_completion_time(self) -> None:
        futures = [
            Future.from_awaitable(_value("slow", delay=0.03)),
            Future.from_awaitable(_value("medium", delay=0.02)),
            Future.from_awaitable(_value("fast", delay=0.0)),
        ]
        assert await Future.join(futures) == ok(["slow", "medium", "fast"])

    @pytest.mark.asyncio
    async def test_err_does_not_stop_the_wait(self) -> None:
        slow = Future.from_awaitable(_value("late", delay=0.03))
        joined = Future.join([Future.err("early"), slow])
        assert await joined == err(["early"])
        assert slow.is_settled()

    @pytest.mark.asyncio
    async def test_rejected_awaitable_via_from_awaitable_is_an_err(self) -> None:
        boom = RuntimeError("rejected")
        result = await Future.join([Future.ok(0), Future.from_awaitable(_raise(boom))])
        assert result == err([boom])

    @pytest.mark.asyncio
    async def test_native_failure_fails_the_join(self) -> None:
        slow = Future.from_awaitable(_value(1, delay=0.05))
        joined = Future.join([
            Future.ok(0),
            Future.err(1),
            slow,
            Future.parse(_raise(ValueError("native"))),
        ])
        with pytest.raises(ValueError, match="native"):
            await joined
        assert slow.is_pending()

    @pytest.mark.asyncio
    async def test_fold_policy_puts_native_failure_in_errors(self) -> None:
        boom = ValueError("native")
        joined = Future.join(
            [Future.ok(0), Future.err(1), Future.parse(_raise(boom)), Future.err(2)],
            policy=SettlePolicy(native_failures="fold"),
        )
        assert await joined == err([1, boom, 2])

    @pytest.mark.asyncio
    async def test_empty(self) -> None:
        assert await Future.join([]) == ok([])


# =============================================================================
# Derived Futures
# =============================================================================


class TestDerived:
    @pytest.mark.asyncio
    async def test_map(self) -> None:
        assert await Future.ok(2).map(lambda x: x * 10) == ok(20)
        assert await Future.err("e").map(lambda x: x * 10) == err("e")

    @pytest.mark.asyncio
    async def test_map_err(self) -> None:
        assert await Future.err("e").map_err(str.upper) == err("E")
        assert await Future.ok(1).map_err(str.upper) == ok(1)

    @pytest.mark.asyncio
    async def test_map_on_pending_future(self) -> None:
        future = Future.from_awaitable(_value(3, delay=0.01)).map(lambda x: x + 1)
        assert future.is_pending()
        assert await future == ok(4)

    @pytest.mark.asyncio
    async def test_map_raising_fails_natively(self) -> None:
        def explode(x: int) -> int:
            raise ZeroDivisionError("nope")

        with pytest.raises(ZeroDivisionError):
            await Future.ok(1).map(explode)

    @pytest.mark.asyncio
    async def test_and_then(self) -> None:
        def fetch_next(x: int) -> Future[int, str]:
            return Future.from_awaitable(_value(x + 1, delay=0.01)).map_err(str)

        assert await Future.ok(1).and_then(fetch_next) == ok(2)

    @pytest.mark.asyncio
    async def test_and_then_short_circuits_on_err(self) -> None:
        calls: list[int] = []

        def follow(x: int) -> Future[int, str]:
            calls.append(x)
            return Future.ok(x)

        assert await Future.err("stop").and_then(follow) == err("stop")
        assert calls == []

    @pytest.mark.asyncio
    async def test_native_failure_propagates_to_derived(self) -> None:
        derived = Future.parse(_raise(ValueError("native"))).map(lambda x: x)
        with pytest.raises(ValueError, match="native"):
            await derived


# =============================================================================
# Callback bookkeeping
# =============================================================================


def _traceback_depth(exc: BaseException) -> int:
    depth = 0
    tb = exc.__traceback__
    while tb is not None:
        depth += 1
        tb = tb.tb_next
    return depth


class TestCallbackIsolation:
    """One misbehaving continuation must not strand the others."""

    @pytest.mark.asyncio
    async def test_and_then_returning_non_future_fails_only_its_own_chain(self) -> None:
        source = Future.from_awaitable(_value(1, delay=0.01))
        broken = source.and_then(lambda v: ok(v))  # type: ignore[arg-type, return-value]
        sibling = source.map(lambda v: v + 1)

        assert await asyncio.wait_for(sibling, timeout=1) == ok(2)
        with pytest.raises(TypeError, match="expected a Future"):
            await broken

    def test_raising_callback_does_not_skip_later_ones(self) -> None:
        callbacks: dict[str, Callable[[int], None]] = {}

        def executor(settle_ok: Callable[[int], None], settle_err: Callable[[str], None]) -> None:
            callbacks["ok"] = settle_ok

        future = Future(executor)

        def explode(_: Future[int, str]) -> None:
            raise RuntimeError("bad continuation")

        future._add_done_callback(explode)
        doubled = future.map(lambda v: v * 2)
        callbacks["ok"](3)
        assert doubled.peek() == Some(ok(6))


class TestAwaitBookkeeping:
    @pytest.mark.asyncio
    async def test_timed_out_awaits_leave_no_waiters(self) -> None:
        never: Future[int, str] = Future(lambda settle_ok, settle_err: None)
        for _ in range(20):
            with pytest.raises(TimeoutError):
                await asyncio.wait_for(never, timeout=0.001)
        assert never._callbacks == []
        assert never.is_pending()

    @pytest.mark.asyncio
    async def test_traceback_does_not_grow_across_awaits(self) -> None:
        future = Future.parse(_raise(ValueError("native")))
        depths: list[int] = []
        for _ in range(3):
            with pytest.raises(ValueError) as info:
                await future
            depths.append(_traceback_depth(info.value))
        assert depths[0] == depths[1] == depths[2]


class TestAdapterArguments:
    def test_from_awaitable_rejects_non_awaitable(self) -> None:
        with pytest.raises(TypeError, match="expected an awaitable"):
            Future.from_awaitable(42)  # type: ignore[arg-type]

    def test_parse_rejects_non_awaitable(self) -> None:
        with pytest.raises(TypeError, match="expected an awaitable"):
            Future.parse(ok(1))  # type: ignore[arg-type]
