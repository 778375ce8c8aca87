"""Tests for CancellationToken and SystemClock against the real event loop."""

import asyncio
import time

import pytest

from attestation_workflow.cancellation import CancellationToken, guarded
from attestation_workflow.errors import Cancelled
from attestation_workflow.utils import Clock, SystemClock


@pytest.mark.asyncio
async def test_sleep_completes_when_not_cancelled() -> None:
    token = CancellationToken()

    await token.sleep(0.01)

    assert not token.cancelled


@pytest.mark.asyncio
async def test_sleep_released_by_cancel() -> None:
    token = CancellationToken()
    asyncio.get_running_loop().call_later(0.01, token.cancel, "stop")
    started = time.monotonic()

    with pytest.raises(Cancelled) as exc_info:
        await token.sleep(10)

    assert time.monotonic() - started < 5
    assert exc_info.value.reason == "stop"


@pytest.mark.asyncio
async def test_first_reason_wins() -> None:
    token = CancellationToken()
    token.cancel("first")
    token.cancel("second")

    assert token.reason == "first"
    with pytest.raises(Cancelled, match="first"):
        token.raise_if_cancelled()


@pytest.mark.asyncio
async def test_guard_returns_result() -> None:
    async def operation() -> str:
        await asyncio.sleep(0)
        return "done"

    assert await guarded(operation(), CancellationToken()) == "done"
    assert await guarded(operation(), None) == "done"


@pytest.mark.asyncio
async def test_guard_cancels_pending_operation() -> None:
    token = CancellationToken()
    operation_cancelled = asyncio.Event()

    async def hang() -> None:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            operation_cancelled.set()
            raise

    asyncio.get_running_loop().call_later(0.01, token.cancel)

    with pytest.raises(Cancelled):
        await token.guard(hang())

    await asyncio.wait_for(operation_cancelled.wait(), timeout=1)


@pytest.mark.asyncio
async def test_guard_with_cancelled_token_never_starts_operation() -> None:
    token = CancellationToken()
    token.cancel()
    started = False

    async def operation() -> None:
        nonlocal started
        started = True

    with pytest.raises(Cancelled):
        await token.guard(operation())

    assert started is False


@pytest.mark.asyncio
async def test_cancel_after_deadline() -> None:
    token = CancellationToken()
    token.cancel_after(0.01)

    with pytest.raises(Cancelled, match="deadline"):
        await token.sleep(10)


@pytest.mark.asyncio
async def test_operation_errors_propagate_through_guard() -> None:
    async def fail() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await CancellationToken().guard(fail())


class TestSystemClock:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(SystemClock(), Clock)

    def test_now_is_monotonic(self) -> None:
        clock = SystemClock()
        first = clock.now()

        assert clock.now() >= first

    @pytest.mark.asyncio
    async def test_sleep_with_token(self) -> None:
        token = CancellationToken()
        token.cancel("gone")

        with pytest.raises(Cancelled):
            await SystemClock().sleep(10, token)

    @pytest.mark.asyncio
    async def test_sleep_without_token(self) -> None:
        await SystemClock().sleep(0)
