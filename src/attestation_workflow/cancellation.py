"""Cancellation tokens threaded through every suspension point.

A workflow receives an optional CancellationToken. Sleeps and collaborator
calls race against it, so cancelling the token (directly or through its
deadline) releases a polling loop within one tick instead of letting it run
to its own timeout.

Example:
    ```python
    token = CancellationToken()
    token.cancel_after(120)  # hard deadline for the whole workflow

    task = asyncio.create_task(orchestrator.execute(params, cancel=token))
    ...
    token.cancel("user aborted")  # task raises Cancelled promptly
    ```
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from attestation_workflow.errors import Cancelled

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal backed by an asyncio.Event."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason = "cancelled"
        self._timer: asyncio.TimerHandle | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        """Signal cancellation. Later calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def cancel_after(self, seconds: float) -> None:
        """Cancel automatically once ``seconds`` have passed.

        Must be called from within a running event loop.
        """
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(seconds, self.cancel, f"deadline of {seconds:g}s exceeded")

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled(self._reason)

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless cancelled first.

        Raises:
            Cancelled: If the token fires before or during the sleep
        """
        self.raise_if_cancelled()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        raise Cancelled(self._reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        The pending operation is cancelled when the token wins the race.

        Raises:
            Cancelled: If the token fires before the operation completes
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise Cancelled(self._reason)

        operation = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {operation, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except BaseException:
            operation.cancel()
            waiter.cancel()
            raise

        if operation in done:
            waiter.cancel()
            return operation.result()

        operation.cancel()
        raise Cancelled(self._reason)


async def guarded(awaitable: Awaitable[T], cancel: CancellationToken | None) -> T:
    """Await ``awaitable``, racing it against ``cancel`` when one is given."""
    if cancel is None:
        return await awaitable
    return await cancel.guard(awaitable)
