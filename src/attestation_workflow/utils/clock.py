"""Time source used by retry and polling loops.

Loops read time and sleep only through a Clock, so tests can swap in a fake
that advances instantly.
"""

import asyncio
import time
from typing import Protocol, runtime_checkable

from attestation_workflow.cancellation import CancellationToken


@runtime_checkable
class Clock(Protocol):
    """Monotonic time plus a cancellable sleep."""

    def now(self) -> float:
        """Return a monotonic reading in seconds."""
        ...

    async def sleep(self, seconds: float, cancel: CancellationToken | None = None) -> None:
        """Suspend for ``seconds``, raising Cancelled if ``cancel`` fires."""
        ...


class SystemClock:
    """Clock backed by time.monotonic and asyncio.sleep."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float, cancel: CancellationToken | None = None) -> None:
        if cancel is None:
            await asyncio.sleep(seconds)
            return
        await cancel.sleep(seconds)
