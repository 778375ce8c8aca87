"""Adaptive polling for voting round finalization."""

import logging
from enum import Enum

from attestation_workflow.cancellation import CancellationToken, guarded
from attestation_workflow.entities import PollingPolicy
from attestation_workflow.errors import Timeout, TransientServiceError
from attestation_workflow.protocols import FinalizationOracle
from attestation_workflow.services.progress import ProgressCallback, report_progress
from attestation_workflow.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

MAX_CHECK_INTERVAL = 60.0
ADAPTIVE_AFTER_CHECKS = 5
ADAPTIVE_GROWTH = 1.5

FINALIZATION_PHASE = "finalization"


class WaiterState(str, Enum):
    WAITING = "WAITING"
    FINALIZED = "FINALIZED"
    TIMEOUT = "TIMEOUT"


class RoundFinalizationWaiter:
    """Waits until one voting round is finalized, or its deadline passes.

    One waiter serves one round: ``state`` moves from WAITING to FINALIZED
    or TIMEOUT and ``intervals`` records every sleep taken. The poll
    interval starts at ``policy.check_interval`` (clamped to 60s) and, after
    5 consecutive non-finalized checks, grows by 1.5x per check up to 60s,
    so long rounds put less load on the oracle while short ones are still
    detected quickly.

    A transient oracle failure counts as a non-finalized check; the deadline
    still bounds the loop.
    """

    def __init__(
        self,
        oracle: FinalizationOracle,
        protocol_id: int,
        round_id: int,
        policy: PollingPolicy,
        clock: Clock | None = None,
    ) -> None:
        self._oracle = oracle
        self._protocol_id = protocol_id
        self._round_id = round_id
        self._policy = policy
        self._clock = clock or SystemClock()
        self.state = WaiterState.WAITING
        self.checks = 0
        self.intervals: list[float] = []

    @property
    def round_id(self) -> int:
        return self._round_id

    async def _is_finalized(self, cancel: CancellationToken | None) -> bool:
        try:
            return await guarded(
                self._oracle.is_finalized(self._protocol_id, self._round_id), cancel
            )
        except TransientServiceError as e:
            logger.warning(f"Finalization check for round {self._round_id} failed: {e}")
            return False

    async def wait(
        self,
        on_progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> None:
        """Poll the oracle until the round is finalized.

        Args:
            on_progress: Called with ("finalization", elapsed) every iteration.
            cancel: Optional token interrupting the oracle call or the sleep.

        Raises:
            Timeout: phase="finalization", once elapsed time exceeds
                ``policy.max_wait_time``
            Cancelled: If ``cancel`` fires
        """
        start = self._clock.now()
        interval = min(self._policy.check_interval, MAX_CHECK_INTERVAL)
        consecutive_checks = 0

        while True:
            finalized = await self._is_finalized(cancel)
            self.checks += 1
            elapsed = self._clock.now() - start

            if finalized:
                self.state = WaiterState.FINALIZED
                logger.info(f"Round {self._round_id} finalized after {elapsed:.0f}s")
                report_progress(on_progress, FINALIZATION_PHASE, elapsed)
                return

            if elapsed > self._policy.max_wait_time:
                self.state = WaiterState.TIMEOUT
                raise Timeout(
                    FINALIZATION_PHASE,
                    self._policy.max_wait_time,
                    f"Round {self._round_id} did not finalize within "
                    f"{self._policy.max_wait_time:g}s",
                )

            consecutive_checks += 1
            if consecutive_checks > ADAPTIVE_AFTER_CHECKS:
                interval = min(interval * ADAPTIVE_GROWTH, MAX_CHECK_INTERVAL)

            logger.debug(
                f"Waiting for round {self._round_id} to finalize... "
                f"({elapsed:.0f}s elapsed, next check in {interval:.1f}s)"
            )
            report_progress(on_progress, FINALIZATION_PHASE, elapsed)

            self.intervals.append(interval)
            await self._clock.sleep(interval, cancel)
