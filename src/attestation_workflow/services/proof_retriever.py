"""Proof retrieval: cache, finalization wait, then proof-service polling."""

import logging

from attestation_workflow.cancellation import CancellationToken, guarded
from attestation_workflow.entities import Fingerprint, PollingPolicy, ProofRecord
from attestation_workflow.errors import ProtocolError, Timeout, TransientServiceError
from attestation_workflow.protocols import FinalizationOracle, ProofService, ProofStore
from attestation_workflow.services.finalization import RoundFinalizationWaiter
from attestation_workflow.services.progress import ProgressCallback, report_progress
from attestation_workflow.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

# Proofs appear on the proof service a little after the round finalizes.
DEFAULT_SETTLE_DELAY = 10.0

PROOF_PHASE = "proof"


class ProofRetriever:
    """Fetches the proof for a request once its round is finalized.

    Steps:
    1. Return the cached proof for (encoded_request, round_id) if present
    2. Wait for round finalization (Timeout phase "finalization")
    3. Sleep ``settle_delay`` seconds
    4. Poll the proof service every ``check_interval`` until a proof
       arrives or ``max_wait_time`` passes (Timeout phase "proof"),
       measured from the first poll. Service errors and incomplete
       payloads count as "not yet"
    5. Cache and return the proof

    Example:
        ```python
        retriever = ProofRetriever(
            proof_service=DaLayerProofService(base_url=settings.da_layer_url),
            oracle=oracle,
            protocol_id=settings.protocol_id,
            cache=ProofCache(ttl=settings.cache_ttl),
        )
        proof = await retriever.retrieve("0xdead", 5, settings.polling_policy())
        ```
    """

    def __init__(
        self,
        proof_service: ProofService,
        oracle: FinalizationOracle,
        protocol_id: int,
        cache: ProofStore | None = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            proof_service: Proof distribution service.
            oracle: Finalization oracle used by the round waiter.
            protocol_id: Protocol id passed to the oracle.
            cache: Optional proof store. None disables caching.
            settle_delay: Seconds to wait between finalization and first poll.
            clock: Time source. Defaults to SystemClock.
        """
        self._proof_service = proof_service
        self._oracle = oracle
        self._protocol_id = protocol_id
        self._cache = cache
        self._settle_delay = settle_delay
        self._clock = clock or SystemClock()

    @property
    def cache(self) -> ProofStore | None:
        return self._cache

    def waiter_for(self, round_id: int, policy: PollingPolicy) -> RoundFinalizationWaiter:
        """Create the finalization waiter for ``round_id``."""
        return RoundFinalizationWaiter(
            oracle=self._oracle,
            protocol_id=self._protocol_id,
            round_id=round_id,
            policy=policy,
            clock=self._clock,
        )

    async def _fetch(
        self,
        round_id: int,
        encoded_request: str,
        cancel: CancellationToken | None,
    ) -> ProofRecord | None:
        try:
            return await guarded(self._proof_service.fetch_proof(round_id, encoded_request), cancel)
        except TransientServiceError as e:
            logger.warning(f"Proof service unavailable for round {round_id}: {e}")
            return None
        except ProtocolError as e:
            logger.debug(f"Proof for round {round_id} not complete yet: {e}")
            return None

    async def retrieve(
        self,
        encoded_request: str,
        round_id: int,
        policy: PollingPolicy,
        on_progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> ProofRecord:
        """Return the proof for ``encoded_request`` in ``round_id``.

        Raises:
            Timeout: If finalization or proof availability exceeds the deadline
            Cancelled: If ``cancel`` fires
        """
        fingerprint = Fingerprint(encoded_request, round_id)

        if self._cache is not None:
            cached = self._cache.get(fingerprint)
            if cached is not None:
                logger.info(f"Proof for round {round_id} served from cache")
                return cached

        waiter = self.waiter_for(round_id, policy)
        await waiter.wait(on_progress=on_progress, cancel=cancel)

        if self._settle_delay > 0:
            await self._clock.sleep(self._settle_delay, cancel)

        start = self._clock.now()
        while True:
            record = await self._fetch(round_id, encoded_request, cancel)
            if record is not None:
                break

            elapsed = self._clock.now() - start
            if elapsed > policy.max_wait_time:
                raise Timeout(
                    PROOF_PHASE,
                    policy.max_wait_time,
                    f"Proof generation for round {round_id} timed out after "
                    f"{policy.max_wait_time:g}s",
                )

            logger.debug(f"Waiting for proof generation... ({elapsed:.0f}s elapsed)")
            report_progress(on_progress, PROOF_PHASE, elapsed)
            await self._clock.sleep(policy.check_interval, cancel)

        logger.info(f"Proof for round {round_id} retrieved")
        if self._cache is not None:
            self._cache.set(fingerprint, record)
        return record
