"""Attestation workflow orchestration.

This service sequences the workflow phases by coordinating the request
preparer (verifier), the ledger submitter and the proof retriever:

    PREPARING -> SUBMITTING -> AWAITING_PROOF -> COMPLETE
    (any phase) -> FAILED
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import httpx

from attestation_workflow.cancellation import CancellationToken, guarded
from attestation_workflow.config import Settings
from attestation_workflow.entities import (
    AttestationType,
    PollingPolicy,
    PreparedRequest,
    ProofRecord,
    RequestParams,
    RetryPolicy,
    RoundInfo,
    SourceId,
    validate_request_params,
)
from attestation_workflow.errors import AttestationError, ValidationError
from attestation_workflow.protocols import (
    FinalizationOracle,
    LedgerSubmitter,
    ProofService,
    RequestPreparer,
)
from attestation_workflow.repositories import DaLayerProofService, VerifierPreparer
from attestation_workflow.services.progress import ProgressCallback
from attestation_workflow.services.proof_cache import ProofCache
from attestation_workflow.services.proof_retriever import ProofRetriever
from attestation_workflow.services.retry import RetryStrategy
from attestation_workflow.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

VALID_STATUS = "VALID"


class WorkflowState(str, Enum):
    PREPARING = "PREPARING"
    SUBMITTING = "SUBMITTING"
    AWAITING_PROOF = "AWAITING_PROOF"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


TransitionCallback = Callable[[WorkflowState], None]


@dataclass(frozen=True)
class WorkflowResult:
    """Outcome of a completed workflow."""

    round_info: RoundInfo
    proof: ProofRecord


class WorkflowOrchestrator:
    """Top-level attestation workflow.

    Retry policy is per phase: preparation is retried with
    ``retry_policy``; submission pays a fee and runs exactly once unless
    ``submit_retry_policy`` is given explicitly. Restarting a failed
    workflow is left to the caller.

    The orchestrator keeps no per-workflow state, so many ``execute`` calls
    may run concurrently on one instance and share its proof cache.

    Example:
        ```python
        orchestrator = WorkflowOrchestrator.create(
            settings=Settings.from_env(),
            submitter=my_ledger,
            oracle=my_relay,
        )
        params, attestation_type, source_id = builder.build()
        result = await orchestrator.execute(params, attestation_type, source_id)
        print(result.round_info.round_id, result.proof.response_bytes)
        ```
    """

    def __init__(
        self,
        preparer: RequestPreparer,
        submitter: LedgerSubmitter,
        retriever: ProofRetriever,
        retry_policy: RetryPolicy,
        polling_policy: PollingPolicy,
        submit_retry_policy: RetryPolicy | None = None,
        explorer_base_url: str = "",
        clock: Clock | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            preparer: Request preparer (verifier).
            submitter: Ledger submitter.
            retriever: Proof retriever (owns the cache).
            retry_policy: Retry policy for the prepare phase.
            polling_policy: Default polling policy for proof retrieval.
            submit_retry_policy: Optional retry policy for submission.
                None submits exactly once.
            explorer_base_url: Systems explorer used to build RoundInfo links.
            clock: Time source for retry sleeps. Defaults to SystemClock.
        """
        clock = clock or SystemClock()
        self._preparer = preparer
        self._submitter = submitter
        self._retriever = retriever
        self._polling_policy = polling_policy
        self._explorer_base_url = explorer_base_url
        self._prepare_retry = RetryStrategy(retry_policy, clock=clock)
        self._submit_retry = (
            RetryStrategy(submit_retry_policy, clock=clock) if submit_retry_policy else None
        )
        # HTTP collaborators built by create(), released by close()
        self._owned_clients: list[VerifierPreparer | DaLayerProofService] = []

    @classmethod
    def create(
        cls,
        settings: Settings,
        submitter: LedgerSubmitter,
        oracle: FinalizationOracle,
        preparer: RequestPreparer | None = None,
        proof_service: ProofService | None = None,
        clock: Clock | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "WorkflowOrchestrator":
        """Factory method wiring default collaborators from settings.

        The verifier and proof service default to their HTTP
        implementations; the ledger submitter and finalization oracle are
        chain-specific and must be supplied. HTTP clients built here are
        owned by the orchestrator and released by ``close()``.

        Args:
            settings: Engine settings.
            submitter: Ledger submitter.
            oracle: Finalization oracle.
            preparer: Override for the HTTP verifier client.
            proof_service: Override for the HTTP proof service client.
            clock: Time source. Defaults to SystemClock.
            client: Optional AsyncClient shared by the default HTTP
                collaborators. It is closed by ``close()``.

        Returns:
            Configured WorkflowOrchestrator
        """
        clock = clock or SystemClock()
        owned: list[VerifierPreparer | DaLayerProofService] = []
        if preparer is None:
            preparer = VerifierPreparer(
                base_url=settings.verifier_url,
                api_key=settings.verifier_api_key,
                timeout=settings.http_timeout,
                client=client,
            )
            owned.append(preparer)
        if proof_service is None:
            proof_service = DaLayerProofService(
                base_url=settings.da_layer_url,
                timeout=settings.http_timeout,
                client=client,
            )
            owned.append(proof_service)
        cache = ProofCache(ttl=settings.cache_ttl, clock=clock) if settings.cache_enabled else None
        retriever = ProofRetriever(
            proof_service=proof_service,
            oracle=oracle,
            protocol_id=settings.protocol_id,
            cache=cache,
            settle_delay=settings.proof_settle_delay,
            clock=clock,
        )
        orchestrator = cls(
            preparer=preparer,
            submitter=submitter,
            retriever=retriever,
            retry_policy=settings.retry_policy(),
            polling_policy=settings.polling_policy(),
            explorer_base_url=settings.systems_explorer_url,
            clock=clock,
        )
        orchestrator._owned_clients = owned
        return orchestrator

    @property
    def retriever(self) -> ProofRetriever:
        return self._retriever

    async def prepare(
        self,
        params: RequestParams,
        attestation_type: AttestationType = AttestationType.WEB2_JSON,
        source_id: SourceId = SourceId.PUBLIC_WEB2,
        cancel: CancellationToken | None = None,
    ) -> PreparedRequest:
        """Validate ``params`` and have the verifier encode them.

        Raises:
            ValidationError: If params are invalid or the verifier rejects them
            RetryExhausted: If every prepare attempt failed transiently
        """
        validate_request_params(params)

        async def attempt() -> PreparedRequest:
            prepared = await self._preparer.prepare(params, attestation_type, source_id)
            if prepared.status != VALID_STATUS:
                raise ValidationError(f"Invalid attestation request: {prepared.status}")
            return prepared

        return await self._prepare_retry.execute(
            attempt,
            on_retry=lambda attempt_no, error: logger.info(
                f"Retrying request preparation (attempt {attempt_no + 1})"
            ),
            cancel=cancel,
        )

    async def submit(
        self,
        encoded_request: str,
        cancel: CancellationToken | None = None,
    ) -> RoundInfo:
        """Submit an encoded request to the ledger.

        Runs once unless a submit retry policy was configured.
        """
        if self._submit_retry is not None:
            receipt = await self._submit_retry.execute(
                lambda: self._submitter.submit(encoded_request),
                cancel=cancel,
            )
        else:
            receipt = await guarded(self._submitter.submit(encoded_request), cancel)

        round_info = RoundInfo.from_receipt(receipt, self._explorer_base_url)
        logger.info(
            f"Request submitted in block {round_info.block_number}, round {round_info.round_id}"
        )
        return round_info

    async def retrieve_proof(
        self,
        encoded_request: str,
        round_id: int,
        polling_policy: PollingPolicy | None = None,
        on_progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> ProofRecord:
        """Wait for the round and fetch the proof (cached when enabled)."""
        return await self._retriever.retrieve(
            encoded_request,
            round_id,
            polling_policy or self._polling_policy,
            on_progress=on_progress,
            cancel=cancel,
        )

    def _enter(
        self,
        state: WorkflowState,
        on_transition: TransitionCallback | None,
    ) -> WorkflowState:
        logger.info(f"Workflow state: {state.value}")
        if on_transition is not None:
            on_transition(state)
        return state

    async def execute(
        self,
        params: RequestParams,
        attestation_type: AttestationType = AttestationType.WEB2_JSON,
        source_id: SourceId = SourceId.PUBLIC_WEB2,
        polling_policy: PollingPolicy | None = None,
        on_progress: ProgressCallback | None = None,
        on_transition: TransitionCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> WorkflowResult:
        """Run the complete workflow: prepare, submit, wait, retrieve proof.

        Args:
            params: Request parameters.
            attestation_type: Attestation kind.
            source_id: Data source.
            polling_policy: Override for the default polling policy.
            on_progress: Polling progress callback (phase, elapsed).
            on_transition: Called with each WorkflowState entered.
            cancel: Optional token aborting the workflow at its next
                suspension point.

        Returns:
            WorkflowResult with the round info and proof

        Raises:
            AttestationError: The first unrecovered error, with
                ``workflow_state`` set to the phase it halted
        """
        state = self._enter(WorkflowState.PREPARING, on_transition)
        try:
            prepared = await self.prepare(params, attestation_type, source_id, cancel=cancel)

            state = self._enter(WorkflowState.SUBMITTING, on_transition)
            round_info = await self.submit(prepared.encoded_request, cancel=cancel)

            state = self._enter(WorkflowState.AWAITING_PROOF, on_transition)
            proof = await self.retrieve_proof(
                prepared.encoded_request,
                round_info.round_id,
                polling_policy=polling_policy,
                on_progress=on_progress,
                cancel=cancel,
            )
        except Exception as e:
            if isinstance(e, AttestationError):
                e.workflow_state = state.value
            logger.error(f"Workflow failed during {state.value}: {e}")
            self._enter(WorkflowState.FAILED, on_transition)
            raise

        self._enter(WorkflowState.COMPLETE, on_transition)
        return WorkflowResult(round_info=round_info, proof=proof)

    def clear_cache(self) -> None:
        """Clear the proof cache, if caching is enabled."""
        if self._retriever.cache is not None:
            self._retriever.cache.clear()

    async def close(self) -> None:
        """Close the HTTP clients created by ``create()``.

        Collaborators passed in by the caller stay open; their owner closes
        them.
        """
        for collaborator in self._owned_clients:
            await collaborator.close()
        self._owned_clients = []
