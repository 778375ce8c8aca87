"""Attestation Workflow - prepare, submit and prove attestation requests.

This package provides a layered architecture for the attestation workflow:

Layers:
    - protocols: Interface contracts (RequestPreparer, LedgerSubmitter,
      FinalizationOracle, ProofService, ProofStore)
    - repositories: HTTP implementations (verifier, DA layer)
    - services: Workflow engine (retry, cache, finalization, retrieval,
      orchestration)
    - dto: Wire models (verifier and DA layer payloads)
    - entities: Domain models (internal)

Usage:
    ```python
    from attestation_workflow import Settings, WorkflowOrchestrator, create_attestation_request

    orchestrator = WorkflowOrchestrator.create(
        Settings.from_env(), submitter=ledger, oracle=relay
    )
    request = (
        create_attestation_request()
        .url("https://swapi.info/api/people/3")
        .jq_filter("{name: .name}")
        .abi_signature(signature)
        .build()
    )
    result = await orchestrator.execute(*request)
    ```
"""

from attestation_workflow.cancellation import CancellationToken
from attestation_workflow.config import Settings, get_settings
from attestation_workflow.entities import (
    AttestationRequestBuilder,
    AttestationType,
    Fingerprint,
    PollingPolicy,
    PreparedRequest,
    ProofRecord,
    RequestParams,
    RetryPolicy,
    RoundInfo,
    SourceId,
    SubmissionReceipt,
    VotingEpoch,
    build_request_params,
    create_attestation_request,
)
from attestation_workflow.errors import (
    AttestationError,
    Cancelled,
    ConfigurationError,
    ProtocolError,
    RetryExhausted,
    Timeout,
    TransientServiceError,
    ValidationError,
)
from attestation_workflow.protocols import (
    FinalizationOracle,
    LedgerSubmitter,
    ProofService,
    ProofStore,
    RequestPreparer,
)
from attestation_workflow.repositories import DaLayerProofService, VerifierPreparer
from attestation_workflow.services import (
    ProofCache,
    ProofRetriever,
    RetryStrategy,
    RoundFinalizationWaiter,
    WorkflowOrchestrator,
    WorkflowResult,
    WorkflowState,
)

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "FinalizationOracle",
    "LedgerSubmitter",
    "ProofService",
    "ProofStore",
    "RequestPreparer",
    # Services (workflow engine)
    "ProofCache",
    "ProofRetriever",
    "RetryStrategy",
    "RoundFinalizationWaiter",
    "WorkflowOrchestrator",
    "WorkflowResult",
    "WorkflowState",
    "CancellationToken",
    # Repositories (HTTP)
    "DaLayerProofService",
    "VerifierPreparer",
    # Entities (domain models)
    "AttestationRequestBuilder",
    "AttestationType",
    "Fingerprint",
    "PollingPolicy",
    "PreparedRequest",
    "ProofRecord",
    "RequestParams",
    "RetryPolicy",
    "RoundInfo",
    "SourceId",
    "SubmissionReceipt",
    "VotingEpoch",
    "build_request_params",
    "create_attestation_request",
    # Errors
    "AttestationError",
    "Cancelled",
    "ConfigurationError",
    "ProtocolError",
    "RetryExhausted",
    "Timeout",
    "TransientServiceError",
    "ValidationError",
]
