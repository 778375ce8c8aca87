"""Service layer for the workflow engine.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    WorkflowOrchestrator -> RetryStrategy -> RequestPreparer
                         -> LedgerSubmitter
                         -> ProofRetriever -> RoundFinalizationWaiter -> FinalizationOracle
                                           -> ProofService
                                           -> ProofCache

Usage:
    ```python
    from attestation_workflow.services import WorkflowOrchestrator

    # Using factory method (recommended)
    orchestrator = WorkflowOrchestrator.create(settings, submitter=ledger, oracle=relay)

    # Or manual creation
    orchestrator = WorkflowOrchestrator(preparer, submitter, retriever, retry, polling)
    ```
"""

from .finalization import RoundFinalizationWaiter, WaiterState
from .orchestrator import WorkflowOrchestrator, WorkflowResult, WorkflowState
from .progress import ProgressCallback
from .proof_cache import ProofCache
from .proof_retriever import ProofRetriever
from .retry import RetryStrategy

__all__ = [
    "ProgressCallback",
    "ProofCache",
    "ProofRetriever",
    "RetryStrategy",
    "RoundFinalizationWaiter",
    "WaiterState",
    "WorkflowOrchestrator",
    "WorkflowResult",
    "WorkflowState",
]
