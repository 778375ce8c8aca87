"""Protocol interfaces for the engine's collaborators.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the verifier, ledger, oracle or proof service implementation
- Unit testing with fake implementations
- Keeping the workflow engine free of transport details

Usage:
    ```python
    from attestation_workflow.protocols import ProofService

    service: ProofService = DaLayerProofService(...)  # works
    service: ProofService = FakeProofService()        # also works
    ```
"""

from .finalization_oracle import FinalizationOracle
from .ledger_submitter import LedgerSubmitter
from .proof_service import ProofService
from .proof_store import ProofStore
from .request_preparer import RequestPreparer

__all__ = [
    "FinalizationOracle",
    "LedgerSubmitter",
    "ProofService",
    "ProofStore",
    "RequestPreparer",
]
