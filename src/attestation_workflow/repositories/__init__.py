"""Repository layer for remote services.

This layer wraps the HTTP services the engine talks to behind the
protocol-based interfaces in ``attestation_workflow.protocols``.

The repositories are protocol-based (structural typing), not
inheritance-based. Any class implementing the required methods will
satisfy the protocol. Ledger submission and finalization checks are
chain-specific and are supplied by the caller.
"""

from .da_layer_proof_service import DaLayerProofService
from .verifier_preparer import VerifierPreparer

__all__ = [
    "DaLayerProofService",
    "VerifierPreparer",
]
