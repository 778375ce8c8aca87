"""Data Transfer Objects for service wire contracts.

These Pydantic models define the JSON exchanged with the verifier and the
DA layer. They are used for request serialization and response validation.

Internal domain logic should use entities from the entities package.
"""

from .proof import ProofRequestPayload, ProofResponsePayload
from .verifier import PrepareRequestPayload, PrepareResponsePayload, VerifierRequestBody

__all__ = [
    "PrepareRequestPayload",
    "PrepareResponsePayload",
    "ProofRequestPayload",
    "ProofResponsePayload",
    "VerifierRequestBody",
]
