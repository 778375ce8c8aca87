"""Proof store protocol.

ProofCache is the in-memory implementation. Other stores (size-bounded,
shared) only need to provide these three methods.
"""

from typing import Protocol, runtime_checkable

from attestation_workflow.entities import Fingerprint, ProofRecord


@runtime_checkable
class ProofStore(Protocol):
    """Protocol for proof caches."""

    def get(self, fingerprint: Fingerprint) -> ProofRecord | None:
        """Return the cached proof, or None if absent or expired."""
        ...

    def set(self, fingerprint: Fingerprint, record: ProofRecord) -> None:
        """Store a proof under its fingerprint."""
        ...

    def clear(self) -> None:
        """Drop every cached proof."""
        ...
