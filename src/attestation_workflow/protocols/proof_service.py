"""Proof distribution service protocol."""

from typing import Protocol, runtime_checkable

from attestation_workflow.entities import ProofRecord


@runtime_checkable
class ProofService(Protocol):
    """Protocol for services that hand out proofs for finalized rounds."""

    async def fetch_proof(self, round_id: int, encoded_request: str) -> ProofRecord | None:
        """Fetch the proof for a request in a round.

        Args:
            round_id: Finalized voting round
            encoded_request: Request the proof is for

        Returns:
            ProofRecord if the proof is available, None if not yet

        Raises:
            TransientServiceError: On network failure
            ProtocolError: If a success response carries an incomplete
                proof; pollers treat this as "not yet"
        """
        ...
