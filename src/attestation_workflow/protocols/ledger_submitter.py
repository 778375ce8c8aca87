"""Ledger submission protocol.

Submitting costs a fee, so the engine calls this exactly once per workflow
unless the caller configures a submit retry policy explicitly.
"""

from typing import Protocol, runtime_checkable

from attestation_workflow.entities import SubmissionReceipt


@runtime_checkable
class LedgerSubmitter(Protocol):
    """Protocol for ledger submission backends."""

    async def submit(self, encoded_request: str) -> SubmissionReceipt:
        """Submit an encoded request to the ledger.

        Implementations derive ``round_id`` from the block timestamp, e.g.
        with VotingEpoch.round_for_timestamp.

        Args:
            encoded_request: Output of the request preparer

        Returns:
            SubmissionReceipt with round id, block number and timestamp
        """
        ...
