"""Voting round domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PreparedRequest:
    """Verifier output for a request.

    Attributes:
        status: Verifier status, "VALID" for usable requests
        encoded_request: ABI-encoded request, used as submission payload
            and as the request half of a proof fingerprint
    """

    status: str
    encoded_request: str


@dataclass(frozen=True)
class SubmissionReceipt:
    """What the ledger reports back after accepting a request."""

    round_id: int
    block_number: int
    block_timestamp: int


@dataclass(frozen=True)
class RoundInfo:
    """Voting round a submitted request landed in.

    Created once, at submission time.

    Attributes:
        round_id: Voting round identifier
        block_number: Block that included the submission
        block_timestamp: Timestamp of that block (Unix seconds)
        explorer_url: Link to the round in a systems explorer, or "" if no
            explorer is configured
    """

    round_id: int
    block_number: int
    block_timestamp: int
    explorer_url: str = ""

    @classmethod
    def from_receipt(cls, receipt: SubmissionReceipt, explorer_base_url: str = "") -> "RoundInfo":
        explorer_url = ""
        if explorer_base_url:
            explorer_url = (
                f"{explorer_base_url.rstrip('/')}/voting-round/{receipt.round_id}?tab=fdc"
            )
        return cls(
            round_id=receipt.round_id,
            block_number=receipt.block_number,
            block_timestamp=receipt.block_timestamp,
            explorer_url=explorer_url,
        )


@dataclass(frozen=True)
class VotingEpoch:
    """Protocol parameters that map block timestamps to round ids.

    Ledger submitters use this to derive ``SubmissionReceipt.round_id``.
    """

    first_voting_round_start_ts: int
    voting_epoch_duration_seconds: int

    def __post_init__(self) -> None:
        if self.voting_epoch_duration_seconds <= 0:
            raise ValueError("voting_epoch_duration_seconds must be positive")

    def round_for_timestamp(self, timestamp: int) -> int:
        """Return the voting round containing ``timestamp``.

        Raises:
            ValueError: If the timestamp predates the first voting round
        """
        if timestamp < self.first_voting_round_start_ts:
            raise ValueError(
                f"Timestamp {timestamp} is before the first voting round "
                f"({self.first_voting_round_start_ts})"
            )
        return (timestamp - self.first_voting_round_start_ts) // self.voting_epoch_duration_seconds
