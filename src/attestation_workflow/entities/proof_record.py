"""Proof domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Fingerprint:
    """Cache key identifying a proof: the encoded request and its round."""

    encoded_request: str
    round_id: int

    @property
    def key(self) -> str:
        return f"{self.encoded_request}:{self.round_id}"


@dataclass(frozen=True)
class ProofRecord:
    """Proof of a request's result in a finalized voting round.

    Attributes:
        response_bytes: ABI-encoded attestation response (hex)
        attestation_kind: Attestation type reported by the proof service
        proof_path: Merkle proof hashes, leaf to root
    """

    response_bytes: str
    attestation_kind: str
    proof_path: tuple[str, ...] = ()
