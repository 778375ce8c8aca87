"""Wire models for the DA layer's proof-by-request-round endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class ProofRequestPayload(BaseModel):
    """Proof lookup by voting round and encoded request."""

    model_config = ConfigDict(populate_by_name=True)

    voting_round_id: int = Field(..., alias="votingRoundId", ge=0)
    request_bytes: str = Field(..., alias="requestBytes", min_length=1)


class ProofResponsePayload(BaseModel):
    """A proof as served by the DA layer."""

    model_config = ConfigDict(extra="allow")

    response_hex: str = Field(..., min_length=1, description="ABI-encoded response")
    attestation_type: str = Field(..., description="Attestation type (hex)")
    proof: list[str] = Field(..., description="Merkle proof hashes")
