"""Wire models for the verifier's prepareRequest endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class VerifierRequestBody(BaseModel):
    """Request body describing the Web2 call the verifier makes."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., description="Endpoint the verifier fetches", min_length=1)
    http_method: str = Field("GET", alias="httpMethod")
    headers: str = Field("{}", description="JSON object of HTTP headers")
    query_params: str = Field("{}", alias="queryParams")
    body: str = Field("{}", description="JSON request body")
    post_process_jq: str = Field(..., alias="postProcessJq", min_length=1)
    abi_signature: str = Field(..., alias="abiSignature", min_length=1)


class PrepareRequestPayload(BaseModel):
    """Top-level prepareRequest payload."""

    model_config = ConfigDict(populate_by_name=True)

    attestation_type: str = Field(
        ..., alias="attestationType", description="UTF-8 hex, padded to 32 bytes"
    )
    source_id: str = Field(..., alias="sourceId", description="UTF-8 hex, padded to 32 bytes")
    request_body: VerifierRequestBody = Field(..., alias="requestBody")


class PrepareResponsePayload(BaseModel):
    """prepareRequest response.

    ``abi_encoded_request`` is only meaningful when status is "VALID".
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: str
    abi_encoded_request: str | None = Field(None, alias="abiEncodedRequest")
