"""Request preparer protocol.

Defines the interface for a service that validates an attestation request
and returns its ABI encoding (the verifier's ``prepareRequest`` endpoint).
"""

from typing import Protocol, runtime_checkable

from attestation_workflow.entities import (
    AttestationType,
    PreparedRequest,
    RequestParams,
    SourceId,
)


@runtime_checkable
class RequestPreparer(Protocol):
    """Protocol for request preparers."""

    async def prepare(
        self,
        params: RequestParams,
        attestation_type: AttestationType,
        source_id: SourceId,
    ) -> PreparedRequest:
        """Encode a request.

        Args:
            params: Validated request parameters
            attestation_type: Attestation kind to request
            source_id: Data source identifier

        Returns:
            PreparedRequest with status "VALID"

        Raises:
            TransientServiceError: On network failure or non-2xx response
            ProtocolError: If the response payload is malformed
            ValidationError: If the preparer rejects the request
        """
        ...
