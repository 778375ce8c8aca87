"""Error taxonomy for the attestation workflow.

Every failure the engine raises is one of the variants below, each carrying
the structured context a caller needs to decide between resubmitting and
aborting:

    AttestationError
    ├── ValidationError        malformed input, never retried
    ├── ConfigurationError     invalid policy or settings, never retried
    ├── TransientServiceError  network failure or non-2xx response
    ├── ProtocolError          success-shaped response with a broken payload
    ├── RetryExhausted         retry budget spent (attempts, last_error)
    ├── Timeout                polling deadline elapsed (phase, limit)
    └── Cancelled              caller aborted the workflow (reason)

``retryable`` tells RetryStrategy whether another attempt may help.
``workflow_state`` is filled in by the orchestrator when the error halts a
workflow.
"""


class AttestationError(Exception):
    """Base exception for attestation workflow errors."""

    code = "ATTESTATION_ERROR"
    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.workflow_state: str | None = None


class ValidationError(AttestationError):
    """Malformed requester input, detected before any network call."""

    code = "VALIDATION_ERROR"


class ConfigurationError(AttestationError, ValueError):
    """Invalid retry/polling policy or settings."""

    code = "CONFIGURATION_ERROR"


class TransientServiceError(AttestationError):
    """Network failure or non-success response from a remote service."""

    code = "TRANSIENT_SERVICE_ERROR"
    retryable = True

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(AttestationError):
    """A success-shaped response whose payload fails structural checks."""

    code = "PROTOCOL_ERROR"
    retryable = True


class RetryExhausted(AttestationError):
    """Raised when a RetryStrategy has spent its attempt budget."""

    code = "RETRY_EXHAUSTED"

    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        super().__init__(f"Operation failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class Timeout(AttestationError):
    """Raised when a polling loop exceeds its deadline.

    Attributes:
        phase: "finalization" or "proof"
        limit: The configured limit in seconds
    """

    code = "TIMEOUT"

    def __init__(self, phase: str, limit: float, detail: str | None = None) -> None:
        super().__init__(detail or f"{phase} did not complete within {limit:g}s")
        self.phase = phase
        self.limit = limit

    @property
    def limit_ms(self) -> int:
        return int(self.limit * 1000)


class Cancelled(AttestationError):
    """Raised at a suspension point once the caller cancelled the workflow."""

    code = "CANCELLED"

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(f"Workflow cancelled: {reason}")
        self.reason = reason


def is_retryable(error: BaseException) -> bool:
    """Check whether another attempt might succeed after ``error``.

    Errors outside the taxonomy (e.g. an unexpected exception raised by a
    collaborator) are treated as retryable.
    """
    return getattr(error, "retryable", True)
