"""Retry and polling policies.

Plain value objects. Callers assemble them once (usually from Settings) and
pass them into every operation that needs them.
"""

from dataclasses import dataclass

from attestation_workflow.errors import ConfigurationError


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff parameters.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        initial_delay: Seconds to wait before the second attempt
        max_delay: Upper bound on any single delay, in seconds
        backoff_multiplier: Factor applied to the delay after each retry
    """

    max_attempts: int = 10
    initial_delay: float = 1.0
    max_delay: float = 60.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("retry delays must not be negative")
        if self.backoff_multiplier < 1:
            raise ConfigurationError(
                f"backoff_multiplier must be at least 1, got {self.backoff_multiplier}"
            )

    @classmethod
    def single_attempt(cls) -> "RetryPolicy":
        return cls(max_attempts=1, initial_delay=0.0, max_delay=0.0)


@dataclass(frozen=True)
class PollingPolicy:
    """Polling parameters.

    Attributes:
        check_interval: Seconds between polls (initial value for adaptive loops)
        max_wait_time: Seconds after which a polling loop gives up
    """

    check_interval: float = 30.0
    max_wait_time: float = 300.0

    def __post_init__(self) -> None:
        if self.check_interval <= 0:
            raise ConfigurationError(f"check_interval must be positive, got {self.check_interval}")
        if self.max_wait_time < 0:
            raise ConfigurationError(f"max_wait_time must not be negative, got {self.max_wait_time}")
