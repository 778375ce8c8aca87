"""Exponential backoff retry strategy."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from attestation_workflow.cancellation import CancellationToken, guarded
from attestation_workflow.entities import RetryPolicy
from attestation_workflow.errors import ConfigurationError, RetryExhausted, is_retryable
from attestation_workflow.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryCallback = Callable[[int, BaseException], None]


class RetryStrategy:
    """Runs a fallible async operation up to ``policy.max_attempts`` times.

    The delay before attempt k+1 starts at ``initial_delay`` and is
    multiplied by ``backoff_multiplier`` after every retry, never exceeding
    ``max_delay``. Errors whose ``retryable`` flag is False (validation,
    configuration, cancellation) propagate immediately.

    Holds no mutable state, so one instance can serve many workflows.

    Example:
        ```python
        strategy = RetryStrategy(RetryPolicy(max_attempts=3, initial_delay=1.0))
        prepared = await strategy.execute(
            lambda: preparer.prepare(params, attestation_type, source_id),
            on_retry=lambda attempt, error: print(f"attempt {attempt} failed: {error}"),
        )
        ```
    """

    def __init__(self, policy: RetryPolicy, clock: Clock | None = None) -> None:
        """Initialize the strategy.

        Args:
            policy: Attempt budget and backoff parameters.
            clock: Time source for sleeping. Defaults to SystemClock.

        Raises:
            ConfigurationError: If the policy allows no attempts
        """
        if policy.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {policy.max_attempts}")
        self._policy = policy
        self._clock = clock or SystemClock()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def delays(self) -> list[float]:
        """Return the sleep schedule between consecutive attempts."""
        result = []
        delay = min(self._policy.initial_delay, self._policy.max_delay)
        for _ in range(self._policy.max_attempts - 1):
            result.append(delay)
            delay = min(delay * self._policy.backoff_multiplier, self._policy.max_delay)
        return result

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: RetryCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> T:
        """Run ``operation`` until it succeeds or the budget is spent.

        Args:
            operation: Zero-argument callable returning a fresh awaitable
                for every attempt.
            on_retry: Called with (attempt, error) after a failed attempt
                that will be retried, before sleeping.
            cancel: Optional token aborting both the operation and the sleep.

        Returns:
            The operation's result

        Raises:
            RetryExhausted: If every attempt failed
            AttestationError: Non-retryable errors, unchanged
        """
        max_attempts = self._policy.max_attempts
        delays = self.delays()
        last_error: BaseException | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                return await guarded(operation(), cancel)
            except Exception as e:
                if not is_retryable(e):
                    raise
                last_error = e

            if attempt == max_attempts:
                break

            delay = delays[attempt - 1]
            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed: {last_error}; retrying in {delay:.1f}s"
            )
            if on_retry is not None:
                on_retry(attempt, last_error)
            await self._clock.sleep(delay, cancel)

        logger.error(f"Operation failed after {max_attempts} attempts: {last_error}")
        raise RetryExhausted(max_attempts, last_error) from last_error
