import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from attestation_workflow.entities import PollingPolicy, RetryPolicy
from attestation_workflow.errors import ConfigurationError


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Engine settings.

    Built once by an entry point and handed to the components that need it;
    nothing below the entry point reads the environment.
    """

    # Services
    verifier_url: str = ""
    verifier_api_key: str = ""
    da_layer_url: str = ""
    systems_explorer_url: str = ""
    protocol_id: int = 200
    http_timeout: float = 30.0

    # Retry (prepare phase)
    retry_max_attempts: int = 10
    retry_initial_delay: float = 1.0
    retry_max_delay: float = 60.0
    retry_backoff_multiplier: float = 2.0

    # Polling
    poll_check_interval: float = 30.0
    poll_max_wait_time: float = 300.0
    proof_settle_delay: float = 10.0

    # Cache
    cache_enabled: bool = False
    cache_ttl: float = 3600.0

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.retry_max_attempts < 1:
            raise ConfigurationError(
                f"ATTESTATION_RETRY_ATTEMPTS must be at least 1, got {self.retry_max_attempts}"
            )
        if self.poll_check_interval <= 0:
            raise ConfigurationError("ATTESTATION_POLL_INTERVAL must be positive")
        if self.poll_max_wait_time < 0:
            raise ConfigurationError("ATTESTATION_POLL_MAX_WAIT must not be negative")
        if self.cache_ttl <= 0:
            raise ConfigurationError("ATTESTATION_CACHE_TTL must be positive")

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        """Load settings from the process environment (and a .env file).

        Args:
            env_file: Optional path to a dotenv file. Defaults to ``.env``
                lookup from the working directory.

        Returns:
            A validated Settings instance

        Raises:
            ConfigurationError: If a value is malformed or out of range
        """
        load_dotenv(env_file)
        return cls(
            verifier_url=os.getenv("VERIFIER_URL", ""),
            verifier_api_key=os.getenv("VERIFIER_API_KEY", ""),
            da_layer_url=os.getenv("DA_LAYER_URL", ""),
            systems_explorer_url=os.getenv("SYSTEMS_EXPLORER_URL", ""),
            protocol_id=_env_int("ATTESTATION_PROTOCOL_ID", "200"),
            http_timeout=_env_float("ATTESTATION_HTTP_TIMEOUT", "30"),
            retry_max_attempts=_env_int("ATTESTATION_RETRY_ATTEMPTS", "10"),
            retry_initial_delay=_env_float("ATTESTATION_RETRY_INITIAL_DELAY", "1"),
            retry_max_delay=_env_float("ATTESTATION_RETRY_MAX_DELAY", "60"),
            retry_backoff_multiplier=_env_float("ATTESTATION_RETRY_BACKOFF", "2"),
            poll_check_interval=_env_float("ATTESTATION_POLL_INTERVAL", "30"),
            poll_max_wait_time=_env_float("ATTESTATION_POLL_MAX_WAIT", "300"),
            proof_settle_delay=_env_float("ATTESTATION_PROOF_SETTLE_DELAY", "10"),
            cache_enabled=_env_bool("ATTESTATION_CACHE_ENABLED"),
            cache_ttl=_env_float("ATTESTATION_CACHE_TTL", "3600"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def retry_policy(self) -> RetryPolicy:
        """Build the prepare-phase retry policy."""
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            initial_delay=self.retry_initial_delay,
            max_delay=self.retry_max_delay,
            backoff_multiplier=self.retry_backoff_multiplier,
        )

    def polling_policy(self) -> PollingPolicy:
        """Build the polling policy shared by finalization and proof polling."""
        return PollingPolicy(
            check_interval=self.poll_check_interval,
            max_wait_time=self.poll_max_wait_time,
        )

    def validate(self) -> list[str]:
        """Report missing values required for talking to real services.

        Returns:
            List of error messages, empty when the configuration is usable
        """
        errors = []
        if not self.verifier_api_key:
            errors.append("VERIFIER_API_KEY is required")
        if not self.verifier_url:
            errors.append("VERIFIER_URL is required")
        if not self.da_layer_url:
            errors.append("DA_LAYER_URL is required")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance for entry points."""
    return Settings.from_env()
