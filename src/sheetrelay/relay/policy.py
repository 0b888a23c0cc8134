"""Retry policy for forwarding uploads."""

from dataclasses import dataclass, field

from ..config import Settings

# Apps Script web apps answer a successful POST with a redirect to the result.
SUCCESS_REDIRECT_STATUS = 302


@dataclass(frozen=True)
class RetryPolicy:
    """How many times, how long, and how patiently to try a delivery."""

    max_attempts: int = 2
    timeout_seconds: float = 120.0
    status_backoff_seconds: float = 1.0
    error_backoff_seconds: float = 2.0
    success_statuses: frozenset[int] = field(
        default_factory=lambda: frozenset({SUCCESS_REDIRECT_STATUS})
    )

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.status_backoff_seconds < 0 or self.error_backoff_seconds < 0:
            raise ValueError("backoff must not be negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.forward_max_attempts,
            timeout_seconds=settings.forward_timeout_seconds,
            status_backoff_seconds=settings.retry_backoff_seconds,
            error_backoff_seconds=settings.error_backoff_seconds,
        )

    def is_success(self, status: int) -> bool:
        return 200 <= status < 300 or status in self.success_statuses

    def is_retryable_status(self, status: int) -> bool:
        return status >= 500

    def timeout_message(self) -> str:
        return f"Request timeout ({self.timeout_seconds:g}s)"
