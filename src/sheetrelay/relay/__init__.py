"""Upload relay: validation, retry policy and downstream delivery."""

from .models import UploadRequest, ForwardOutcome
from .policy import RetryPolicy, SUCCESS_REDIRECT_STATUS
from .delivery import post_with_retry
from .handler import RelayHandler
from .errors import (
    RelayError,
    NoDestinationConfiguredError,
    InvalidPayloadError,
    PayloadTooLargeError,
    DownstreamRejectedError,
    DownstreamUnavailableError,
    InternalRelayError,
)

__all__ = [
    "UploadRequest",
    "ForwardOutcome",
    "RetryPolicy",
    "SUCCESS_REDIRECT_STATUS",
    "post_with_retry",
    "RelayHandler",
    # Errors
    "RelayError",
    "NoDestinationConfiguredError",
    "InvalidPayloadError",
    "PayloadTooLargeError",
    "DownstreamRejectedError",
    "DownstreamUnavailableError",
    "InternalRelayError",
]
