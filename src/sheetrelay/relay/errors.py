"""Error taxonomy for the relay.

Every error carries the HTTP status it maps to and a stable ``kind`` string.
``to_response`` renders the JSON body returned to the caller.
"""

from typing import Any, Optional


class RelayError(Exception):
    """Base class for errors surfaced to relay clients."""

    status_code = 500
    kind = "InternalError"

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_response(self) -> dict:
        body = {"ok": False, "kind": self.kind, "error": self.message}
        body.update(self.extra)
        return body


class NoDestinationConfiguredError(RelayError):
    status_code = 400
    kind = "NoDestinationConfigured"

    def __init__(self, message: str = "No script URL configured."):
        super().__init__(message)


class InvalidPayloadError(RelayError):
    status_code = 400
    kind = "InvalidPayload"


class PayloadTooLargeError(RelayError):
    status_code = 413
    kind = "PayloadTooLarge"

    def __init__(self, limit: int):
        super().__init__(f"Request body exceeds {limit} bytes.")


class DownstreamRejectedError(RelayError):
    """Downstream answered with a status that is never retried."""

    status_code = 502
    kind = "DownstreamRejected"

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"Forward failed {status}", status=status, gasResponse=body)


class DownstreamUnavailableError(RelayError):
    """Downstream kept failing (5xx, network error or timeout) until retries ran out."""

    status_code = 502
    kind = "DownstreamUnavailable"

    def __init__(
        self,
        status: Optional[int] = None,
        body: str = "",
        details: Optional[str] = None,
    ):
        if status is not None:
            super().__init__(f"Forward failed {status}", status=status, gasResponse=body)
        else:
            super().__init__("Forward failed after retries", details=details)


class InternalRelayError(RelayError):
    status_code = 500
    kind = "InternalError"

    def __init__(self, details: str):
        super().__init__("Internal server error", details=details)
