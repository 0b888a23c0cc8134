"""Upload relay: validates an inbound body and forwards it downstream."""

import asyncio
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..config import Settings
from .delivery import Sleep, post_with_retry
from .errors import (
    DownstreamRejectedError,
    DownstreamUnavailableError,
    InvalidPayloadError,
    NoDestinationConfiguredError,
)
from .models import ForwardOutcome, UploadRequest, normalize_script_url
from .policy import RetryPolicy

logger = logging.getLogger(__name__)


def _payload_error_message(error: ValidationError) -> str:
    fields = {str(err["loc"][0]) for err in error.errors() if err.get("loc")}
    if "values" in fields or not fields:
        return "Missing or invalid 'values' array in payload."
    return f"Invalid {', '.join(repr(f) for f in sorted(fields))} in payload."


class RelayHandler:
    """Forwards uploads to the configured Apps Script webhook."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        policy: Optional[RetryPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings = settings
        self.client = client
        self.policy = policy or RetryPolicy.from_settings(settings)
        self._sleep = sleep

    def resolve_destination(self, override: Any = None) -> str:
        """Pick the per-request override, falling back to the configured default."""
        url = normalize_script_url(override) or self.settings.google_script_url
        if not url:
            raise NoDestinationConfiguredError()
        return url

    def parse(self, body: Any) -> tuple[str, UploadRequest]:
        """Validate an inbound body and resolve where it should go.

        Raises:
            NoDestinationConfiguredError: No override and no default destination
            InvalidPayloadError: Body is not an object or ``values`` is not an array
        """
        if not isinstance(body, dict):
            raise InvalidPayloadError("Request body must be a JSON object.")

        url = self.resolve_destination(body.get("googleScriptUrl"))

        try:
            upload = UploadRequest.model_validate(body)
        except ValidationError as e:
            raise InvalidPayloadError(_payload_error_message(e)) from e

        return url, upload

    async def handle_upload(self, body: Any) -> dict:
        """Validate, forward and translate the outcome into a response body.

        Raises:
            RelayError: Any rejected or failed upload
        """
        url, upload = self.parse(body)
        forward = upload.forward_payload(self.settings.default_sheet_name)

        logger.info(f"Uploading {len(forward['values'])} rows to {forward['sheetName']}...")

        outcome = await post_with_retry(
            self.client, url, forward, self.policy, sleep=self._sleep
        )
        return self._to_response(outcome)

    def _to_response(self, outcome: ForwardOutcome) -> dict:
        if outcome.success:
            return {
                "ok": True,
                "forwarded": True,
                "status": outcome.status,
                "text": outcome.response_body,
                "attempts": outcome.attempts,
            }

        if outcome.status is None:
            raise DownstreamUnavailableError(details=outcome.error_detail)
        if self.policy.is_retryable_status(outcome.status):
            raise DownstreamUnavailableError(
                status=outcome.status, body=outcome.response_body
            )
        raise DownstreamRejectedError(outcome.status, outcome.response_body)

    def status(self) -> dict:
        """Liveness payload for the root endpoint."""
        return {
            "ok": True,
            "service": "sheetrelay",
            "status": "alive",
            "message": "POST /upload with JSON { sheetName, values }",
            "destination_configured": self.settings.destination_configured,
            "policy": {
                "max_attempts": self.policy.max_attempts,
                "timeout_seconds": self.policy.timeout_seconds,
            },
        }
