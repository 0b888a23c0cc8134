"""API routes for SheetRelay."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..relay import (
    InternalRelayError,
    InvalidPayloadError,
    PayloadTooLargeError,
    RelayError,
    RelayHandler,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_relay(request: Request) -> RelayHandler:
    """Get the relay handler created at startup."""
    return request.app.state.relay


async def read_json_body(request: Request, limit: int) -> Any:
    """Read and decode a JSON body, refusing anything larger than ``limit`` bytes."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(limit)

    raw = bytearray()
    async for chunk in request.stream():
        raw.extend(chunk)
        if len(raw) > limit:
            raise PayloadTooLargeError(limit)

    try:
        return json.loads(bytes(raw))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidPayloadError(f"Request body is not valid JSON: {e}") from e


@router.get("/")
async def status(relay: RelayHandler = Depends(get_relay)):
    """Liveness check; reports whether a default destination is configured."""
    return relay.status()


@router.post("/upload")
async def upload(request: Request, relay: RelayHandler = Depends(get_relay)):
    """Forward ``{sheetName, values}`` to the Apps Script webhook."""
    try:
        body = await read_json_body(request, relay.settings.max_body_bytes)
        return await relay.handle_upload(body)
    except RelayError:
        raise
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        raise InternalRelayError(str(e)) from e
