"""Retrying JSON POST used to hand uploads to the downstream webhook."""

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from .models import ForwardOutcome
from .policy import RetryPolicy

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


async def _read_body(response: httpx.Response) -> str:
    """Read the response text, returning an empty string if the read fails."""
    try:
        await response.aread()
        return response.text
    except httpx.HTTPError as e:
        logger.debug(f"Could not read downstream response body: {e}")
        return ""


async def _post_once(client: httpx.AsyncClient, url: str, payload: dict) -> tuple[int, str]:
    # The stream context closes the connection on every exit path,
    # including cancellation by the surrounding timeout.
    async with client.stream(
        "POST",
        url,
        json=payload,
        headers={"Content-Type": "application/json"},
    ) as response:
        body = await _read_body(response)
        return response.status_code, body


async def post_with_retry(
    client: httpx.AsyncClient,
    url: str,
    payload: dict,
    policy: RetryPolicy,
    sleep: Sleep = asyncio.sleep,
) -> ForwardOutcome:
    """POST ``payload`` to ``url`` as JSON, retrying per ``policy``.

    Attempts run one at a time. Each is bounded by ``policy.timeout_seconds``
    and cancelled when the bound expires. 5xx responses and network errors
    are retried after a backoff until the attempt budget is spent; any other
    non-success status stops immediately.

    Args:
        client: Shared async HTTP client (must not follow redirects)
        url: Destination webhook URL
        payload: JSON-serializable body
        policy: Attempt budget, timeout and backoff
        sleep: Awaitable used for backoff waits

    Returns:
        ForwardOutcome describing the last attempt
    """
    last_error = None
    timed_out = False

    for attempt in range(1, policy.max_attempts + 1):
        is_last = attempt >= policy.max_attempts

        try:
            status, body = await asyncio.wait_for(
                _post_once(client, url, payload), timeout=policy.timeout_seconds
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            last_error = policy.timeout_message()
            timed_out = True
            logger.error(
                f"Attempt {attempt} timed out after {policy.timeout_seconds:g} seconds"
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            last_error = str(e) or e.__class__.__name__
            timed_out = False
            logger.error(f"Attempt {attempt} error: {last_error}")
        else:
            if policy.is_success(status):
                logger.info(f"Success! Status: {status}")
                return ForwardOutcome(
                    success=True, attempts=attempt, status=status, response_body=body
                )

            last_error = f"Non-OK response {status}"
            logger.error(f"Attempt {attempt} failed: {status}")

            if policy.is_retryable_status(status) and not is_last:
                logger.info(f"Retrying in {policy.status_backoff_seconds:g} seconds...")
                await sleep(policy.status_backoff_seconds)
                continue

            return ForwardOutcome(
                success=False,
                attempts=attempt,
                status=status,
                response_body=body,
                error_detail=last_error,
            )

        if not is_last:
            logger.info(f"Retrying in {policy.error_backoff_seconds:g} seconds...")
            await sleep(policy.error_backoff_seconds)

    return ForwardOutcome(
        success=False,
        attempts=policy.max_attempts,
        error_detail=last_error,
        timed_out=timed_out,
    )
