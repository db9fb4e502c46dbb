"""Readiness probe for the remote WebDriver endpoint."""

import logging
from typing import Optional

import httpx

from ..core.exceptions import RemoteConnectionError

logger = logging.getLogger(__name__)


async def check_remote_ready(
    remote_url: str,
    timeout: float = 10.0,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Query ``{remote_url}/status`` and confirm the endpoint accepts sessions.

    Both Selenium Grid and Appium answer the W3C status endpoint with
    ``{"value": {"ready": ...}}``. A missing ``ready`` flag counts as ready.

    Args:
        remote_url: Base URL of the remote endpoint
        timeout: Request timeout in seconds
        client: Optional client to reuse; one is created otherwise

    Returns:
        The decoded status payload

    Raises:
        RemoteConnectionError: If the endpoint is unreachable or not ready
    """
    status_url = f"{remote_url.rstrip('/')}/status"

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.get(status_url)
        else:
            response = await client.get(status_url, timeout=timeout)
    except httpx.HTTPError as e:
        raise RemoteConnectionError(remote_url, str(e)) from e

    if response.status_code != 200:
        raise RemoteConnectionError(
            remote_url, f"status endpoint returned HTTP {response.status_code}"
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise RemoteConnectionError(remote_url, f"invalid status payload: {e}") from e

    value = payload.get("value") if isinstance(payload, dict) else None
    if isinstance(value, dict) and value.get("ready") is False:
        raise RemoteConnectionError(remote_url, value.get("message") or "endpoint is not ready")

    logger.info(f"Remote WebDriver at {remote_url} is ready")
    return payload
