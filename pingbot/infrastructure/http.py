import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from pingbot.domain.exceptions import DecodeException, TransportException

logger = logging.getLogger(__name__)

USER_AGENT = "pingbot"
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30, connect=10)
# Limit concurrent connections so a run stays well inside the APIs' rate limits
CONNECTOR_LIMIT = 10


def create_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(connector=aiohttp.TCPConnector(limit=CONNECTOR_LIMIT))


async def _read_json(response, url: str) -> Any:
    if response.status >= 400:
        body = await response.text()
        raise TransportException(url, body[:200] or "request failed", status=response.status)
    try:
        return await response.json(content_type=None)
    except ValueError as e:
        raise DecodeException(f"Invalid JSON returned by {url}: {e}") from e


async def get_json(
    session: aiohttp.ClientSession,
    url: str,
    headers: Dict[str, str],
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Sends a GET request and decodes the JSON body.

    Raises:
        TransportException: On connection errors, timeouts and non-2xx statuses.
        DecodeException: When the body is not valid JSON.
    """
    logger.debug(f"GET {url} {params or ''}")
    try:
        async with session.get(url, params=params, headers=headers, timeout=REQUEST_TIMEOUT) as response:
            return await _read_json(response, url)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransportException(url, str(e) or type(e).__name__) from e


async def post_json(
    session: aiohttp.ClientSession,
    url: str,
    headers: Dict[str, str],
    payload: Dict[str, Any],
) -> Any:
    """Sends a JSON POST request and decodes the JSON body. Errors as for ``get_json``."""
    logger.debug(f"POST {url}")
    try:
        async with session.post(url, json=payload, headers=headers, timeout=REQUEST_TIMEOUT) as response:
            return await _read_json(response, url)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransportException(url, str(e) or type(e).__name__) from e
