"""Keep-alive self-ping: periodically GET our own /health through the external address."""

import asyncio
from typing import Optional

import httpx

from msgrelay.observability import get_logger

logger = get_logger("msgrelay.keepalive")

PING_TIMEOUT_SEC = 10.0


async def ping_once(client: httpx.AsyncClient, address: str) -> Optional[int]:
    """GET {address}/health. Returns the status code, or None if the request failed."""
    url = f"{address}/health"
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        logger.error("ping_failed", extra={"url": url, "error": str(e)})
        return None
    logger.info("ping_ok", extra={"url": url, "status": response.status_code})
    return response.status_code


async def ping_loop(
    address: str,
    interval: float,
    client: Optional[httpx.AsyncClient] = None,
) -> None:
    """Sleep, ping, repeat until cancelled. The next sleep starts after the ping finishes."""
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=PING_TIMEOUT_SEC)
    try:
        while True:
            await asyncio.sleep(interval)
            await ping_once(client, address)
    finally:
        if owns_client:
            await client.aclose()
