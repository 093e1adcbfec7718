import logging
import httpx
from typing import Optional

from kisanmandi.config import settings

log = logging.getLogger("kisanmandi.http")

# Global HTTP client instance
client: Optional[httpx.AsyncClient] = None

async def init_http():
    """Initialize the global HTTP client."""
    global client

    if client is not None:
        return

    # Timeout is opt-in; the provider is called single-shot with no retries
    timeout_config = httpx.Timeout(settings.MANDI_HTTP_TIMEOUT_SEC)

    client = httpx.AsyncClient(
        timeout=timeout_config,
        limits=httpx.Limits(
            max_keepalive_connections=20,
            max_connections=20,
            keepalive_expiry=30  # Keep connections alive for 30s
        ),
        headers={
            "Accept": "application/json",
            "User-Agent": settings.USER_AGENT,
        },
    )
    log.info("HTTP client initialized (timeout=%s)", settings.MANDI_HTTP_TIMEOUT_SEC)

async def close_http():
    """Close the global HTTP client."""
    global client
    if client:
        await client.aclose()
        client = None
        log.info("HTTP client closed")

def get_http_client() -> httpx.AsyncClient:
    """Get the global HTTP client instance."""
    if client is None:
        raise RuntimeError("HTTP client not initialized. Call init_http() first.")
    return client
