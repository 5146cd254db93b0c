import logging
from typing import Any

import httpx

from ..exceptions import UpstreamTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


async def send_request(
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    **kwargs: Any,
) -> httpx.Response:
    """Send a single request to the provider.

    Uses `client` when one is injected, otherwise a short-lived client.
    Timeouts are raised as `UpstreamTimeoutError`; other `httpx.RequestError`
    subclasses propagate so each caller can map them to its own error type.
    """
    try:
        if client is not None:
            return await client.request(method, url, timeout=timeout, **kwargs)

        async with httpx.AsyncClient(timeout=timeout) as short_lived:
            return await short_lived.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        logger.warning(f"Timed out calling {method} {url}")

        raise UpstreamTimeoutError(
            f"Timed out after {timeout}s calling {method} {url}"
        ) from e
