import asyncio
from urllib.parse import urlparse

import aiohttp
from loguru import logger


async def probe_clip(locator: str, timeout: float = 10.0) -> bool:
    """
    Check that an http(s) clip locator answers with a 2xx status.

    Locators with other schemes are not probed and count as reachable. The
    body is never read. Returns False on any network failure; never raises.
    """
    scheme = urlparse(locator).scheme.lower()
    if scheme not in ("http", "https"):
        return True

    try:
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(locator, allow_redirects=True) as response:
                if 200 <= response.status < 300:
                    return True
                logger.warning(f"Clip probe got HTTP {response.status} for {locator}")
                return False
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.warning(f"Clip probe failed for {locator}: {e}")
        return False
