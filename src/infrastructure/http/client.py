from __future__ import annotations

import ssl
from typing import TYPE_CHECKING

import aiohttp
import certifi

if TYPE_CHECKING:
    from settings import TileCacheSettings


def make_ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context(cafile=certifi.where())


def make_http_session(settings: TileCacheSettings) -> aiohttp.ClientSession:
    """Create a session for plain, unauthenticated tile GET requests.

    The connector pool is capped at ``download_concurrency`` so a full
    viewport refresh cannot open more sockets than the cache would use.
    """
    connector = aiohttp.TCPConnector(
        ssl=make_ssl_context(),
        limit=settings.download_concurrency,
    )
    timeout = aiohttp.ClientTimeout(total=settings.request_timeout_s)
    return aiohttp.ClientSession(
        connector=connector,
        timeout=timeout,
        headers={'User-Agent': settings.user_agent},
    )
