"""
Загрузка растровых тайлов с публичных тайл-серверов.

Один GET без ретраев: повторная попытка через резервный провайдер
выполняется уровнем кэша.
"""

from __future__ import annotations

import asyncio
import logging
from io import BytesIO
from typing import TYPE_CHECKING

import aiohttp
from PIL import Image, UnidentifiedImageError

from shared.constants import HTTP_OK, HTTP_TIMEOUT_DEFAULT

if TYPE_CHECKING:
    from settings import TileCacheSettings

logger = logging.getLogger(__name__)


class TileFetchError(RuntimeError):
    """Tile could not be downloaded or decoded."""


def decode_tile_image(data: bytes) -> Image.Image:
    """Decode PNG/JPEG bytes into an RGBA image (labels tiles are transparent)."""
    with Image.open(BytesIO(data)) as img:
        return img.convert('RGBA')


class TileImageLoader:
    """Async callable: url -> decoded PIL image."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        timeout_s: float = HTTP_TIMEOUT_DEFAULT,
    ) -> None:
        self.session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout_s)

    @classmethod
    def from_settings(
        cls, session: aiohttp.ClientSession, settings: TileCacheSettings
    ) -> TileImageLoader:
        return cls(session, timeout_s=settings.request_timeout_s)

    async def __call__(self, url: str) -> Image.Image:
        """
        Загружает один тайл и возвращает PIL.Image (RGBA).

        Raises:
            TileFetchError: любой статус кроме 200, сетевая ошибка,
                таймаут или ошибка декодирования.

        """
        try:
            resp = await self.session.get(url, timeout=self.timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            msg = f'Network error for {url}: {e}'
            raise TileFetchError(msg) from e
        try:
            if resp.status != HTTP_OK:
                msg = f'HTTP {resp.status} for {url}'
                raise TileFetchError(msg)
            try:
                data = await resp.read()
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                msg = f'Failed to read body of {url}: {e}'
                raise TileFetchError(msg) from e
            try:
                return decode_tile_image(data)
            except (UnidentifiedImageError, OSError) as e:
                msg = f'Failed to decode tile {url}: {e}'
                raise TileFetchError(msg) from e
        finally:
            resp.release()
