from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from shared.constants import (
    DOWNLOAD_CONCURRENCY,
    ENV_PREFIX,
    HTTP_TIMEOUT_DEFAULT,
    HTTP_USER_AGENT,
    TILE_CACHE_EVICTION_BATCH,
    TILE_CACHE_MAX_AGE_S,
    TILE_CACHE_MAX_SIZE,
)


class TileCacheSettings(BaseModel):
    """Tunables of the tile cache and its HTTP loader."""

    model_config = {
        'extra': 'ignore',
        'frozen': True,
    }

    # Максимальное число записей в кэше
    max_size: int = TILE_CACHE_MAX_SIZE
    # Возраст записи (с), после которого она считается устаревшей
    max_age_s: float = TILE_CACHE_MAX_AGE_S
    # Запас, освобождаемый при вытеснении сверх лимита
    eviction_batch: int = TILE_CACHE_EVICTION_BATCH
    # Таймаут одного HTTP-запроса (с)
    request_timeout_s: float = HTTP_TIMEOUT_DEFAULT
    # Максимум одновременных загрузок
    download_concurrency: int = DOWNLOAD_CONCURRENCY
    user_agent: str = HTTP_USER_AGENT
    # Писать в лог первое использование каждого провайдера
    log_provider_usage: bool = True

    @field_validator('max_size', 'download_concurrency')
    @classmethod
    def validate_positive_int(cls, v: int | str) -> int:
        v = int(v)
        if v <= 0:
            msg = 'Значение должно быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('max_age_s', 'request_timeout_s')
    @classmethod
    def validate_positive_float(cls, v: float | str) -> float:
        v = float(v)
        if v <= 0:
            msg = 'Значение должно быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('eviction_batch')
    @classmethod
    def validate_eviction_batch(cls, v: int | str) -> int:
        v = int(v)
        if v < 0:
            msg = 'eviction_batch не может быть отрицательным'
            raise ValueError(msg)
        return v

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = 'user_agent не может быть пустым'
            raise ValueError(msg)
        return v


def load_settings(env_file: str | Path | None = None) -> TileCacheSettings:
    """Build settings from TILECACHE_* environment variables.

    Args:
        env_file: Optional .env file loaded before reading the environment.
            Variables already set in the environment take precedence.

    Returns:
        Validated TileCacheSettings.
    """
    if env_file is not None and Path(env_file).is_file():
        load_dotenv(env_file)

    values: dict[str, str] = {}
    for field in TileCacheSettings.model_fields:
        raw = os.getenv(f'{ENV_PREFIX}{field.upper()}')
        if raw is not None and raw.strip():
            values[field] = raw.strip()
    return TileCacheSettings(**values)
