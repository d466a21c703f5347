"""Shared utilities and helpers."""
from shared.diagnostics import (
    get_memory_info,
    log_cache_stats,
    log_memory_usage,
)

__all__ = [
    'get_memory_info',
    'log_cache_stats',
    'log_memory_usage',
]
