"""
Diagnostic utilities.

This module logs process memory usage and tile cache health.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import psutil

if TYPE_CHECKING:
    from tiles.cache import CacheStats

logger = logging.getLogger(__name__)


def get_memory_info() -> dict[str, Any]:
    """Get memory usage of the current process."""
    try:
        process = psutil.Process()
        memory_info = process.memory_info()
        system_memory = psutil.virtual_memory()
    except psutil.Error as e:
        return {'error': str(e)}

    return {
        'process_rss_mb': round(memory_info.rss / 1024 / 1024, 2),
        'process_vms_mb': round(memory_info.vms / 1024 / 1024, 2),
        'system_available_mb': round(system_memory.available / 1024 / 1024, 2),
        'system_percent': system_memory.percent,
    }


def log_memory_usage(context: str = '') -> None:
    """Log current memory usage at debug level."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    info = get_memory_info()
    if 'error' in info:
        logger.debug('Memory usage %s: unavailable (%s)', context, info['error'])
        return
    logger.debug(
        'Memory usage %s: RSS=%.1fMB, VMS=%.1fMB, system available=%.1fMB (%.1f%% used)',
        context,
        info['process_rss_mb'],
        info['process_vms_mb'],
        info['system_available_mb'],
        info['system_percent'],
    )


def log_cache_stats(stats: CacheStats, context: str = '') -> None:
    """Log a one-line summary of tile cache state."""
    logger.info(
        'Tile cache %s: size=%d/%d, healthy=%.2f, hits=%d, misses=%d, pending=%d',
        context,
        stats.size,
        stats.max_size,
        stats.hit_rate,
        stats.hits,
        stats.misses,
        stats.pending,
    )
