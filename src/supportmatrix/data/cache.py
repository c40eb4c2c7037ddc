"""
Site Data Cache

Owns the lifecycle of the aggregated SiteData:

    EMPTY --get()--> LOADING --success--> READY
                        |
                        +------failure--> EMPTY (error propagated to callers)

At most one pipeline run is in flight per cache. Callers arriving while a
load is running await the same task and receive the same SiteData object.
Once READY the result is kept until the process exits or a development-only
clear() resets it.

Usage:
    from supportmatrix.data import SiteDataCache

    cache = SiteDataCache(config)
    site_data = await cache.get()

    # Presentation layer: distinguish failure from an empty result
    result = await cache.fetch()
    if result.status is LoadStatus.FAILED:
        ...
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from .config import ContentConfig, get_config
from .logging import get_logger
from .pipeline import load_site_data
from .schema import SiteData


# Global cache instance
_cache: Optional['SiteDataCache'] = None

SiteDataLoader = Callable[[ContentConfig], Awaitable[SiteData]]


def _retrieve_exception(task: asyncio.Task):
    """Mark a failed load as retrieved even if every caller was cancelled."""
    if not task.cancelled():
        task.exception()


class CacheState(Enum):
    """Lifecycle state of a SiteDataCache"""
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class LoadStatus(Enum):
    """Outcome of a load, as shown to the user"""
    READY = "ready"      # Data available
    EMPTY = "empty"      # Load succeeded but found no boards and no reports
    FAILED = "failed"    # Load failed; show the error message


@dataclass
class LoadResult:
    """Result of SiteDataCache.fetch()."""
    status: LoadStatus
    data: Optional[SiteData] = None
    error: Optional[str] = None


class SiteDataCache:
    """
    Memoized holder of the aggregated site data.

    Args:
        config: Content configuration passed to the loader
        loader: Pipeline coroutine; defaults to load_site_data
    """

    def __init__(
        self,
        config: Optional[ContentConfig] = None,
        loader: Optional[SiteDataLoader] = None,
    ):
        self.config = config or get_config()
        self._loader = loader or load_site_data
        self._data: Optional[SiteData] = None
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self.load_count = 0

    @property
    def state(self) -> CacheState:
        if self._data is not None:
            return CacheState.READY
        if self._task is not None:
            return CacheState.LOADING
        return CacheState.EMPTY

    async def _run(self, generation: int) -> SiteData:
        self.load_count += 1
        try:
            data = await self._loader(self.config)
        finally:
            if generation == self._generation:
                self._task = None

        if generation == self._generation:
            self._data = data
        return data

    async def get(self) -> SiteData:
        """
        Get the site data, running the pipeline on first use.

        Raises:
            Exception: whatever the pipeline raised; the cache is left
                EMPTY so a later call retries
        """
        if self._data is not None:
            return self._data

        if self._task is None:
            self._task = asyncio.ensure_future(self._run(self._generation))
            self._task.add_done_callback(_retrieve_exception)

        # Shield so one cancelled caller does not cancel the shared load
        return await asyncio.shield(self._task)

    async def fetch(self) -> LoadResult:
        """Get the site data as a LoadResult instead of raising."""
        try:
            data = await self.get()
        except Exception as e:
            return LoadResult(status=LoadStatus.FAILED, error=str(e) or type(e).__name__)

        if data.is_empty():
            return LoadResult(status=LoadStatus.EMPTY, data=data)
        return LoadResult(status=LoadStatus.READY, data=data)

    # -------------------------------------------------------------------------
    # Development-only debug surface
    # -------------------------------------------------------------------------

    def clear(self) -> bool:
        """
        Drop the cached data (development only).

        An in-flight load is detached: its callers still get its result but
        the cache does not keep it.

        Returns:
            True if the cache was cleared, False outside dev mode
        """
        if not self.config.dev_mode:
            get_logger().warning("clear() ignored: data cache can only be cleared in dev mode")
            return False

        self._generation += 1
        self._data = None
        self._task = None
        get_logger().info("Data cache cleared")
        return True

    def loading_stats(self) -> Dict[str, Any]:
        """Current cache and loading state, for debugging."""
        stats = self._data.statistics if self._data is not None else None
        return {
            'is_cached': self._data is not None,
            'is_loading': self._task is not None,
            'cache_timestamp': stats.last_updated if stats else None,
            'total_boards': stats.total_boards if stats else None,
            'total_reports': stats.total_reports if stats else None,
        }


def get_cache(config: Optional[ContentConfig] = None) -> SiteDataCache:
    """
    Get the process-wide default cache.

    Args:
        config: Optional configuration override (replaces the instance)
    """
    global _cache

    if config is not None:
        _cache = SiteDataCache(config)
    elif _cache is None:
        _cache = SiteDataCache()

    return _cache


def reset_cache():
    """Reset the process-wide default cache (mainly for testing)."""
    global _cache
    _cache = None
