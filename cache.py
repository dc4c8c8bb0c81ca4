import copy
import logging
import time
from typing import Any, Callable, Dict, NamedTuple, Optional

from config import settings

logger = logging.getLogger(__name__)


class CacheEntry(NamedTuple):
    key: str
    payload: Any
    created_at: float


def make_key(username: str, view: str, days: Optional[int] = None) -> str:
    key = f"{username.lower()}:{view}"
    if days is not None:
        key += f":{days}"
    return key


class ResultCache:
    """Time-boxed store for rendered view payloads.

    Entries are valid for ``ttl`` seconds from insertion. Expired entries are
    evicted lazily on ``get``; there is no background sweep. Payloads are
    deep-copied on the way in and out so callers never share state with the
    cache.
    """

    def __init__(self, ttl: int = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl if ttl is not None else settings.CACHE_TTL
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def _age(self, entry: CacheEntry) -> float:
        return self._clock() - entry.created_at

    def is_valid(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._age(entry) <= self.ttl

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._age(entry) > self.ttl:
            self._entries.pop(key, None)
            logger.debug(f"Cache entry expired: {key}")
            return None

        logger.debug(f"Cache hit: {key}")
        return copy.deepcopy(entry.payload)

    def put(self, key: str, payload: Any):
        self._entries[key] = CacheEntry(key, copy.deepcopy(payload), self._clock())

    def clear(self):
        self._entries.clear()

    def clear_expired(self) -> int:
        expired_keys = [key for key in list(self._entries) if not self.is_valid(key)]

        for key in expired_keys:
            self._entries.pop(key, None)

        if expired_keys:
            logger.info(f"Removed {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def __len__(self) -> int:
        return len(self._entries)

    def get_cache_info(self) -> Dict[str, Any]:
        cache_details = {}
        for key, entry in list(self._entries.items()):
            cache_details[key] = {
                "age_seconds": round(self._age(entry), 3),
                "is_valid": self._age(entry) <= self.ttl
            }

        return {
            "cached_entries": len(cache_details),
            "cache_keys": list(cache_details.keys()),
            "cache_timeout": self.ttl,
            "cache_details": cache_details
        }
