"""Crime snapshot caches injected into the crime score service."""

from __future__ import annotations

from typing import Hashable, Optional, Protocol

from cachetools import TTLCache

from ...models.domain import CrimeSnapshot

# 4 decimal places is roughly 11 m; finer than the feed's own anonymised locations.
KEY_PRECISION = 4


def snapshot_cache_key(lat: float, lng: float, month: str, radius_m: float) -> tuple:
    return (round(lat, KEY_PRECISION), round(lng, KEY_PRECISION), month, float(radius_m))


class SnapshotCache(Protocol):
    def get(self, key: Hashable) -> Optional[CrimeSnapshot]:
        ...

    def set(self, key: Hashable, snapshot: CrimeSnapshot) -> None:
        ...

    def expire(self, key: Hashable | None = None) -> None:
        ...


class TTLSnapshotCache:
    """Bounded, time-expiring snapshot cache backed by ``cachetools.TTLCache``."""

    def __init__(self, maxsize: int, ttl: float) -> None:
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)

    def get(self, key: Hashable) -> Optional[CrimeSnapshot]:
        return self._cache.get(key)

    def set(self, key: Hashable, snapshot: CrimeSnapshot) -> None:
        if snapshot.degraded:
            return
        self._cache[key] = snapshot

    def expire(self, key: Hashable | None = None) -> None:
        """Drop one entry, or every entry when no key is given."""
        if key is None:
            self._cache.clear()
        else:
            self._cache.pop(key, None)

    def __len__(self) -> int:
        return len(self._cache)
