import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class ExpiringCache:
    """Key-value store where every entry carries its own expiry instant.

    Parameters
    ----------
    timeout : float
        Default time-to-live in seconds, used by `set` when no per-call
        timeout is given.
    clock : Callable[[], float]
        Returns the current instant in seconds. Defaults to `time.time`.

    Notes
    -----
    - An entry is live while `expires_at > clock()`.
    - Expiration is lazy (on `get`/`has`); there is no background reaper, so an
      expired entry stays in memory until it is next observed.
    - Operations are O(1) average time.
    """

    def __init__(self, timeout: float, clock: Callable[[], float] = time.time):
        self.timeout = timeout
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._store.pop(key, None)
            return None
        return entry

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value for `key` if present and not expired.

        Parameters
        ----------
        key : str
            Cache key.

        Returns
        -------
        Optional[Any]
            The stored value, or `None` if the key is missing or the entry expired.

        Notes
        -----
        - Performs lazy eviction: if the entry is stale, it is removed and `None` is returned.
        """

        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    def has(self, key: str) -> bool:
        """Same check as `get` (including eviction), returned as a boolean."""

        return self._live_entry(key) is not None

    def set(self, key: str, value: Any, timeout: Optional[float] = None) -> None:
        """Insert or replace a value for `key`.

        Parameters
        ----------
        key : str
            Cache key.
        value : Any
            Arbitrary Python object to store.
        timeout : Optional[float]
            Time-to-live in seconds for this entry only. Defaults to the
            store-wide `timeout`.
        """

        ttl = self.timeout if timeout is None else timeout
        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        """Remove all entries from the cache.

        Useful for tests or to force a full refresh of cached data.
        """

        self._store.clear()

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return len(self._store)
