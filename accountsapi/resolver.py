import logging
from operator import itemgetter
from typing import Any, Callable, List, Protocol, Sequence

from .cache import ExpiringCache
from .errors import InvalidArgument

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100


class Fetcher(Protocol):
    async def fetch_one(self, key: str) -> Any:
        ...

    async def fetch_many(self, keys: Sequence[str]) -> Sequence[Any]:
        ...


class BatchResolver:
    """Cache-aware lookup of one or many records through a `Fetcher`.

    Parameters
    ----------
    cache : ExpiringCache
        Store consulted before, and populated after, every remote fetch.
    fetcher : Fetcher
        Remote collaborator. Its errors are propagated unchanged.
    key_func : Callable[[Any], str]
        Extracts a fetched record's own key. Defaults to the `"id"` item.

    Notes
    -----
    - Concurrent calls for the same missing key are not coalesced: each one
      issues its own remote fetch.
    """

    def __init__(self, cache: ExpiringCache, fetcher: Fetcher,
                 key_func: Callable[[Any], str] = itemgetter("id")):
        self.cache = cache
        self.fetcher = fetcher
        self.key_func = key_func

    async def resolve(self, key: str, force: bool = False) -> Any:
        """Return the record for `key`, from cache unless `force` is set."""

        if not force and self.cache.has(key):
            return self.cache.get(key)
        value = await self.fetcher.fetch_one(key)
        self.cache.set(key, value)
        return value

    async def resolve_many(self, keys: Sequence[str], force: bool = False) -> List[Any]:
        """Return the records for up to `MAX_BATCH_SIZE` keys with at most one remote call.

        Parameters
        ----------
        keys : Sequence[str]
            Keys to look up. Duplicates are kept: each occurrence is a separate
            cache lookup, or a separate entry in the remote request.
        force : bool
            Skip the cache and fetch every key.

        Returns
        -------
        List[Any]
            Cache hits in input order, followed by fetched records in the order
            the remote returned them. This is NOT the input order; callers that
            need it must re-sort by key.

        Raises
        ------
        InvalidArgument
            If more than `MAX_BATCH_SIZE` keys are given. Nothing is looked up
            or fetched in that case.
        """

        if len(keys) > MAX_BATCH_SIZE:
            raise InvalidArgument(f"Cannot get more than {MAX_BATCH_SIZE} records at once")

        results: List[Any] = []
        to_fetch: List[str] = []
        for key in keys:
            if not force and self.cache.has(key):
                results.append(self.cache.get(key))
            else:
                to_fetch.append(key)

        if to_fetch:
            logger.debug("cache hits=%d, fetching %d keys", len(results), len(to_fetch))
            for value in await self.fetcher.fetch_many(to_fetch):
                self.cache.set(self.key_func(value), value)
                results.append(value)
        return results
