import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from grouphub.utils import maybe_await

logger = logging.getLogger(__name__)

QueryKey = Tuple[Any, ...]


class Query:
    """A cached fetch that can be refetched when its key is invalidated."""

    def __init__(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]):
        self.key = key
        self.fetcher = fetcher
        self.data: Any = None
        self.error: Optional[BaseException] = None
        self.is_fetching = False
        self.is_fetched = False
        self.is_stale = True
        self.fetch_count = 0

    async def fetch(self) -> Any:
        if not self.is_stale:
            return self.data
        return await self.refetch()

    async def refetch(self) -> Any:
        self.is_fetching = True
        self.fetch_count += 1
        try:
            self.data = await self.fetcher()
            self.error = None
        except Exception as e:
            self.error = e
            raise
        finally:
            self.is_fetching = False
        self.is_fetched = True
        self.is_stale = False
        return self.data


class QueryClient:
    def __init__(self):
        self._queries: Dict[QueryKey, Query] = {}

    def use_query(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]) -> Query:
        """Register (or re-point) the query for ``key`` and return it."""
        query = self._queries.get(key)
        if query is None:
            query = Query(key, fetcher)
            self._queries[key] = query
        else:
            query.fetcher = fetcher
        return query

    def get_query_data(self, key: QueryKey) -> Any:
        query = self._queries.get(key)
        return query.data if query else None

    def remove_query(self, key: QueryKey):
        self._queries.pop(key, None)

    async def invalidate_queries(self, key: QueryKey) -> List[Query]:
        """Mark every query whose key starts with ``key`` stale and refetch it."""
        matched = [query for query_key, query in self._queries.items() if query_key[: len(key)] == key]
        for query in matched:
            query.is_stale = True
            logger.debug(f"Invalidated query {query.key}")
            await query.refetch()
        return matched


class Mutation:
    """
    Runs a write with a pending flag and lifecycle callbacks.

    An exclusive mutation refuses a second ``mutate`` while one is in flight
    and returns None for it. A non-exclusive one runs every call and stays
    pending until the last of them settles. Exceptions from the write are
    re-raised after ``on_error`` and ``on_settled`` have run.
    """

    def __init__(
        self,
        key: str,
        fn: Callable[..., Awaitable[Any]],
        on_mutate: Optional[Callable[..., Any]] = None,
        on_success: Optional[Callable[[Any], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        on_settled: Optional[Callable[[], Any]] = None,
        exclusive: bool = True,
    ):
        self.key = key
        self.fn = fn
        self.on_mutate = on_mutate
        self.on_success = on_success
        self.on_error = on_error
        self.on_settled = on_settled
        self.exclusive = exclusive
        self.in_flight = 0

    @property
    def is_pending(self) -> bool:
        return self.in_flight > 0

    async def mutate(self, *args: Any, **kwargs: Any) -> Any:
        if self.exclusive and self.is_pending:
            logger.warning(f"Mutation {self.key} is already running, ignoring new request")
            return None

        self.in_flight += 1
        try:
            if self.on_mutate:
                await maybe_await(self.on_mutate(*args, **kwargs))
            result = await self.fn(*args, **kwargs)
            if self.on_success:
                await maybe_await(self.on_success(result))
            return result
        except Exception as e:
            logger.error(f"Mutation {self.key} failed: {e}")
            if self.on_error:
                await maybe_await(self.on_error(e))
            raise
        finally:
            self.in_flight -= 1
            if self.on_settled:
                await maybe_await(self.on_settled())
