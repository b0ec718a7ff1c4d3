import logging
from typing import List

from grouphub import env
from grouphub.actions import GroupActions
from grouphub.hooks.base_hook import Hook
from grouphub.models.data import Group, SearchState
from grouphub.scope import Debouncer, SequenceGuard
from grouphub.store import GroupStore

logger = logging.getLogger(__name__)

SEARCH_KINDS = ("GROUPS", "POSTS")


class Search(Hook):
    """
    Debounced search box.

    ``query`` follows every keystroke. ``debounce`` only catches up after the
    input has been quiet for ``delay`` seconds, and each new non-empty
    ``debounce`` value fires one search. Clearing the box clears the stored
    results without a request. Responses for queries older than the last
    applied one are dropped.
    """

    name = "search"

    def __init__(self, actions: GroupActions, store: GroupStore, kind: str = "GROUPS",
                 delay: float = env.SEARCH_DEBOUNCE_SECONDS):
        super().__init__()
        if kind not in SEARCH_KINDS:
            raise ValueError(f"Unknown search kind {kind!r}")
        self.actions = actions
        self.store = store
        self.kind = kind
        self.query = ""
        self.debounce = ""
        self.fetch_count = 0
        self._debouncer = Debouncer(delay, self._on_debounce)
        self._sequence = SequenceGuard()

    def on_search_query(self, value: str):
        self.query = value
        self._debouncer.push(value)

    async def on_unmount(self):
        self._debouncer.cancel()

    def _on_debounce(self, value: str):
        if value == self.debounce:
            return
        self.debounce = value
        if value:
            self.scope.spawn(self._fetch(value))
        else:
            self._sequence.reset()
            self.scope.apply(self.store.on_clear_search)

    async def _fetch(self, term: str):
        token = self._sequence.next()
        self.fetch_count += 1
        self.scope.apply(self.store.on_search, SearchState(query=self.query, debounce=term, is_searching=True))

        result = await self.actions.search_groups(self.kind, term)

        if not self._sequence.accept(token):
            logger.debug(f"Discarding stale search results for {term!r}")
            return
        self.scope.apply(
            self.store.on_search,
            SearchState(
                query=self.query,
                debounce=term,
                is_searching=False,
                status=result.status,
                data=result.groups,
            ),
        )


class ExploreFeed(Hook):
    """Infinite-scroll list of groups for one explore category."""

    name = "explore"

    def __init__(self, actions: GroupActions, store: GroupStore, category: str):
        super().__init__()
        self.actions = actions
        self.store = store
        self.category = category
        self.is_fetching = False
        self._sequence = SequenceGuard()

    async def on_mount(self):
        self._sequence.reset()
        self.store.on_clear_list()

    async def fetch_page(self, page: int) -> List[Group]:
        token = self._sequence.next()
        self.is_fetching = True
        try:
            result = await self.actions.get_explore_group(self.category, page or 0)
        finally:
            self.is_fetching = False

        if not self._sequence.accept(token):
            logger.debug(f"Discarding stale explore page {page} for {self.category}")
            return []
        groups = result.groups if result.ok else []
        if groups:
            self.scope.apply(self.store.on_infinite_scroll, groups)
        return groups
