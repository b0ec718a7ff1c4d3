"""Tests for the debounced search box and the explore feed."""

import asyncio

import pytest
import pytest_asyncio

from conftest import failed, ok
from grouphub.hooks.search import ExploreFeed, Search
from grouphub.models.data import Group, SearchState

DELAY = 0.05


async def settle(hook):
    await asyncio.sleep(DELAY * 3)
    await hook.scope.join()


@pytest_asyncio.fixture
async def search(actions, store):
    hook = Search(actions, store, delay=DELAY)
    await hook.mount()
    yield hook
    await hook.unmount()


@pytest.mark.asyncio
async def test_burst_of_keystrokes_fires_one_search_with_last_value(search, actions, store):
    actions.search_groups.return_value = ok(groups=[{"id": "g1", "name": "Algebra Club"}])

    for value in ("a", "al", "alg"):
        search.on_search_query(value)
        await asyncio.sleep(DELAY / 5)
    await settle(search)

    actions.search_groups.assert_awaited_once_with("GROUPS", "alg")
    assert search.query == "alg"
    assert search.debounce == "alg"
    assert store.search.is_searching is False
    assert store.search.status == 200
    assert [group.name for group in store.search.data] == ["Algebra Club"]


@pytest.mark.asyncio
async def test_clearing_the_query_clears_results_without_request(search, actions, store):
    actions.search_groups.return_value = ok(groups=[{"id": "g1", "name": "Chess"}])
    search.on_search_query("chess")
    await settle(search)

    search.on_search_query("")
    await settle(search)

    assert actions.search_groups.await_count == 1
    assert store.search == SearchState()


@pytest.mark.asyncio
async def test_new_term_triggers_new_search(search, actions):
    search.on_search_query("chess")
    await settle(search)
    search.on_search_query("chemistry")
    await settle(search)

    assert [call.args for call in actions.search_groups.await_args_list] == [
        ("GROUPS", "chess"),
        ("GROUPS", "chemistry"),
    ]


@pytest.mark.asyncio
async def test_stale_response_does_not_overwrite_newer_results(search, actions, store):
    release_old = asyncio.Event()

    async def fake_search(kind, term):
        if term == "old":
            await release_old.wait()
        return ok(groups=[{"id": term, "name": term}])

    actions.search_groups.side_effect = fake_search

    search.on_search_query("old")
    await asyncio.sleep(DELAY * 3)
    search.on_search_query("new")
    await asyncio.sleep(DELAY * 3)
    release_old.set()
    await search.scope.join()

    assert [group.name for group in store.search.data] == ["new"]
    assert store.search.debounce == "new"


@pytest.mark.asyncio
async def test_unmount_cancels_pending_timer(actions, store):
    hook = Search(actions, store, delay=DELAY)
    await hook.mount()
    hook.on_search_query("late")
    await hook.unmount()
    await asyncio.sleep(DELAY * 3)

    actions.search_groups.assert_not_awaited()
    assert store.search == SearchState()


def test_unknown_search_kind_is_rejected(actions, store):
    with pytest.raises(ValueError):
        Search(actions, store, kind="COURSES")


@pytest.mark.asyncio
async def test_explore_feed_appends_pages(actions, store):
    actions.get_explore_group.side_effect = [
        ok(groups=[{"id": "g1", "name": "One"}]),
        ok(groups=[{"id": "g2", "name": "Two"}]),
    ]
    feed = ExploreFeed(actions, store, "fitness")
    await feed.mount()

    await feed.fetch_page(0)
    await feed.fetch_page(1)

    assert [call.args for call in actions.get_explore_group.await_args_list] == [("fitness", 0), ("fitness", 1)]
    assert [group.id for group in store.infinite_scroll] == ["g1", "g2"]
    assert feed.is_fetching is False


@pytest.mark.asyncio
async def test_explore_feed_ignores_failed_pages(actions, store):
    actions.get_explore_group.return_value = failed(404)
    feed = ExploreFeed(actions, store, "music")
    await feed.mount()

    assert await feed.fetch_page(0) == []
    assert store.infinite_scroll == []


@pytest.mark.asyncio
async def test_explore_feed_clears_previous_list_on_mount(actions, store):
    store.on_infinite_scroll([Group(id="stale", name="Stale", user_id="u")])
    feed = ExploreFeed(actions, store, "music")
    await feed.mount()

    assert store.infinite_scroll == []
