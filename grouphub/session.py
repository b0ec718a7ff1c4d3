import logging
from typing import Optional

from grouphub import env
from grouphub.actions import GroupActions
from grouphub.hooks import (
    ChatWindow,
    CustomDomain,
    ExploreFeed,
    GroupMembers,
    GroupSettings,
    MediaGallery,
    MessageComposer,
    PresenceTracker,
    Search,
)
from grouphub.notifications import Navigator, Toaster
from grouphub.query import QueryClient
from grouphub.realtime import RealtimeClient
from grouphub.store import GroupStore
from grouphub.upload import Uploader

logger = logging.getLogger(__name__)


class GroupSession:
    """
    Everything one signed-in user needs inside one group.

    The collaborators are built once and handed to every hook, so hooks in
    the same session share a store, a query cache and a toaster.
    """

    def __init__(
        self,
        user_id: str,
        group_id: str,
        receiver_id: Optional[str] = None,
        actions: Optional[GroupActions] = None,
        uploader: Optional[Uploader] = None,
        realtime: Optional[RealtimeClient] = None,
        store: Optional[GroupStore] = None,
        queries: Optional[QueryClient] = None,
        toaster: Optional[Toaster] = None,
        navigator: Optional[Navigator] = None,
        search_delay: float = env.SEARCH_DEBOUNCE_SECONDS,
    ):
        self.user_id = user_id
        self.group_id = group_id
        self.receiver_id = receiver_id
        self.actions = actions or GroupActions()
        self.uploader = uploader or Uploader()
        self.realtime = realtime or RealtimeClient()
        self.store = store or GroupStore()
        self.queries = queries or QueryClient()
        self.toaster = toaster or Toaster()
        self.navigator = navigator or Navigator()

        self.presence = PresenceTracker(self.realtime, self.store, user_id)
        self.members = GroupMembers(self.actions, self.queries, group_id)
        self.search = Search(self.actions, self.store, delay=search_delay)
        self.settings = GroupSettings(self.actions, self.uploader, self.queries, self.toaster, self.navigator, group_id)
        self.gallery = MediaGallery(self.actions, self.uploader, self.toaster, group_id)
        self.domain = CustomDomain(self.actions, self.queries, self.toaster, group_id)
        self.explore: Optional[ExploreFeed] = None
        self.chat: Optional[ChatWindow] = None
        self.composer: Optional[MessageComposer] = None
        if receiver_id:
            self.chat = ChatWindow(self.actions, self.realtime, self.store, user_id, receiver_id)
            self.composer = MessageComposer(self.actions, receiver_id)

    @classmethod
    def from_env(cls) -> "GroupSession":
        return cls(user_id=env.USER_ID, group_id=env.GROUP_ID, receiver_id=env.RECEIVER_ID or None)

    def hooks(self):
        return [hook for hook in (self.presence, self.chat, self.members, self.settings, self.domain, self.search,
                                  self.explore) if hook is not None]

    async def start(self):
        await self.presence.mount()
        if self.chat is not None:
            await self.chat.mount()
        await self.members.mount()
        await self.settings.mount()
        await self.domain.mount()
        await self.search.mount()
        logger.info(f"Session started for user {self.user_id} in group {self.group_id}")

    async def open_explore(self, category: str) -> ExploreFeed:
        if self.explore is not None:
            await self.explore.unmount()
        self.explore = ExploreFeed(self.actions, self.store, category)
        await self.explore.mount()
        return self.explore

    async def stop(self):
        for hook in reversed(self.hooks()):
            await hook.unmount()
        logger.info("Session stopped")
