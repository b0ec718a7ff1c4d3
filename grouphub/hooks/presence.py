import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from grouphub.hooks.base_hook import Hook
from grouphub.models.data import Member
from grouphub.realtime import SUBSCRIBED, Channel, RealtimeClient
from grouphub.store import GroupStore

logger = logging.getLogger(__name__)

PRESENCE_CHANNEL = "tracking"


class PresenceStatus(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    JOINING = "JOINING"
    SUBSCRIBED = "SUBSCRIBED"
    CLOSED = "CLOSED"


def online_members(state: Dict[str, List[Dict[str, Any]]]) -> List[Member]:
    """Take the first tracked payload of every presence key."""
    members = []
    for key, payloads in state.items():
        if not payloads:
            continue
        userid = (payloads[0].get("member") or {}).get("userid")
        if userid:
            members.append(Member(id=userid))
        else:
            logger.debug(f"Presence key {key} carries no member id")
    return members


class PresenceTracker(Hook):
    """
    Tracks who is online in the group chat.

    Every presence sync hands the full snapshot of online members to the
    store. Once the channel is subscribed this client tracks its own user id
    so other peers see it on their next sync.
    """

    name = "presence"

    def __init__(self, realtime: RealtimeClient, store: GroupStore, user_id: str):
        super().__init__()
        self.realtime = realtime
        self.store = store
        self.user_id = user_id
        self.status = PresenceStatus.DISCONNECTED
        self.channel: Optional[Channel] = None
        self.snapshot: List[Member] = []

    async def on_mount(self):
        self.status = PresenceStatus.JOINING
        self.channel = self.realtime.channel(PRESENCE_CHANNEL)
        self.channel.on("presence", {"event": "sync"}, self._on_sync)
        await self.channel.subscribe(self._on_status)

    async def on_unmount(self):
        self.status = PresenceStatus.CLOSED
        if self.channel is not None:
            await self.channel.unsubscribe(self._on_sync)

    async def _on_status(self, status: str):
        if self.scope.closed or status != SUBSCRIBED:
            return
        self.status = PresenceStatus.SUBSCRIBED
        await self.channel.track({"member": {"userid": self.user_id}})
        logger.info(f"Tracking presence for user {self.user_id}")

    def _on_sync(self, payload: Dict[str, Any]):
        self.snapshot = online_members(self.channel.presence_state())
        self.scope.apply(self.store.on_online, self.snapshot)
