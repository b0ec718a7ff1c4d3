import logging
from typing import Callable, Iterable, List

from grouphub.models.data import Group, Member, Message, SearchState

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class GroupStore:
    """
    Client-side state shared between hooks.

    Each hook gets the store it should write to through its constructor.
    Updates happen on the event loop thread only, so no locking is done.
    Listeners are told which slice changed: "chat", "online", "search" or
    "infinite_scroll".
    """

    def __init__(self):
        self.chat: List[Message] = []
        self.online: List[Member] = []
        self.search = SearchState()
        self.infinite_scroll: List[Group] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, slice_name: str):
        for listener in list(self._listeners):
            listener(slice_name)

    # chat
    def on_chat(self, chat: Iterable[Message]):
        self.chat = list(chat)
        self._notify("chat")

    # online members
    def on_online(self, members: Iterable[Member]):
        known = {member.id for member in self.online}
        added = []
        for member in members:
            if member.id not in known:
                known.add(member.id)
                added.append(member)
        if added:
            self.online = self.online + added
            logger.debug(f"{len(added)} member(s) came online")
            self._notify("online")

    def online_ids(self) -> List[str]:
        return [member.id for member in self.online]

    # search
    def on_search(self, state: SearchState):
        self.search = state
        self._notify("search")

    def on_clear_search(self):
        self.search = SearchState()
        self._notify("search")

    # explore pagination
    def on_infinite_scroll(self, groups: Iterable[Group]):
        self.infinite_scroll = self.infinite_scroll + list(groups)
        self._notify("infinite_scroll")

    def on_clear_list(self):
        self.infinite_scroll = []
        self._notify("infinite_scroll")
