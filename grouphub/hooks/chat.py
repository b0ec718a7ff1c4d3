import logging
from typing import Any, Dict, List, Optional, Protocol, Set
from uuid import uuid4

from pydantic import ValidationError

from grouphub.actions import GroupActions
from grouphub.hooks.base_hook import Hook
from grouphub.models.data import ActionResult, Member, Message
from grouphub.models.forms import SendNewMessageForm, form_errors
from grouphub.query import Mutation, Query, QueryClient
from grouphub.realtime import Channel, RealtimeClient
from grouphub.store import GroupStore

logger = logging.getLogger(__name__)

CHANGES_CHANNEL = "table-db-changes"
MESSAGE_CHANGES = {"event": "*", "schema": "public", "table": "Message"}


class ScrollWindow(Protocol):
    def scroll_to_bottom(self) -> None: ...


class ChatWindow(Hook):
    """
    Message log for the conversation between ``user_id`` and ``receiver_id``.

    The log is seeded by a history fetch and kept current by the message
    change feed. The feed delivers every row in the table, so rows from
    other conversations are skipped here. Rows are keyed by id, so a live
    row that also shows up in the history is kept once, and live updates
    or deletes that land before the history take precedence over it.
    """

    name = "chat-window"

    def __init__(self, actions: GroupActions, realtime: RealtimeClient, store: GroupStore,
                 user_id: str, receiver_id: str):
        super().__init__()
        self.actions = actions
        self.realtime = realtime
        self.store = store
        self.user_id = user_id
        self.receiver_id = receiver_id
        self.messages: List[Message] = []
        self.history_loaded = False
        self._deleted: Set[str] = set()
        self.window: Optional[ScrollWindow] = None
        self.channel: Optional[Channel] = None

    async def on_mount(self):
        self.channel = self.realtime.channel(CHANGES_CHANNEL)
        self.channel.on("postgres_changes", MESSAGE_CHANGES, self._on_change)
        await self.channel.subscribe()
        self.scope.spawn(self.load_history())

    async def on_unmount(self):
        if self.channel is not None:
            await self.channel.unsubscribe(self._on_change)

    def attach_window(self, window: Optional[ScrollWindow]):
        self.window = window
        self.scroll_to_bottom()

    def scroll_to_bottom(self):
        if self.window is not None:
            self.window.scroll_to_bottom()

    async def load_history(self):
        result = await self.actions.get_all_user_messages(self.receiver_id)
        if self.scope.closed:
            return
        # Live rows are newer than the history snapshot, so they win by id
        live = {message.id: message for message in self.messages}
        merged = [
            live.pop(message.id, message) for message in result.messages if message.id not in self._deleted
        ]
        early = [message for message in self.messages if message.id in live]
        if early:
            logger.debug(f"Keeping {len(early)} live message(s) that arrived before history")
        self.messages = merged + early
        self._deleted.clear()
        self.history_loaded = True
        self._publish()

    def _on_change(self, payload: Dict[str, Any]):
        event = payload.get("eventType")
        if event == "DELETE":
            removed_id = (payload.get("old") or {}).get("id")
            if not self.history_loaded:
                self._deleted.add(removed_id)
            remaining = [message for message in self.messages if message.id != removed_id]
            if len(remaining) != len(self.messages):
                self.messages = remaining
                self._publish()
            return

        row = payload.get("new") or {}
        if "id" not in row:
            logger.debug(f"Ignoring {event} change without a row")
            return
        message = Message.from_payload(row)
        if not message.between(self.user_id, self.receiver_id):
            return

        for index, existing in enumerate(self.messages):
            if existing.id == message.id:
                self.messages[index] = message
                break
        else:
            self.messages.append(message)
        self._publish()

    def _publish(self):
        if self.scope.apply(self.store.on_chat, list(self.messages)):
            self.scroll_to_bottom()


class MessageComposer:
    """Chat input: validates the body, clears the input and sends with a fresh id."""

    def __init__(self, actions: GroupActions, receiver_id: str):
        self.actions = actions
        self.receiver_id = receiver_id
        self.values: Dict[str, str] = {"message": ""}
        self.errors: Dict[str, str] = {}
        self.mutation = Mutation("send-new-message", self._send, on_mutate=self.reset, exclusive=False)

    def set_value(self, message: str):
        self.values["message"] = message

    def reset(self, *_):
        self.values = {"message": ""}

    async def submit(self, message: Optional[str] = None) -> Optional[ActionResult]:
        try:
            form = SendNewMessageForm(message=self.values["message"] if message is None else message)
        except ValidationError as e:
            self.errors = form_errors(e)
            return None
        self.errors = {}
        return await self.mutation.mutate(str(uuid4()), form.message)

    async def _send(self, message_id: str, body: str) -> ActionResult:
        return await self.actions.send_message(self.receiver_id, message_id, body)


class GroupMembers(Hook):
    """Members listed in the group chat sidebar."""

    name = "group-members"

    def __init__(self, actions: GroupActions, queries: QueryClient, group_id: str):
        super().__init__()
        self.actions = actions
        self.queries = queries
        self.group_id = group_id
        self.query: Optional[Query] = None

    async def on_mount(self):
        self.query = self.queries.use_query(
            ("member-chats",), lambda: self.actions.get_all_group_members(self.group_id)
        )
        await self.query.fetch()

    @property
    def members(self) -> List[Member]:
        if self.query is None or self.query.data is None:
            return []
        return self.query.data.members
