"""Shared fixtures and fakes for the grouphub tests."""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from grouphub.actions import GroupActions
from grouphub.models.data import ActionResult, UploadFile
from grouphub.notifications import Navigator, Toaster
from grouphub.query import QueryClient
from grouphub.realtime import RealtimeClient
from grouphub.store import GroupStore
from grouphub.upload import Uploader, UploadResult


class PresenceHub:
    """In-memory stand-in for the realtime server's presence bookkeeping."""

    def __init__(self):
        self.sockets: List["FakeSocket"] = []
        self.state: Dict[str, List[Dict[str, Any]]] = {}

    async def track(self, socket: "FakeSocket", channel: str, payload: Dict[str, Any]):
        self.state[socket.sid] = [payload]
        for peer in list(self.sockets):
            await peer.push(channel, "presence", "sync", {"state": dict(self.state)})


class FakeSocket:
    """Socket.IO client double: records emits and acks channel joins."""

    def __init__(self, sid: str = "sid-1", ack: Optional[Dict[str, Any]] = None, hub: Optional[PresenceHub] = None):
        self.sid = sid
        self.ack = ack if ack is not None else {"status": "SUBSCRIBED"}
        self.hub = hub
        self.handlers: Dict[str, Any] = {}
        self.emitted: List[tuple] = []
        if hub is not None:
            hub.sockets.append(self)

    def on(self, event, handler=None):
        self.handlers[event] = handler

    async def emit(self, event, data=None, callback=None):
        self.emitted.append((event, data))
        if event == "channel-join" and callback is not None:
            await callback(self.ack)
        if event == "presence-track" and self.hub is not None:
            await self.hub.track(self, data["channel"], data["payload"])

    async def connect(self, *args, **kwargs):
        pass

    async def disconnect(self):
        pass

    def events(self, name: str) -> List[Any]:
        return [data for event, data in self.emitted if event == name]

    async def push(self, channel: str, kind: str, event: str, payload: Dict[str, Any]):
        await self.handlers["channel-events"]({"channel": channel, "type": kind, "event": event, "payload": payload})

    async def push_change(self, event_type: str, new: Optional[Dict[str, Any]] = None,
                          old: Optional[Dict[str, Any]] = None, table: str = "Message"):
        await self.push(
            "table-db-changes",
            "postgres_changes",
            event_type,
            {"schema": "public", "table": table, "eventType": event_type, "new": new or {}, "old": old or {}},
        )


def ok(**data) -> ActionResult:
    return ActionResult(status=200, data=data)


def failed(status: int = 400, message: str = "Something went wrong") -> ActionResult:
    return ActionResult(status=status, message=message)


def image(name: str = "photo.png", size: int = 10) -> UploadFile:
    return UploadFile(name=name, content=b"x" * size, content_type="image/png")


def group_payload(**overrides) -> Dict[str, Any]:
    payload = {
        "id": "g1",
        "name": "Python Guild",
        "userId": "owner",
        "description": "Learn Python together",
        "jsonDescription": None,
        "htmlDescription": None,
        "gallery": [],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def socket():
    return FakeSocket()


@pytest.fixture
def realtime(socket):
    return RealtimeClient(sio=socket, token="secret")


@pytest.fixture
def store():
    return GroupStore()


@pytest.fixture
def queries():
    return QueryClient()


@pytest.fixture
def toaster():
    return Toaster()


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def actions():
    mock = AsyncMock(spec=GroupActions)
    mock.get_group_info.return_value = ok(group=group_payload())
    mock.update_group_settings.return_value = ok()
    mock.update_group_gallery.return_value = ok()
    mock.remove_group_gallery.return_value = ok()
    mock.search_groups.return_value = ok(groups=[])
    mock.get_explore_group.return_value = ok(groups=[])
    mock.get_all_group_members.return_value = ok(members=[])
    mock.get_all_user_messages.return_value = ok(messages=[])
    mock.send_message.return_value = ok()
    mock.get_domain_config.return_value = ok(domain={"domain": "learn.example.com", "status": "verified"})
    mock.add_custom_domain.return_value = ActionResult(status=200, message="Domain successfully added")
    return mock


@pytest.fixture
def uploader():
    mock = AsyncMock(spec=Uploader)

    async def upload_file(upload):
        return UploadResult(uuid=f"uuid-{upload.name}")

    mock.upload_file.side_effect = upload_file
    return mock
