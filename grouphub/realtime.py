import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

import socketio

from grouphub import env
from grouphub.utils import maybe_await

logger = logging.getLogger(__name__)

SUBSCRIBED = "SUBSCRIBED"
CHANNEL_ERROR = "CHANNEL_ERROR"
JOINING = "JOINING"
CLOSED = "CLOSED"

Callback = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]


class Channel:
    """
    A named realtime channel.

    Listeners are registered with ``on`` before ``subscribe``. The server
    pushes every channel event on the shared ``channel-events`` socket event
    and the owning RealtimeClient routes it here by channel name.

    Several hooks may share one channel. Each ``subscribe`` counts as one
    subscriber and each ``unsubscribe`` drops the caller's own listeners;
    the channel is only left once the last subscriber is gone.
    """

    def __init__(self, client: "RealtimeClient", name: str):
        self.client = client
        self.name = name
        self.status: Optional[str] = None
        self.subscribers = 0
        self.bindings: List[Tuple[str, Dict[str, Any], Callback]] = []
        self._presence: Dict[str, List[Dict[str, Any]]] = {}

    def on(self, event_type: str, event_filter: Dict[str, Any], callback: Callback) -> "Channel":
        self.bindings.append((event_type, dict(event_filter), callback))
        return self

    async def subscribe(self, callback: Optional[Callable[[str], Any]] = None) -> "Channel":
        self.subscribers += 1
        if self.status != SUBSCRIBED:
            self.status = JOINING

        async def ack(reply=None):
            if self.status == CLOSED:
                logger.debug(f"Ignoring join reply for closed channel {self.name}")
                return
            self.status = (reply or {}).get("status", CHANNEL_ERROR)
            if self.status == SUBSCRIBED:
                logger.info(f"Subscribed to channel {self.name}")
            else:
                logger.warning(f"Channel {self.name} failed to subscribe: {reply}")
            if callback:
                await maybe_await(callback(self.status))

        await self.client.sio.emit(
            "channel-join",
            {
                "channel": self.name,
                "bindings": [{"type": kind, "filter": event_filter} for kind, event_filter, _ in self.bindings],
            },
            callback=ack,
        )
        return self

    async def track(self, payload: Dict[str, Any]):
        await self.client.sio.emit("presence-track", {"channel": self.name, "payload": payload})

    def presence_state(self) -> Dict[str, List[Dict[str, Any]]]:
        return dict(self._presence)

    async def unsubscribe(self, *callbacks: Callback):
        """Drop the given listeners and leave the channel if nobody else is subscribed."""
        if self.status == CLOSED:
            return
        if callbacks:
            self.bindings = [binding for binding in self.bindings if binding[2] not in callbacks]
        self.subscribers = max(self.subscribers - 1, 0)
        if self.subscribers:
            logger.debug(f"Channel {self.name} still has {self.subscribers} subscriber(s)")
            return
        await self.close()

    async def close(self):
        """Leave the channel regardless of how many subscribers remain."""
        if self.status == CLOSED:
            return
        self.status = CLOSED
        self.subscribers = 0
        self.client.remove_channel(self)
        await self.client.sio.emit("channel-leave", {"channel": self.name})
        logger.info(f"Left channel {self.name}")

    async def receive(self, raw: Dict[str, Any]):
        if self.status == CLOSED:
            return
        kind = raw.get("type")
        event = raw.get("event")
        payload = raw.get("payload") or {}

        if kind == "presence" and event == "sync":
            self._presence = payload.get("state") or {}

        for binding_kind, event_filter, callback in list(self.bindings):
            if binding_kind == kind and _matches(kind, event_filter, event, payload):
                await maybe_await(callback(payload))


def _matches(kind: str, event_filter: Dict[str, Any], event: Optional[str], payload: Dict[str, Any]) -> bool:
    if kind == "presence":
        return event_filter.get("event") in (None, event)
    if kind == "postgres_changes":
        wanted = event_filter.get("event", "*")
        if wanted != "*" and wanted != payload.get("eventType"):
            return False
        for key in ("schema", "table"):
            if key in event_filter and event_filter[key] != payload.get(key):
                return False
        return True
    return True


class RealtimeClient:
    """Socket.IO connection shared by every realtime channel."""

    def __init__(self, sio: Optional[socketio.AsyncClient] = None, token: str = env.TOKEN):
        self.sio = sio or socketio.AsyncClient(logger=False, engineio_logger=False)
        self.token = token
        self.channels: Dict[str, Channel] = {}

        self.sio.on("connect", self._on_connect)
        self.sio.on("disconnect", self._on_disconnect)
        self.sio.on("channel-events", self.dispatch)

    async def connect(self, url: str = env.REALTIME_URL, path: str = env.REALTIME_PATH):
        logger.info(f"Attempting to connect to {url}")
        await self.sio.connect(url, socketio_path=path, transports=["websocket"], auth={"token": self.token})

    async def disconnect(self):
        for channel in list(self.channels.values()):
            await channel.close()
        await self.sio.disconnect()

    def channel(self, name: str) -> Channel:
        if name not in self.channels:
            self.channels[name] = Channel(self, name)
        return self.channels[name]

    def remove_channel(self, channel: Channel):
        if self.channels.get(channel.name) is channel:
            del self.channels[channel.name]

    async def dispatch(self, raw: Dict[str, Any]):
        channel = self.channels.get(raw.get("channel"))
        if channel is None:
            logger.debug(f"Dropping event for unknown channel {raw.get('channel')}")
            return
        await channel.receive(raw)

    async def _on_connect(self):
        logger.info("Connected to realtime server")

    async def _on_disconnect(self):
        logger.info("Disconnected from realtime server")
