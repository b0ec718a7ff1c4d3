import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional, Set

logger = logging.getLogger(__name__)


class Scope:
    """
    Lifetime of a mounted hook.

    Tasks started through ``spawn`` are cancelled when the scope closes, and
    ``apply`` drops any state write that lands after close.
    """

    def __init__(self, name: str):
        self.name = name
        self.closed = False
        self._tasks: Set[asyncio.Task] = set()

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        if self.closed:
            coro.close()
            raise RuntimeError(f"Scope {self.name} is closed")
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def apply(self, write: Callable[..., Any], *args: Any) -> bool:
        if self.closed:
            logger.debug(f"Dropped late write in closed scope {self.name}")
            return False
        write(*args)
        return True

    async def join(self):
        """Wait for every task currently running in the scope."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self):
        self.closed = True
        for task in list(self._tasks):
            task.cancel()


class SequenceGuard:
    """Hands out increasing tokens and accepts a response only if no newer one was applied."""

    def __init__(self):
        self._issued = 0
        self._applied = 0

    def next(self) -> int:
        self._issued += 1
        return self._issued

    def accept(self, token: int) -> bool:
        if token < self._applied:
            return False
        self._applied = token
        return True

    def reset(self):
        """Mark everything issued so far as stale."""
        self._applied = self.next()


class Debouncer:
    """Calls ``callback(value)`` once ``delay`` seconds pass without another push."""

    def __init__(self, delay: float, callback: Callable[[Any], Any]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: Any):
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any):
        self._handle = None
        self.callback(value)
