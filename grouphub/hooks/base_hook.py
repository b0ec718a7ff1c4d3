from abc import ABC

from grouphub.scope import Scope


class Hook(ABC):
    """
    Base class for client hooks.

    A hook is mounted once by the view that owns it and unmounted when that
    view goes away. Unmounting closes the hook's scope: timers and running
    requests are cancelled and writes that land afterwards are dropped.
    Hooks can also be used as ``async with`` blocks.
    """

    name = "hook"

    def __init__(self):
        self.scope = Scope(self.name)
        self.mounted = False

    async def mount(self):
        if self.scope.closed:
            self.scope = Scope(self.name)
        self.mounted = True
        await self.on_mount()
        return self

    async def unmount(self):
        if not self.mounted:
            return
        self.mounted = False
        self.scope.close()
        await self.on_unmount()

    async def on_mount(self):
        """Start fetches and subscriptions. Override in subclasses."""

    async def on_unmount(self):
        """Release resources that the scope does not own. Override in subclasses."""

    async def __aenter__(self):
        return await self.mount()

    async def __aexit__(self, exc_type, exc, tb):
        await self.unmount()
