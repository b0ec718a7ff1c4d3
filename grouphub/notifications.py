import logging
from typing import Callable, List

from grouphub.models.data import Toast

logger = logging.getLogger(__name__)


class Toaster:
    """Transient user notifications. Sinks decide how a toast is shown."""

    def __init__(self):
        self.history: List[Toast] = []
        self._sinks: List[Callable[[Toast], None]] = []

    def add_sink(self, sink: Callable[[Toast], None]):
        self._sinks.append(sink)

    def toast(self, title: str, description: str) -> Toast:
        toast = Toast(title=title, description=description)
        self.history.append(toast)
        if toast.is_error:
            logger.warning(f"{title}: {description}")
        else:
            logger.info(f"{title}: {description}")
        for sink in self._sinks:
            sink(toast)
        return toast

    def success(self, description: str) -> Toast:
        return self.toast("Success", description)

    def error(self, description: str) -> Toast:
        return self.toast("Error", description)

    @property
    def errors(self) -> List[Toast]:
        return [toast for toast in self.history if toast.is_error]


class Navigator:
    """Records redirect targets for whatever drives the client's routing."""

    def __init__(self):
        self.history: List[str] = []

    def push(self, path: str):
        logger.info(f"Redirecting to {path}")
        self.history.append(path)

    @property
    def current(self):
        return self.history[-1] if self.history else None
