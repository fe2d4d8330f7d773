from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Coroutine
from concurrent.futures import Future
from typing import Any

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class AsyncRunner(QObject):
    """
    Runs coroutines on one background asyncio loop.

    Results come back through ``finished(tag, result)``; Qt queues the signal to
    the GUI thread, so slots may touch widgets. A single long-lived loop keeps
    the AI client's connection pool bound to one event loop.
    """

    finished = Signal(str, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever,
            name="taskmaster-async",
            daemon=True,
        )
        self._thread.start()

    def submit(self, tag: str, coro: Coroutine[Any, Any, Any]) -> None:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        future.add_done_callback(lambda done: self._deliver(tag, done))

    def shutdown(self) -> None:
        if not self._loop.is_running():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=2)

    def _deliver(self, tag: str, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Background call %s failed", tag, exc_info=exc)
            self.finished.emit(tag, None)
            return
        self.finished.emit(tag, future.result())
