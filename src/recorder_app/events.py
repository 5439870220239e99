"""
Ordered observer list used for the controller's lifecycle notifications.

``emit`` only enqueues; a pump task delivers emissions to listeners one at a
time in emission order. Listeners may be plain callables or coroutine
functions.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional

from recorder_app.logger import get_logger

logger = get_logger(__name__)

Listener = Callable[..., Any]


class EventChannel:
    """Named-event observer list with asynchronous, ordered delivery."""

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = {}
        self._queue: Optional[asyncio.Queue] = None
        self._pump: Optional[asyncio.Task] = None
        self._closed = False

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """
        Subscribe a listener.

        Returns:
            A callable that unsubscribes the listener.
        """
        self._listeners.setdefault(event, []).append(listener)
        return lambda: self.off(event, listener)

    def once(self, event: str, listener: Listener) -> Callable[[], None]:
        """Subscribe a listener that is removed after its first delivery."""

        def wrapper(*args):
            self.off(event, wrapper)
            return listener(*args)

        return self.on(event, wrapper)

    def off(self, event: str, listener: Listener) -> bool:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Queue an emission for delivery.

        Returns:
            False if the channel is closed or nobody listens to ``event``.
        """
        if self._closed or not self._listeners.get(event):
            return False

        if self._queue is None:
            self._queue = asyncio.Queue()
        self._queue.put_nowait((event, args))

        if self._pump is None or self._pump.done():
            self._pump = asyncio.get_running_loop().create_task(self._run())
        return True

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is None:
                    self._listeners.clear()
                    return
                event, args = item
                await self._deliver(event, args)
            finally:
                self._queue.task_done()

    async def _deliver(self, event: str, args: tuple) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Listener for '{event}' failed: {e}")

    def in_delivery(self) -> bool:
        """True when called from a listener running on the delivery task."""
        return self._pump is not None and asyncio.current_task() is self._pump

    async def drain(self) -> None:
        """Wait until every queued emission has been delivered."""
        if self._queue is not None and self._pump is not None:
            await self._queue.join()

    async def aclose(self) -> None:
        """
        Deliver pending emissions, stop the pump and drop all listeners.

        Called from a listener, it only queues the stop: the pump finishes the
        queued emissions after that listener returns and then drops listeners.
        """
        if self._closed:
            return
        self._closed = True

        if self._pump is None or self._pump.done():
            self._listeners.clear()
            return

        self._queue.put_nowait(None)
        if not self.in_delivery():
            await self._pump
