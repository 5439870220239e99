"""
The single window -> host call gate.

The page calls ``window.dispatch(data)``; the payload is handed to the sink
as-is and the call returns without waiting on any listener.
"""

from typing import Any, Callable

from recorder_app.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BINDING_NAME = "dispatch"


class BindingChannel:
    """Exposes one named binding into the page and relays its payloads."""

    def __init__(self, name: str = DEFAULT_BINDING_NAME):
        self.name = name
        self._sink: Callable[[Any], Any] | None = None

    def _on_call(self, source, data: Any = None) -> None:
        if self._sink is None:
            return
        logger.debug(f"Binding '{self.name}' called with {data!r}")
        self._sink(data)

    async def install(self, page, sink: Callable[[Any], Any]) -> None:
        """
        Expose the binding on ``page``.

        Args:
            page: Playwright page to expose the binding into.
            sink: Called synchronously with every payload.
        """
        self._sink = sink
        await page.expose_binding(self.name, self._on_call)

    def detach(self) -> None:
        """Stop relaying payloads; later calls from the page are ignored."""
        self._sink = None
