"""
Controller for the recorder window.

``RecorderApp.open`` launches the window session, serves the UI bundle,
exposes the ``dispatch`` binding and navigates to the entry page. After that
the host pushes state with the ``set_*`` methods and listens for ``event``
and ``close`` notifications.

State machine::

    uninitialized -> initializing -> ready -> closed

``closed`` is terminal and is entered exactly once, either through
``close()`` or because the window was closed by the user.
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence, TextIO, Union

from recorder_app.assets import AssetInterceptor
from recorder_app.binding import BindingChannel
from recorder_app.bootstrap import RecorderSession, install_app_icon, launch_session
from recorder_app.config import RecorderConfig
from recorder_app.events import EventChannel, Listener
from recorder_app.logger import get_logger
from recorder_app.models import CallLog, InspectedSession, Mode, Source, to_wire
from recorder_app.push import evaluate_push, write_source_echo

logger = get_logger(__name__)

Launcher = Callable[[InspectedSession, RecorderConfig], Awaitable[RecorderSession]]


class AppState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    CLOSED = "closed"


class RecorderApp:
    """
    Owns the recorder window session and its two-way channel.

    Events:
        event(payload): A payload the window sent through ``dispatch``.
        close(): The window is gone. Emitted at most once.
    """

    def __init__(
        self,
        config: Optional[RecorderConfig] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.config = config or RecorderConfig()
        self._stdout = stdout
        self._state = AppState.UNINITIALIZED
        self._session: Optional[RecorderSession] = None
        self._events = EventChannel()
        self._binding = BindingChannel()
        self._interceptor = AssetInterceptor(
            self.config.bundle_root, self.config.app_marker
        )
        self._closed = asyncio.Event()
        self._teardown_task: Optional[asyncio.Task] = None

    # ─── Lifecycle ───────────────────────────────────────────────────

    @classmethod
    async def open(
        cls,
        inspected: Union[InspectedSession, Any],
        config: Optional[RecorderConfig] = None,
        *,
        launcher: Launcher = launch_session,
        stdout: Optional[TextIO] = None,
    ) -> "RecorderApp":
        """
        Launch the recorder window next to an inspected browser.

        Args:
            inspected: InspectedSession, or a Playwright BrowserContext.
            config: Recorder settings; defaults to ``RecorderConfig()``.
            launcher: Coroutine that starts the window session.
            stdout: Stream for the CLI source echo; defaults to sys.stdout.

        Raises:
            LaunchError: If the window session cannot be started.
        """
        if not isinstance(inspected, InspectedSession):
            inspected = InspectedSession.from_context(inspected)

        app = cls(config, stdout=stdout)
        app._state = AppState.INITIALIZING
        app._session = await launcher(inspected, app.config)
        try:
            await app._init()
        except Exception:
            logger.error("Recorder window failed to initialize, closing it")
            await app.close()
            raise
        return app

    async def _init(self) -> None:
        page = self._session.page
        await install_app_icon(self._session, self.config.app_icon)
        await self._interceptor.install(page)
        await self._binding.install(page, self._on_dispatch)
        page.once("close", self._on_page_close)

        await page.goto(self.config.entry_url)
        if self._state is AppState.INITIALIZING:
            self._state = AppState.READY
            logger.info(f"Recorder window ready at {self.config.entry_url}")

    def _on_dispatch(self, payload: Any) -> None:
        if self._state is AppState.CLOSED:
            return
        self._events.emit("event", payload)

    def _on_page_close(self, *_args) -> None:
        self._begin_close("window closed")

    def _begin_close(self, reason: str) -> bool:
        """
        Enter the closed state and start the teardown.

        Returns False if the closed state was already entered.
        """
        if self._state is AppState.CLOSED:
            return False
        logger.info(f"Recorder window closing: {reason}")
        self._state = AppState.CLOSED
        self._binding.detach()
        self._events.emit("close")
        self._teardown_task = asyncio.ensure_future(self._teardown())
        return True

    async def _teardown(self) -> None:
        try:
            if self._session is not None:
                await self._session.close()
        except Exception as e:
            logger.error(f"Failed to tear down recorder session: {e}")
        finally:
            try:
                await self._events.aclose()
            finally:
                self._closed.set()

    async def close(self) -> None:
        """
        Close the window. Calling it again is a no-op.

        Every caller waits for the same teardown, except listeners: the
        teardown waits for listener delivery to finish, so from a listener
        this only starts it.
        """
        self._begin_close("closed by host")
        if self._events.in_delivery():
            return
        await asyncio.shield(self._teardown_task)

    async def wait_closed(self) -> None:
        """Wait until the window is closed and the session torn down."""
        await self._closed.wait()

    async def bring_to_front(self) -> None:
        if self._state is not AppState.READY:
            return
        await self._session.page.bring_to_front()

    # ─── Listeners ───────────────────────────────────────────────────

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        return self._events.on(event, listener)

    def once(self, event: str, listener: Listener) -> Callable[[], None]:
        return self._events.once(event, listener)

    def off(self, event: str, listener: Listener) -> bool:
        return self._events.off(event, listener)

    # ─── State pushes ────────────────────────────────────────────────

    async def _push(self, hook: str, arg: Any) -> None:
        """
        Send a value to the window, discarding any failure.

        This is the only place push errors are dropped: the window can close
        at any moment, so a failed push is expected and never surfaced.
        """
        if self._state is not AppState.READY:
            logger.debug(f"Skipping {hook}: recorder is {self._state.value}")
            return

        result = await evaluate_push(self._session.page, hook, arg)
        if not result.ok:
            logger.debug(f"Dropped {hook} push: {result.error}")

    async def set_mode(self, mode: Union[Mode, str]) -> None:
        await self._push("playwrightSetMode", to_wire(mode))

    async def set_file(self, file: str) -> None:
        await self._push("playwrightSetFile", file)

    async def set_paused(self, paused: bool) -> None:
        await self._push("playwrightSetPaused", bool(paused))

    async def set_sources(self, sources: Sequence[Union[Source, dict]]) -> None:
        """Replace the source list; also echoes the first source under cli_exit."""
        await self._push("playwrightSetSources", to_wire(list(sources)))

        if self.config.cli_exit and sources:
            first = sources[0]
            text = first.text if isinstance(first, Source) else first.get("text", "")
            write_source_echo(text, self._stdout)

    async def set_selector(self, selector: str, focus: Optional[bool] = None) -> None:
        await self._push("playwrightSetSelector", [selector, focus])

    async def update_call_logs(self, call_logs: Sequence[Union[CallLog, dict]]) -> None:
        await self._push("playwrightUpdateLogs", to_wire(list(call_logs)))

    # ─── Introspection ───────────────────────────────────────────────

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state is AppState.CLOSED

    @property
    def page(self):
        return self._session.page if self._session is not None else None

    @property
    def cdp_endpoint(self) -> Optional[str]:
        return self._session.cdp_endpoint if self._session is not None else None
