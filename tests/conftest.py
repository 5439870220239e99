"""Shared pytest fixtures: a fake Playwright page and recorder session."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from recorder_app.bootstrap import RecorderSession
from recorder_app.config import RecorderConfig


class FakeRoute:
    """Stand-in for a Playwright Route."""

    def __init__(self, url):
        self.request = MagicMock(url=url)
        self.fulfill = AsyncMock()
        self.continue_ = AsyncMock()
        self.abort = AsyncMock()


class FakePage:
    """Records what the controller installs on a page and can simulate the window."""

    def __init__(self):
        self.route_handlers = []
        self.bindings = {}
        self._close_listeners = []
        self.evaluate = AsyncMock()
        self.goto = AsyncMock()
        self.bring_to_front = AsyncMock()
        self.is_closed = False

    async def route(self, pattern, handler):
        self.route_handlers.append((pattern, handler))

    async def expose_binding(self, name, callback):
        self.bindings[name] = callback

    def once(self, event, callback):
        if event == "close":
            self._close_listeners.append(callback)

    def call_binding(self, name, data):
        """Invoke an exposed binding the way page script would."""
        return self.bindings[name](MagicMock(name="source"), data)

    def close_window(self):
        """Simulate the user closing the recorder window."""
        if self.is_closed:
            return
        self.is_closed = True
        self.evaluate.side_effect = Exception(
            "Target page, context or browser has been closed"
        )
        listeners, self._close_listeners = self._close_listeners, []
        for callback in listeners:
            callback(self)


@pytest.fixture
def fake_page():
    return FakePage()


@pytest.fixture
def fake_session(fake_page):
    """A RecorderSession whose context close also closes the window."""
    playwright = MagicMock()
    playwright.stop = AsyncMock()
    context = MagicMock()
    context.close = AsyncMock(side_effect=lambda: fake_page.close_window())
    context.new_cdp_session = AsyncMock()
    return RecorderSession(playwright, context, fake_page)


@pytest.fixture
def launcher(fake_session):
    return AsyncMock(return_value=fake_session)


@pytest.fixture
def bundle(tmp_path):
    """A small recorder bundle on disk."""
    (tmp_path / "index.html").write_text("<html><body>recorder</body></html>")
    (tmp_path / "app.js").write_text("window.ready = true;")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "font.woff2").write_bytes(bytes(range(256)))
    (tmp_path / "blob.bin").write_bytes(b"\x00\x01\x02")
    return tmp_path


@pytest.fixture
def config(bundle):
    return RecorderConfig(bundle_root=bundle, app_icon=None)
