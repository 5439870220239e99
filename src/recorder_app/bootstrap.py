"""
Launches the separate, persistent Chromium session that hosts the recorder
window.

The window runs as a small ``--app`` chrome window next to the inspected
browser and shares its Chromium channel when possible. Launch failures are
fatal and surface as ``LaunchError``.
"""

import base64
from pathlib import Path
from typing import Optional

from playwright.async_api import async_playwright

from recorder_app.config import RecorderConfig
from recorder_app.errors import LaunchError
from recorder_app.logger import get_logger
from recorder_app.models import InspectedSession

logger = get_logger(__name__)


def build_launch_args(config: RecorderConfig) -> list[str]:
    """Chromium flags for the minimized application window."""
    width, height = config.window_size
    x, y = config.window_position
    args = [
        "--app=data:text/html,",
        f"--window-size={width},{height}",
        f"--window-position={x},{y}",
    ]
    if config.remote_debugging_port is not None:
        args.append(f"--remote-debugging-port={config.remote_debugging_port}")
    return args


def resolve_headless(config: RecorderConfig, inspected: InspectedSession) -> bool:
    return config.headless or (config.under_test and not inspected.headful)


def resolve_executable(
    playwright, inspected: InspectedSession
) -> tuple[Optional[str], Optional[str]]:
    """
    Pick the channel and executable for the recorder window.

    Returns:
        (channel, executable_path) tuple; both None for non-chromium sessions.
    """
    if not inspected.is_chromium:
        return None, None

    channel = inspected.channel
    executable_path = None
    default_path = playwright.chromium.executable_path
    if not default_path or not Path(default_path).exists():
        executable_path = inspected.executable_path
        logger.debug(
            f"Bundled chromium not found at {default_path!r}, "
            f"using {executable_path!r}"
        )
    return channel, executable_path


class RecorderSession:
    """The Playwright driver, persistent context and page of the window."""

    def __init__(self, playwright, context, page, cdp_endpoint: Optional[str] = None):
        self.playwright = playwright
        self.context = context
        self.page = page
        self.cdp_endpoint = cdp_endpoint
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Close the context and stop the driver. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True

        try:
            await self.context.close()
        except Exception as e:
            logger.warning(f"Failed to close recorder context: {e}")
        finally:
            await self.playwright.stop()
        logger.debug("Recorder session closed")


async def launch_session(
    inspected: InspectedSession, config: RecorderConfig
) -> RecorderSession:
    """
    Start the recorder window session.

    Args:
        inspected: Description of the browser whose actions are recorded.
        config: Recorder settings.

    Returns:
        A RecorderSession bound to the first page of the new context.

    Raises:
        LaunchError: If the browser cannot be launched or its default
            context does not finish loading.
    """
    playwright = None
    try:
        playwright = await async_playwright().start()
        channel, executable_path = resolve_executable(playwright, inspected)
        headless = resolve_headless(config, inspected)
        logger.info(
            f"Launching recorder window (channel={channel}, headless={headless})"
        )
        context = await playwright.chromium.launch_persistent_context(
            "",
            channel=channel,
            executable_path=executable_path,
            args=build_launch_args(config),
            no_viewport=True,
            headless=headless,
        )
        pages = context.pages
        page = pages[0] if pages else await context.new_page()
        await page.wait_for_load_state()
    except Exception as e:
        if playwright is not None:
            await playwright.stop()
        raise LaunchError(f"Failed to launch recorder window: {e}") from e

    cdp_endpoint = None
    if config.use_websocket:
        cdp_endpoint = f"http://127.0.0.1:{config.remote_debugging_port}"
    return RecorderSession(playwright, context, page, cdp_endpoint)


async def install_app_icon(session: RecorderSession, icon_path: Optional[Path]) -> bool:
    """
    Set the window's dock tile to the recorder icon.

    Only Chromium on macOS renders the tile; failures are logged and ignored.
    """
    if icon_path is None:
        return False
    try:
        image = base64.b64encode(Path(icon_path).read_bytes()).decode("ascii")
        cdp = await session.context.new_cdp_session(session.page)
        await cdp.send("Browser.setDockTile", {"image": image})
        return True
    except Exception as e:
        logger.debug(f"Could not install app icon: {e}")
        return False
