"""
Serves the recorder UI bundle through a virtual address space.

Requests to ``https://<app_marker>/<path>`` are answered from the local bundle
directory; every other request continues to the network untouched.
"""

from pathlib import Path
from typing import Tuple
from urllib.parse import unquote, urlsplit

from recorder_app.errors import AssetNotFoundError
from recorder_app.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

EXTENSION_TO_MIME: dict[str, str] = {
    ".css": "text/css",
    ".html": "text/html",
    ".ico": "image/x-icon",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".js": "application/javascript",
    ".json": "application/json",
    ".map": "application/json",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".ttf": "font/ttf",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def mime_type_for(path: Path | str) -> str:
    """Look up the Content-Type for a file, defaulting to octet-stream."""
    return EXTENSION_TO_MIME.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


class AssetInterceptor:
    """
    Route handler that fulfills virtual asset requests from the bundle.

    Args:
        bundle_root: Directory holding the recorder UI bundle.
        app_marker: Host name reserved for the virtual address space.
    """

    def __init__(self, bundle_root: Path, app_marker: str = "playwright"):
        self.bundle_root = Path(bundle_root).resolve()
        self.prefix = f"https://{app_marker}/"
        self._installed = False

    def is_virtual(self, url: str) -> bool:
        return url.startswith(self.prefix)

    def resolve(self, url: str) -> Path:
        """
        Map a virtual URL to a file inside the bundle.

        Raises:
            AssetNotFoundError: If the path escapes the bundle or is not a file.
        """
        if not self.is_virtual(url):
            raise AssetNotFoundError(url, "not a virtual asset URL")

        relative = unquote(urlsplit(url[len(self.prefix) :]).path)
        path = (self.bundle_root / relative).resolve()

        try:
            path.relative_to(self.bundle_root)
        except ValueError:
            raise AssetNotFoundError(url, "outside the bundle root") from None

        if not path.is_file():
            raise AssetNotFoundError(url)
        return path

    def load(self, url: str) -> Tuple[bytes, str]:
        """Read a virtual asset, returning its bytes and Content-Type."""
        path = self.resolve(url)
        try:
            body = path.read_bytes()
        except OSError as e:
            raise AssetNotFoundError(url, str(e)) from e
        return body, mime_type_for(path)

    async def handle(self, route) -> None:
        """Fulfill, fail or pass through a single intercepted request."""
        url = route.request.url
        if not self.is_virtual(url):
            await route.continue_()
            return

        try:
            body, mime = self.load(url)
        except AssetNotFoundError as e:
            logger.error(f"Recorder bundle is missing an asset: {e}")
            await route.abort("failed")
            return

        logger.debug(f"Serving {url} ({mime}, {len(body)} bytes)")
        await route.fulfill(
            status=200,
            headers={"Content-Type": mime},
            body=body,
        )

    async def install(self, page) -> None:
        """Register the interceptor on a page. Allowed once per interceptor."""
        if self._installed:
            raise RuntimeError("Asset interceptor is already installed")
        self._installed = True
        await page.route("**/*", self.handle)
