"""
Exceptions raised by the recorder window controller.
"""


class RecorderError(Exception):
    """Base class for recorder_app errors."""


class LaunchError(RecorderError):
    """The recorder window session could not be started."""


class AssetNotFoundError(RecorderError):
    """A virtual asset URL did not resolve to a file inside the bundle."""

    def __init__(self, url: str, reason: str = "not found"):
        super().__init__(f"Cannot serve {url}: {reason}")
        self.url = url
        self.reason = reason
