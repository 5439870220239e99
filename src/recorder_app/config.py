"""
Configuration for the recorder window.

``RecorderConfig`` is passed explicitly into bootstrap and the controller.
``RecorderConfig.from_env`` is the only place the test-harness environment
switches are read.
"""

import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, Field

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_BUNDLE_ROOT = PACKAGE_DIR / "web"
DEFAULT_APP_ICON = DEFAULT_BUNDLE_ROOT / "icon.png"

# Environment switches used by automated test harnesses
ENV_RECORDER_PORT = "PWTEST_RECORDER_PORT"
ENV_CLI_HEADLESS = "PWTEST_CLI_HEADLESS"
ENV_UNDER_TEST = "PWTEST_UNDER_TEST"
ENV_CLI_EXIT = "PWTEST_CLI_EXIT"


def _default_icon() -> Optional[Path]:
    return DEFAULT_APP_ICON if DEFAULT_APP_ICON.exists() else None


class RecorderConfig(BaseModel):
    """Settings for launching and serving the recorder window."""

    app_marker: str = "playwright"
    entry_point: str = "index.html"
    bundle_root: Path = DEFAULT_BUNDLE_ROOT
    app_icon: Optional[Path] = Field(default_factory=_default_icon)

    window_size: Tuple[int, int] = (600, 600)
    window_position: Tuple[int, int] = (1280, 10)

    remote_debugging_port: Optional[int] = None
    headless: bool = False
    under_test: bool = False
    cli_exit: bool = False

    @property
    def use_websocket(self) -> bool:
        """Websocket transport is used whenever a debugging port is exposed."""
        return self.remote_debugging_port is not None

    @property
    def virtual_prefix(self) -> str:
        return f"https://{self.app_marker}/"

    @property
    def entry_url(self) -> str:
        return self.virtual_prefix + self.entry_point

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides
    ) -> "RecorderConfig":
        """
        Build a config from the test-harness environment switches.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            **overrides: Field values that take precedence over the environment.

        Returns:
            A new RecorderConfig.
        """
        env = os.environ if environ is None else environ

        values: dict = {
            "headless": bool(env.get(ENV_CLI_HEADLESS)),
            "under_test": bool(env.get(ENV_UNDER_TEST)),
            "cli_exit": bool(env.get(ENV_CLI_EXIT)),
        }
        port = env.get(ENV_RECORDER_PORT)
        if port:
            values["remote_debugging_port"] = int(port)

        values.update(overrides)
        return cls(**values)
