"""
Recorder window controller.

Owns a separate Chromium application window hosting the recorder UI and
keeps a two-way channel with it: a ``dispatch`` binding from the window and
best-effort state pushes from the host.
"""

from recorder_app.config import RecorderConfig
from recorder_app.controller import AppState, RecorderApp
from recorder_app.errors import AssetNotFoundError, LaunchError, RecorderError
from recorder_app.models import CallLog, EventData, InspectedSession, Mode, Source

__all__ = [
    "AppState",
    "AssetNotFoundError",
    "CallLog",
    "EventData",
    "InspectedSession",
    "LaunchError",
    "Mode",
    "RecorderApp",
    "RecorderConfig",
    "RecorderError",
    "Source",
]
