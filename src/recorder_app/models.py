"""
Pydantic models for values pushed into the recorder window.

Covers:
- Push payloads (mode, sources, call logs)
- Dispatch payloads sent back from the window
- The description of the inspected browser session
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Mode(str, Enum):
    """Recorder mode shown in the window toolbar."""

    NONE = "none"
    RECORDING = "recording"
    INSPECTING = "inspecting"


class _WireModel(BaseModel):
    """Base for models that cross into the page using camelCase names."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class SourceHighlight(_WireModel):
    line: int
    type: Literal["running", "paused", "error"]


class Source(_WireModel):
    """A generated source file shown in the code pane."""

    file: str
    text: str
    language: str = "python"
    highlight: list[SourceHighlight] = Field(default_factory=list)
    reveal_line: Optional[int] = Field(default=None, alias="revealLine")
    label: Optional[str] = None


class CallLogParams(_WireModel):
    url: Optional[str] = None
    selector: Optional[str] = None


class CallLog(_WireModel):
    """A single entry in the call log pane."""

    id: str
    title: str
    messages: list[str] = Field(default_factory=list)
    status: Literal["in-progress", "done", "paused", "error"] = "in-progress"
    error: Optional[str] = None
    reveal: Optional[bool] = None
    duration: Optional[float] = None
    params: CallLogParams = Field(default_factory=CallLogParams)


class EventData(BaseModel):
    """
    Window -> host payload sent through the ``dispatch`` binding.

    The controller relays payloads untouched; listeners may parse them with
    ``EventData.model_validate(payload)`` when they expect this shape.
    """

    event: str
    params: Any = None


class InspectedSession(BaseModel):
    """
    The parts of the inspected browser that the recorder window mirrors.

    Example:
        InspectedSession(
            browser_name="chromium",
            channel="chrome",
            headful=True,
        )
    """

    browser_name: str = "chromium"
    channel: Optional[str] = None
    executable_path: Optional[str] = None
    headful: bool = False
    sdk_language: str = "python"

    @property
    def is_chromium(self) -> bool:
        return self.browser_name == "chromium"

    @classmethod
    def from_context(cls, context, **overrides) -> "InspectedSession":
        """
        Describe a live Playwright ``BrowserContext``.

        Playwright does not expose the channel or headless flag of a running
        browser, so those come from ``overrides`` when the caller knows them.
        """
        browser = context.browser
        browser_name = browser.browser_type.name if browser else "chromium"
        return cls(browser_name=browser_name, **overrides)


def to_wire(value: Any) -> Any:
    """Convert models (and lists of models) into JSON-ready values."""
    if isinstance(value, _WireModel):
        return value.to_wire()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value
