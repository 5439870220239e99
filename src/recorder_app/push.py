"""
Host -> window state pushes.

Each push evaluates one of the page's ``window.playwright*`` hooks with a
single serializable argument. ``evaluate_push`` never raises: failures,
most commonly a window that is already closed, come back as a failed
``PushResult`` for the caller to discard.
"""

import sys
from dataclasses import dataclass
from typing import Any, Optional, TextIO

SOURCE_ECHO_DELIMITER = "\n-------------8<-------------\n"

# Page function for each push, keyed by the window hook it calls
PUSH_HOOKS: dict[str, str] = {
    "playwrightSetMode": "mode => window.playwrightSetMode(mode)",
    "playwrightSetFile": "file => window.playwrightSetFile(file)",
    "playwrightSetPaused": "paused => window.playwrightSetPaused(paused)",
    "playwrightSetSources": "sources => window.playwrightSetSources(sources)",
    "playwrightSetSelector": (
        "([selector, focus]) => window.playwrightSetSelector(selector, focus)"
    ),
    "playwrightUpdateLogs": "callLogs => window.playwrightUpdateLogs(callLogs)",
}


@dataclass(frozen=True)
class PushResult:
    """Outcome of a single push."""

    hook: str
    ok: bool
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, hook: str) -> "PushResult":
        return cls(hook=hook, ok=True)

    @classmethod
    def failure(cls, hook: str, error: BaseException) -> "PushResult":
        return cls(hook=hook, ok=False, error=error)


async def evaluate_push(page, hook: str, arg: Any) -> PushResult:
    """
    Run a push hook inside the page.

    Args:
        page: Playwright page, or None when no window is available.
        hook: Key of ``PUSH_HOOKS``.
        arg: JSON-serializable argument for the hook.

    Returns:
        The PushResult; exceptions are captured, never raised.
    """
    expression = PUSH_HOOKS[hook]
    if page is None:
        return PushResult.failure(hook, RuntimeError("No recorder page"))

    try:
        await page.evaluate(expression, arg)
    except Exception as e:
        return PushResult.failure(hook, e)
    return PushResult.success(hook)


def write_source_echo(text: str, stream: Optional[TextIO] = None) -> None:
    """Write ``text`` between the scissor delimiters for CLI test harnesses."""
    out = stream if stream is not None else sys.stdout
    out.write(SOURCE_ECHO_DELIMITER)
    out.write(text)
    out.write(SOURCE_ECHO_DELIMITER)
    out.flush()
