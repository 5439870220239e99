"""
Command line entry point.

Usage:
    recorder-app open [URL] [--channel CHANNEL]
    recorder-app --verbose open https://example.com
"""

import asyncio
import json
import os
from typing import Optional

import typer
from dotenv import load_dotenv
from playwright.async_api import async_playwright

from recorder_app.config import RecorderConfig
from recorder_app.controller import RecorderApp
from recorder_app.errors import LaunchError
from recorder_app.logger import get_logger, setup_logging
from recorder_app.models import InspectedSession, Mode

logger = get_logger(__name__)

app = typer.Typer(help="Recorder window controller")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    Recorder window controller.
    """
    setup_logging(level="DEBUG" if verbose else "WARNING")
    load_dotenv()


def format_payload(payload) -> str:
    """Render a dispatch payload on one line."""
    return json.dumps(payload, default=str, ensure_ascii=False)


async def run_recorder(url: Optional[str], channel: Optional[str]) -> int:
    """Open an inspected browser plus its recorder window and wait for close."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(channel=channel, headless=False)
        context = await browser.new_context()
        page = await context.new_page()
        if url:
            await page.goto(url)

        inspected = InspectedSession.from_context(
            context, channel=channel, headful=True
        )
        try:
            recorder = await RecorderApp.open(inspected, RecorderConfig.from_env())
        except LaunchError as e:
            typer.echo(f"❌ {e}", err=True)
            await browser.close()
            return 1
        logger.info(f"Recorder window attached (cdp={recorder.cdp_endpoint})")

        recorder.on("event", lambda payload: typer.echo(format_payload(payload)))
        recorder.on("close", lambda: typer.echo("🛑 Recorder window closed."))

        await recorder.set_mode(Mode.RECORDING)
        await recorder.set_file(os.path.join(os.getcwd(), "recorded.py"))
        await recorder.wait_closed()
        await browser.close()
    return 0


@app.command("open")
def open_command(
    url: Optional[str] = typer.Argument(None, help="Page to open in the inspected browser"),
    channel: Optional[str] = typer.Option(
        None, "--channel", "-c", help="Chromium channel, e.g. chrome or msedge"
    ),
):
    """Open a browser with the recorder window attached."""
    code = asyncio.run(run_recorder(url, channel))
    if code:
        raise typer.Exit(code)


if __name__ == "__main__":
    app()
