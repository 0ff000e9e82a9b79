"""Scoped Playwright browser session.

The Playwright connection is driven by the running event loop, so its
lifetime is the ``async with`` block: leaving it closes the page, context,
browser and driver in that order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from ..utils.logger import debug_detail, logger, timestamp


@dataclass
class BrowserConfig:
    headed: bool = False
    channel: Optional[str] = None
    timeout_ms: int = 120_000


class BrowserSession:
    """Own one Chromium browser with a single fresh context and page."""

    def __init__(self, config: BrowserConfig):
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    async def __aenter__(self) -> "BrowserSession":
        self._playwright = await async_playwright().start()
        try:
            debug_detail(f"Launching Chromium (headed={self.config.headed}, channel={self.config.channel})")
            self._browser = await self._playwright.chromium.launch(
                headless=not self.config.headed,
                channel=self.config.channel,
            )
            self.context = await self._browser.new_context()
            await self.context.clear_cookies()
            self.context.set_default_timeout(self.config.timeout_ms)
            self.page = await self.context.new_page()
        except BaseException:
            await self._shutdown()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self._shutdown()
        return False

    async def _shutdown(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as exc:
                debug_detail(f"Browser close failed: {exc}")
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def save_debug_screenshot(self, directory: Path) -> Optional[Path]:
        """Full-page capture named after the current time; best effort."""
        if self.page is None or self.page.is_closed():
            return None
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"debug-{timestamp().replace(':', '-')}.png"
        try:
            await self.page.screenshot(path=str(path), full_page=True)
        except Exception as exc:
            logger.warning("Could not capture debug screenshot: %s", exc)
            return None
        return path
