"""Shared headless Chromium used to rasterize HTML."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)

PageCallback = Callable[[Page], Awaitable[bytes]]


class BrowserRenderer:
    """
    Lazily launched browser shared by all requests.

    Each :meth:`render` call gets its own page, so concurrent webhooks can
    render side by side.
    """

    def __init__(self, *, headless: bool = True) -> None:
        self._headless = headless
        self._lock = asyncio.Lock()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None or not self._browser.is_connected():
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                logger.info("Launching headless Chromium")
                self._browser = await self._playwright.chromium.launch(
                    headless=self._headless
                )
            return self._browser

    async def render(
        self,
        html: str,
        callback: PageCallback,
        *,
        timeout_ms: Optional[int] = None,
    ) -> bytes:
        """Load ``html`` in a fresh page and return what ``callback`` captures."""
        browser = await self._ensure_browser()
        page = await browser.new_page()
        try:
            await page.set_content(html, wait_until="load", timeout=timeout_ms)
            return await callback(page)
        finally:
            await page.close()

    async def close(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
