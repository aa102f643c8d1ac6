"""Shared browser lifecycle against a fake Playwright driver."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from helpers import PNG_BYTES
from hookrelay.services.browser import BrowserRenderer


class FakePage:
    def __init__(self) -> None:
        self.content: Optional[str] = None
        self.content_kwargs: dict[str, Any] = {}
        self.closed = False

    async def set_content(self, html: str, **kwargs: Any) -> None:
        self.content = html
        self.content_kwargs = kwargs

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self) -> None:
        self.pages: list[FakePage] = []
        self.connected = True
        self.closed = False

    def is_connected(self) -> bool:
        return self.connected

    async def new_page(self) -> FakePage:
        page = FakePage()
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakeChromium:
    def __init__(self) -> None:
        self.launches: list[dict[str, Any]] = []
        self.browsers: list[FakeBrowser] = []

    async def launch(self, **kwargs: Any) -> FakeBrowser:
        self.launches.append(kwargs)
        browser = FakeBrowser()
        self.browsers.append(browser)
        return browser


class FakePlaywright:
    def __init__(self) -> None:
        self.chromium = FakeChromium()
        self.stopped = False

    async def stop(self) -> None:
        self.stopped = True


class FakeDriver:
    """What ``async_playwright()`` returns: an object with ``start()``."""

    def __init__(self) -> None:
        self.starts = 0
        self.playwright = FakePlaywright()

    def __call__(self) -> "FakeDriver":
        return self

    async def start(self) -> FakePlaywright:
        self.starts += 1
        return self.playwright


@pytest.fixture
def driver(monkeypatch: pytest.MonkeyPatch) -> FakeDriver:
    fake = FakeDriver()
    monkeypatch.setattr("hookrelay.services.browser.async_playwright", fake)
    return fake


async def capture(page: FakePage) -> bytes:
    return PNG_BYTES


class TestBrowserRenderer:
    @pytest.mark.asyncio
    async def test_render_loads_html_and_returns_capture(self, driver: FakeDriver) -> None:
        renderer = BrowserRenderer()
        assert await renderer.render("<p>hi</p>", capture, timeout_ms=2500) == PNG_BYTES

        (page,) = driver.playwright.chromium.browsers[0].pages
        assert page.content == "<p>hi</p>"
        assert page.content_kwargs == {"wait_until": "load", "timeout": 2500}
        assert page.closed
        assert driver.playwright.chromium.launches == [{"headless": True}]

    @pytest.mark.asyncio
    async def test_browser_launched_once_for_many_renders(self, driver: FakeDriver) -> None:
        renderer = BrowserRenderer()
        await renderer.render("<p>1</p>", capture)
        await renderer.render("<p>2</p>", capture)

        chromium = driver.playwright.chromium
        assert driver.starts == 1
        assert len(chromium.launches) == 1
        assert len(chromium.browsers[0].pages) == 2

    @pytest.mark.asyncio
    async def test_page_closed_when_callback_fails(self, driver: FakeDriver) -> None:
        async def timeout(page: FakePage) -> bytes:
            raise TimeoutError("Timeout 10000ms exceeded")

        renderer = BrowserRenderer()
        with pytest.raises(TimeoutError):
            await renderer.render("<p>slow</p>", timeout)

        (page,) = driver.playwright.chromium.browsers[0].pages
        assert page.closed

    @pytest.mark.asyncio
    async def test_disconnected_browser_is_relaunched(self, driver: FakeDriver) -> None:
        renderer = BrowserRenderer()
        await renderer.render("<p>1</p>", capture)
        driver.playwright.chromium.browsers[0].connected = False
        await renderer.render("<p>2</p>", capture)

        chromium = driver.playwright.chromium
        assert driver.starts == 1
        assert len(chromium.browsers) == 2
        assert len(chromium.browsers[1].pages) == 1

    @pytest.mark.asyncio
    async def test_close_shuts_browser_and_driver(self, driver: FakeDriver) -> None:
        renderer = BrowserRenderer(headless=False)
        await renderer.render("<p>1</p>", capture)
        await renderer.close()

        assert driver.playwright.chromium.launches == [{"headless": False}]
        assert driver.playwright.chromium.browsers[0].closed
        assert driver.playwright.stopped

    @pytest.mark.asyncio
    async def test_close_before_first_render_is_noop(self, driver: FakeDriver) -> None:
        await BrowserRenderer().close()
        assert driver.starts == 0
