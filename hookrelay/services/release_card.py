"""Release card: HTML built from release metadata, rasterized by the browser."""

from __future__ import annotations

from dataclasses import dataclass

from playwright.async_api import Page

from hookrelay.config import DEFAULT_RENDER_TIMEOUT_MS
from hookrelay.services.browser import BrowserRenderer
from hookrelay.templating import render_template

MARKDOWN_CSS_URL = (
    "https://cdnjs.cloudflare.com/ajax/libs/github-markdown-css/5.2.0/"
    "github-markdown-light.min.css"
)
MARKED_JS_URL = "https://cdn.jsdelivr.net/npm/marked/marked.min.js"

BODY_WIDTH = 800  # fixed so every card has the same width
VIEWPORT = {"width": 840, "height": 100}
CONTENT_ID = "content"


class RenderError(RuntimeError):
    """Raised when the release card cannot be turned into an image."""


@dataclass(frozen=True)
class ReleaseCard:
    repo_name: str
    title: str
    tag_name: str
    author: str
    published_at: str
    body: str


def build_release_html(card: ReleaseCard) -> str:
    """
    Self-contained HTML page for ``card``.

    The Markdown body is embedded as a JSON string literal and parsed by
    marked.js inside the page. Script in the body runs in the throwaway
    render page; nothing beyond marked's own handling sanitizes it.
    """
    return render_template(
        "release.html",
        card=card,
        content_id=CONTENT_ID,
        body_width=BODY_WIDTH,
        markdown_css_url=MARKDOWN_CSS_URL,
        marked_js_url=MARKED_JS_URL,
    )


def screenshot_callback(timeout_ms: int = DEFAULT_RENDER_TIMEOUT_MS):
    async def capture(page: Page) -> bytes:
        await page.set_viewport_size(VIEWPORT)
        await page.wait_for_selector(f"#{CONTENT_ID}", timeout=timeout_ms)
        element = await page.query_selector("body")
        if element is None:
            raise RenderError("rendered page has no body")
        return await element.screenshot(type="png")

    return capture


async def render_release_image(
    card: ReleaseCard,
    renderer: BrowserRenderer,
    *,
    timeout_ms: int = DEFAULT_RENDER_TIMEOUT_MS,
) -> bytes:
    """Return PNG bytes of the card; any failure surfaces as :class:`RenderError`."""
    try:
        html = build_release_html(card)
        image = await renderer.render(
            html, screenshot_callback(timeout_ms), timeout_ms=timeout_ms
        )
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"release card for {card.tag_name} failed: {exc!r}") from exc
    if not image:
        raise RenderError(f"release card for {card.tag_name} produced no image")
    return image
