"""PDF renderer backed by headless Chromium (Playwright).

One browser per process, launched lazily on first use and reused by every
request. Each render opens a fresh page, loads the HTML with the `load`
readiness gate, prints it and closes the page on every exit path. The
browser is closed at application shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from playwright.async_api import Browser, Playwright, async_playwright

from uptown_docs.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageParams:
    """Fixed print parameters shared by both documents."""

    format: str = "A4"
    landscape: bool = False
    print_background: bool = True
    display_header_footer: bool = True
    margin: dict[str, str] = field(
        default_factory=lambda: {"top": "35mm", "right": "12mm", "bottom": "18mm", "left": "12mm"}
    )


DEFAULT_PAGE = PageParams()


class Renderer(Protocol):
    """Anything that turns HTML plus header/footer fragments into PDF bytes."""

    async def render(self, html: str, header: str, footer: str, page: PageParams = DEFAULT_PAGE) -> bytes: ...


class ChromiumRenderer:
    """Playwright-backed Renderer with a lazily launched shared browser."""

    def __init__(self) -> None:
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    async def _get_browser(self) -> Browser:
        if self._browser is not None:
            return self._browser
        async with self._lock:
            if self._browser is None:
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(
                    headless=settings.renderer.headless,
                    args=settings.renderer.args,
                )
                logger.info("Chromium launched (headless=%s)", settings.renderer.headless)
        return self._browser

    async def render(self, html: str, header: str, footer: str, page: PageParams = DEFAULT_PAGE) -> bytes:
        browser = await self._get_browser()
        tab = await browser.new_page()
        try:
            await tab.set_content(html, wait_until="load")
            return await tab.pdf(
                format=page.format,
                landscape=page.landscape,
                print_background=page.print_background,
                display_header_footer=page.display_header_footer,
                header_template=header,
                footer_template=footer,
                margin=page.margin,
            )
        finally:
            await tab.close()

    async def close(self) -> None:
        """Close the browser and stop Playwright. Called during shutdown."""
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        logger.info("Chromium renderer closed")


# Module-level singleton — one browser per process.
renderer = ChromiumRenderer()
