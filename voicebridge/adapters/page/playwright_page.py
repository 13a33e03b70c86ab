"""PagePort backed by a Playwright persistent browser context."""

import sys
from pathlib import Path
from typing import Any, Optional

from playwright.async_api import BrowserContext, Page, Playwright, async_playwright

from voicebridge.config import BROWSER, DEFAULT_BASE_URL
from voicebridge.domain.errors import PageUnavailable


def _log(msg: str):
    print(msg, file=sys.stderr)


class PlaywrightPage:
    """One long-lived page in a persistent profile, so the login survives restarts."""

    def __init__(
        self,
        user_data_dir: str,
        base_url: str = DEFAULT_BASE_URL,
        headless: bool = False,
        browser: str = BROWSER,
        navigation_timeout: float = 30.0,
    ):
        self.user_data_dir = user_data_dir
        self.base_url = base_url
        self.headless = headless
        self.browser = browser
        self.navigation_timeout = navigation_timeout
        self._playwright: Optional[Playwright] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def is_available(self) -> bool:
        return self._page is not None and not self._page.is_closed()

    async def start(self, open_base_url: bool = True):
        if self._context is not None:
            return
        Path(self.user_data_dir).expanduser().mkdir(parents=True, exist_ok=True)
        self._playwright = await async_playwright().start()
        browser_type = getattr(self._playwright, self.browser)
        self._context = await browser_type.launch_persistent_context(
            str(Path(self.user_data_dir).expanduser()),
            headless=self.headless,
        )
        self._context.set_default_navigation_timeout(self.navigation_timeout * 1000)
        pages = self._context.pages
        self._page = pages[0] if pages else await self._context.new_page()
        _log(f"[page] {self.browser} started (profile: {self.user_data_dir})")
        if open_base_url:
            await self.load(self.base_url)

    async def close(self):
        context, playwright = self._context, self._playwright
        self._page = None
        self._context = None
        self._playwright = None
        if context is not None:
            await context.close()
        if playwright is not None:
            await playwright.stop()
        _log("[page] closed")

    def _require_page(self) -> Page:
        if not self.is_available:
            raise PageUnavailable()
        return self._page

    async def execute(self, script: str, arg: Any = None) -> Any:
        """Evaluate a page function with ``arg`` passed as its bound parameter."""
        page = self._require_page()
        return await page.evaluate(script, arg)

    async def load(self, url: str) -> None:
        page = self._require_page()
        await page.goto(url, wait_until="domcontentloaded")

    async def wait_closed(self):
        """Resolve when the user closes the page or the browser goes away."""
        page = self._page
        if page is None or page.is_closed():
            return
        await page.wait_for_event("close", timeout=0)
