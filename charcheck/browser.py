import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from camoufox.async_api import AsyncCamoufox
from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from .config import BLOCKED_RESOURCES, RunConfig
from .utils import CharCheckError

log = logging.getLogger(__name__)


async def _close_quietly(target, what: str) -> None:
    try:
        await target.close()
    except Exception as e:
        log.debug("Closing %s failed: %r", what, e)


class BrowserProvider:
    """
    One Chromium browser shared by every worker.

    The browser is either launched here or attached to over CDP when an
    endpoint is given. Each call to :meth:`open_page` gets its own
    ``BrowserContext`` so workers never share cookies, storage or a page.
    """

    per_probe = False

    def __init__(self, headless: bool = True, cdp_endpoint: Optional[str] = None):
        self.headless = headless
        self.cdp_endpoint = cdp_endpoint
        self._pw: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    async def start(self) -> Browser:
        if self._browser is not None:
            return self._browser
        self._pw = await async_playwright().start()
        if self.cdp_endpoint:
            log.info("Connecting to browser at %s...", self.cdp_endpoint)
            self._browser = await self._pw.chromium.connect_over_cdp(self.cdp_endpoint)
        else:
            log.info("Launching browser...")
            self._browser = await self._pw.chromium.launch(headless=self.headless)
        return self._browser

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[Page]:
        if self._browser is None:
            raise CharCheckError("browser provider has not been started")
        ctx: BrowserContext = await self._browser.new_context(
            viewport={"width": 1280, "height": 720},
            locale="en-US",
            ignore_https_errors=True,
        )
        try:
            await ctx.route(BLOCKED_RESOURCES, lambda r: r.abort())
            page = await ctx.new_page()
            yield page
        finally:
            await _close_quietly(ctx, "browser context")

    async def close(self) -> None:
        if self._browser is not None:
            log.info("Closing browser...")
            await _close_quietly(self._browser, "browser")
            self._browser = None
        if self._pw is not None:
            try:
                await self._pw.stop()
            except Exception as e:
                log.debug("Stopping playwright failed: %r", e)
            self._pw = None

    async def __aenter__(self) -> "BrowserProvider":
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()


class PerProbeProvider:
    """
    Legacy mode: nothing is shared, every probe launches its own camoufox
    browser and throws it away afterwards. Much slower, but one crashed
    browser can only ever cost a single identifier.
    """

    per_probe = True

    def __init__(self, headless: bool = True):
        self.headless = headless

    async def start(self) -> None:
        log.info("Per-probe browser mode: one browser per identifier")

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[Page]:
        async with AsyncCamoufox(
            headless=self.headless,
            os=["windows", "macos", "linux"],
        ) as browser:
            page = await browser.new_page()
            try:
                yield page
            finally:
                await _close_quietly(page, "page")

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "PerProbeProvider":
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()


def make_provider(config: RunConfig):
    if config.browser_mode == "per-probe":
        return PerProbeProvider(headless=config.headless)
    return BrowserProvider(headless=config.headless, cdp_endpoint=config.cdp_endpoint)
