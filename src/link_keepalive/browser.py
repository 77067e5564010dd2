"""Scoped Chromium session with stealth configuration."""

import logging
from typing import Optional

from playwright.async_api import (
    Browser, BrowserContext, Error as PlaywrightError, Page, Playwright, Route,
    async_playwright
)

from link_keepalive.exceptions import BrowserUnavailableError, ProbeError
from link_keepalive.headers import HeadersManager
from link_keepalive.models import KeepAliveConfig

logger = logging.getLogger(__name__)


class BrowserSession:
    """Owns the Playwright driver, browser and context for one run."""

    LAUNCH_ARGS = [
        '--no-sandbox',
        '--disable-setuid-sandbox',
        '--disable-dev-shm-usage',
        '--disable-gpu',
        '--no-first-run',
        '--no-default-browser-check',
        '--disable-default-apps',
        '--disable-extensions',
        '--disable-blink-features=AutomationControlled',
    ]

    BLOCKED_RESOURCE_TYPES = frozenset({'media', 'stylesheet', 'image', 'font'})

    STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});
"""

    def __init__(self, config: KeepAliveConfig, headers: Optional[HeadersManager] = None):
        self.config = config
        self.headers = headers or HeadersManager(user_agent=config.user_agent)
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Start the Playwright driver and launch the browser."""
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        try:
            await self._launch()
        except BrowserUnavailableError:
            await self.close()
            raise

    async def _launch(self):
        logger.info('Launching browser with stealth configuration...')

        # New session, new fingerprint
        self.headers.reset_session()
        browser_headers = self.headers.get_browser_headers()
        viewport = self.headers.get_viewport()

        launch_options = {
            'headless': self.config.headless,
            'args': self.LAUNCH_ARGS,
        }
        if self.config.chromium_executable:
            launch_options['executable_path'] = self.config.chromium_executable

        try:
            self.browser = await self._playwright.chromium.launch(**launch_options)
            self.context = await self.browser.new_context(
                user_agent=browser_headers['User-Agent'],
                viewport=viewport,
                ignore_https_errors=True,
                extra_http_headers={'Accept-Language': browser_headers['Accept-Language']}
            )
            await self.context.add_init_script(self.STEALTH_SCRIPT)

            if self.config.block_resources:
                await self.context.route('**/*', self._route)
        except PlaywrightError as e:
            await self.close_browser()
            raise BrowserUnavailableError(f"Failed to launch browser: {e}") from e

        logger.debug(f"Browser configured with User-Agent: {browser_headers['User-Agent']}")
        logger.debug(f"Viewport: {viewport['width']}x{viewport['height']}")

    async def _route(self, route: Route):
        """Abort heavy resources the probe never needs."""
        if route.request.resource_type in self.BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    def is_alive(self) -> bool:
        """Check if browser and context are still usable."""
        return (
            self.browser is not None
            and self.browser.is_connected()
            and self.context is not None
        )

    async def restart(self):
        """Replace a dead browser with a fresh one."""
        logger.warning('Browser/context is no longer alive, recreating...')
        await self.close_browser()
        if self._playwright is None:
            await self.start()
        else:
            await self._launch()

    async def new_page(self) -> Page:
        if not self.is_alive():
            raise ProbeError('Browser context is closed')
        return await self.context.new_page()

    async def close_browser(self):
        """Close the browser, keeping the Playwright driver for a relaunch."""
        browser, self.browser, self.context = self.browser, None, None
        if browser is not None:
            try:
                await browser.close()
                logger.info('Browser closed')
            except PlaywrightError as e:
                logger.debug(f"Error closing browser: {e}")

    async def close(self):
        """Close all resources."""
        await self.close_browser()
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            finally:
                self._playwright = None
