"""Page probing strategies that reveal direct download links."""

import asyncio
import logging
import random
from typing import Optional, Protocol, Set, runtime_checkable

from playwright.async_api import Error as PlaywrightError, Page, Response

from link_keepalive.browser import BrowserSession
from link_keepalive.concurrency import SleepFunc
from link_keepalive.exceptions import ProbeError
from link_keepalive.extractor import extract_download_links
from link_keepalive.heuristics import ProbeHeuristics
from link_keepalive.models import KeepAliveConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class PageProber(Protocol):
    """Discovers candidate download URLs for a target page."""

    async def probe(self, url: str) -> Set[str]:
        """Return the de-duplicated set of download URLs found on *url*."""
        ...


class PlaywrightProber:
    """Drives a real browser to the page, clicks download affordances and
    collects links seen in network traffic and in the rendered markup."""

    NAVIGATION_DELAY = 0.5  # seconds

    def __init__(self, session: BrowserSession, config: KeepAliveConfig,
                 heuristics: ProbeHeuristics, sleep: SleepFunc = asyncio.sleep,
                 rng: Optional[random.Random] = None):
        self.session = session
        self.config = config
        self.heuristics = heuristics
        self._sleep = sleep
        self._rng = rng or random.Random()

    async def probe(self, url: str) -> Set[str]:
        page = await self.session.new_page()
        try:
            return await self._collect(page, url)
        finally:
            if not page.is_closed():
                try:
                    await page.close()
                except PlaywrightError as e:
                    logger.debug(f"Error closing page: {e}")

    async def _collect(self, page: Page, url: str) -> Set[str]:
        links: Set[str] = set()

        def on_response(response: Response):
            if self.heuristics.matches_url(response.url):
                links.add(response.url)
                logger.debug(f"Detected download link: {response.url}")

        page.on('response', on_response)

        logger.info(f"Navigating to {url}")
        await self._sleep(self.NAVIGATION_DELAY)

        try:
            await page.goto(url, wait_until='domcontentloaded',
                            timeout=self.config.page_timeout)
        except PlaywrightError as e:
            raise ProbeError(f"Navigation to {url} failed: {e}") from e

        logger.debug('Waiting for dynamic content to load...')
        await self._sleep(self.config.render_wait / 1000)

        await self._simulate_human_behavior(page)

        clicked = await self._click_download_buttons(page)
        logger.debug(f"Clicked {clicked} download buttons")

        try:
            content = await page.content()
        except PlaywrightError as e:
            raise ProbeError(f"Could not read rendered page {url}: {e}") from e

        page_links = extract_download_links(content, page.url, self.heuristics)
        logger.debug(f"Found {len(page_links)} download links in page content")
        links.update(page_links)

        return links

    async def _simulate_human_behavior(self, page: Page):
        """Scroll a little and pause, like a reader would."""
        low, high = self.heuristics.scroll_range
        try:
            await page.evaluate('(y) => window.scrollBy(0, y)', self._rng.randint(low, high))
            await self._sleep(self._rng.uniform(*self.heuristics.scroll_pause))
        except PlaywrightError as e:
            logger.debug(f"Error in human behavior simulation: {e}")

    async def _click_download_buttons(self, page: Page) -> int:
        """Click every visible element whose text reads like a download action."""
        clicked = 0

        for selector in self.heuristics.click_selectors:
            try:
                elements = await page.query_selector_all(selector)
            except PlaywrightError as e:
                logger.debug(f"Error finding elements with selector {selector}: {e}")
                continue

            logger.debug(f"Found {len(elements)} elements for selector: {selector}")

            for element in elements:
                try:
                    if not await element.is_visible():
                        continue

                    text = (await element.inner_text()).lower()
                    if not self.heuristics.matches_button_text(text):
                        continue

                    await self._sleep(self._rng.uniform(*self.heuristics.pre_click_delay))
                    await element.click(timeout=self.heuristics.click_timeout)
                    clicked += 1
                    logger.debug(f"Clicked download button with text: {text}")
                    await self._sleep(self.config.wait_time / 1000)
                except PlaywrightError as e:
                    logger.debug(f"Error clicking element: {e}")

        return clicked
