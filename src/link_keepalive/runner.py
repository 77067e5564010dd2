"""Sequential keep-alive pipeline: probe each target, verify each link."""

import asyncio
import logging
from typing import List, Optional

from link_keepalive.browser import BrowserSession
from link_keepalive.concurrency import SleepFunc, humanized_delay, retry_operation
from link_keepalive.config import parse_targets
from link_keepalive.exceptions import BrowserUnavailableError
from link_keepalive.headers import HeadersManager
from link_keepalive.heuristics import ProbeHeuristics, load_heuristics
from link_keepalive.models import KeepAliveConfig, RunStatistics
from link_keepalive.prober import PageProber, PlaywrightProber
from link_keepalive.reporter import check_outcome, report
from link_keepalive.verifier import LinkVerifier

logger = logging.getLogger(__name__)

# Error text that means the browser itself went away, not just the page
BROWSER_FAILURE_MARKERS = ('closed', 'Target')


class KeepAliveRunner:
    """Runs one keep-alive pass over all configured targets."""

    def __init__(self, config: KeepAliveConfig,
                 browser: Optional[BrowserSession] = None,
                 prober: Optional[PageProber] = None,
                 verifier: Optional[LinkVerifier] = None,
                 heuristics: Optional[ProbeHeuristics] = None,
                 sleep: SleepFunc = asyncio.sleep):
        self.config = config
        self._sleep = sleep
        self.headers = HeadersManager(user_agent=config.user_agent)
        self.browser = browser or BrowserSession(config, self.headers)
        self.prober = prober or PlaywrightProber(
            self.browser,
            config,
            heuristics or load_heuristics(config.heuristics_path),
            sleep=sleep
        )
        self.verifier = verifier or LinkVerifier(config, self.headers, sleep=sleep)

    async def run(self) -> RunStatistics:
        """
        Process every target and report.

        Returns:
            Statistics of the run

        Raises:
            ConfigurationError: If no valid target is configured
            BrowserUnavailableError: If the browser cannot be (re)launched
            NoSuccessfulVerificationsError: If links were found but none verified
        """
        stats = RunStatistics()
        logger.info('Starting keep-alive run (downloading samples with stealth features)...')

        try:
            targets = parse_targets(self.config.urls)
            stats.total_targets = len(targets)

            async with self.browser, self.verifier:
                await self._process_all(targets, stats)

            report(stats, verbose=self.config.verbose)
            check_outcome(stats)
        except Exception as e:
            logger.error(f"Fatal error: {e}")
            raise

        logger.info('✓ Keep-alive run completed successfully')
        return stats

    async def _process_all(self, targets: List[str], stats: RunStatistics):
        for index, url in enumerate(targets):
            if index > 0:
                delay = humanized_delay(self.config.min_target_delay,
                                        self.config.max_target_delay)
                logger.debug(f"Adding {delay * 1000:.0f}ms delay before processing next URL")
                await self._sleep(delay)

            if not self.browser.is_alive():
                await self.browser.restart()

            stats.targets_processed += 1
            try:
                await self.process_target(url, stats)
            except BrowserUnavailableError:
                raise
            except Exception as e:
                logger.error(f"Failed to process URL {url}: {e}")
                stats.record_error(url, str(e))

                if any(marker in str(e) for marker in BROWSER_FAILURE_MARKERS):
                    logger.warning('Browser issue detected, will recreate for next URL')
                    await self.browser.close_browser()

    async def process_target(self, url: str, stats: RunStatistics) -> int:
        """
        Probe a target page and verify every discovered link.

        Returns:
            Number of successfully verified links
        """
        links = await retry_operation(
            lambda: self.prober.probe(url),
            self.config.max_retries,
            description=f"probe {url}",
            sleep=self._sleep
        )

        if not links:
            logger.warning(f"⚠ No download links found for: {url}")
            return 0

        logger.info(f"Found {len(links)} download links for {url}")
        stats.links_found += len(links)

        successes = 0
        for link in sorted(links):
            result = await self.verifier.verify(link, stats)
            if result.success:
                successes += 1

        return successes
