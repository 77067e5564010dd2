"""Partial-download verification of direct download links using httpx."""

import asyncio
import time
import logging
from typing import Optional

import httpx

from link_keepalive.concurrency import SleepFunc, retry_operation
from link_keepalive.exceptions import VerificationError
from link_keepalive.headers import HeadersManager
from link_keepalive.models import KeepAliveConfig, RunStatistics, VerificationResult

logger = logging.getLogger(__name__)


class LinkVerifier:
    """Fetches the first bytes of each link to keep it active."""

    SUCCESS_STATUSES = (200, 206)
    RETRY_ATTEMPTS = 2
    CHUNK_SIZE = 64 * 1024

    def __init__(self, config: KeepAliveConfig, headers: Optional[HeadersManager] = None,
                 client: Optional[httpx.AsyncClient] = None,
                 sleep: SleepFunc = asyncio.sleep):
        self.config = config
        self.headers = headers or HeadersManager(user_agent=config.user_agent)
        self.budget = config.download_bytes
        self._sleep = sleep
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.download_timeout,
                verify=self.config.verify_ssl,
                follow_redirects=True
            )
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_sample(self, url: str) -> int:
        """
        Perform one range-limited download attempt.

        Args:
            url: Direct download URL

        Returns:
            Number of body bytes read, never more than the byte budget

        Raises:
            VerificationError: On transport failure, unexpected status or empty body
        """
        if self._client is None:
            raise RuntimeError("LinkVerifier used outside of its async context")

        headers = self.headers.get_download_headers()
        headers['Range'] = f'bytes=0-{self.budget - 1}'

        try:
            async with self._client.stream('GET', url, headers=headers) as response:
                if response.status_code not in self.SUCCESS_STATUSES:
                    raise VerificationError(
                        f"HTTP {response.status_code} {response.reason_phrase}".strip(),
                        status_code=response.status_code
                    )

                received = 0
                async for chunk in response.aiter_raw(self.CHUNK_SIZE):
                    received += len(chunk)
                    if received >= self.budget:
                        # Leaving the stream context closes the connection
                        received = self.budget
                        break
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            # InvalidURL and StreamError are not HTTPError subclasses
            raise VerificationError(f"{type(e).__name__}: {e}") from e

        if received == 0:
            raise VerificationError(
                f"Empty response body (HTTP {response.status_code})",
                status_code=response.status_code
            )

        logger.debug(f"Read {received} bytes from {url} -> {response.status_code}")
        return received

    async def verify(self, url: str, stats: RunStatistics) -> VerificationResult:
        """Verify a link with a reduced retry budget and record the outcome."""
        start_time = time.time()
        logger.debug(f"Downloading {self.budget} byte sample from: {url}")

        try:
            received = await retry_operation(
                lambda: self.fetch_sample(url),
                self.RETRY_ATTEMPTS,
                description=f"download {url}",
                sleep=self._sleep
            )
        except VerificationError as e:
            stats.record_failure(url, str(e))
            logger.warning(f"✗ Download failed: {url} -> {e}")
            return VerificationResult(
                url=url,
                success=False,
                status_code=e.status_code,
                error=str(e),
                duration=time.time() - start_time
            )

        stats.record_success(received)
        logger.info(f"✓ Downloaded {received} bytes from: {url}")
        return VerificationResult(
            url=url,
            success=True,
            bytes_read=received,
            duration=time.time() - start_time
        )
