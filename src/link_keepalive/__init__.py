"""
link-keepalive: keeps expiring file-hosting download links active.

This module provides both a CLI interface and a scriptable API for probing
file-hosting pages with a stealth browser and downloading a small sample of
every discovered link.
"""

__version__ = "0.1.0"

from link_keepalive.config import Config, load_config, parse_targets
from link_keepalive.concurrency import (
    BackoffProfile, STANDARD_BACKOFF, RATE_LIMIT_BACKOFF, retry_operation
)
from link_keepalive.exceptions import (
    KeepAliveError, ConfigurationError, ProbeError, VerificationError,
    BrowserUnavailableError, NoSuccessfulVerificationsError
)
from link_keepalive.headers import HeadersManager
from link_keepalive.heuristics import ProbeHeuristics, load_heuristics
from link_keepalive.models import (
    KeepAliveConfig, RunStatistics, VerificationResult, ErrorRecord
)
from link_keepalive.prober import PageProber, PlaywrightProber
from link_keepalive.runner import KeepAliveRunner
from link_keepalive.verifier import LinkVerifier

__all__ = [
    # Main classes
    'Config',
    'KeepAliveRunner',
    'LinkVerifier',
    'PlaywrightProber',
    'PageProber',
    'HeadersManager',
    'BackoffProfile',

    # Models
    'KeepAliveConfig',
    'RunStatistics',
    'VerificationResult',
    'ErrorRecord',
    'ProbeHeuristics',

    # Exceptions
    'KeepAliveError',
    'ConfigurationError',
    'ProbeError',
    'VerificationError',
    'BrowserUnavailableError',
    'NoSuccessfulVerificationsError',

    # Constants
    'STANDARD_BACKOFF',
    'RATE_LIMIT_BACKOFF',

    # Functions
    'load_config',
    'load_heuristics',
    'parse_targets',
    'retry_operation',
    'run_keepalive',
]


async def run_keepalive(urls: str, **options) -> RunStatistics:
    """
    Quick keep-alive run for a newline-separated list of URLs.

    Args:
        urls: One page URL per line
        **options: Additional KeepAliveConfig fields

    Returns:
        RunStatistics of the run
    """
    runner = KeepAliveRunner(KeepAliveConfig(urls=urls, **options))
    return await runner.run()
