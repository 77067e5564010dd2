#!/usr/bin/env python3
"""
Example usage of the link-keepalive scriptable API.
"""

import asyncio

from link_keepalive import (
    Config, KeepAliveConfig, KeepAliveRunner, ConfigurationError,
    parse_targets, run_keepalive
)
from link_keepalive.utils import setup_logging


def example_parse_targets():
    """Validate a target list without touching the network."""
    print("Target Parsing Example")
    print("-" * 40)

    raw = "https://gofile.io/d/abc123\nnot-a-url\nhttps://gofile.io/d/def456"
    targets = parse_targets(raw)
    print(f"Valid targets: {len(targets)}")
    for url in targets:
        print(f"  {url}")

    try:
        parse_targets("\n\n")
    except ConfigurationError as e:
        print(f"Empty list rejected: {e}")


def example_custom_config():
    """Example with custom configuration."""
    print("Custom Configuration Example")
    print("-" * 40)

    config = Config(environ={'KEEPALIVE_URLS': 'https://gofile.io/d/abc123'})
    config.update(max_retries=5, page_timeout=30000, wait_time=3000, verbose=True)

    settings = config.keepalive
    print(f"- Max retries: {settings.max_retries}")
    print(f"- Timeout: {settings.page_timeout}ms")
    print(f"- Wait time: {settings.wait_time}ms")
    print(f"- Sample size: {settings.download_bytes} bytes")


async def example_full_run():
    """Full run against real pages (needs network and a Playwright browser)."""
    settings = KeepAliveConfig(
        urls="https://gofile.io/d/abc123",
        max_retries=2,
        verbose=True
    )
    runner = KeepAliveRunner(settings)
    stats = await runner.run()
    print(f"Verified {stats.successful_verifications} of {stats.links_found} links")


async def example_quick_run():
    """One-call helper."""
    stats = await run_keepalive("https://gofile.io/d/abc123", headless=True)
    print(f"Bytes transferred: {stats.bytes_transferred}")


def main():
    """Run examples."""
    setup_logging('INFO')

    print("=" * 50)
    print("link-keepalive Scriptable API Examples")
    print("=" * 50)
    print()

    example_parse_targets()
    print()

    example_custom_config()
    print()

    # Uncomment to run against real pages
    # asyncio.run(example_full_run())
    # asyncio.run(example_quick_run())

    print("\nEnvironment variables:")
    print("  KEEPALIVE_URLS   newline-separated page URLs (required)")
    print("  MAX_RETRIES      attempts per page (default: 3)")
    print("  PAGE_TIMEOUT     page load timeout in ms (default: 60000)")
    print("  WAIT_TIME        wait after each click in ms (default: 5000)")
    print("  HEADLESS         run the browser headless (default: true)")
    print("  VERBOSE          debug logging (default: false)")
    print("  DOWNLOAD_BYTES   sample size per link (default: 1048576)")


if __name__ == "__main__":
    main()
