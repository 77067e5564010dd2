"""Tests for header and fingerprint rotation."""

from __future__ import annotations

import random

from link_keepalive.headers import HeadersManager

CHROME_UA = HeadersManager.USER_AGENTS[0]
FIREFOX_UA = HeadersManager.USER_AGENTS[3]
EDGE_UA = HeadersManager.USER_AGENTS[-1]


def test_fixed_user_agent_wins() -> None:
    manager = HeadersManager(user_agent="custom-agent/1.0")
    assert manager.get_browser_headers()["User-Agent"] == "custom-agent/1.0"
    assert manager.get_download_headers()["User-Agent"] == "custom-agent/1.0"


def test_browser_headers_cached_until_reset() -> None:
    manager = HeadersManager(rng=random.Random(7))
    first = manager.get_browser_headers()

    assert manager.get_browser_headers() is first

    manager.reset_session()
    assert manager.get_browser_headers() is not first


def test_download_headers() -> None:
    headers = HeadersManager(referer="https://gofile.io/").get_download_headers()

    assert headers["Accept"] == "*/*"
    assert headers["Referer"] == "https://gofile.io/"
    assert headers["Origin"] == "https://gofile.io"
    assert headers["Cache-Control"] == "no-cache"
    assert "Range" not in headers


def test_sec_ch_ua_for_chromium_only() -> None:
    assert HeadersManager.get_sec_ch_ua(FIREFOX_UA) is None

    chrome = HeadersManager.get_sec_ch_ua(CHROME_UA)
    assert '"Google Chrome";v="122"' in chrome
    assert '"Not=A?Brand";v="120"' in chrome

    assert '"Microsoft Edge"' in HeadersManager.get_sec_ch_ua(EDGE_UA)


def test_chromium_browser_headers_include_client_hints() -> None:
    headers = HeadersManager(user_agent=CHROME_UA).get_browser_headers()

    assert headers["sec-ch-ua-platform"] == '"Windows"'
    assert headers["Sec-Fetch-Mode"] == "navigate"


def test_firefox_browser_headers_skip_client_hints() -> None:
    headers = HeadersManager(user_agent=FIREFOX_UA).get_browser_headers()
    assert "sec-ch-ua" not in headers


def test_platform_detection() -> None:
    assert HeadersManager.get_platform(HeadersManager.USER_AGENTS[5]) == '"macOS"'
    assert HeadersManager.get_platform(HeadersManager.USER_AGENTS[9]) == '"Linux"'
    assert HeadersManager.get_platform("curl/8.0") == '"Unknown"'


def test_viewport_is_a_copy() -> None:
    manager = HeadersManager(rng=random.Random(1))
    viewport = manager.get_viewport()
    viewport["width"] = 1

    assert {"width": 1, "height": viewport["height"]} not in HeadersManager.VIEWPORTS
