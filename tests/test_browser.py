"""Tests for the scoped browser session.

``async_playwright`` is replaced by a fake driver, so no Chromium is
launched; the fakes record launch options, contexts, routes and closes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError

from link_keepalive import browser as browser_module
from link_keepalive.browser import BrowserSession
from link_keepalive.exceptions import BrowserUnavailableError, ProbeError


class FakeContext:
    def __init__(self) -> None:
        self.options: Dict[str, Any] = {}
        self.init_scripts: List[str] = []
        self.routes: List[tuple] = []
        self.pages = 0

    async def add_init_script(self, script: str) -> None:
        self.init_scripts.append(script)

    async def route(self, pattern: str, handler) -> None:
        self.routes.append((pattern, handler))

    async def new_page(self):
        self.pages += 1
        return object()


class FakeChromiumBrowser:
    def __init__(self) -> None:
        self.connected = True
        self.closed = False
        self.context: Optional[FakeContext] = None

    async def new_context(self, **options) -> FakeContext:
        self.context = FakeContext()
        self.context.options = options
        return self.context

    def is_connected(self) -> bool:
        return self.connected

    async def close(self) -> None:
        self.closed = True
        self.connected = False


class FakeChromium:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.launches: List[Dict[str, Any]] = []
        self.browsers: List[FakeChromiumBrowser] = []

    async def launch(self, **options) -> FakeChromiumBrowser:
        self.launches.append(options)
        if self.error is not None:
            raise self.error
        browser = FakeChromiumBrowser()
        self.browsers.append(browser)
        return browser


class FakePlaywright:
    def __init__(self, chromium: FakeChromium) -> None:
        self.chromium = chromium
        self.stopped = False

    async def stop(self) -> None:
        self.stopped = True


class FakeDriverManager:
    def __init__(self, playwright: FakePlaywright) -> None:
        self.playwright = playwright
        self.starts = 0

    async def start(self) -> FakePlaywright:
        self.starts += 1
        return self.playwright


class FakeRequest:
    def __init__(self, resource_type: str) -> None:
        self.resource_type = resource_type


class FakeRoute:
    def __init__(self, resource_type: str) -> None:
        self.request = FakeRequest(resource_type)
        self.outcome: Optional[str] = None

    async def abort(self) -> None:
        self.outcome = 'aborted'

    async def continue_(self) -> None:
        self.outcome = 'continued'


@pytest.fixture()
def chromium() -> FakeChromium:
    return FakeChromium()


@pytest.fixture()
def driver(monkeypatch, chromium) -> FakePlaywright:
    playwright = FakePlaywright(chromium)
    manager = FakeDriverManager(playwright)
    monkeypatch.setattr(browser_module, 'async_playwright', lambda: manager)
    return playwright


class TestLaunch:
    async def test_launch_configures_stealth_context(self, make_config, chromium, driver) -> None:
        config = make_config(headless=False, chromium_executable='/usr/bin/chromium',
                             user_agent='agent/1.0')

        async with BrowserSession(config) as session:
            assert session.is_alive()
            context = chromium.browsers[0].context

        options = chromium.launches[0]
        assert options['headless'] is False
        assert options['executable_path'] == '/usr/bin/chromium'
        assert '--disable-blink-features=AutomationControlled' in options['args']
        assert context.options['user_agent'] == 'agent/1.0'
        assert context.options['ignore_https_errors'] is True
        assert 'Accept-Language' in context.options['extra_http_headers']
        assert context.init_scripts == [BrowserSession.STEALTH_SCRIPT]
        assert [pattern for pattern, _ in context.routes] == ['**/*']

    async def test_no_routes_when_blocking_disabled(self, make_config, chromium, driver) -> None:
        async with BrowserSession(make_config(block_resources=False)):
            context = chromium.browsers[0].context

        assert context.routes == []
        assert 'executable_path' not in chromium.launches[0]

    async def test_launch_failure_stops_driver(self, make_config, monkeypatch) -> None:
        chromium = FakeChromium(error=PlaywrightError("Executable doesn't exist"))
        playwright = FakePlaywright(chromium)
        monkeypatch.setattr(browser_module, 'async_playwright',
                            lambda: FakeDriverManager(playwright))

        session = BrowserSession(make_config())
        with pytest.raises(BrowserUnavailableError, match="Executable doesn't exist"):
            async with session:
                pytest.fail('context body must not run')

        assert playwright.stopped is True
        assert session.is_alive() is False


class TestTeardown:
    async def test_close_on_normal_exit(self, make_config, chromium, driver) -> None:
        async with BrowserSession(make_config()):
            pass

        assert chromium.browsers[0].closed is True
        assert driver.stopped is True

    async def test_close_when_body_raises(self, make_config, chromium, driver) -> None:
        with pytest.raises(RuntimeError):
            async with BrowserSession(make_config()):
                raise RuntimeError('run aborted')

        assert chromium.browsers[0].closed is True
        assert driver.stopped is True

    async def test_close_browser_keeps_driver_for_restart(
        self, make_config, chromium, driver
    ) -> None:
        async with BrowserSession(make_config()) as session:
            await session.close_browser()
            assert session.is_alive() is False
            assert driver.stopped is False

            await session.restart()
            assert session.is_alive() is True

        assert len(chromium.launches) == 2
        assert all(browser.closed for browser in chromium.browsers)

    async def test_disconnected_browser_is_not_alive(self, make_config, chromium, driver) -> None:
        async with BrowserSession(make_config()) as session:
            chromium.browsers[0].connected = False
            assert session.is_alive() is False

    async def test_new_page_on_dead_browser_raises(self, make_config, chromium, driver) -> None:
        async with BrowserSession(make_config()) as session:
            await session.close_browser()
            with pytest.raises(ProbeError, match='closed'):
                await session.new_page()


class TestResourceBlocking:
    @pytest.mark.parametrize('resource_type', ['image', 'media', 'font', 'stylesheet'])
    async def test_heavy_resources_aborted(self, make_config, resource_type) -> None:
        route = FakeRoute(resource_type)
        await BrowserSession(make_config())._route(route)
        assert route.outcome == 'aborted'

    @pytest.mark.parametrize('resource_type', ['document', 'script', 'xhr', 'fetch'])
    async def test_other_resources_continue(self, make_config, resource_type) -> None:
        route = FakeRoute(resource_type)
        await BrowserSession(make_config())._route(route)
        assert route.outcome == 'continued'
