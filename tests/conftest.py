"""Shared fixtures and fakes for the link-keepalive test suite.

No test launches a browser: the runner is exercised with ``FakeBrowser`` and
``FakeProber`` stand-ins, and HTTP traffic is mocked with ``respx``.
"""

from __future__ import annotations

from typing import Dict, List, Set, Union

import pytest

from link_keepalive.models import KeepAliveConfig


class SleepRecorder:
    """Async replacement for ``asyncio.sleep`` that only records delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeBrowser:
    """Mimics the parts of ``BrowserSession`` the runner relies on."""

    def __init__(self) -> None:
        self.entered = False
        self.exited = False
        self.alive = True
        self.restarts = 0
        self.browser_closes = 0

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.exited = True

    def is_alive(self) -> bool:
        return self.alive

    async def restart(self) -> None:
        self.restarts += 1
        self.alive = True

    async def close_browser(self) -> None:
        self.browser_closes += 1
        self.alive = False


class FakeProber:
    """Returns canned link sets (or raises canned errors) per target URL."""

    def __init__(self, results: Dict[str, Union[Set[str], Exception]]) -> None:
        self.results = results
        self.calls: List[str] = []

    async def probe(self, url: str) -> Set[str]:
        self.calls.append(url)
        result = self.results[url]
        if isinstance(result, Exception):
            raise result
        return set(result)


@pytest.fixture()
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture()
def make_config():
    """Build a KeepAliveConfig with instant inter-target delays."""

    def _make(**overrides) -> KeepAliveConfig:
        values = {"min_target_delay": 0.0, "max_target_delay": 0.0}
        values.update(overrides)
        return KeepAliveConfig(**values)

    return _make


@pytest.fixture()
def isolated_cwd(tmp_path, monkeypatch):
    """Run from an empty directory so no stray config or .env is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path
