"""Realistic browser headers and fingerprints for avoiding automation detection."""

import random
import re
from typing import Dict, List, Optional


class HeadersManager:
    """Rotates user agents, languages and viewports across sessions."""

    USER_AGENTS = [
        # Chrome on Windows
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
        # Firefox on Windows
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:123.0) Gecko/20100101 Firefox/123.0',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:122.0) Gecko/20100101 Firefox/122.0',
        # Chrome on macOS
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36',
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36',
        # Safari on macOS
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.3 Safari/605.1.15',
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15',
        # Chrome on Linux
        'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36',
        'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36',
        # Firefox on Linux
        'Mozilla/5.0 (X11; Linux x86_64; rv:123.0) Gecko/20100101 Firefox/123.0',
        'Mozilla/5.0 (X11; Linux x86_64; rv:122.0) Gecko/20100101 Firefox/122.0',
        # Edge on Windows
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36 Edg/122.0.2365.52',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36 Edg/121.0.2277.83',
    ]

    ACCEPT_LANGUAGES = [
        'en-US,en;q=0.9',
        'en-US,en;q=0.9,es;q=0.8',
        'en-US,en;q=0.9,fr;q=0.8',
        'en-US,en;q=0.9,pt;q=0.8',
        'en-US,en;q=0.9,de;q=0.8',
        'en-GB,en;q=0.9,en-US;q=0.8',
        'pt-BR,pt;q=0.9,en;q=0.8',
        'es-ES,es;q=0.9,en;q=0.8',
        'fr-FR,fr;q=0.9,en;q=0.8',
        'de-DE,de;q=0.9,en;q=0.8',
    ]

    ACCEPT_ENCODINGS = [
        'gzip, deflate, br, zstd',
        'gzip, deflate, br',
        'gzip, deflate',
    ]

    SEC_FETCH_SITES = ['same-origin', 'same-site', 'cross-site', 'none']

    VIEWPORTS = [
        {'width': 1920, 'height': 1080},
        {'width': 1366, 'height': 768},
        {'width': 1536, 'height': 864},
        {'width': 1440, 'height': 900},
        {'width': 1280, 'height': 720},
        {'width': 1600, 'height': 900},
        {'width': 2560, 'height': 1440},
    ]

    def __init__(self, user_agent: Optional[str] = None,
                 referer: str = 'https://gofile.io/', rng: Optional[random.Random] = None):
        """
        Initialize headers manager.

        Args:
            user_agent: Fixed user agent overriding the rotation
            referer: Site sent as Referer/Origin on download requests
            rng: Random source, mainly for reproducible tests
        """
        self.user_agent = user_agent
        self.referer = referer
        self._rng = rng or random.Random()
        self._session_headers: Optional[Dict[str, str]] = None

    def _choice(self, options: List):
        return self._rng.choice(options)

    def pick_user_agent(self) -> str:
        return self.user_agent or self._choice(self.USER_AGENTS)

    def get_browser_headers(self) -> Dict[str, str]:
        """
        Get realistic headers for a browser context.

        Headers are cached so every request in a session looks consistent
        until ``reset_session`` is called.
        """
        if self._session_headers:
            return self._session_headers

        user_agent = self.pick_user_agent()
        headers = {
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,'
                      'image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7',
            'Accept-Language': self._choice(self.ACCEPT_LANGUAGES),
            'Accept-Encoding': self._choice(self.ACCEPT_ENCODINGS),
            'Connection': 'keep-alive',
            'Upgrade-Insecure-Requests': '1',
        }

        # Roughly 30% of real users send DNT
        if self._rng.random() > 0.7:
            headers['DNT'] = '1'

        sec_ch_ua = self.get_sec_ch_ua(user_agent)
        if sec_ch_ua:
            headers['sec-ch-ua'] = sec_ch_ua
            headers['sec-ch-ua-mobile'] = '?0'
            headers['sec-ch-ua-platform'] = self.get_platform(user_agent)
            headers['Sec-Fetch-Site'] = self._choice(self.SEC_FETCH_SITES)
            headers['Sec-Fetch-Mode'] = 'navigate'
            headers['Sec-Fetch-User'] = '?1'
            headers['Sec-Fetch-Dest'] = 'document'

        self._session_headers = headers
        return headers

    def get_download_headers(self) -> Dict[str, str]:
        """Get headers for a direct download request; rotated on every call."""
        origin = self.referer.rstrip('/')
        return {
            'User-Agent': self.pick_user_agent(),
            'Accept': '*/*',
            'Accept-Language': self._choice(self.ACCEPT_LANGUAGES),
            'Accept-Encoding': self._choice(self.ACCEPT_ENCODINGS),
            'Connection': 'keep-alive',
            'Referer': self.referer,
            'Origin': origin,
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        }

    @staticmethod
    def get_sec_ch_ua(user_agent: str) -> Optional[str]:
        """Build the sec-ch-ua header for Chromium-based agents."""
        match = re.search(r'Chrome/(\d+)', user_agent)
        if not match:
            return None

        version = int(match.group(1))
        brand_version = version // 8 * 8

        if 'Edg' in user_agent:
            brand = 'Microsoft Edge'
        else:
            brand = 'Google Chrome'
        return f'"{brand}";v="{version}", "Chromium";v="{version}", "Not=A?Brand";v="{brand_version}"'

    @staticmethod
    def get_platform(user_agent: str) -> str:
        if 'Windows' in user_agent:
            return '"Windows"'
        if 'Macintosh' in user_agent:
            return '"macOS"'
        if 'Linux' in user_agent:
            return '"Linux"'
        return '"Unknown"'

    def get_viewport(self) -> Dict[str, int]:
        return dict(self._choice(self.VIEWPORTS))

    def reset_session(self):
        """Forget cached browser headers so the next session rotates."""
        self._session_headers = None
