"""Probe heuristics: selectors and URL patterns kept as versioned data.

The target site's markup changes independently of the verification logic, so
everything page-specific lives in a ``ProbeHeuristics`` table that can be
replaced with a JSON file without touching code.
"""

import json
import re
from pathlib import Path
from typing import List, Tuple, Union
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError

from link_keepalive.exceptions import ConfigurationError


class ProbeHeuristics(BaseModel):
    """Selectors and patterns used to discover direct download links."""
    version: str = "2024.1"
    click_selectors: List[str] = Field(default_factory=lambda: [
        'a[href*="/download/"]',
        'button:has-text("download")',
        'button:has-text("baixar")',
        'button:has-text("télécharger")',
        'button:has-text("descargar")',
        'button:has-text("scarica")',
        '[data-cy="download"]',
        '.download-button',
        '#download',
        '.btn-download',
        '[class*="download"]',
        '[id*="download"]',
        'a[class*="btn"]',
        'button[class*="btn"]',
    ])
    button_text_pattern: str = r"download|baixar|télécharger|descargar|scarica|get|obter"
    download_path_pattern: str = r"/download/"
    cdn_host_pattern: str = r"srv-store\d+\.gofile\.io"
    link_substrings: List[str] = Field(default_factory=lambda: [
        'srv-store',
        '/download/',
        'gofile.io/download',
    ])
    click_timeout: int = 5000  # milliseconds
    pre_click_delay: Tuple[float, float] = (0.2, 0.5)  # seconds
    scroll_range: Tuple[int, int] = (100, 400)  # pixels
    scroll_pause: Tuple[float, float] = (0.3, 0.8)  # seconds

    def matches_url(self, url: str) -> bool:
        """Return True if *url* looks like a direct download link."""
        if re.search(self.download_path_pattern, url):
            return True

        hostname = urlparse(url).hostname or ''
        if re.search(self.cdn_host_pattern, hostname):
            return True

        return any(fragment in url for fragment in self.link_substrings)

    def matches_button_text(self, text: str) -> bool:
        return re.search(self.button_text_pattern, text.lower()) is not None


DEFAULT_HEURISTICS = ProbeHeuristics()


def load_heuristics(path: Union[str, Path, None] = None) -> ProbeHeuristics:
    """
    Load a heuristics table from a JSON file.

    Args:
        path: JSON file path; the built-in table is returned when omitted

    Returns:
        ProbeHeuristics instance
    """
    if path is None:
        return DEFAULT_HEURISTICS

    heuristics_file = Path(path)
    if not heuristics_file.exists():
        raise ConfigurationError(f"Heuristics file not found: {heuristics_file}")

    try:
        with open(heuristics_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return ProbeHeuristics(**data)
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid heuristics file {heuristics_file}: {e}") from e
