"""Extraction of download links from rendered page HTML."""

import logging
from typing import Set

from lxml import etree, html

from link_keepalive.heuristics import ProbeHeuristics

logger = logging.getLogger(__name__)


def extract_download_links(html_content: str, base_url: str,
                           heuristics: ProbeHeuristics) -> Set[str]:
    """
    Collect anchor targets that look like direct download links.

    Args:
        html_content: Rendered HTML of the page
        base_url: URL the page was served from, used to resolve relative links
        heuristics: Patterns deciding which links qualify

    Returns:
        Set of absolute download URLs
    """
    links: Set[str] = set()

    if not html_content or not html_content.strip():
        return links

    try:
        tree = html.fromstring(html_content)
    except (etree.ParserError, ValueError) as e:
        logger.debug(f"Could not parse page content from {base_url}: {e}")
        return links

    tree.make_links_absolute(base_url, resolve_base_href=True,
                            handle_failures='discard')

    for href in tree.xpath('//a[@href]/@href'):
        href = href.strip()
        if href.startswith(('http://', 'https://')) and heuristics.matches_url(href):
            links.add(href)

    return links
