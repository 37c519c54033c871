"""
HTML-Embedded-JSON Strategy (tertiary, last resort)
===================================================
Fetch the public post page and scan its embedded JSON blocks for a
post-media node.

Candidate blocks, in page order:
    1. <script type="application/json" ...>{...}</script>
    2. window._sharedData = {...};
    3. window.__additionalDataLoaded('...', {...});
"""

import json
import logging
import re
from typing import Iterator, Optional

from ..exceptions import StrategyFailed
from ..models import CanonicalPost
from ..utils import PostIdentifier
from .base import Strategy
from .media_node import parse_media_node, search_media_node

logger = logging.getLogger("instapull.strategies.html")

JSON_SCRIPT_RE = re.compile(
    r'<script[^>]+type="application/json"[^>]*>(.*?)</script>',
    re.DOTALL,
)
SHARED_DATA_RE = re.compile(
    r'window\._sharedData\s*=\s*({.+?})\s*;\s*</script>',
    re.DOTALL,
)
ADDITIONAL_DATA_RE = re.compile(
    r'window\.__additionalDataLoaded\s*\(\s*[\'"].*?[\'"]\s*,\s*({.+?})\s*\)\s*;',
    re.DOTALL,
)


def iter_script_blocks(html: str) -> Iterator[str]:
    """Raw text of every candidate JSON block in the page."""
    for pattern in (JSON_SCRIPT_RE, SHARED_DATA_RE, ADDITIONAL_DATA_RE):
        for match in pattern.finditer(html):
            yield match.group(1)


def find_embedded_media_node(html: str) -> Optional[dict]:
    """First media node found in any parseable block; broken blocks are skipped."""
    for block in iter_script_blocks(html):
        try:
            data = json.loads(block)
        except ValueError:
            continue
        node = search_media_node(data)
        if node is not None:
            return node
    return None


class HtmlPageStrategy(Strategy):
    """Scrape the post page for embedded JSON."""

    name = "html"

    async def attempt(self, target: PostIdentifier) -> CanonicalPost:
        response = await self._fetch(
            "GET",
            target.url,
            headers={
                "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
                "sec-fetch-dest": "document",
                "sec-fetch-mode": "navigate",
                "sec-fetch-site": "none",
                "upgrade-insecure-requests": "1",
            },
        )
        if not response.ok:
            raise StrategyFailed(f"html: HTTP {response.status_code}")

        node = find_embedded_media_node(response.text or "")
        if node is None:
            raise StrategyFailed("html: no post data in any script block")

        return parse_media_node(node, target.kind_hint, self.name)
