"""
GraphQL Strategy (primary)
==========================
POST https://www.instagram.com/api/graphql?variables=...&doc_id=...&lsd=...

The endpoint answers anonymous requests only when the web client's
headers are present (X-IG-App-ID, X-FB-LSD, X-ASBD-ID, same-origin
fetch metadata). The response carries data.xdt_shortcode_media.
"""

import json
import logging
from typing import Dict

from ..config import ASBD_ID, BASE_URL, GRAPHQL_URL, IG_APP_ID
from ..exceptions import StrategyFailed
from ..models import CanonicalPost
from ..utils import PostIdentifier
from .base import Strategy
from .media_node import find_media_node, parse_media_node

logger = logging.getLogger("instapull.strategies.graphql")


class GraphQLStrategy(Strategy):
    """Private GraphQL query endpoint."""

    name = "graphql"

    def build_params(self, shortcode: str) -> Dict[str, str]:
        variables = {
            "shortcode": shortcode,
            "child_comment_count": 0,
            "fetch_comment_count": 0,
            "parent_comment_count": 0,
            "has_threaded_comments": False,
        }
        return {
            "variables": json.dumps(variables, separators=(",", ":")),
            "doc_id": self._settings.graphql_doc_id,
            "lsd": self._settings.lsd,
        }

    def build_headers(self) -> Dict[str, str]:
        return {
            "accept": "*/*",
            "content-type": "application/x-www-form-urlencoded",
            "x-ig-app-id": IG_APP_ID,
            "x-fb-lsd": self._settings.lsd,
            "x-asbd-id": ASBD_ID,
            "origin": BASE_URL,
            "referer": f"{BASE_URL}/",
            "sec-fetch-dest": "empty",
            "sec-fetch-mode": "cors",
            "sec-fetch-site": "same-origin",
        }

    async def attempt(self, target: PostIdentifier) -> CanonicalPost:
        response = await self._fetch(
            "POST",
            GRAPHQL_URL,
            headers=self.build_headers(),
            params=self.build_params(target.id),
        )
        if not response.ok:
            raise StrategyFailed(f"graphql: HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise StrategyFailed("graphql: response is not JSON") from e

        node = find_media_node(payload)
        if node is None:
            raise StrategyFailed("graphql: no xdt_shortcode_media in response")

        return parse_media_node(node, target.kind_hint, self.name)
