"""
oEmbed Strategy (secondary)
===========================
GET https://api.instagram.com/oembed?url=<post url>

oEmbed never exposes the video file, only a thumbnail. A successful
result is therefore a single asset pointing at the thumbnail, with its
kind guessed from the URL path. When the upstream puts the post behind
a login/age gate it answers with an HTML page instead of JSON; that is
terminal for the whole resolution.
"""

import logging
from typing import Optional

from ..config import OEMBED_URL
from ..exceptions import AgeRestrictedError, StrategyFailed
from ..models import CanonicalPost, MediaAsset, MediaKind, PostKind, PostOwner
from ..utils import PostIdentifier, infer_post_kind
from .base import Strategy

logger = logging.getLogger("instapull.strategies.oembed")

HTML_PREFIXES = ("<!doctype html", "<html")


def is_html_document(body: str) -> bool:
    return body.lstrip().lower().startswith(HTML_PREFIXES)


class OEmbedStrategy(Strategy):
    """Public oEmbed endpoint, thumbnail only."""

    name = "oembed"

    async def attempt(self, target: PostIdentifier) -> CanonicalPost:
        response = await self._fetch(
            "GET",
            OEMBED_URL,
            headers={"accept": "application/json"},
            params={"url": target.url},
        )
        if not response.ok:
            raise StrategyFailed(f"oembed: HTTP {response.status_code}")

        if is_html_document(response.text):
            logger.debug("oEmbed answered with an HTML wall for %s", target.url)
            raise AgeRestrictedError(f"oEmbed returned HTML for {target.url}")

        try:
            data = response.json()
        except ValueError as e:
            raise StrategyFailed("oembed: response is not JSON") from e
        if not isinstance(data, dict):
            raise StrategyFailed("oembed: response is not an object")

        thumbnail = data.get("thumbnail_url")
        kind = MediaKind.VIDEO if target.is_video_path else MediaKind.IMAGE
        asset = MediaAsset.build(
            thumbnail,
            kind,
            thumbnail_url=thumbnail,
            quality_label=self._quality(data),
        )
        if asset is None:
            raise StrategyFailed("oembed: no thumbnail_url in response")

        payload_kind = PostKind.REEL if kind is MediaKind.VIDEO else PostKind.POST
        return CanonicalPost.resolved(
            [asset],
            infer_post_kind(payload_kind, target.kind_hint),
            owner=PostOwner(username=data.get("author_name") or None),
            strategy=self.name,
        )

    @staticmethod
    def _quality(data: dict) -> Optional[str]:
        width = data.get("thumbnail_width")
        height = data.get("thumbnail_height")
        if width and height:
            return f"{width}x{height}"
        return None
