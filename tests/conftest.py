"""
Pytest fixtures for instapull tests.

FakeTransport stands in for the network: routes are matched by method
and URL prefix, every call is recorded, unrouted calls fail like a
dropped connection.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pytest

from instapull.exceptions import TransportError
from instapull.transport import TransportResponse

GRAPHQL = "https://www.instagram.com/api/graphql"
OEMBED = "https://api.instagram.com/oembed"


@dataclass
class Call:
    method: str
    url: str
    headers: Optional[Dict[str, str]] = None
    params: Optional[Dict[str, str]] = None
    data: Optional[Dict[str, str]] = None


class FakeTransport:
    def __init__(self):
        self.routes: List[tuple] = []
        self.calls: List[Call] = []
        self.closed = False

    def add(
        self,
        method: str,
        prefix: str,
        status: int = 200,
        text: Optional[str] = None,
        json_body: Any = None,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        exc: Optional[Exception] = None,
    ) -> "FakeTransport":
        if json_body is not None:
            text = json.dumps(json_body)
        response = TransportResponse(
            status_code=status,
            text=text or "",
            headers=headers or {},
            content=content or (text or "").encode(),
        )
        self.routes.append((method.upper(), prefix, response, exc))
        return self

    async def request(self, method, url, *, headers=None, params=None, data=None):
        self.calls.append(Call(method.upper(), url, headers, params, data))
        for route_method, prefix, response, exc in self.routes:
            if route_method == method.upper() and url.startswith(prefix):
                if exc is not None:
                    raise exc
                return response
        raise TransportError(f"no route for {method} {url}")

    def count(self, prefix: str) -> int:
        return sum(1 for c in self.calls if c.url.startswith(prefix))

    async def close(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()


@pytest.fixture
def fake():
    return FakeTransport()


# ─── Sample Data ─────────────────────────────────────────────

@pytest.fixture
def image_node():
    """Single-image shortcode media node."""
    return {
        "__typename": "XDTGraphImage",
        "id": "3300000000000000001",
        "shortcode": "ABC123",
        "is_video": False,
        "display_url": "https://scontent.cdninstagram.com/v/t51/abc123_1080.jpg",
        "dimensions": {"height": 1350, "width": 1080},
        "owner": {
            "id": "123456789",
            "username": "testuser",
            "full_name": "Test User",
            "is_verified": True,
        },
        "edge_media_preview_like": {"count": 500},
    }


@pytest.fixture
def video_node():
    """Reel / video shortcode media node."""
    return {
        "__typename": "XDTGraphVideo",
        "shortcode": "XYZ789",
        "is_video": True,
        "display_url": "https://scontent.cdninstagram.com/v/t51/xyz789_cover.jpg",
        "video_url": "https://scontent.cdninstagram.com/o1/v/t16/xyz789.mp4",
        "dimensions": {"height": 1920, "width": 1080},
        "owner": {"username": "reeluser"},
    }


@pytest.fixture
def carousel_node():
    """Carousel with image, video, image children."""
    return {
        "__typename": "XDTGraphSidecar",
        "shortcode": "CAR0US3L",
        "is_video": False,
        "display_url": "https://scontent.cdninstagram.com/v/t51/cover.jpg",
        "edge_sidecar_to_children": {
            "edges": [
                {"node": {
                    "is_video": False,
                    "display_url": "https://scontent.cdninstagram.com/v/t51/child1.jpg",
                }},
                {"node": {
                    "is_video": True,
                    "display_url": "https://scontent.cdninstagram.com/v/t51/child2_cover.jpg",
                    "video_url": "https://scontent.cdninstagram.com/o1/v/t16/child2.mp4",
                }},
                {"node": {
                    "is_video": False,
                    "display_url": "https://scontent.cdninstagram.com/v/t51/child3.jpg",
                }},
            ]
        },
        "owner": {"username": "carouseluser", "full_name": "Carousel User", "is_verified": False},
        "edge_media_preview_like": {"count": 42},
    }


def graphql_body(node):
    return {"data": {"xdt_shortcode_media": node}, "status": "ok"}


@pytest.fixture
def oembed_body():
    return {
        "version": "1.0",
        "author_name": "reeluser",
        "provider_name": "Instagram",
        "thumbnail_url": "https://scontent.cdninstagram.com/v/t51/xyz789_thumb.jpg",
        "thumbnail_width": 640,
        "thumbnail_height": 1136,
    }


LOGIN_WALL_HTML = (
    "<!DOCTYPE html><html lang=\"en\"><head><title>Login • Instagram</title></head>"
    "<body><div id=\"react-root\"></div></body></html>"
)


def post_page_html(node) -> str:
    """Post page carrying the node inside a nested application/json block."""
    blob = {
        "require": [[
            "ScheduledServerJS", "handle", None,
            [{"__bbox": {"require": [[
                "RelayPrefetchedStreamCache", "next", [],
                ["adp_PolarisPostRootQueryRelayPreloader", {
                    "__bbox": {"result": {"data": {"xdt_shortcode_media": node}}}
                }],
            ]]}}],
        ]]
    }
    return (
        "<!DOCTYPE html><html><head>"
        '<script type="application/json" data-sjs>{not valid json</script>'
        '<script type="application/json" data-sjs>{"require": []}</script>'
        f'<script type="application/json" data-content-len="9" data-sjs>{json.dumps(blob)}</script>'
        "</head><body></body></html>"
    )
