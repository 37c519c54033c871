"""
Post-media node parsing shared by the GraphQL and HTML strategies.

Both surfaces expose the same "shortcode media" node:

    {
        "__typename": "XDTGraphSidecar",
        "is_video": false,
        "display_url": "https://...",
        "video_url": "https://...",            # video only
        "dimensions": {"height": 1350, "width": 1080},
        "edge_sidecar_to_children": {"edges": [{"node": {...}}, ...]},
        "owner": {"username": ..., "full_name": ..., "is_verified": ...},
        "edge_media_preview_like": {"count": 123}
    }
"""

from typing import Any, Dict, List, Optional

from ..exceptions import StrategyFailed
from ..models import CanonicalPost, MediaAsset, MediaKind, PostKind, PostOwner
from ..utils import infer_post_kind

MEDIA_NODE_KEYS = ("xdt_shortcode_media", "shortcode_media")

# Deepest nesting searched inside embedded page JSON
MAX_SEARCH_DEPTH = 32


def looks_like_media_node(node: Any) -> bool:
    return isinstance(node, dict) and (
        "display_url" in node
        or "video_url" in node
        or "edge_sidecar_to_children" in node
    )


def find_media_node(payload: Any) -> Optional[Dict]:
    """Media node of a GraphQL response: data.xdt_shortcode_media."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if not isinstance(data, dict):
        return None
    for key in MEDIA_NODE_KEYS:
        node = data.get(key)
        if looks_like_media_node(node):
            return node
    return None


def search_media_node(obj: Any, depth: int = 0) -> Optional[Dict]:
    """Depth-first search for a media node anywhere inside decoded JSON."""
    if depth > MAX_SEARCH_DEPTH:
        return None
    if isinstance(obj, dict):
        for key in MEDIA_NODE_KEYS:
            node = obj.get(key)
            if looks_like_media_node(node):
                return node
        children = obj.values()
    elif isinstance(obj, list):
        children = obj
    else:
        return None
    for child in children:
        if isinstance(child, (dict, list)):
            found = search_media_node(child, depth + 1)
            if found is not None:
                return found
    return None


def _quality(node: Dict) -> Optional[str]:
    dims = node.get("dimensions")
    if isinstance(dims, dict) and dims.get("width") and dims.get("height"):
        return f"{dims['width']}x{dims['height']}"
    return None


def _asset(node: Dict) -> Optional[MediaAsset]:
    """One asset from a node; None when its media URL is missing."""
    if node.get("is_video"):
        return MediaAsset.build(
            node.get("video_url"),
            MediaKind.VIDEO,
            thumbnail_url=node.get("display_url"),
            quality_label=_quality(node),
        )
    return MediaAsset.build(
        node.get("display_url"),
        MediaKind.IMAGE,
        quality_label=_quality(node),
    )


def _children(node: Dict) -> Optional[List[Dict]]:
    sidecar = node.get("edge_sidecar_to_children")
    if not isinstance(sidecar, dict):
        return None
    edges = sidecar.get("edges") or []
    return [
        edge["node"] for edge in edges
        if isinstance(edge, dict) and isinstance(edge.get("node"), dict)
    ]


def _owner(node: Dict) -> PostOwner:
    owner = node.get("owner")
    if not isinstance(owner, dict):
        owner = {}
    likes = node.get("edge_media_preview_like") or node.get("edge_liked_by") or {}
    like_count = likes.get("count") if isinstance(likes, dict) else None
    return PostOwner(
        username=owner.get("username"),
        full_name=owner.get("full_name"),
        like_count=like_count if isinstance(like_count, int) else None,
        is_verified=owner.get("is_verified") if isinstance(owner.get("is_verified"), bool) else None,
    )


def parse_media_node(
    node: Dict,
    kind_hint: Optional[PostKind],
    strategy: str,
) -> CanonicalPost:
    """
    Classify a media node into a CanonicalPost.

    video -> one video asset; carousel -> one asset per child in order;
    otherwise -> one image asset.

    Raises:
        StrategyFailed: no usable asset in the node
    """
    if not isinstance(node, dict):
        raise StrategyFailed("media node is not an object")

    if node.get("is_video"):
        payload_kind = PostKind.REEL
        assets = [_asset(node)]
    else:
        children = _children(node)
        if children is not None:
            payload_kind = PostKind.POST
            assets = [_asset(child) for child in children]
        else:
            payload_kind = PostKind.POST
            assets = [_asset(node)]

    media = [a for a in assets if a is not None]
    if not media:
        raise StrategyFailed("media node has no usable media URL")

    return CanonicalPost.resolved(
        media,
        infer_post_kind(payload_kind, kind_hint),
        owner=_owner(node),
        strategy=strategy,
    )
