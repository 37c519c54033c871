"""
instapull models: canonical result schema.
"""

from .base import InstaModel
from .common import MediaKind, PostKind, is_absolute_http_url
from .post import CanonicalPost, MediaAsset, PostOwner

__all__ = [
    "InstaModel",
    "MediaKind",
    "PostKind",
    "is_absolute_http_url",
    "CanonicalPost",
    "MediaAsset",
    "PostOwner",
]
