"""
Common Models
=============
Shared types used across multiple model modules.
"""

from enum import Enum
from urllib.parse import urlparse


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class PostKind(str, Enum):
    POST = "post"
    STORY = "story"
    REEL = "reel"


def is_absolute_http_url(value) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not isinstance(value, str) or not value:
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
