"""
Utilities
=========
URL normalization and identifier extraction.

Supports:
    - instagram.com/p/ABC123/
    - instagram.com/reel/ABC123/ and /reels/ABC123/
    - instagram.com/tv/ABC123/
    - instagram.com/stories/username/3123456789/
    - instagram.com/username/p/ABC123/
    - instagr.am/p/ABC123/
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .config import BASE_URL, RESERVED_PATHS
from .exceptions import InvalidUrlError
from .models.common import PostKind


ALLOWED_HOSTS = ("instagram.com", "instagr.am")

_POST_PATH_RE = re.compile(
    r"^/(?:(?P<user>[A-Za-z0-9_.]+)/)?"
    r"(?P<segment>p|reels|reel|stories|tv)/"
    r"(?P<id>[A-Za-z0-9_-]+)"
    r"(?:/(?P<sub>[A-Za-z0-9_-]+))?"
)

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.]{1,30}$")

SEGMENT_KINDS = {
    "p": PostKind.POST,
    "reel": PostKind.REEL,
    "reels": PostKind.REEL,
    "tv": PostKind.REEL,
    "stories": PostKind.STORY,
}

# oEmbed guesses a video only for these; "reels" stays a kind hint
VIDEO_SEGMENTS = ("reel", "tv")


@dataclass(frozen=True)
class PostIdentifier:
    """
    Stable identity of a post, extracted from its URL.

    Fields:
        id: Opaque shortcode / story id
        kind_hint: Post kind implied by the path segment
        segment: Matched path segment (p, reel, reels, stories, tv)
        url: Normalized URL without tracking parameters
        username: Owner username when present in the path
    """
    id: str
    kind_hint: PostKind
    segment: str
    url: str
    username: Optional[str] = None

    @property
    def is_video_path(self) -> bool:
        return self.segment in VIDEO_SEGMENTS


def _parse(url: str):
    if not isinstance(url, str):
        return None
    url = url.strip()
    if not url:
        return None
    if "://" not in url:
        url = "https://" + url.lstrip("/")
    try:
        return urlparse(url)
    except ValueError:
        return None


def _host_allowed(host: str) -> bool:
    host = (host or "").lower().split(":")[0]
    return any(host == h or host.endswith("." + h) for h in ALLOWED_HOSTS)


def extract_identifier(url: str) -> PostIdentifier:
    """
    Extract the post identifier from an Instagram URL.

    Query string, fragment and any path segments after the identifier
    are ignored.

    Raises:
        InvalidUrlError: URL is not a post/reel/story URL
    """
    parsed = _parse(url)
    if parsed is None or parsed.scheme not in ("http", "https") or not _host_allowed(parsed.netloc):
        raise InvalidUrlError(f"Not an Instagram URL: {url!r}")

    match = _POST_PATH_RE.match(parsed.path or "/")
    if not match:
        raise InvalidUrlError(f"No post identifier in URL: {url!r}")

    segment = match.group("segment")
    ident = match.group("id")
    username = match.group("user")

    if segment == "stories":
        # /stories/<username>/<story_id>/
        if match.group("sub"):
            username, ident = ident, match.group("sub")
            normalized = f"{BASE_URL}/stories/{username}/{ident}/"
        else:
            normalized = f"{BASE_URL}/stories/{ident}/"
    else:
        normalized = f"{BASE_URL}/{segment}/{ident}/"

    return PostIdentifier(
        id=ident,
        kind_hint=SEGMENT_KINDS[segment],
        segment=segment,
        url=normalized,
        username=username,
    )


def normalize_url(url: str) -> str:
    """Canonical post URL without tracking parameters."""
    return extract_identifier(url).url


def url_kind_override(kind_hint: Optional[PostKind]) -> Optional[PostKind]:
    """URL-derived kind that beats the payload: reel and story only."""
    if kind_hint in (PostKind.REEL, PostKind.STORY):
        return kind_hint
    return None


def infer_post_kind(payload_kind: PostKind, kind_hint: Optional[PostKind]) -> PostKind:
    """Combine payload and URL classification; the URL wins when it says anything."""
    return url_kind_override(kind_hint) or payload_kind


def extract_username(url: str) -> Optional[str]:
    """
    Extract username from a profile-shaped URL.

    The first path segment is the username unless it is a reserved
    keyword (p, reel, stories, ...).

    Returns:
        str: Username or None
    """
    parsed = _parse(url)
    if parsed is None or not _host_allowed(parsed.netloc):
        return None
    parts = [p for p in (parsed.path or "").split("/") if p]
    if not parts:
        return None
    first = parts[0]
    if first.lower() in RESERVED_PATHS or not _USERNAME_RE.match(first):
        return None
    return first
