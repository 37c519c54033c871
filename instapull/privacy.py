"""
Privacy Pre-check
=================
Best-effort probe of a profile page before extraction.

Only profile-shaped URLs (instagram.com/<username>/...) carry a
username; post/reel/story URLs do not, and are assumed public. Any
fetch or parse problem also means "assume public": this check may
short-circuit a resolution only on a positive private signal.
"""

import json
import logging
import re
from typing import Any, Optional

from .config import PROFILE_URL
from .exceptions import TransportError
from .transport import Transport
from .utils import extract_username

logger = logging.getLogger("instapull.privacy")

STRUCTURED_SCRIPT_RE = re.compile(
    r'<script[^>]+type="application/(?:ld\+)?json"[^>]*>(.*?)</script>',
    re.DOTALL,
)
SHARED_DATA_RE = re.compile(
    r'window\._sharedData\s*=\s*({.+?})\s*;\s*</script>',
    re.DOTALL,
)
PRIVATE_MARKER_RE = re.compile(r'"is_private"\s*:\s*true')

MAX_SEARCH_DEPTH = 32


def _find_flag(obj: Any, username: str, depth: int = 0) -> Optional[bool]:
    """is_private of the user object whose username matches."""
    if depth > MAX_SEARCH_DEPTH:
        return None
    if isinstance(obj, dict):
        flag = obj.get("is_private")
        name = obj.get("username")
        if isinstance(flag, bool) and isinstance(name, str) and name.lower() == username.lower():
            return flag
        children = obj.values()
    elif isinstance(obj, list):
        children = obj
    else:
        return None
    for child in children:
        if isinstance(child, (dict, list)):
            found = _find_flag(child, username, depth + 1)
            if found is not None:
                return found
    return None


def flag_from_structured_data(html: str, username: str) -> Optional[bool]:
    for match in STRUCTURED_SCRIPT_RE.finditer(html):
        try:
            data = json.loads(match.group(1))
        except ValueError:
            continue
        flag = _find_flag(data, username)
        if flag is not None:
            return flag
    return None


def flag_from_shared_data(html: str) -> Optional[bool]:
    match = SHARED_DATA_RE.search(html)
    if not match:
        return None
    try:
        shared = json.loads(match.group(1))
        flag = shared["entry_data"]["ProfilePage"][0]["graphql"]["user"]["is_private"]
    except (ValueError, KeyError, IndexError, TypeError):
        return None
    return flag if isinstance(flag, bool) else None


def flag_from_marker(html: str) -> bool:
    return PRIVATE_MARKER_RE.search(html) is not None


def detect_private(html: str, username: str) -> bool:
    """Structured data, then legacy _sharedData, then raw marker search."""
    flag = flag_from_structured_data(html, username)
    if flag is None:
        flag = flag_from_shared_data(html)
    if flag is None:
        flag = flag_from_marker(html)
    return flag


class PrivacyChecker:
    """
    Usage:
        checker = PrivacyChecker(transport)
        if await checker.is_private(url):
            ...
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    async def is_private(self, url: str) -> bool:
        username = extract_username(url)
        if not username:
            return False

        profile_url = PROFILE_URL.format(username=username)
        try:
            response = await self._transport.request(
                "GET", profile_url, headers={"accept": "text/html"},
            )
        except TransportError as e:
            logger.debug("Privacy check for @%s failed: %s", username, e)
            return False

        if not response.ok or not response.text:
            logger.debug("Privacy check for @%s: HTTP %s", username, response.status_code)
            return False

        private = detect_private(response.text, username)
        logger.debug("Privacy check for @%s: private=%s", username, private)
        return private
