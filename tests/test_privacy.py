"""
Tests for the best-effort privacy pre-check.
"""

import json

import pytest

from instapull.exceptions import TransportError
from instapull.privacy import (
    PrivacyChecker,
    detect_private,
    flag_from_shared_data,
    flag_from_structured_data,
)

PROFILE = "https://www.instagram.com/someuser/"


def ld_json_page(user: dict) -> str:
    return (
        "<html><head>"
        '<script type="application/ld+json">{broken</script>'
        f'<script type="application/ld+json">{json.dumps({"@type": "ProfilePage", "mainEntity": user})}</script>'
        "</head></html>"
    )


def shared_data_page(is_private: bool) -> str:
    shared = {"entry_data": {"ProfilePage": [{"graphql": {"user": {"username": "someuser", "is_private": is_private}}}]}}
    return f"<script>window._sharedData = {json.dumps(shared)};</script>"


class TestDetectPrivate:

    def test_structured_data_private(self):
        html = ld_json_page({"username": "someuser", "is_private": True})
        assert flag_from_structured_data(html, "someuser") is True
        assert detect_private(html, "someuser") is True

    def test_structured_data_public_beats_marker(self):
        # another account on the page is private; ours is not
        html = ld_json_page({"username": "SomeUser", "is_private": False}) + '"is_private":true'
        assert detect_private(html, "someuser") is False

    def test_structured_data_other_user_ignored(self):
        html = ld_json_page({"username": "otheruser", "is_private": True})
        assert flag_from_structured_data(html, "someuser") is None

    def test_shared_data(self):
        assert flag_from_shared_data(shared_data_page(True)) is True
        assert flag_from_shared_data(shared_data_page(False)) is False

    def test_shared_data_wrong_shape(self):
        html = '<script>window._sharedData = {"entry_data": {}};</script>'
        assert flag_from_shared_data(html) is None

    def test_marker(self):
        assert detect_private('{"user":{"is_private" : true}}', "someuser") is True

    def test_nothing_found_is_public(self):
        assert detect_private("<html><body>Sorry, this page isn't available.</body></html>", "someuser") is False


class TestPrivacyChecker:

    @pytest.mark.asyncio
    async def test_private_profile(self, fake):
        fake.add("GET", PROFILE, text=shared_data_page(True))
        assert await PrivacyChecker(fake).is_private(PROFILE) is True
        assert fake.calls[0].url == PROFILE

    @pytest.mark.asyncio
    async def test_public_profile(self, fake):
        fake.add("GET", PROFILE, text=shared_data_page(False))
        assert await PrivacyChecker(fake).is_private(PROFILE + "?hl=en") is False

    @pytest.mark.asyncio
    async def test_username_prefixed_post_probes_profile(self, fake):
        fake.add("GET", PROFILE, text=shared_data_page(True))
        assert await PrivacyChecker(fake).is_private("https://www.instagram.com/someuser/p/ABC123/") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [
        "https://www.instagram.com/p/ABC123/",
        "https://www.instagram.com/reel/XYZ789/",
        "https://www.instagram.com/stories/someuser/123/",
        "https://example.com/someuser/",
    ])
    async def test_no_username_no_request(self, fake, url):
        assert await PrivacyChecker(fake).is_private(url) is False
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_network_error_assumes_public(self, fake):
        fake.add("GET", PROFILE, exc=TransportError("timeout"))
        assert await PrivacyChecker(fake).is_private(PROFILE) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,text", [(404, '"is_private":true'), (200, "")])
    async def test_bad_response_assumes_public(self, fake, status, text):
        fake.add("GET", PROFILE, status=status, text=text)
        assert await PrivacyChecker(fake).is_private(PROFILE) is False
