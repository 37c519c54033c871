"""
Post Models
===========
Canonical result of a resolution: the post, its media assets and owner.

Every strategy produces a CanonicalPost; callers never see upstream shapes.

Usage:
    post = CanonicalPost.resolved([asset], PostKind.POST, strategy="graphql")
    post.to_dict()
    # {"success": True, "media": [{"sourceUrl": ..., "kind": "image"}], ...}
"""

from typing import Callable, Iterable, Optional, Tuple

from pydantic import field_validator, model_validator

from .base import InstaModel
from .common import MediaKind, PostKind, is_absolute_http_url


class MediaAsset(InstaModel):
    """
    Single downloadable image or video.

    Fields:
        source_url: Absolute http(s) URL of the media file
        kind: image | video
        thumbnail_url: Preview image (mainly for video)
        quality_label: "<width>x<height>" when known
    """
    source_url: str
    kind: MediaKind
    thumbnail_url: Optional[str] = None
    quality_label: Optional[str] = None

    @field_validator("source_url")
    @classmethod
    def check_source_url(cls, v: str) -> str:
        if not is_absolute_http_url(v):
            raise ValueError(f"not an absolute http(s) URL: {v!r}")
        return v.strip()

    @field_validator("thumbnail_url")
    @classmethod
    def drop_bad_thumbnail(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not is_absolute_http_url(v):
            return None
        return v.strip()

    @classmethod
    def build(
        cls,
        source_url: Optional[str],
        kind: MediaKind,
        thumbnail_url: Optional[str] = None,
        quality_label: Optional[str] = None,
    ) -> Optional["MediaAsset"]:
        """Create an asset, or None when source_url is missing or not absolute."""
        if not is_absolute_http_url(source_url):
            return None
        return cls(
            source_url=source_url,
            kind=kind,
            thumbnail_url=thumbnail_url,
            quality_label=quality_label,
        )


class PostOwner(InstaModel):
    """Author metadata, copied opportunistically from the payload."""
    username: Optional[str] = None
    full_name: Optional[str] = None
    like_count: Optional[int] = None
    is_verified: Optional[bool] = None

    @property
    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (self.username, self.full_name, self.like_count, self.is_verified)
        )


class CanonicalPost(InstaModel):
    """
    Unified resolution result.

    Invariants:
        success=True  -> media non-empty, error is None
        success=False -> media empty, error set
    """
    success: bool
    media: Tuple[MediaAsset, ...] = ()
    post_kind: PostKind = PostKind.POST
    error: Optional[str] = None
    owner: Optional[PostOwner] = None
    strategy: Optional[str] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "CanonicalPost":
        if self.success:
            if not self.media:
                raise ValueError("successful result must carry at least one media asset")
            if self.error is not None:
                raise ValueError("successful result cannot carry an error")
        else:
            if not self.error:
                raise ValueError("failed result must carry an error")
            if self.media:
                raise ValueError("failed result cannot carry media")
        return self

    @classmethod
    def resolved(
        cls,
        media: Iterable[MediaAsset],
        post_kind: PostKind,
        owner: Optional[PostOwner] = None,
        strategy: Optional[str] = None,
    ) -> "CanonicalPost":
        if owner is not None and owner.is_empty:
            owner = None
        return cls(
            success=True,
            media=tuple(media),
            post_kind=post_kind,
            owner=owner,
            strategy=strategy,
        )

    @classmethod
    def failed(cls, error: str, post_kind: PostKind = PostKind.POST) -> "CanonicalPost":
        return cls(success=False, media=(), post_kind=post_kind, error=str(error))

    def with_rewritten_urls(self, rewrite: Callable[[str], str]) -> "CanonicalPost":
        """
        Return a copy whose asset URLs went through rewrite().

        Used by callers that relay media through their own host.
        """
        if not self.media:
            return self
        media = tuple(
            asset.model_copy(update={
                "source_url": rewrite(asset.source_url),
                "thumbnail_url": rewrite(asset.thumbnail_url) if asset.thumbnail_url else None,
            })
            for asset in self.media
        )
        return self.model_copy(update={"media": media})
