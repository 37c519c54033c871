"""
instapull: resolve Instagram post URLs into downloadable media.

Usage:
    import asyncio
    import instapull

    post = asyncio.run(instapull.resolve("https://www.instagram.com/p/ABC123/"))
    if post.success:
        for asset in post.media:
            print(asset.kind, asset.source_url)
"""

__version__ = "1.0.0"

from .config import Settings
from .exceptions import (
    AgeRestrictedError,
    AllMethodsFailedError,
    ErrorCode,
    InstapullError,
    InvalidUrlError,
    PrivateProfileError,
    StrategyFailed,
    TransportError,
)
from .log_config import LogConfig
from .models import CanonicalPost, MediaAsset, MediaKind, PostKind, PostOwner
from .privacy import PrivacyChecker
from .resolver import ResolutionState, Resolver, resolve
from .transport import HttpTransport, TransportResponse
from .utils import PostIdentifier, extract_identifier, normalize_url

__all__ = [
    "__version__",
    "Settings",
    "AgeRestrictedError",
    "AllMethodsFailedError",
    "ErrorCode",
    "InstapullError",
    "InvalidUrlError",
    "PrivateProfileError",
    "StrategyFailed",
    "TransportError",
    "LogConfig",
    "CanonicalPost",
    "MediaAsset",
    "MediaKind",
    "PostKind",
    "PostOwner",
    "PrivacyChecker",
    "ResolutionState",
    "Resolver",
    "resolve",
    "HttpTransport",
    "TransportResponse",
    "PostIdentifier",
    "extract_identifier",
    "normalize_url",
]
