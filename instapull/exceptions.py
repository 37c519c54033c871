"""
instapull Exception Classes
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error tags surfaced to callers in CanonicalPost.error."""
    INVALID_URL = "InvalidUrlError"
    PRIVATE_PROFILE = "PrivateProfile"
    AGE_RESTRICTED = "AgeRestrictedOrPrivate"
    ALL_METHODS_FAILED = "AllMethodsFailed"


# User-facing text per error tag (used by the HTTP layer)
USER_MESSAGES = {
    ErrorCode.INVALID_URL: "Invalid Instagram URL. Please provide a valid Instagram post, reel, or story URL.",
    ErrorCode.PRIVATE_PROFILE: "This Instagram profile is private and its posts cannot be downloaded.",
    ErrorCode.AGE_RESTRICTED: "This post may be private or age-restricted and cannot be downloaded.",
    ErrorCode.ALL_METHODS_FAILED: "Could not find any media for this URL. The post may have been deleted.",
}


class InstapullError(Exception):
    """Base instapull error class"""

    code: ErrorCode = ErrorCode.ALL_METHODS_FAILED
    terminal: bool = True

    def __init__(self, message: str = ""):
        self.message = message or self.code.value
        super().__init__(self.message)


class InvalidUrlError(InstapullError):
    """No post identifier could be extracted from the URL"""
    code = ErrorCode.INVALID_URL


class PrivateProfileError(InstapullError):
    """Privacy pre-check found a private profile"""
    code = ErrorCode.PRIVATE_PROFILE


class AgeRestrictedError(InstapullError):
    """Upstream answered with a login/age-gate wall"""
    code = ErrorCode.AGE_RESTRICTED


class AllMethodsFailedError(InstapullError):
    """Every strategy was exhausted without a result"""
    code = ErrorCode.ALL_METHODS_FAILED


class StrategyFailed(Exception):
    """Raised when a single strategy fails (triggers fallback)."""
    terminal = False


class TransportError(Exception):
    """Network-level failure (connection, TLS, timeout)."""
    pass
