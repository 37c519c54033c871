"""
Resolution Orchestrator
=======================
Turns one post URL into one CanonicalPost.

    Init -> TryPrimary -> TrySecondary -> TryTertiary -> Resolved | Failed

    1. Identifier extraction (no network). Invalid URL -> InvalidUrlError.
    2. Privacy pre-check (best-effort). Private -> PrivateProfile.
    3. Strategies one at a time: GraphQL -> oEmbed -> HTML page.
       StrategyFailed        -> next strategy
       terminal error        -> stop (AgeRestrictedOrPrivate)
       success               -> stop, later strategies never run
    4. Nothing left -> AllMethodsFailed.

resolve() never raises for upstream or network conditions; every
outcome is a CanonicalPost.
"""

import asyncio
import logging
from enum import Enum
from typing import List, Optional, Sequence

from .config import Settings
from .exceptions import (
    AllMethodsFailedError,
    InstapullError,
    InvalidUrlError,
    PrivateProfileError,
    StrategyFailed,
)
from .models import CanonicalPost, PostKind
from .privacy import PrivacyChecker
from .strategies import Strategy, default_strategies
from .transport import HttpTransport, Transport
from .utils import extract_identifier

logger = logging.getLogger("instapull.resolver")


class ResolutionState(str, Enum):
    INIT = "Init"
    TRY_PRIMARY = "TryPrimary"
    TRY_SECONDARY = "TrySecondary"
    TRY_TERTIARY = "TryTertiary"
    RESOLVED = "Resolved"
    FAILED = "Failed"


STRATEGY_STATES = (
    ResolutionState.TRY_PRIMARY,
    ResolutionState.TRY_SECONDARY,
    ResolutionState.TRY_TERTIARY,
)


class Resolver:
    """
    Multi-strategy resolver.

    Holds only configuration and collaborators; resolve() keeps all
    per-call state local, so one Resolver serves concurrent calls.

    Usage:
        async with HttpTransport() as transport:
            resolver = Resolver(transport)
            post = await resolver.resolve("https://www.instagram.com/p/ABC123/")
    """

    def __init__(
        self,
        transport: Transport,
        settings: Optional[Settings] = None,
        strategies: Optional[Sequence[Strategy]] = None,
        privacy_checker: Optional[PrivacyChecker] = None,
    ):
        self._settings = settings or Settings()
        self._transport = transport
        self._strategies: List[Strategy] = list(
            strategies if strategies is not None
            else default_strategies(transport, self._settings)
        )
        if privacy_checker is None and self._settings.privacy_check:
            privacy_checker = PrivacyChecker(transport)
        self._privacy = privacy_checker

    @property
    def strategies(self) -> List[Strategy]:
        return list(self._strategies)

    async def resolve(self, url: str) -> CanonicalPost:
        """Resolve one URL. Never raises for upstream conditions."""
        state = ResolutionState.INIT
        logger.debug("[%s] %s", state.value, url)

        try:
            target = extract_identifier(url)
        except InvalidUrlError as e:
            logger.info("Invalid URL %r: %s", url, e)
            return CanonicalPost.failed(e.code.value)

        if self._privacy is not None and await self._privacy.is_private(url):
            logger.info("Profile behind %s is private, skipping extraction", url)
            return CanonicalPost.failed(PrivateProfileError.code.value, target.kind_hint)

        for index, strategy in enumerate(self._strategies):
            state = STRATEGY_STATES[min(index, len(STRATEGY_STATES) - 1)]
            logger.debug("[%s] %s -> %s", state.value, target.id, strategy.name)
            try:
                result = await strategy.attempt(target)
            except StrategyFailed as e:
                logger.debug("Strategy %s failed for %s: %s", strategy.name, target.id, e)
                continue
            except InstapullError as e:
                if not e.terminal:
                    logger.debug("Strategy %s failed for %s: %s", strategy.name, target.id, e)
                    continue
                logger.info("Strategy %s stopped resolution of %s: %s", strategy.name, target.id, e.code.value)
                return CanonicalPost.failed(e.code.value, target.kind_hint)
            except Exception as e:
                logger.debug("Strategy %s crashed for %s: %r", strategy.name, target.id, e)
                continue

            logger.info(
                "[%s] Post '%s' via %s (%d media)",
                ResolutionState.RESOLVED.value, target.id, strategy.name, len(result.media),
            )
            return result

        logger.warning("[%s] All strategies failed for '%s'", ResolutionState.FAILED.value, target.id)
        return CanonicalPost.failed(AllMethodsFailedError.code.value, target.kind_hint)

    async def resolve_many(self, urls: Sequence[str], concurrency: int = 5) -> List[CanonicalPost]:
        """
        Resolve independent URLs concurrently.

        Each URL runs its own sequential pipeline; results keep input order.
        """
        sem = asyncio.Semaphore(max(1, concurrency))

        async def task(url: str) -> CanonicalPost:
            async with sem:
                return await self.resolve(url)

        return list(await asyncio.gather(*(task(u) for u in urls)))


async def resolve(url: str, settings: Optional[Settings] = None) -> CanonicalPost:
    """
    One-shot resolution with a fresh transport.

    Usage:
        post = await instapull.resolve("https://www.instagram.com/reel/XYZ789/")
    """
    settings = settings or Settings()
    async with HttpTransport(settings) as transport:
        return await Resolver(transport, settings).resolve(url)
