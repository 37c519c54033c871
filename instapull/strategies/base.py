"""
Strategy base class.

A strategy is one self-contained extraction technique against one
upstream surface. attempt() either returns a successful CanonicalPost
or raises:

    StrategyFailed        recoverable, the resolver moves on
    InstapullError        terminal, the resolver stops (e.g. AgeRestrictedError)
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..config import Settings
from ..exceptions import StrategyFailed, TransportError
from ..models import CanonicalPost
from ..transport import Transport, TransportResponse
from ..utils import PostIdentifier

logger = logging.getLogger("instapull.strategies")


class Strategy(ABC):
    """One upstream surface, one attempt per resolution."""

    name: str = "base"

    def __init__(self, transport: Transport, settings: Optional[Settings] = None):
        self._transport = transport
        self._settings = settings or Settings()

    @abstractmethod
    async def attempt(self, target: PostIdentifier) -> CanonicalPost:
        """Resolve target or raise StrategyFailed / a terminal InstapullError."""

    async def _fetch(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """Single upstream call; network errors become StrategyFailed."""
        try:
            return await self._transport.request(
                method, url, headers=headers, params=params, data=data,
            )
        except TransportError as e:
            raise StrategyFailed(f"{self.name}: {e}") from e

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
