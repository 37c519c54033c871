"""
Extraction strategies, in priority order.
"""

from typing import List, Optional

from ..config import Settings
from ..transport import Transport
from .base import Strategy
from .graphql import GraphQLStrategy
from .html_page import HtmlPageStrategy
from .oembed import OEmbedStrategy

STRATEGY_ORDER = (GraphQLStrategy, OEmbedStrategy, HtmlPageStrategy)


def default_strategies(transport: Transport, settings: Optional[Settings] = None) -> List[Strategy]:
    """GraphQL -> oEmbed -> HTML page."""
    return [cls(transport, settings) for cls in STRATEGY_ORDER]


__all__ = [
    "Strategy",
    "GraphQLStrategy",
    "OEmbedStrategy",
    "HtmlPageStrategy",
    "STRATEGY_ORDER",
    "default_strategies",
]
