"""
Ranking strategies
==================

Interchangeable policies that order the tracks of one album.

Available strategies:
- BalancedRankingStrategy ("balanced"): acclaim rank, rating, score
- AcclaimRankingStrategy ("bea"): critic rating first
- PopularityRankingStrategy ("spotify"): streaming popularity first
- UserRankingStrategy ("user"): the listener's own order
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Type

from .acclaim import AcclaimRankingStrategy
from .balanced import BalancedRankingStrategy
from .base_strategy import RankingStrategy, RankingStrategyMetadata
from .enrichment import enrich_album_tracks
from .popularity import PopularityRankingStrategy
from .user import UserRankingStrategy

logger = logging.getLogger(__name__)

RANKING_STRATEGIES: Dict[str, Type[RankingStrategy]] = {
    "balanced": BalancedRankingStrategy,
    "bea": AcclaimRankingStrategy,
    "spotify": PopularityRankingStrategy,
    "user": UserRankingStrategy,
}

_ALIASES = {
    "acclaim": "bea",
    "popularity": "spotify",
}


def resolve_ranking_id(ranking_id: Optional[str]) -> str:
    """Map a ranking id or alias to a registered id; unknown ids become "balanced"."""
    key = (ranking_id or "balanced").strip().lower()
    key = _ALIASES.get(key, key)
    if key not in RANKING_STRATEGIES:
        logger.warning(f"Unknown ranking strategy '{ranking_id}', falling back to 'balanced'")
        return "balanced"
    return key


def create_ranking_strategy(ranking_id: Optional[str] = None, **options) -> RankingStrategy:
    """Instantiate a ranking strategy by id (defaulting to Balanced)."""
    return RANKING_STRATEGIES[resolve_ranking_id(ranking_id)](**options)


def list_ranking_strategies() -> List[RankingStrategyMetadata]:
    return [cls.get_metadata() for cls in RANKING_STRATEGIES.values()]


__all__ = [
    "RankingStrategy",
    "RankingStrategyMetadata",
    "BalancedRankingStrategy",
    "AcclaimRankingStrategy",
    "PopularityRankingStrategy",
    "UserRankingStrategy",
    "RANKING_STRATEGIES",
    "create_ranking_strategy",
    "enrich_album_tracks",
    "list_ranking_strategies",
    "resolve_ranking_id",
]
