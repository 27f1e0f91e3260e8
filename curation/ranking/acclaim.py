"""
Acclaim ranking (BestEverAlbums-style critic ratings).

Reuses the balanced enrichment, then orders by rating alone, falling back to
explicit acclaim rank, streaming popularity and original order.
"""
from __future__ import annotations

import math
from typing import Tuple

from curation.models import CanonicalTrack
from curation.ranking.balanced import BalancedRankingStrategy, _desc
from curation.ranking.base_strategy import RankingStrategyMetadata


class AcclaimRankingStrategy(BalancedRankingStrategy):
    metadata = RankingStrategyMetadata(
        id="bea",
        name="BEA Rating",
        description="Prioritizes BestEverAlbums Ratings.",
        title_prefix="BEA",
    )

    def sort_key(self, track: CanonicalTrack) -> Tuple:
        acclaim_rank = track.acclaim_rank if track.acclaim_rank is not None else math.inf
        return (
            _desc(track.rating, -1),
            acclaim_rank,
            _desc(track.spotify_popularity, -1),
            track.orig_index,
        )
