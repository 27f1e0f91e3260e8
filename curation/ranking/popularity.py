"""
Popularity ranking (streaming popularity, 0-100).

Reuses the balanced enrichment, then orders by popularity, falling back to
rating and original order.
"""
from __future__ import annotations

from typing import Tuple

from curation.models import CanonicalTrack
from curation.ranking.balanced import BalancedRankingStrategy, _desc
from curation.ranking.base_strategy import RankingStrategyMetadata


class PopularityRankingStrategy(BalancedRankingStrategy):
    metadata = RankingStrategyMetadata(
        id="spotify",
        name="Spotify Popularity",
        description="Prioritizes Spotify Popularity (0-100).",
        title_prefix="SPFY",
    )

    def sort_key(self, track: CanonicalTrack) -> Tuple:
        return (
            _desc(track.spotify_popularity, -1),
            _desc(track.rating, -1),
            track.orig_index,
        )
