"""
Balanced ranking: explicit acclaim rank first, then rating, then score.

This is the default strategy. Each evidence field is resolved independently
(see enrichment.py), then tracks are ordered by:

1. explicit acclaim rank, ascending (missing sorts last)
2. rating, descending (includes the streaming-popularity fallback)
3. score, descending
4. original album order
"""
from __future__ import annotations

import math
from typing import List, Tuple

from curation.models import Album, CanonicalTrack, RankedTrack
from curation.ranking.base_strategy import RankingStrategy, RankingStrategyMetadata
from curation.ranking.enrichment import enrich_album_tracks


def _desc(value, missing: float) -> float:
    return -(value if value is not None else missing)


class BalancedRankingStrategy(RankingStrategy):
    metadata = RankingStrategyMetadata(
        id="balanced",
        name="Balanced (Default)",
        description="Prioritizes Acclaim Rank, then Rating, then Score.",
    )

    def rank(self, album: Album) -> List[RankedTrack]:
        tracks = enrich_album_tracks(album)
        ordered = sorted(tracks, key=self.sort_key)
        return self.number_tracks(ordered)

    def sort_key(self, track: CanonicalTrack) -> Tuple:
        acclaim_rank = track.acclaim_rank if track.acclaim_rank is not None else math.inf
        return (
            acclaim_rank,
            _desc(track.rating, -1),
            _desc(track.acclaim_score, 0),
            track.orig_index,
        )
