"""
User-defined ranking: the listener's own track order.

Ranks come from the mapping passed to the constructor ({title: rank}) or,
failing that, from the album's userRanking list ([{trackTitle, userRank}]).
Titles are matched with normalize_user_title(). Tracks the user did not rank
sort after every ranked track, in album order. An album with no user ranking
at all keeps its original order.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from curation.models import Album, RankedTrack, as_number
from curation.ranking.base_strategy import RankingStrategy, RankingStrategyMetadata
from curation.ranking.enrichment import enrich_album_tracks
from curation.string_utils import normalize_user_title

logger = logging.getLogger(__name__)

UNRANKED = 999


class UserRankingStrategy(RankingStrategy):
    metadata = RankingStrategyMetadata(
        id="user",
        name="My Ranking",
        description="Your personal track order based on your preferences.",
        title_prefix="UGR",
    )

    def __init__(self, user_ranks: Optional[Mapping[str, int]] = None, **options):
        super().__init__(**options)
        self.user_ranks: Dict[str, int] = {}
        for title, rank in (user_ranks or {}).items():
            number = as_number(rank)
            key = normalize_user_title(title)
            if key and number is not None:
                self.user_ranks[key] = number

    def _rank_map(self, album: Album) -> Dict[str, int]:
        if self.user_ranks:
            return self.user_ranks
        ranks: Dict[str, int] = {}
        for entry in album.user_ranking or []:
            if not isinstance(entry, dict):
                continue
            key = normalize_user_title(entry.get("trackTitle") or entry.get("title"))
            number = as_number(entry.get("userRank"))
            if key and number is not None:
                ranks[key] = number
        return ranks

    def rank(self, album: Album) -> List[RankedTrack]:
        tracks = enrich_album_tracks(album)
        if not tracks:
            return []

        ranks = self._rank_map(album)
        if not ranks:
            logger.debug(f"No user ranking for album {album.id}; keeping album order")
            return self.number_tracks(tracks)

        for track in tracks:
            track.user_rank = ranks.get(normalize_user_title(track.title))

        ordered = sorted(
            tracks,
            key=lambda t: (t.user_rank if t.user_rank is not None else UNRANKED, t.orig_index),
        )
        unranked = sum(1 for t in tracks if t.user_rank is None)
        if unranked:
            logger.debug(f"Album {album.id}: {unranked} tracks without a user rank")
        return self.number_tracks(ordered)
