"""
Top-N selection
===============

Takes the top N ranked tracks of every album (no hit extraction), applies a
grouping strategy, then emits either one playlist or as many target-duration
playlists as needed, split sequentially without reordering.

Presets fix the ranking strategy, the track count and the title.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from curation.models import CanonicalTrack, Playlist, renumber_playlists, total_duration
from curation.playlist.config import GenerationConfig
from curation.playlist.ordering import group_tracks, grouping_suffix
from curation.ranking import RankingStrategy, create_ranking_strategy

from .base_strategy import AlgorithmMetadata, DistributionAlgorithm, GenerationResult

logger = logging.getLogger(__name__)


class TopNAlgorithm(DistributionAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-n",
        name="Top N Tracks",
        badge="TOP N",
        description="Picks the top N tracks of every album with the selected ranking.",
    )

    default_source: Dict[str, Any] = {
        "name": "Top N Algorithm",
        "type": "internal",
        "description": "Top N selection",
        "secure": True,
    }

    ranking_id: Optional[str] = None
    """Ranking strategy forced by a preset (None follows the config)."""

    fixed_track_count: Optional[int] = None
    preset_title: Optional[str] = None

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        ranking_strategy: Optional[RankingStrategy] = None,
        **overrides: Any,
    ):
        if ranking_strategy is None and self.ranking_id:
            ranking_strategy = create_ranking_strategy(self.ranking_id)
        super().__init__(config, ranking_strategy, **overrides)
        if self.fixed_track_count:
            self.config = replace(self.config, track_count=self.fixed_track_count)

    @property
    def track_count(self) -> int:
        return self.config.track_count

    def playlist_label(self) -> str:
        """Title stem: the preset title or "<prefix> Top N", plus any grouping suffix."""
        if self.preset_title:
            label = self.preset_title
        else:
            prefix = self.ranking_strategy.get_metadata().title_prefix
            label = f"{prefix} Top {self.track_count}".strip()
        suffix = grouping_suffix(self.config.grouping_strategy)
        return f"{label} {suffix}" if suffix else label

    def generate(self, albums: List[Any]) -> GenerationResult:
        ranked = self.rank_albums(albums)
        n = self.track_count

        selected: List[CanonicalTrack] = []
        for album in ranked:
            for i, track in enumerate(album.tracks[:n]):
                self.annotate(track, f"Top {i + 1} of {n}", round(1 - i * 0.1, 2))
                track.rank = i + 1
                selected.append(track)

        if not selected:
            return self.build_result([])

        ordered = group_tracks(selected, self.config.grouping_strategy, seed=self.config.seed)
        playlists = self.split_playlists(ordered)
        renumber_playlists(playlists)

        logger.debug(
            f"{self.metadata.id}: {len(selected)} tracks from {len(ranked)} albums "
            f"into {len(playlists)} playlists"
        )
        return self.build_result(playlists)

    def split_playlists(self, tracks: List[CanonicalTrack]) -> List[Playlist]:
        label = self.playlist_label()
        subtitle = f"Top {self.track_count} from each album"
        target = self.config.target_seconds
        mode = self.config.output_mode

        if mode == "single" or (mode == "auto" and total_duration(tracks) <= target):
            return [Playlist(id="p1", title=label, subtitle=subtitle, kind="selection", tracks=list(tracks))]

        chunks: List[List[CanonicalTrack]] = [[]]
        duration = 0.0
        for track in tracks:
            length = track.duration or 0
            if chunks[-1] and duration + length > target:
                chunks.append([])
                duration = 0.0
            chunks[-1].append(track)
            duration += length

        return [
            Playlist(
                id=f"p{i + 1}",
                title=f"{label} Vol. {i + 1}",
                subtitle=subtitle,
                kind="selection",
                tracks=chunk,
            )
            for i, chunk in enumerate(chunks)
        ]


class TopNAcclaimedAlgorithm(TopNAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-n-acclaimed",
        name="Top Acclaimed Tracks",
        badge="BEA",
        description="Pick the critically acclaimed tracks of every album.",
    )
    ranking_id = "bea"


class TopNPopularAlgorithm(TopNAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-n-popular",
        name="Top Tracks by Popularity",
        badge="SPOTIFY",
        description="Pick the most streamed tracks of every album.",
    )
    ranking_id = "spotify"


class TopNUserAlgorithm(TopNAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-n-user",
        name="Top Tracks by My Own Ranking",
        badge="USER",
        description="Build playlists from your personal track rankings.",
    )
    ranking_id = "user"


class Top3AcclaimedAlgorithm(TopNAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-3-acclaimed",
        name="Top 3 Acclaimed",
        badge="TOP 3",
        description="The critical selection: best rated tracks of every album.",
    )
    default_source = {
        "name": "Critics' Choice",
        "type": "bea",
        "description": "Top 3 by BEA Rating",
        "secure": True,
    }
    ranking_id = "bea"
    fixed_track_count = 3
    preset_title = "Critics' Choice"


class Top3PopularAlgorithm(TopNAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-3-popular",
        name="Crowd Favorites",
        badge="TOP 3",
        description="The 3 most popular tracks of every album.",
    )
    default_source = {
        "name": "Crowd Favorites",
        "type": "spotify",
        "description": "Top 3 by Spotify Popularity",
        "secure": True,
    }
    ranking_id = "spotify"
    fixed_track_count = 3
    preset_title = "Crowd Favorites"


class Top5AcclaimedAlgorithm(TopNAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-5-acclaimed",
        name="Deep Cuts",
        badge="TOP 5",
        description="The 5 most acclaimed tracks of every album, for the connoisseur.",
    )
    default_source = {
        "name": "Deep Cuts",
        "type": "bea",
        "description": "Top 5 by BEA Rating",
        "secure": True,
    }
    ranking_id = "bea"
    fixed_track_count = 5
    preset_title = "Deep Cuts"


class Top5PopularAlgorithm(TopNAlgorithm):
    metadata = AlgorithmMetadata(
        id="top-5-popular",
        name="Greatest Hits",
        badge="TOP 5",
        description="The 5 most popular tracks of every album, an extended selection for fans.",
    )
    default_source = {
        "name": "Greatest Hits",
        "type": "spotify",
        "description": "Top 5 by Spotify Popularity",
        "secure": True,
    }
    ranking_id = "spotify"
    fixed_track_count = 5
    preset_title = "Greatest Hits"
