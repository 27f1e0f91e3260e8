"""
Legacy Round-Robin
==================

Output:
- P1: Greatest Hits Vol. 1 (rank #1 from each album)
- P2: Greatest Hits Vol. 2 (rank #2 from each album)
- P3..N: Deep Cuts, album buckets dealt round-robin

The Greatest Hits playlists are always split. With backfill_hits enabled
they are topped up to the target duration from the remaining pool,
preferring albums they do not yet contain. Durations are then balanced by
swapping.
"""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from typing import Any, Dict, List

from curation.models import CanonicalTrack, Playlist, renumber_playlists, total_duration
from curation.playlist.balancing import Balancer
from curation.playlist.distribution import distribute_round_robin, make_deep_cut_playlists
from curation.playlist.hits import extract_hits, split_hits_playlists
from curation.playlist.trimming import rank_key

from .base_strategy import AlgorithmMetadata, DistributionAlgorithm, GenerationResult

logger = logging.getLogger(__name__)


class LegacyRoundRobinAlgorithm(DistributionAlgorithm):
    metadata = AlgorithmMetadata(
        id="legacy-roundrobin",
        name="Legacy Round-Robin",
        badge="LEGACY",
        description="Simple mode: deals tracks in rotation. Stable and tested, good for comparison.",
    )

    default_source: Dict[str, Any] = {
        "name": "Hybrid Curation",
        "type": "internal",
        "description": "Hybrid track curation",
        "secure": True,
    }

    def generate(self, albums: List[Any]) -> GenerationResult:
        ranked = self.rank_albums(albums)
        if not ranked:
            return self.build_result([])

        hits = extract_hits(ranked, self.annotate, reasons=("P1 Hit", "P2 Hit"))
        playlists = split_hits_playlists(hits)

        remaining = sorted(hits.remainder_tracks, key=rank_key)
        if self.config.backfill_hits:
            for playlist in playlists:
                self.fill_playlist(playlist, remaining)

        target = self.config.target_seconds
        deep_cut_count = max(1, math.ceil(total_duration(remaining) / target))
        deep_cuts = make_deep_cut_playlists(deep_cut_count, subtitle="Round-robin")
        playlists.extend(deep_cuts)
        renumber_playlists(playlists)

        buckets: "OrderedDict[str, List[CanonicalTrack]]" = OrderedDict()
        for track in remaining:
            buckets.setdefault(track.origin_album_id or f"__noalbum__:{track.id}", []).append(track)

        distribute_round_robin(
            list(buckets.values()),
            deep_cuts,
            placed=lambda track, idx: self.annotate(track, f"Round-robin: {deep_cuts[idx].id}", 0.5),
        )

        swaps = Balancer(
            self.config.target_seconds,
            self.config.flexibility_seconds,
            self.config.max_iterations,
            annotate=self.annotate,
        ).balance(playlists)
        logger.debug(f"{self.metadata.id}: {len(playlists)} playlists, {swaps} balancing swaps")

        return self.build_result(playlists)

    def fill_playlist(self, playlist: Playlist, remaining: List[CanonicalTrack]) -> None:
        """Top up playlist to the target from remaining, preferring new albums."""
        duration = playlist.duration
        while duration < self.config.target_seconds and remaining:
            present = set(playlist.album_ids())
            idx = next(
                (i for i, track in enumerate(remaining) if track.origin_album_id not in present),
                0,
            )
            candidate = remaining.pop(idx)
            self.annotate(candidate, "fill:worse-ranked", 0.35)
            playlist.tracks.append(candidate)
            duration += candidate.duration or 0
