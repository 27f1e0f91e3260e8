"""
S-Draft Original (full serpentine)
==================================

- P1/P2: Greatest Hits Vol. 1 and Vol. 2, always split
- P3..N: Deep Cuts, remainder tracks dealt album by album in a zigzag

1st, 3rd, 5th... albums start at the last deep cut and walk backward; the
others start at the first deep cut and walk forward. Durations are then
balanced by swapping.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List

from curation.models import renumber_playlists, total_duration
from curation.playlist.balancing import Balancer
from curation.playlist.distribution import distribute_serpentine, make_deep_cut_playlists
from curation.playlist.hits import extract_hits, split_hits_playlists

from .base_strategy import AlgorithmMetadata, DistributionAlgorithm, GenerationResult

logger = logging.getLogger(__name__)


class SerpentineAlgorithm(DistributionAlgorithm):
    metadata = AlgorithmMetadata(
        id="s-draft-original",
        name="S-Draft Serpentine",
        badge="CLASSIC",
        description="Classic algorithm: deals tracks in a zigzag across playlists for maximum variety.",
    )

    default_source: Dict[str, Any] = {
        "name": "S-Draft Original",
        "type": "internal",
        "description": "S-Draft curation with full serpentine",
        "secure": True,
    }

    def generate(self, albums: List[Any]) -> GenerationResult:
        ranked = self.rank_albums(albums)
        if not ranked:
            return self.build_result([])

        hits = extract_hits(ranked, self.annotate, reasons=("P1 Greatest Hit", "P2 Greatest Hit"))
        playlists = split_hits_playlists(hits)

        remaining_duration = total_duration(hits.remainder_tracks)
        deep_cut_count = max(1, math.ceil(remaining_duration / self.config.target_seconds))
        deep_cuts = make_deep_cut_playlists(deep_cut_count, subtitle="S-Draft Serpentine")
        playlists.extend(deep_cuts)
        renumber_playlists(playlists)

        for album in hits.remainder:
            distribute_serpentine(
                album.tracks,
                deep_cuts,
                reverse=album.leads_serpentine,
                placed=lambda track, idx: self.annotate(track, f"Serpentine: {deep_cuts[idx].id}", 0.5),
            )

        swaps = Balancer(
            self.config.target_seconds,
            self.config.flexibility_seconds,
            self.config.max_iterations,
            annotate=self.annotate,
        ).balance(playlists)
        logger.debug(f"{self.metadata.id}: {deep_cut_count} deep cuts, {swaps} balancing swaps")

        return self.build_result(playlists)
