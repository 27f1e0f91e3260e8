"""
Balanced Cascade (recommended)
==============================

1. Greatest Hits: one playlist when rank #1 + #2 fit under greatest_hits_max,
   otherwise Vol. 1 / Vol. 2.
2. Serpentine pass: numDC = max(1, smallest album track count - 2) deep cuts;
   ranks #3..#(numDC + 2) are dealt in a zigzag, 1st/3rd/... albums first.
3. Cascade pass: tracks beyond that rank are grouped by rank and each group
   goes to one deep cut, ping-ponging from the last one.
4. Adjacent deep cuts whose combined duration is under deep_cuts_max are
   merged front to back ("Deep Cuts Vol. 1-2").
5. Deep cuts still over deep_cuts_max are trimmed into "Orphan Tracks".
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, List

from curation.models import CanonicalTrack, Playlist, renumber_playlists
from curation.playlist.distribution import (
    deep_cut_title,
    distribute_cascade,
    distribute_serpentine,
    make_deep_cut_playlists,
)
from curation.playlist.hits import extract_hits, greatest_hits_playlists
from curation.playlist.trimming import Trimmer, rank_key

from .base_strategy import AlgorithmMetadata, DistributionAlgorithm, GenerationResult

logger = logging.getLogger(__name__)


class BalancedCascadeAlgorithm(DistributionAlgorithm):
    metadata = AlgorithmMetadata(
        id="balanced-cascade",
        name="Balanced Cascade",
        badge="RECOMMENDED",
        description=(
            "Builds balanced playlists blending the best tracks of every album. "
            "Short playlists are merged automatically."
        ),
        is_recommended=True,
    )

    default_source: Dict[str, Any] = {
        "name": "Balanced Cascade",
        "type": "internal",
        "description": "Balanced Cascade curation",
        "secure": True,
    }

    def generate(self, albums: List[Any]) -> GenerationResult:
        ranked = self.rank_albums(albums)
        if not ranked:
            return self.build_result([])

        hits = extract_hits(ranked, self.annotate)
        playlists = greatest_hits_playlists(hits, self.config.greatest_hits_max)
        first_deep_cut_index = len(playlists)

        num_dc = max(1, hits.min_track_count - 2)
        max_first_pass_rank = num_dc + 2
        logger.debug(
            f"Cascade: min tracks={hits.min_track_count}, deep cuts={num_dc}, "
            f"serpentine covers #3-#{max_first_pass_rank}"
        )

        deep_cuts = make_deep_cut_playlists(num_dc, subtitle="Balanced Cascade")
        playlists.extend(deep_cuts)

        leading = [album for album in hits.remainder if album.leads_serpentine]
        trailing = [album for album in hits.remainder if not album.leads_serpentine]
        for album in leading + trailing:
            first_pass = [t for t in album.tracks if rank_key(t) <= max_first_pass_rank]
            direction = "odd" if album.leads_serpentine else "even"
            distribute_serpentine(
                first_pass,
                deep_cuts,
                reverse=album.leads_serpentine,
                placed=lambda track, idx, d=direction: self.annotate(
                    track, f"Serpentine {d}: DC{idx + 1}", 0.6
                ),
            )

        excess: Dict[int, List[CanonicalTrack]] = defaultdict(list)
        for album in hits.remainder:
            for track in album.tracks:
                if rank_key(track) > max_first_pass_rank:
                    excess[rank_key(track)].append(track)

        if excess:
            distribute_cascade(
                excess,
                deep_cuts,
                placed=lambda track, idx: self.annotate(
                    track, f"Cascade #{rank_key(track)}: DC{idx + 1}", 0.4
                ),
            )

        self.merge_small_playlists(playlists, first_deep_cut_index)
        Trimmer(self.config.deep_cuts_max, annotate=self.annotate).trim(playlists, first_deep_cut_index)
        renumber_playlists(playlists)

        return self.build_result(playlists)

    def merge_small_playlists(self, playlists: List[Playlist], first_deep_cut_index: int) -> int:
        """
        Merge adjacent deep cuts whose combined duration is under deep_cuts_max.

        A merged playlist stays in place and is compared with its new
        neighbour, so chains of short playlists collapse into one. Titles
        reflect the span of original volumes held.

        Returns:
            Number of merges performed
        """
        merges = 0
        i = first_deep_cut_index
        while i < len(playlists) - 1:
            current, nxt = playlists[i], playlists[i + 1]
            if current.kind != "deep_cuts" or nxt.kind != "deep_cuts":
                i += 1
                continue

            combined = current.duration + nxt.duration
            if combined >= self.config.deep_cuts_max:
                i += 1
                continue

            logger.debug(
                f"Merging '{current.title}' ({current.duration / 60:.0f}min) + "
                f"'{nxt.title}' ({nxt.duration / 60:.0f}min) = {combined / 60:.0f}min"
            )
            for track in nxt.tracks:
                self.annotate(track, f"Merged from {nxt.title}", 0.5)
                current.tracks.append(track)
            current.tracks.sort(key=rank_key)
            current.volumes = sorted(set(current.volumes) | set(nxt.volumes))
            current.title = deep_cut_title(current.volumes)
            del playlists[i + 1]
            merges += 1

        if merges:
            logger.info(f"Merged {merges} short deep-cut playlists")
        return merges
