"""
S-Draft Balanced (flexible)
===========================

- Greatest Hits: one playlist when it fits under greatest_hits_max,
  otherwise Vol. 1 (all rank #1) and Vol. 2 (all rank #2)
- Deep Cuts: ceil(remaining duration / deep_cuts_max) playlists filled by
  full serpentine
- Deep cuts under minimum_duration hand their tracks to other deep cuts
  with headroom; whatever cannot move stays behind as "Orphan Tracks"
- Album coverage: when feasible, swap tracks so every playlist holds at
  least one track from every album
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from curation.models import ORPHAN_TITLE, CanonicalTrack, Playlist, renumber_playlists, total_duration
from curation.playlist.distribution import distribute_serpentine, make_deep_cut_playlists
from curation.playlist.hits import HitExtraction, extract_hits, greatest_hits_playlists, missing_albums

from .base_strategy import AlgorithmMetadata, DistributionAlgorithm, GenerationResult

logger = logging.getLogger(__name__)

MAX_COVERAGE_SWAPS = 100


class SDraftBalancedAlgorithm(DistributionAlgorithm):
    metadata = AlgorithmMetadata(
        id="s-draft-balanced",
        name="S-Draft Balanced",
        badge="FLEXIBLE",
        description=(
            "Flexible Greatest Hits (1 or 2), strict 48 min Deep Cuts, "
            "30 min minimum per playlist."
        ),
    )

    default_source: Dict[str, Any] = {
        "name": "S-Draft Balanced",
        "type": "internal",
        "description": "Revised balanced S-Draft curation",
        "secure": True,
    }

    def generate(self, albums: List[Any]) -> GenerationResult:
        ranked = self.rank_albums(albums)
        if not ranked:
            return self.build_result([])

        hits = extract_hits(ranked, self.annotate)
        playlists = greatest_hits_playlists(hits, self.config.greatest_hits_max)
        if len(playlists) > 1:
            self._warn_missing_hits(playlists, hits)
        first_deep_cut_index = len(playlists)

        remaining_duration = total_duration(hits.remainder_tracks)
        deep_cut_count = max(1, math.ceil(remaining_duration / self.config.deep_cuts_max))
        deep_cuts = make_deep_cut_playlists(deep_cut_count, subtitle="S-Draft Balanced")
        playlists.extend(deep_cuts)
        renumber_playlists(playlists)

        for album in hits.remainder:
            distribute_serpentine(
                album.tracks,
                deep_cuts,
                reverse=album.leads_serpentine,
                placed=lambda track, idx: self.annotate(track, f"Serpentine: {deep_cuts[idx].id}", 0.5),
            )

        self.handle_under_duration(playlists, first_deep_cut_index)
        self.verify_album_coverage(playlists, hits)

        return self.build_result(playlists)

    def _warn_missing_hits(self, playlists: List[Playlist], hits: HitExtraction) -> None:
        album_ids = list(hits.track_counts)
        for playlist in playlists:
            missing = missing_albums(playlist, album_ids)
            if missing:
                logger.warning(f"Albums missing in {playlist.title}: {', '.join(missing)}")

    def handle_under_duration(self, playlists: List[Playlist], first_deep_cut_index: int) -> None:
        """
        Dissolve deep cuts shorter than minimum_duration.

        Tracks move, last first, to other deep cuts (walked from the end)
        that stay within deep_cuts_max after receiving them. Leftovers keep
        their playlist, relabelled as orphan. Empty playlists are dropped and
        ids renumbered.
        """
        under = [
            p for p in playlists[first_deep_cut_index:]
            if p.kind == "deep_cuts" and p.duration < self.config.minimum_duration
        ]

        for under_playlist in under:
            if under_playlist.duration >= self.config.minimum_duration:
                continue
            under_idx = next(i for i, p in enumerate(playlists) if p is under_playlist)
            pending = list(under_playlist.tracks)

            for target_idx in range(len(playlists) - 1, first_deep_cut_index - 1, -1):
                if target_idx == under_idx or not pending:
                    continue
                target = playlists[target_idx]
                if target.kind != "deep_cuts":
                    continue
                for i in range(len(pending) - 1, -1, -1):
                    track = pending[i]
                    if target.duration + (track.duration or 0) <= self.config.deep_cuts_max:
                        target.tracks.append(track)
                        self.annotate(track, f"Redistributed to {target.id}", 0.3)
                        del pending[i]

            under_playlist.tracks = pending
            if pending:
                under_playlist.title = ORPHAN_TITLE
                under_playlist.subtitle = (
                    f"Duration under {self.config.minimum_duration / 60:.0f} min - requires manual curation"
                )
                under_playlist.kind = "orphan"
                logger.info(f"{len(pending)} tracks could not be redistributed; kept as {ORPHAN_TITLE}")

        playlists[:] = [p for p in playlists if p.tracks]
        renumber_playlists(playlists)

    def verify_album_coverage(self, playlists: List[Playlist], hits: HitExtraction) -> int:
        """
        Enforce one track per album per playlist when it is feasible at all.

        Skipped when there are more playlists than the smallest album has
        tracks. Returns the number of swaps performed.
        """
        min_tracks = hits.min_track_count
        if len(playlists) > min_tracks:
            logger.debug(
                f"Album coverage relaxed: {len(playlists)} playlists, "
                f"smallest album has {min_tracks} tracks"
            )
            return 0
        return self.enforce_album_coverage(playlists, list(hits.track_counts))

    def enforce_album_coverage(self, playlists: List[Playlist], album_ids: List[str]) -> int:
        """Greedy first-found swaps; Greatest Hits and orphan playlists are never touched."""
        eligible = [p for p in playlists if p.kind == "deep_cuts"]
        swaps = 0

        for playlist in eligible:
            missing = missing_albums(playlist, album_ids)
            if not missing:
                continue
            logger.debug(f"'{playlist.title}' missing {len(missing)} albums, attempting swaps")

            for album_id in missing:
                if swaps >= MAX_COVERAGE_SWAPS:
                    break
                swap = self._find_coverage_swap(playlist, album_id, eligible)
                if swap is None:
                    logger.warning(f"Could not find coverage swap for album {album_id} in '{playlist.title}'")
                    continue

                donor, incoming, outgoing = swap
                donor.tracks[_index_of(donor.tracks, incoming)] = outgoing
                playlist.tracks[_index_of(playlist.tracks, outgoing)] = incoming
                self.annotate(incoming, f"Coverage swap to {playlist.id}", 0.4)
                self.annotate(outgoing, f"Coverage swap to {donor.id}", 0.4)
                swaps += 1

        if swaps:
            logger.info(f"Album coverage enforcement: {swaps} swaps performed")
        return swaps

    def _find_coverage_swap(
        self,
        playlist: Playlist,
        album_id: str,
        eligible: List[Playlist],
    ) -> Optional[Tuple[Playlist, CanonicalTrack, CanonicalTrack]]:
        for donor in eligible:
            if donor is playlist:
                continue
            from_album = [t for t in donor.tracks if t.origin_album_id == album_id]
            if len(from_album) <= 1:
                continue
            incoming = from_album[0]
            for outgoing in playlist.tracks:
                spare = sum(1 for t in playlist.tracks if t.origin_album_id == outgoing.origin_album_id)
                if spare > 1:
                    return donor, incoming, outgoing
        return None


def _index_of(tracks: List[CanonicalTrack], track: CanonicalTrack) -> int:
    return next(i for i, t in enumerate(tracks) if t is track)
