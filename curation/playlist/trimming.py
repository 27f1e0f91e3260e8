"""
Ceiling trimming: move the lowest-ranked tracks of over-long deep-cut
playlists into a shared "Orphan Tracks" overflow playlist.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from curation.models import ORPHAN_TITLE, CanonicalTrack, Playlist

logger = logging.getLogger(__name__)

UNRANKED = 999


def rank_key(track: CanonicalTrack):
    rank = track.effective_rank
    return rank if rank is not None else UNRANKED


class Trimmer:
    def __init__(
        self,
        max_duration: float,
        annotate: Optional[Callable[[CanonicalTrack, str, float], None]] = None,
    ):
        self.max_duration = max_duration
        self.annotate = annotate

    def trim(self, playlists: List[Playlist], first_deep_cut_index: int = 0) -> Optional[Playlist]:
        """
        Trim deep-cut playlists from first_deep_cut_index on to max_duration.

        The orphan playlist is created on first use and appended to
        playlists. Every processed playlist is re-sorted by ascending rank.

        Returns:
            The orphan playlist, or None when nothing was trimmed
        """
        orphan: Optional[Playlist] = None

        for playlist in list(playlists[first_deep_cut_index:]):
            if playlist.kind != "deep_cuts":
                continue

            moved = 0
            while playlist.tracks and playlist.duration > self.max_duration:
                playlist.tracks.sort(key=rank_key, reverse=True)
                removed = playlist.tracks.pop(0)
                if orphan is None:
                    orphan = Playlist(
                        id="orphan",
                        title=ORPHAN_TITLE,
                        subtitle="Trimmed due to duration limits",
                        kind="orphan",
                    )
                    playlists.append(orphan)
                orphan.tracks.append(removed)
                if self.annotate:
                    self.annotate(removed, "Trimmed to Orphan Tracks", 0.2)
                moved += 1

            playlist.tracks.sort(key=rank_key)
            if moved:
                logger.info(f"Trimmed {moved} tracks from '{playlist.title}' to {ORPHAN_TITLE}")

        return orphan
