"""
Greedy duration balancing via track swaps.

Each iteration takes the shortest and the longest playlist, stops when both
already sit inside [target - flexibility, target + flexibility], and
otherwise performs the single swap between them that most reduces their
duration gap. The loop is bounded, so it always terminates; reaching the
band is not guaranteed.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from curation.models import CanonicalTrack, Playlist

logger = logging.getLogger(__name__)

Annotate = Callable[[CanonicalTrack, str, float], None]

# Rank protected from leaving each Greatest Hits kind
_PROTECTED_RANKS = {
    "greatest_hits": (1, 2),
    "greatest_hits_1": (1,),
    "greatest_hits_2": (2,),
}


class Balancer:
    def __init__(
        self,
        target_seconds: float,
        flexibility_seconds: float,
        max_iterations: int = 100,
        annotate: Optional[Annotate] = None,
    ):
        self.target_seconds = target_seconds
        self.flexibility_seconds = flexibility_seconds
        self.max_iterations = max_iterations
        self.annotate = annotate

    @property
    def lower_bound(self) -> float:
        return self.target_seconds - self.flexibility_seconds

    @property
    def upper_bound(self) -> float:
        return self.target_seconds + self.flexibility_seconds

    def balance(self, playlists: List[Playlist]) -> int:
        """
        Swap tracks between the extreme playlists until balanced or stuck.

        Returns:
            Number of swaps performed
        """
        swaps = 0
        for iteration in range(self.max_iterations):
            if len(playlists) < 2:
                break

            ordered = sorted(playlists, key=lambda p: p.duration)
            p_under, p_over = ordered[0], ordered[-1]
            under_duration, over_duration = p_under.duration, p_over.duration

            if under_duration >= self.lower_bound and over_duration <= self.upper_bound:
                logger.debug(f"Balanced after {iteration} iterations ({swaps} swaps)")
                return swaps
            if p_under is p_over:
                break

            best = self._best_swap(p_over, p_under, over_duration, under_duration)
            if best is None:
                logger.debug(
                    f"No improving swap between {p_over.id} and {p_under.id}; "
                    f"stopping after {swaps} swaps"
                )
                return swaps

            track_over, track_under = best
            self._swap(p_over, p_under, track_over, track_under)
            swaps += 1
        else:
            logger.debug(f"Balancing hit the {self.max_iterations}-iteration limit ({swaps} swaps)")

        return swaps

    def _best_swap(
        self,
        p_over: Playlist,
        p_under: Playlist,
        over_duration: float,
        under_duration: float,
    ) -> Optional[Tuple[CanonicalTrack, CanonicalTrack]]:
        best: Optional[Tuple[CanonicalTrack, CanonicalTrack]] = None
        best_gap = abs(over_duration - under_duration)

        for track_over in p_over.tracks:
            for track_under in p_under.tracks:
                if not self.is_swap_valid(p_over, p_under, track_over, track_under):
                    continue
                delta = (track_over.duration or 0) - (track_under.duration or 0)
                gap = abs((over_duration - delta) - (under_duration + delta))
                if gap < best_gap:
                    best = (track_over, track_under)
                    best_gap = gap
        return best

    def _swap(
        self,
        p_over: Playlist,
        p_under: Playlist,
        track_over: CanonicalTrack,
        track_under: CanonicalTrack,
    ) -> None:
        if self.annotate:
            self.annotate(track_over, f"Swap: moved to {p_under.id}", 0.45)
            self.annotate(track_under, f"Swap: moved to {p_over.id}", 0.45)

        p_over.tracks = [t for t in p_over.tracks if t is not track_over]
        p_over.tracks.append(track_under)
        p_under.tracks = [t for t in p_under.tracks if t is not track_under]
        p_under.tracks.append(track_over)

    def is_swap_valid(
        self,
        p_over: Playlist,
        p_under: Playlist,
        track_over: CanonicalTrack,
        track_under: CanonicalTrack,
    ) -> bool:
        if is_protected(p_over, track_over) or is_protected(p_under, track_under):
            return False

        same_album = track_over.origin_album_id == track_under.origin_album_id
        if not same_album:
            if is_last_of_album(p_over, track_over) or is_last_of_album(p_under, track_under):
                return False
        return True


def is_protected(playlist: Playlist, track: CanonicalTrack) -> bool:
    """True for the rank-1/rank-2 hit sitting in its Greatest Hits playlist."""
    if not playlist.is_greatest_hits:
        return False
    return track.effective_rank in _PROTECTED_RANKS[playlist.kind]


def is_last_of_album(playlist: Playlist, track: CanonicalTrack) -> bool:
    """True when track is the only one of its album in the playlist."""
    if not track.origin_album_id:
        return False
    count = sum(1 for t in playlist.tracks if t.origin_album_id == track.origin_album_id)
    return count == 1
