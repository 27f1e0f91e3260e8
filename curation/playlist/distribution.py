"""
Placement patterns for deep-cut playlists.

- serpentine: zigzag across the playlists, repeating the boundary playlist
  when the direction flips (0, 1, 2, 2, 1, 0, 0, ...)
- cascade: all tracks sharing a rank go to one playlist, then the cursor
  ping-pongs to the next, starting from the last playlist
- round robin: one track per album bucket per turn, dealt across playlists
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from curation.models import CanonicalTrack, Playlist

logger = logging.getLogger(__name__)

Placed = Callable[[CanonicalTrack, int], None]


def deep_cut_title(volumes: Sequence[int]) -> str:
    """Title for a deep-cut playlist holding the given original volumes."""
    if not volumes:
        return "Deep Cuts"
    low, high = min(volumes), max(volumes)
    if low == high:
        return f"Deep Cuts Vol. {low}"
    return f"Deep Cuts Vol. {low}-{high}"


def make_deep_cut_playlists(count: int, subtitle: str = "") -> List[Playlist]:
    playlists = []
    for idx in range(max(1, count)):
        volume = idx + 1
        playlists.append(Playlist(
            id=f"dc{volume}",
            title=deep_cut_title([volume]),
            subtitle=subtitle,
            kind="deep_cuts",
            volumes=[volume],
        ))
    return playlists


def serpentine_indices(count: int, reverse: bool = False) -> Iterator[int]:
    """
    Yield playlist indices in snake-draft order forever.

    Forward from 0, or backward from count-1 when reverse is set. The
    boundary index is yielded twice when the direction flips.
    """
    if count <= 0:
        return
    idx = count - 1 if reverse else 0
    step = -1 if reverse else 1
    while True:
        yield idx
        nxt = idx + step
        if 0 <= nxt < count:
            idx = nxt
        else:
            step = -step


def distribute_serpentine(
    tracks: List[CanonicalTrack],
    playlists: List[Playlist],
    reverse: bool = False,
    placed: Optional[Placed] = None,
) -> None:
    """Append tracks to playlists in serpentine order."""
    if not playlists:
        return
    for track, idx in zip(tracks, serpentine_indices(len(playlists), reverse)):
        playlists[idx].tracks.append(track)
        if placed:
            placed(track, idx)


def distribute_cascade(
    tracks_by_rank: Dict[int, List[CanonicalTrack]],
    playlists: List[Playlist],
    placed: Optional[Placed] = None,
) -> None:
    """Place each rank group, in ascending rank order, into one playlist per group."""
    if not playlists:
        return
    cursor = serpentine_indices(len(playlists), reverse=True)
    for rank in sorted(tracks_by_rank):
        idx = next(cursor)
        for track in tracks_by_rank[rank]:
            playlists[idx].tracks.append(track)
            if placed:
                placed(track, idx)


def distribute_round_robin(
    buckets: List[List[CanonicalTrack]],
    playlists: List[Playlist],
    placed: Optional[Placed] = None,
) -> None:
    """
    Cycle over the buckets drawing one track per turn. Bucket k always deals
    into playlist k modulo the playlist count, so an album stays together in
    its own deep cut while the albums sharing a playlist alternate.
    """
    if not playlists:
        return
    queues = [list(bucket) for bucket in buckets]
    while any(queues):
        for bucket_idx, queue in enumerate(queues):
            if not queue:
                continue
            track = queue.pop(0)
            idx = bucket_idx % len(playlists)
            playlists[idx].tracks.append(track)
            if placed:
                placed(track, idx)
