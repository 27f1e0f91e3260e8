"""
Grouping strategies for Top-N selections.

Tracks arrive in album order, each carrying its per-album rank. A grouping
only reorders them; it never adds or drops tracks.

- album: keep album order (default)
- flat_ranked: every album's #1, then every #2, ...
- artist: cluster by artist in first-seen order, rank inside each cluster
- interleave: per rank level, one track per artist in first-seen order
- shuffle: random order; a seed makes it reproducible
"""
from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from curation.models import CanonicalTrack
from curation.playlist.trimming import rank_key

logger = logging.getLogger(__name__)

GROUPING_SUFFIXES = {
    "album": "",
    "flat_ranked": "(Ranked)",
    "artist": "(By Artist)",
    "interleave": "(Interleaved)",
    "shuffle": "(Shuffled)",
}


def _artist_order(tracks: List[CanonicalTrack]) -> Dict[str, int]:
    order: Dict[str, int] = {}
    for track in tracks:
        key = (track.artist or "").casefold()
        if key not in order:
            order[key] = len(order)
    return order


def _interleave(tracks: List[CanonicalTrack]) -> List[CanonicalTrack]:
    by_rank: Dict[float, Dict[str, List[CanonicalTrack]]] = {}
    order = _artist_order(tracks)
    for track in sorted(tracks, key=rank_key):
        queues = by_rank.setdefault(rank_key(track), {})
        queues.setdefault((track.artist or "").casefold(), []).append(track)

    result: List[CanonicalTrack] = []
    for rank in sorted(by_rank):
        queues = [by_rank[rank][artist] for artist in sorted(by_rank[rank], key=order.get)]
        while any(queues):
            for queue in queues:
                if queue:
                    result.append(queue.pop(0))
    return result


def group_tracks(
    tracks: List[CanonicalTrack],
    strategy: str = "album",
    seed: Optional[int] = None,
) -> List[CanonicalTrack]:
    """Return a reordered copy of tracks according to the grouping strategy."""
    if strategy == "flat_ranked":
        return sorted(tracks, key=rank_key)

    if strategy == "artist":
        order = _artist_order(tracks)
        return sorted(tracks, key=lambda t: (order[(t.artist or "").casefold()], rank_key(t)))

    if strategy == "interleave":
        return _interleave(tracks)

    if strategy == "shuffle":
        shuffled = list(tracks)
        random.Random(seed).shuffle(shuffled)
        return shuffled

    if strategy != "album":
        logger.warning(f"Unknown grouping strategy '{strategy}', keeping album order")
    return list(tracks)


def grouping_suffix(strategy: str) -> str:
    return GROUPING_SUFFIXES.get(strategy, "")
