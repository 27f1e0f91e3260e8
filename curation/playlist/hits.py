"""
Hit extraction: the first phase shared by the hits-based algorithms.

For each ranked album the rank-1 track goes to the Greatest Hits vol.1
bucket, the rank-2 track to vol.2 and the rest (rank 3 and beyond) to a
per-album remainder that keeps the album's position for serpentine
direction decisions.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from curation.models import CanonicalTrack, Playlist, total_duration

logger = logging.getLogger(__name__)

Annotate = Callable[[CanonicalTrack, str, float], None]


@dataclass
class RankedAlbum:
    """An album's ranked track copies, each stamped with rank and origin."""

    album_id: str
    position: int
    tracks: List[CanonicalTrack]

    @property
    def leads_serpentine(self) -> bool:
        """1st, 3rd, 5th... albums (0-indexed even) walk from the last deep cut."""
        return self.position % 2 == 0


@dataclass
class HitExtraction:
    rank1: List[CanonicalTrack] = field(default_factory=list)
    rank2: List[CanonicalTrack] = field(default_factory=list)
    remainder: List[RankedAlbum] = field(default_factory=list)
    track_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def hits_duration(self) -> float:
        return total_duration(self.rank1) + total_duration(self.rank2)

    @property
    def remainder_tracks(self) -> List[CanonicalTrack]:
        return [track for album in self.remainder for track in album.tracks]

    @property
    def min_track_count(self) -> int:
        return min(self.track_counts.values()) if self.track_counts else 0


def extract_hits(
    albums: List[RankedAlbum],
    annotate: Optional[Annotate] = None,
    reasons: tuple = ("Greatest Hit #1", "Greatest Hit #2"),
) -> HitExtraction:
    """
    Split ranked albums into rank-1 hits, rank-2 hits and remainders.

    Args:
        albums: Ranked albums, tracks already in rank order
        annotate: Callback recording provenance for each extracted hit
        reasons: Annotation reasons for the rank-1 and rank-2 hits
    """
    result = HitExtraction()
    for album in albums:
        if not album.tracks:
            continue
        result.track_counts[album.album_id] = len(album.tracks)

        for bucket, track, reason, score in (
            (result.rank1, album.tracks[0], reasons[0], 1.0),
            (result.rank2, album.tracks[1] if len(album.tracks) > 1 else None, reasons[1], 0.95),
        ):
            if track is None:
                continue
            if annotate:
                annotate(track, reason, score)
            bucket.append(track)

        if len(album.tracks) > 2:
            result.remainder.append(RankedAlbum(album.album_id, album.position, album.tracks[2:]))

    logger.debug(
        f"Hit extraction: {len(result.rank1)} rank-1, {len(result.rank2)} rank-2, "
        f"{len(result.remainder_tracks)} remaining tracks"
    )
    return result


def split_hits_playlists(hits: HitExtraction) -> List[Playlist]:
    return [
        Playlist(
            id="p1",
            title="Greatest Hits Vol. 1",
            subtitle="Rank #1 from each album",
            kind="greatest_hits_1",
            tracks=list(hits.rank1),
        ),
        Playlist(
            id="p2",
            title="Greatest Hits Vol. 2",
            subtitle="Rank #2 from each album",
            kind="greatest_hits_2",
            tracks=list(hits.rank2),
        ),
    ]


def greatest_hits_playlists(hits: HitExtraction, max_duration: float) -> List[Playlist]:
    """
    One merged Greatest Hits playlist when it fits under max_duration,
    otherwise vol.1 (all rank-1s) and vol.2 (all rank-2s).
    """
    if hits.hits_duration <= max_duration:
        return [
            Playlist(
                id="p1",
                title="Greatest Hits",
                subtitle="Rank #1 and #2 from each album",
                kind="greatest_hits",
                tracks=list(hits.rank1) + list(hits.rank2),
            )
        ]

    logger.info(
        f"Greatest Hits exceed {max_duration / 60:.0f} min "
        f"({hits.hits_duration / 60:.1f} min), splitting into two volumes"
    )
    return split_hits_playlists(hits)


def missing_albums(playlist: Playlist, album_ids: List[str]) -> List[str]:
    present = set(playlist.album_ids())
    return [album_id for album_id in album_ids if album_id not in present]
