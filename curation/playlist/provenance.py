"""
Provenance tracking for one generation run.

ProvenanceTracker collects the ranking sources that contributed to a run and,
once playlists are built, summarizes per album which tracks went where and
why. A tracker is scoped to a single run; nothing is shared across runs.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from curation.models import Album, CanonicalTrack, Playlist, RankingSource, utc_timestamp
from curation.string_utils import normalize_source_key

logger = logging.getLogger(__name__)


class ProvenanceTracker:
    """Deduplicated ranking sources plus an album lookup for the run summary."""

    def __init__(self):
        self._sources: Dict[str, RankingSource] = {}
        self._albums: Dict[str, Album] = {}

    def register_source(self, source: Any) -> Optional[RankingSource]:
        """
        Register a ranking source by name, dict or RankingSource.

        Registration is idempotent: the first source registered under a
        normalized name wins and later registrations return it unchanged.

        Returns:
            The stored source, or None when the input carries no usable name
        """
        normalized = RankingSource.from_value(source)
        if normalized is None:
            return None
        key = normalize_source_key(normalized.name)
        if not key:
            return None
        if key not in self._sources:
            self._sources[key] = normalized
            logger.debug(f"Registered ranking source: {normalized.name} ({normalized.type})")
        return self._sources[key]

    def register_album(self, album: Album) -> None:
        """Remember album metadata and register every source it declares."""
        self._albums[album.id] = album
        for source in album.ranking_sources or []:
            self.register_source(source)

    def album(self, album_id: str) -> Optional[Album]:
        return self._albums.get(album_id)

    @property
    def sources(self) -> List[RankingSource]:
        """Registered sources in registration order."""
        return list(self._sources.values())

    def build_summary(self, playlists: List[Playlist]) -> Dict[str, Dict[str, Any]]:
        """
        Summarize placements grouped by origin album.

        Each entry lists the tracks placed from that album (rank, destination
        playlist, duration, annotation history) and the distinct source names
        found in their annotations, in first-seen order. Tracks without an
        origin album are left out.
        """
        summary: Dict[str, Dict[str, Any]] = {}
        now = utc_timestamp()

        for playlist in playlists:
            for track in playlist.tracks:
                album_id = track.origin_album_id
                if not album_id:
                    continue

                entry = summary.get(album_id)
                if entry is None:
                    album = self._albums.get(album_id)
                    entry = {
                        "albumId": album_id,
                        "albumTitle": (album.title if album else "") or "Unknown Album",
                        "artist": (album.artist if album else "") or "Unknown Artist",
                        "tracks": [],
                        "sourceNames": [],
                        "lastUpdated": now,
                    }
                    summary[album_id] = entry

                entry["tracks"].append(_track_entry(track, playlist))
                for info in track.ranking_info:
                    if info.source and info.source not in entry["sourceNames"]:
                        entry["sourceNames"].append(info.source)

        return summary


def _track_entry(track: CanonicalTrack, playlist: Playlist) -> Dict[str, Any]:
    return {
        "trackId": track.id,
        "title": track.title,
        "rank": track.rank,
        "playlistId": playlist.id,
        "playlistTitle": playlist.title,
        "duration": track.duration,
        "rankingInfo": [info.to_dict() for info in track.ranking_info],
    }
