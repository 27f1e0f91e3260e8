"""
Track enrichment: merge per-album ranking evidence into canonical tracks.

An album may carry evidence arrays next to its tracks (a consolidated
ranking, best-ever evidence, an acclaim list). Each track field is resolved
through its own fallback chain, so a track missing one signal simply
inherits the next.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from curation.models import Album, CanonicalTrack, as_number, first_number
from curation.string_utils import normalize_title_key

logger = logging.getLogger(__name__)


def _index_entries(entries: List[Any]) -> Dict[str, Dict[str, Any]]:
    """Index evidence entries by normalized title; later duplicates win."""
    index: Dict[str, Dict[str, Any]] = {}
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        key = normalize_title_key(entry.get("trackTitle") or entry.get("title") or "")
        if key:
            index[key] = entry
    return index


def _valid_popularity(value: Any) -> Optional[float]:
    number = as_number(value)
    if number is None or number <= -1:
        return None
    return number


def enrich_album_tracks(album: Album) -> List[CanonicalTrack]:
    """
    Normalize an album's tracks and fill ranking fields from its evidence.

    Chains (first available value wins):
    - acclaim rank: track acclaimRank/rank, consolidated finalPosition/position,
      acclaim-list rank
    - rating: track rating, consolidated, best-ever, acclaim-list ratings,
      then streaming popularity
    - score: track acclaimScore/normalizedScore, consolidated normalizedScore,
      then rating

    Tracks keep album order; spotify_rank is assigned by popularity for the
    tracks that have one.

    Args:
        album: Album whose tracks are read (never mutated)

    Returns:
        Fresh canonical track copies in original album order
    """
    if album is None or not album.tracks:
        return []

    consolidated = _index_entries(album.ranking_consolidated)
    best_ever = _index_entries(album.best_ever_evidence)
    acclaim = _index_entries(album.ranking_acclaim)

    enriched: List[CanonicalTrack] = []
    for idx, raw in enumerate(album.tracks):
        track = CanonicalTrack.from_raw(raw, album, idx)
        key = normalize_title_key(track.title)
        cons = consolidated.get(key, {})
        be = best_ever.get(key, {})
        ac = acclaim.get(key, {})

        popularity = _valid_popularity(track.spotify_popularity)
        track.spotify_popularity = popularity

        track.acclaim_rank = first_number(
            track.acclaim_rank,
            cons.get("finalPosition"),
            cons.get("position"),
            ac.get("rank"),
        )
        track.rating = first_number(
            track.rating,
            cons.get("rating"),
            be.get("rating"),
            ac.get("rating"),
            popularity,
        )
        track.acclaim_score = first_number(
            track.acclaim_score,
            cons.get("normalizedScore"),
            track.rating,
        )
        track.canonical_rank = first_number(track.canonical_rank, cons.get("finalPosition"))
        enriched.append(track)

    by_popularity = sorted(
        (t for t in enriched if t.spotify_popularity is not None),
        key=lambda t: -t.spotify_popularity,
    )
    for idx, track in enumerate(by_popularity):
        track.spotify_rank = idx + 1

    logger.debug(
        f"Enriched {len(enriched)} tracks for album {album.id} "
        f"(consolidated={len(consolidated)}, best_ever={len(best_ever)}, acclaim={len(acclaim)})"
    )
    return enriched
