"""
Plain-text reporting for generation results.

Used by the CLI and for debug logging; the report is derived from the
result only and never changes it.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional

from curation.logging_utils import format_count, format_duration, truncate_list
from curation.models import Playlist
from curation.playlist.strategies.base_strategy import GenerationResult

logger = logging.getLogger(__name__)


def playlist_line(playlist: Playlist) -> str:
    """One-line summary, e.g. "p3  Deep Cuts Vol. 1  12 tracks  45m07s  4 albums"."""
    albums = len(set(playlist.album_ids()))
    return (
        f"{playlist.id:<4} {playlist.title:<28} "
        f"{format_count(len(playlist.tracks), 'track'):>10}  "
        f"{format_duration(playlist.duration):>8}  "
        f"{format_count(albums, 'album')}"
    )


def band_violations(
    playlists: List[Playlist],
    target_seconds: float,
    flexibility_seconds: float,
) -> List[Playlist]:
    """Non-orphan playlists whose duration lies outside the tolerance band."""
    low, high = target_seconds - flexibility_seconds, target_seconds + flexibility_seconds
    return [p for p in playlists if not p.is_orphan and not (low <= p.duration <= high)]


def build_report(
    result: GenerationResult,
    target_seconds: Optional[float] = None,
    flexibility_seconds: Optional[float] = None,
) -> str:
    lines = [
        f"{format_count(len(result.playlists), 'playlist')}, "
        f"{format_count(result.track_count, 'track')}, "
        f"{format_count(len(result.ranking_summary), 'album')}",
    ]
    lines.extend(f"  {playlist_line(p)}" for p in result.playlists)

    kinds: Dict[str, int] = Counter(p.kind for p in result.playlists)
    lines.append("Kinds: " + ", ".join(f"{kind}={count}" for kind, count in sorted(kinds.items())))

    if target_seconds is not None and flexibility_seconds is not None:
        outside = band_violations(result.playlists, target_seconds, flexibility_seconds)
        if outside:
            lines.append(
                f"Outside {format_duration(target_seconds)} +/- {format_duration(flexibility_seconds)}: "
                + truncate_list([p.id for p in outside], max_items=5)
            )

    lines.append("Sources: " + truncate_list([s.name for s in result.ranking_sources], max_items=5))
    return "\n".join(lines)


def log_report(result: GenerationResult, level: int = logging.INFO, **kwargs) -> None:
    for line in build_report(result, **kwargs).splitlines():
        logger.log(level, line)
