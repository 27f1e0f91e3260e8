"""Test configuration and fixtures."""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


def build_album(
    album_id: str,
    num_tracks: int,
    duration: float = 180,
    artist: Optional[str] = None,
    ranked: bool = True,
    durations: Optional[List[float]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Build a raw album dict; ranked albums carry acclaimRank 1..N in track order."""
    tracks = []
    for i in range(num_tracks):
        track: Dict[str, Any] = {
            "id": f"{album_id}_t{i + 1}",
            "title": f"{album_id} Song {i + 1}",
            "duration": durations[i] if durations else duration,
        }
        if ranked:
            track["acclaimRank"] = i + 1
        tracks.append(track)
    album = {
        "id": album_id,
        "title": f"Album {album_id}",
        "artist": artist or f"Artist {album_id}",
        "tracks": tracks,
    }
    album.update(extra)
    return album


@pytest.fixture
def album_factory():
    return build_album


@pytest.fixture
def two_albums() -> List[Dict[str, Any]]:
    """2 albums x 5 tracks, acclaimRank 1..5, 180s each."""
    return [build_album("a1", 5), build_album("a2", 5)]


@pytest.fixture
def many_albums() -> List[Dict[str, Any]]:
    """6 albums with 8-12 tracks of varied length."""
    albums = []
    for idx, count in enumerate([10, 8, 12, 9, 11, 8]):
        durations = [150 + ((idx * 37 + i * 53) % 240) for i in range(count)]
        albums.append(build_album(f"alb{idx + 1}", count, durations=durations))
    return albums
