"""
Domain records shared by the ranking and curation modules.

Raw album/track records arrive as plain dicts produced by the metadata
enrichment collaborator (camelCase keys, any subset of fields). They are
normalized here into dataclasses and serialized back to camelCase dicts on
the way out.
"""
from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

PlaylistKind = Literal[
    "greatest_hits",
    "greatest_hits_1",
    "greatest_hits_2",
    "deep_cuts",
    "orphan",
    "selection",
]

GREATEST_HITS_KINDS = frozenset({"greatest_hits", "greatest_hits_1", "greatest_hits_2"})
ORPHAN_TITLE = "Orphan Tracks"

# Raw keys consumed by CanonicalTrack.from_raw; anything else lands in metadata
_KNOWN_TRACK_KEYS = frozenset({
    "id", "title", "name", "trackTitle", "artist", "album", "duration",
    "acclaimRank", "rank", "acclaimScore", "normalizedScore", "rating",
    "spotifyRank", "spotifyPopularity", "popularity", "canonicalRank",
    "position", "originAlbumId", "rankingInfo", "userRank", "_rank", "metadata",
})


def as_number(value: Any) -> Optional[Union[int, float]]:
    """Coerce a raw numeric field, returning None for missing or unparsable values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def first_number(*values: Any) -> Optional[Union[int, float]]:
    """Return the first value in a fallback chain that parses as a number."""
    for value in values:
        number = as_number(value)
        if number is not None:
            return number
    return None


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RankingInfo:
    """One provenance entry explaining why a track landed where it did."""

    reason: str
    source: Optional[str] = None
    score: Optional[float] = None
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reason": self.reason,
            "source": self.source,
            "score": self.score,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class RankingSource:
    """A named origin of ranking evidence (critic site, streaming service, curator)."""

    name: str
    type: str = "external"
    reference: str = ""
    secure: bool = False
    description: str = ""

    @classmethod
    def from_value(cls, value: Any) -> Optional["RankingSource"]:
        """Build a source from a bare name, a dict, or an existing source."""
        if isinstance(value, RankingSource):
            return value
        if isinstance(value, str):
            payload: Dict[str, Any] = {"name": value}
        elif isinstance(value, dict):
            payload = value
        else:
            return None

        name = str(payload.get("name") or "").strip()
        if not name:
            return None
        return cls(
            name=name,
            type=payload.get("type") or "external",
            reference=payload.get("reference") or "",
            secure=payload.get("secure") is True,
            description=payload.get("description") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "reference": self.reference,
            "secure": self.secure,
            "description": self.description,
        }


@dataclass
class CanonicalTrack:
    """
    Canonical track shape shared by every ranking strategy and algorithm.

    Attributes:
        id: Identifier, unique within one run
        duration: Seconds, never negative
        acclaim_rank: Critic-derived position (1-based, smaller is better)
        rating: Display rating, may fall back to streaming popularity
        origin_album_id: Set once when the track enters an album context
        orig_index: Position in the album's track list, used for stable ties
        rank: Transient 1-based rank stamped by the algorithm that owns this copy
        ranking_info: Append-only provenance history
    """

    id: str
    title: str
    artist: str = ""
    album: str = ""
    duration: float = 0
    acclaim_rank: Optional[Union[int, float]] = None
    acclaim_score: Optional[float] = None
    rating: Optional[float] = None
    spotify_rank: Optional[int] = None
    spotify_popularity: Optional[float] = None
    canonical_rank: Optional[Union[int, float]] = None
    user_rank: Optional[int] = None
    position: Optional[int] = None
    origin_album_id: Optional[str] = None
    orig_index: int = 0
    rank: Optional[int] = None
    ranking_info: List[RankingInfo] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(
        cls,
        data: Union[Dict[str, Any], "CanonicalTrack", None],
        album: Optional["Album"] = None,
        index: int = 0,
    ) -> "CanonicalTrack":
        """
        Normalize a raw provider record into a canonical track.

        Missing fields never raise: every field has a fallback chain and the
        worst case is an untitled zero-length track.

        Args:
            data: Raw track dict (camelCase keys) or an existing canonical track
            album: Album context supplying artist/album/id defaults
            index: Position of the track in the album's track list
        """
        if isinstance(data, CanonicalTrack):
            track = data.copy()
            if album is not None:
                track.set_origin(album.id)
            track.orig_index = index
            return track

        raw: Dict[str, Any] = data if isinstance(data, dict) else {}
        album_id = album.id if album is not None else "album"

        title = raw.get("title") or raw.get("name") or raw.get("trackTitle") or f"Track {index + 1}"
        duration = as_number(raw.get("duration"))
        popularity = first_number(raw.get("spotifyPopularity"), raw.get("popularity"))

        metadata = dict(raw.get("metadata") or {})
        metadata.update({k: v for k, v in raw.items() if k not in _KNOWN_TRACK_KEYS})

        history = [
            entry if isinstance(entry, RankingInfo) else RankingInfo(
                reason=str(entry.get("reason") or entry.get("source") or ""),
                source=entry.get("source"),
                score=entry.get("score"),
                timestamp=entry.get("timestamp") or utc_timestamp(),
            )
            for entry in (raw.get("rankingInfo") or [])
            if isinstance(entry, (RankingInfo, dict))
        ]

        return cls(
            id=str(raw.get("id") or f"track_{album_id}_{index + 1}"),
            title=str(title).strip(),
            artist=str(raw.get("artist") or (album.artist if album else "") or "").strip(),
            album=str(raw.get("album") or (album.title if album else "") or "").strip(),
            duration=max(0, duration or 0),
            acclaim_rank=first_number(raw.get("acclaimRank"), raw.get("rank")),
            acclaim_score=first_number(raw.get("acclaimScore"), raw.get("normalizedScore")),
            rating=as_number(raw.get("rating")),
            spotify_rank=as_number(raw.get("spotifyRank")),
            spotify_popularity=popularity,
            canonical_rank=first_number(raw.get("canonicalRank"), raw.get("rank")),
            position=as_number(raw.get("position")),
            origin_album_id=raw.get("originAlbumId") or (album.id if album else None),
            orig_index=index,
            ranking_info=history,
            metadata=metadata,
        )

    def copy(self) -> "CanonicalTrack":
        """Return an independent copy; provenance entries are immutable and shared."""
        return replace(
            self,
            ranking_info=list(self.ranking_info),
            metadata=copy.deepcopy(self.metadata),
        )

    def with_rank(self, rank: int) -> "CanonicalTrack":
        track = self.copy()
        track.rank = rank
        return track

    def set_origin(self, album_id: Optional[str]) -> None:
        """Set the origin album once; later calls never reassign it."""
        if album_id and not self.origin_album_id:
            self.origin_album_id = album_id

    def annotate(self, reason: str, source: Optional[str] = None, score: Optional[float] = None) -> None:
        self.ranking_info.append(RankingInfo(reason=reason, source=source, score=score))

    @property
    def effective_rank(self) -> Optional[Union[int, float]]:
        """Rank used by trimming and protection: stamped rank, then acclaim rank."""
        return self.rank if self.rank is not None else self.acclaim_rank

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration": self.duration,
            "acclaimRank": self.acclaim_rank,
            "acclaimScore": self.acclaim_score,
            "rating": self.rating,
            "spotifyRank": self.spotify_rank,
            "spotifyPopularity": self.spotify_popularity,
            "canonicalRank": self.canonical_rank,
            "userRank": self.user_rank,
            "position": self.position,
            "originAlbumId": self.origin_album_id,
            "rank": self.rank,
            "rankingInfo": [info.to_dict() for info in self.ranking_info],
            "metadata": copy.deepcopy(self.metadata),
        }


@dataclass(frozen=True)
class RankedTrack:
    """Result record of a ranking strategy: a fresh track copy and its 1-based rank."""

    track: CanonicalTrack
    rank: int


@dataclass
class Album:
    """
    An album as handed to the engine.

    Tracks may be raw dicts or canonical tracks; ranking strategies
    normalize on read and never mutate them.
    """

    id: str
    title: str = ""
    artist: str = ""
    tracks: List[Any] = field(default_factory=list)
    ranking_consolidated: List[Dict[str, Any]] = field(default_factory=list)
    best_ever_evidence: List[Dict[str, Any]] = field(default_factory=list)
    ranking_acclaim: List[Dict[str, Any]] = field(default_factory=list)
    ranking_sources: List[Any] = field(default_factory=list)
    user_ranking: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], "Album"], index: int = 0) -> "Album":
        """Build an album from a raw dict, tolerating missing or malformed fields."""
        if isinstance(data, Album):
            return data
        raw = data if isinstance(data, dict) else {}

        def _list(key: str) -> List[Any]:
            value = raw.get(key)
            return list(value) if isinstance(value, list) else []

        return cls(
            id=str(raw.get("id") or f"album_{index + 1}"),
            title=str(raw.get("title") or ""),
            artist=str(raw.get("artist") or ""),
            tracks=_list("tracks"),
            ranking_consolidated=_list("rankingConsolidated"),
            best_ever_evidence=_list("bestEverEvidence"),
            ranking_acclaim=_list("rankingAcclaim"),
            ranking_sources=_list("rankingSources"),
            user_ranking=_list("userRanking"),
        )


@dataclass
class Playlist:
    id: str
    title: str
    subtitle: str = ""
    kind: PlaylistKind = "deep_cuts"
    tracks: List[CanonicalTrack] = field(default_factory=list)
    # Original deep-cut volume numbers held by this playlist (merges widen the span)
    volumes: List[int] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return total_duration(self.tracks)

    @property
    def is_orphan(self) -> bool:
        return self.kind == "orphan"

    @property
    def is_greatest_hits(self) -> bool:
        return self.kind in GREATEST_HITS_KINDS

    def album_ids(self) -> List[str]:
        return [t.origin_album_id for t in self.tracks if t.origin_album_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "kind": self.kind,
            "duration": self.duration,
            "tracks": [track.to_dict() for track in self.tracks],
        }


def total_duration(tracks: Iterable[CanonicalTrack]) -> float:
    """Sum track durations in seconds; missing durations count as zero."""
    return sum((t.duration or 0) for t in tracks or [])


def renumber_playlists(playlists: List[Playlist]) -> None:
    """Reassign sequential ids p1..pN after structural changes."""
    for idx, playlist in enumerate(playlists):
        playlist.id = f"p{idx + 1}"
