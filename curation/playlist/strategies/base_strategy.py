"""
Base Distribution Algorithm
===========================

A distribution algorithm consumes ranked albums and places their tracks into
playlists. Every generate() call is a pure function of its inputs: the
caller's albums are never mutated and nothing carries over between runs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from curation.models import Album, CanonicalTrack, Playlist, RankingSource
from curation.playlist.config import GenerationConfig
from curation.playlist.hits import RankedAlbum
from curation.playlist.provenance import ProvenanceTracker
from curation.ranking import RankingStrategy, create_ranking_strategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlgorithmMetadata:
    """Static description of an algorithm for selection UIs."""

    id: str
    name: str
    badge: str
    description: str
    is_recommended: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "badge": self.badge,
            "description": self.description,
            "isRecommended": self.is_recommended,
        }


@dataclass
class GenerationResult:
    """Output of one generate() call."""

    playlists: List[Playlist] = field(default_factory=list)
    """Playlists in display order, ids p1..pN."""

    ranking_summary: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    """Per-album placement summary keyed by origin album id."""

    ranking_sources: List[RankingSource] = field(default_factory=list)
    """Deduplicated sources, in registration order."""

    @property
    def track_count(self) -> int:
        return sum(len(p.tracks) for p in self.playlists)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playlists": [p.to_dict() for p in self.playlists],
            "rankingSummary": self.ranking_summary,
            "rankingSources": [s.to_dict() for s in self.ranking_sources],
        }


class DistributionAlgorithm(ABC):
    """Abstract base class for playlist distribution algorithms.

    Subclasses must implement generate() and describe themselves through the
    class-level metadata and default_source.
    """

    metadata = AlgorithmMetadata(
        id="base",
        name="Base Algorithm",
        badge="ABSTRACT",
        description="Abstract base class - do not use directly",
    )

    default_source: Dict[str, Any] = {
        "name": "Curation Engine",
        "type": "internal",
        "description": "Internal curation",
        "secure": True,
    }

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        ranking_strategy: Optional[RankingStrategy] = None,
        **overrides: Any,
    ):
        """Initialize the algorithm.

        Args:
            config: Generation options (defaults when omitted)
            ranking_strategy: Strategy instance; built from config.ranking_id when omitted
            **overrides: camelCase or snake_case config overrides
        """
        base = config or GenerationConfig(algorithm_id=self.metadata.id)
        self.config = base.with_overrides(overrides)
        self.ranking_strategy = ranking_strategy or create_ranking_strategy(self.config.ranking_id)
        self.provenance = ProvenanceTracker()
        self.source = self.provenance.register_source(self.default_source)

    @classmethod
    def get_metadata(cls) -> AlgorithmMetadata:
        return cls.metadata

    @abstractmethod
    def generate(self, albums: List[Any]) -> GenerationResult:
        """Generate playlists from albums.

        Args:
            albums: Album objects or raw album dicts

        Returns:
            GenerationResult with playlists, summary and sources
        """
        raise NotImplementedError(f"{type(self).__name__}.generate() must be implemented by subclass")

    def start_run(self) -> None:
        """Reset per-run state so repeated generate() calls stay independent."""
        self.provenance = ProvenanceTracker()
        self.source = self.provenance.register_source(self.default_source)

    def rank_albums(self, albums: List[Any]) -> List[RankedAlbum]:
        """
        Rank every non-empty album and stamp ranks on fresh track copies.

        Starts a new run. Albums without tracks are skipped entirely: they
        register no sources and do not count towards album positions.
        """
        self.start_run()
        ranked: List[RankedAlbum] = []

        for index, raw in enumerate(albums or []):
            if raw is None:
                continue
            album = Album.from_dict(raw, index)
            if not album.tracks:
                logger.debug(f"Skipping album {album.id}: no tracks")
                continue

            ranked_tracks = self.ranking_strategy.rank(album)
            if not ranked_tracks:
                continue

            self.provenance.register_album(album)
            tracks = []
            for item in ranked_tracks:
                track = item.track.with_rank(item.rank)
                track.set_origin(album.id)
                tracks.append(track)
            ranked.append(RankedAlbum(album_id=album.id, position=len(ranked), tracks=tracks))

        logger.debug(
            f"{self.metadata.id}: ranked {len(ranked)} albums with "
            f"{self.ranking_strategy.get_metadata().id} strategy"
        )
        return ranked

    def annotate(self, track: CanonicalTrack, reason: str, score: Optional[float] = None) -> None:
        track.annotate(reason, self.source.name if self.source else None, score)

    def build_result(self, playlists: List[Playlist]) -> GenerationResult:
        return GenerationResult(
            playlists=playlists,
            ranking_summary=self.provenance.build_summary(playlists),
            ranking_sources=self.provenance.sources,
        )
