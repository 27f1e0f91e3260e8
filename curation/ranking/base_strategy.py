"""
Base Ranking Strategy
=====================

A ranking strategy decides how the tracks of one album are ordered. It is
the "source of truth" selector, decoupled from the distribution algorithms
that consume its output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from curation.models import Album, CanonicalTrack, RankedTrack


@dataclass(frozen=True)
class RankingStrategyMetadata:
    """Static description of a ranking strategy for selection UIs."""

    id: str
    name: str
    description: str
    title_prefix: str = ""
    """Prefix used when a Top-N playlist title is seeded from this strategy."""


class RankingStrategy(ABC):
    """Abstract base class for track ranking strategies.

    Subclasses must implement rank(), returning every track of the album in
    descending-quality order with 1-based ranks. Absence of ranking evidence
    is never an error: strategies fall back to original album order.
    """

    metadata = RankingStrategyMetadata(
        id="abstract",
        name="Abstract Strategy",
        description="Base class",
    )

    def __init__(self, **options):
        self.options = options

    @classmethod
    def get_metadata(cls) -> RankingStrategyMetadata:
        return cls.metadata

    @abstractmethod
    def rank(self, album: Album) -> List[RankedTrack]:
        """Rank the tracks of an album.

        Args:
            album: Album with raw or canonical tracks (never mutated)

        Returns:
            RankedTrack records holding fresh track copies, ranks 1..N
        """
        raise NotImplementedError(f"{type(self).__name__}.rank() must be implemented by subclass")

    @staticmethod
    def number_tracks(tracks: List[CanonicalTrack]) -> List[RankedTrack]:
        """Wrap already-sorted tracks into ranked records numbered from 1."""
        return [RankedTrack(track=track, rank=idx + 1) for idx, track in enumerate(tracks)]
