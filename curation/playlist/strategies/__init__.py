"""
Distribution Algorithms
=======================

Strategy pattern implementations for placing ranked tracks into playlists.

Available algorithms:
- BalancedCascadeAlgorithm: serpentine + cascade + merge + trim (recommended)
- SDraftBalancedAlgorithm: flexible Greatest Hits, minimum duration, album coverage
- SerpentineAlgorithm: full serpentine with swap balancing
- LegacyRoundRobinAlgorithm: round-robin with swap balancing
- TopNAlgorithm and presets: top N tracks of every album

Public API:
-----------
Base:
    DistributionAlgorithm
    AlgorithmMetadata
    GenerationResult
"""

from .balanced_cascade import BalancedCascadeAlgorithm
from .base_strategy import AlgorithmMetadata, DistributionAlgorithm, GenerationResult
from .legacy_round_robin import LegacyRoundRobinAlgorithm
from .sdraft_balanced import SDraftBalancedAlgorithm
from .serpentine import SerpentineAlgorithm
from .top_n import (
    Top3AcclaimedAlgorithm,
    Top3PopularAlgorithm,
    Top5AcclaimedAlgorithm,
    Top5PopularAlgorithm,
    TopNAcclaimedAlgorithm,
    TopNAlgorithm,
    TopNPopularAlgorithm,
    TopNUserAlgorithm,
)

__all__ = [
    "AlgorithmMetadata",
    "DistributionAlgorithm",
    "GenerationResult",
    "BalancedCascadeAlgorithm",
    "SDraftBalancedAlgorithm",
    "SerpentineAlgorithm",
    "LegacyRoundRobinAlgorithm",
    "TopNAlgorithm",
    "TopNAcclaimedAlgorithm",
    "TopNPopularAlgorithm",
    "TopNUserAlgorithm",
    "Top3AcclaimedAlgorithm",
    "Top3PopularAlgorithm",
    "Top5AcclaimedAlgorithm",
    "Top5PopularAlgorithm",
]
