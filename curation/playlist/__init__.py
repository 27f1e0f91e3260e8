# Configuration and building blocks
from .config import (
    DEFAULT_ALGORITHM_ID,
    DEFAULT_RANKING_ID,
    GenerationConfig,
    default_generation_config,
)
from .provenance import ProvenanceTracker
from .balancing import Balancer
from .trimming import Trimmer

# Algorithms, registry and end-to-end entry point
from .strategies import AlgorithmMetadata, DistributionAlgorithm, GenerationResult
from .playlist_factory import create, get_algorithm, get_recommended, list_algorithms
from .pipeline import generate_playlists

from . import distribution
from . import hits
from . import ordering
from . import reporter

__all__ = [
    "DEFAULT_ALGORITHM_ID",
    "DEFAULT_RANKING_ID",
    "GenerationConfig",
    "default_generation_config",
    "ProvenanceTracker",
    "Balancer",
    "Trimmer",
    "AlgorithmMetadata",
    "DistributionAlgorithm",
    "GenerationResult",
    "create",
    "get_algorithm",
    "get_recommended",
    "list_algorithms",
    "generate_playlists",
    "distribution",
    "hits",
    "ordering",
    "reporter",
]
