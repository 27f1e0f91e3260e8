from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from curation.logging_utils import format_count, stage_timer
from curation.models import Album
from curation.playlist.config import GenerationConfig, default_generation_config
from curation.playlist.playlist_factory import create
from curation.playlist.strategies.base_strategy import GenerationResult
from curation.ranking import RankingStrategy

logger = logging.getLogger(__name__)


def _input_track_count(albums: List[Any]) -> int:
    count = 0
    for index, raw in enumerate(albums or []):
        if raw is not None:
            count += len(Album.from_dict(raw, index).tracks)
    return count


def generate_playlists(
    albums: List[Any],
    config: Optional[GenerationConfig] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
    ranking_strategy: Optional[RankingStrategy] = None,
) -> GenerationResult:
    """
    Run one generation end to end:
    - resolve the config (defaults + overrides)
    - instantiate the algorithm from the registry
    - rank, distribute, balance and trim via the algorithm
    Returns playlists, the per-album summary and the ranking sources.

    Raises:
        ValueError: If the configured algorithm id is not registered
    """
    cfg = (config or default_generation_config()).with_overrides(overrides)

    algorithm = create(cfg.algorithm_id, config=cfg, ranking_strategy=ranking_strategy)
    if algorithm is None:
        raise ValueError(f"Unknown algorithm id: {cfg.algorithm_id}")

    logger.info(
        f"Generating playlists: algorithm={cfg.algorithm_id} "
        f"ranking={algorithm.ranking_strategy.get_metadata().id} "
        f"albums={len(albums or [])} target={cfg.target_seconds / 60:.0f}min"
    )

    with stage_timer(f"Generation ({cfg.algorithm_id})", logger):
        result = algorithm.generate(albums)

    placed = result.track_count
    logger.info(
        f"Generated {format_count(len(result.playlists), 'playlist')} "
        f"with {format_count(placed, 'track')} from {format_count(len(result.ranking_summary), 'album')}"
    )

    if not algorithm.get_metadata().id.startswith("top-"):
        expected = _input_track_count(albums)
        if placed != expected:
            logger.warning(f"Track count mismatch: placed {placed} of {expected} input tracks")

    return result
