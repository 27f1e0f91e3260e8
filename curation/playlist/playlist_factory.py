"""
Playlist Factory
================

Registry mapping algorithm ids to distribution algorithm classes, plus the
metadata listing used by selection UIs. Registration order is display
order; the recommended algorithm comes first.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type

from .config import GenerationConfig
from .strategies import (
    BalancedCascadeAlgorithm,
    DistributionAlgorithm,
    LegacyRoundRobinAlgorithm,
    SDraftBalancedAlgorithm,
    SerpentineAlgorithm,
    Top3AcclaimedAlgorithm,
    Top3PopularAlgorithm,
    Top5AcclaimedAlgorithm,
    Top5PopularAlgorithm,
    TopNAcclaimedAlgorithm,
    TopNAlgorithm,
    TopNPopularAlgorithm,
    TopNUserAlgorithm,
)

logger = logging.getLogger(__name__)

_ALGORITHMS: Dict[str, Type[DistributionAlgorithm]] = {}

# Former ids still accepted by create() and get_algorithm()
_ALIASES = {
    "mjrp-balanced-cascade": "balanced-cascade",
}


def register_algorithm(algorithm_class: Type[DistributionAlgorithm]) -> None:
    algorithm_id = algorithm_class.get_metadata().id
    _ALGORITHMS[algorithm_id] = algorithm_class
    logger.debug(f"Registered algorithm: {algorithm_id} ({algorithm_class.__name__})")


for _cls in (
    BalancedCascadeAlgorithm,
    SDraftBalancedAlgorithm,
    SerpentineAlgorithm,
    LegacyRoundRobinAlgorithm,
    TopNAlgorithm,
    TopNAcclaimedAlgorithm,
    TopNPopularAlgorithm,
    TopNUserAlgorithm,
    Top3AcclaimedAlgorithm,
    Top3PopularAlgorithm,
    Top5AcclaimedAlgorithm,
    Top5PopularAlgorithm,
):
    register_algorithm(_cls)


def get_algorithm(algorithm_id: Optional[str]) -> Optional[Type[DistributionAlgorithm]]:
    """Return the class registered under algorithm_id (or an alias), else None."""
    if not algorithm_id:
        return None
    key = algorithm_id.strip().lower()
    return _ALGORITHMS.get(_ALIASES.get(key, key))


def list_algorithms() -> List[Dict[str, Any]]:
    """Metadata of every registered algorithm, in display order."""
    return [cls.get_metadata().to_dict() for cls in _ALGORITHMS.values()]


def get_recommended() -> str:
    """Id of the recommended algorithm (the first registered when none is flagged)."""
    for algorithm_id, cls in _ALGORITHMS.items():
        if cls.get_metadata().is_recommended:
            return algorithm_id
    return next(iter(_ALGORITHMS))


def create(
    algorithm_id: Optional[str],
    options: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Optional[DistributionAlgorithm]:
    """
    Instantiate an algorithm by id.

    Args:
        algorithm_id: Registry id
        options: camelCase or snake_case generation options
        **kwargs: Passed to the algorithm (config=, ranking_strategy=)

    Returns:
        The algorithm instance, or None for an unknown id
    """
    algorithm_class = get_algorithm(algorithm_id)
    if algorithm_class is None:
        logger.warning(f"Unknown algorithm: {algorithm_id}")
        return None

    config = kwargs.pop("config", None) or GenerationConfig(algorithm_id=algorithm_class.get_metadata().id)
    return algorithm_class(config=config.with_overrides(options), **kwargs)
