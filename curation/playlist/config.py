from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Literal, Optional

OutputMode = Literal["single", "multiple", "auto"]
GroupingStrategy = Literal["album", "flat_ranked", "artist", "interleave", "shuffle"]

DEFAULT_ALGORITHM_ID = "balanced-cascade"
DEFAULT_RANKING_ID = "balanced"

DEFAULT_TARGET_SECONDS = 45 * 60
DEFAULT_FLEXIBILITY_SECONDS = 7 * 60
DEFAULT_GREATEST_HITS_MAX = 60 * 60
DEFAULT_DEEP_CUTS_MAX = 48 * 60
DEFAULT_MINIMUM_DURATION = 30 * 60
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TRACK_COUNT = 3

OUTPUT_MODES = ("single", "multiple", "auto")
GROUPING_STRATEGIES = ("album", "flat_ranked", "artist", "interleave", "shuffle")

# camelCase keys of the external configuration contract
_CAMEL_KEYS = {
    "algorithmId": "algorithm_id",
    "rankingId": "ranking_id",
    "targetSeconds": "target_seconds",
    "targetDuration": "target_seconds",
    "flexibilitySeconds": "flexibility_seconds",
    "greatestHitsMax": "greatest_hits_max",
    "deepCutsMax": "deep_cuts_max",
    "minimumDuration": "minimum_duration",
    "outputMode": "output_mode",
    "groupingStrategy": "grouping_strategy",
    "trackCount": "track_count",
    "maxIterations": "max_iterations",
    "backfillHits": "backfill_hits",
}

_POSITIVE_NUMBERS = (
    "target_seconds",
    "flexibility_seconds",
    "greatest_hits_max",
    "deep_cuts_max",
    "minimum_duration",
)


@dataclass(frozen=True)
class GenerationConfig:
    """
    Options for one generation run.

    Durations are in seconds. Omitted or invalid values fall back to the
    defaults above; nothing here ever raises on bad caller input.
    """

    algorithm_id: str = DEFAULT_ALGORITHM_ID
    ranking_id: str = DEFAULT_RANKING_ID
    target_seconds: float = DEFAULT_TARGET_SECONDS
    flexibility_seconds: float = DEFAULT_FLEXIBILITY_SECONDS
    greatest_hits_max: float = DEFAULT_GREATEST_HITS_MAX
    deep_cuts_max: float = DEFAULT_DEEP_CUTS_MAX
    minimum_duration: float = DEFAULT_MINIMUM_DURATION
    output_mode: OutputMode = "auto"
    grouping_strategy: GroupingStrategy = "album"
    track_count: int = DEFAULT_TRACK_COUNT
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    backfill_hits: bool = False
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> "GenerationConfig":
        """Build a config from camelCase or snake_case options."""
        return default_generation_config(overrides=options)

    def with_overrides(self, overrides: Optional[Dict[str, Any]]) -> "GenerationConfig":
        """Return a copy with validated overrides applied."""
        if not overrides:
            return self
        return replace(self, **_clean_overrides(overrides))


def _clean_overrides(options: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(GenerationConfig)}
    cleaned: Dict[str, Any] = {}

    for key, value in (options or {}).items():
        name = _CAMEL_KEYS.get(key, key)
        if name not in known or value is None:
            continue

        if name in _POSITIVE_NUMBERS:
            try:
                number = float(value)
            except (TypeError, ValueError):
                continue
            if number > 0:
                cleaned[name] = int(number) if number.is_integer() else number
        elif name in ("track_count", "max_iterations"):
            try:
                number = int(value)
            except (TypeError, ValueError):
                continue
            if number > 0:
                cleaned[name] = number
        elif name == "output_mode":
            if str(value).lower() in OUTPUT_MODES:
                cleaned[name] = str(value).lower()
        elif name == "grouping_strategy":
            if str(value).lower() in GROUPING_STRATEGIES:
                cleaned[name] = str(value).lower()
        elif name == "backfill_hits":
            cleaned[name] = bool(value)
        elif name == "seed":
            try:
                cleaned[name] = int(value)
            except (TypeError, ValueError):
                continue
        else:
            text = str(value).strip()
            if text:
                cleaned[name] = text

    return cleaned


def default_generation_config(
    algorithm_id: Optional[str] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> GenerationConfig:
    """
    Return the default config, optionally for a given algorithm, with overrides.

    Args:
        algorithm_id: Registry id; overrides may still replace it
        overrides: camelCase or snake_case options (e.g. from YAML or a request)
    """
    base = GenerationConfig()
    if algorithm_id:
        base = replace(base, algorithm_id=algorithm_id)
    return base.with_overrides(overrides)
