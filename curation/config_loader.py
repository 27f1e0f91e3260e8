"""
Configuration Loader - Manages YAML configuration and environment variables
"""
import os
from typing import Any, Dict, Optional

import yaml

from curation.playlist.config import (
    DEFAULT_ALGORITHM_ID,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RANKING_ID,
    DEFAULT_TRACK_COUNT,
    GROUPING_STRATEGIES,
    OUTPUT_MODES,
    GenerationConfig,
    default_generation_config,
)

# (seconds key, minutes key) per duration setting
_DURATION_KEYS = {
    "target_seconds": ("target_seconds", "target_minutes"),
    "flexibility_seconds": ("flexibility_seconds", "flexibility_minutes"),
    "greatest_hits_max": ("greatest_hits_max_seconds", "greatest_hits_max_minutes"),
    "deep_cuts_max": ("deep_cuts_max_seconds", "deep_cuts_max_minutes"),
    "minimum_duration": ("minimum_seconds", "minimum_minutes"),
}


class Config:
    """Configuration manager for the curation engine"""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self.config = self._load_config()
        self._validate_config()

    def _load_config(self) -> dict:
        """Load configuration from YAML file"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {self.config_path}: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping: {self.config_path}")
        return data

    def _validate_config(self):
        """Validate section shapes and value ranges"""
        for section in ('curation', 'logging'):
            if section in self.config and not isinstance(self.config[section] or {}, dict):
                raise ValueError(f"Configuration section '{section}' must be a mapping")

        curation = self.section('curation')
        for seconds_key, minutes_key in _DURATION_KEYS.values():
            for key in (seconds_key, minutes_key):
                if key in curation:
                    value = curation[key]
                    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                        raise ValueError(f"curation.{key} must be a positive number, got {value!r}")

        for key in ('track_count', 'max_iterations'):
            if key in curation:
                value = curation[key]
                if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                    raise ValueError(f"curation.{key} must be a positive integer, got {value!r}")

        if 'output_mode' in curation and curation['output_mode'] not in OUTPUT_MODES:
            raise ValueError(
                f"curation.output_mode must be one of {', '.join(OUTPUT_MODES)}, got {curation['output_mode']!r}"
            )
        if 'grouping_strategy' in curation and curation['grouping_strategy'] not in GROUPING_STRATEGIES:
            raise ValueError(
                f"curation.grouping_strategy must be one of {', '.join(GROUPING_STRATEGIES)}, "
                f"got {curation['grouping_strategy']!r}"
            )

    def section(self, name: str) -> Dict[str, Any]:
        return self.config.get(name) or {}

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            section: Configuration section
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        return self.section(section).get(key, default)

    def _duration(self, name: str) -> Optional[float]:
        seconds_key, minutes_key = _DURATION_KEYS[name]
        curation = self.section('curation')
        if seconds_key in curation:
            return curation[seconds_key]
        if minutes_key in curation:
            return curation[minutes_key] * 60
        return None

    @property
    def algorithm_id(self) -> str:
        """Get distribution algorithm id (with environment variable override)"""
        return os.getenv('CURATION_ALGORITHM') or self.get('curation', 'algorithm', DEFAULT_ALGORITHM_ID)

    @property
    def ranking_id(self) -> str:
        """Get ranking strategy id (with environment variable override)"""
        return os.getenv('CURATION_RANKING') or self.get('curation', 'ranking', DEFAULT_RANKING_ID)

    @property
    def target_seconds(self) -> Optional[float]:
        """Get target playlist duration in seconds (None = algorithm default)"""
        return self._duration('target_seconds')

    @property
    def flexibility_seconds(self) -> Optional[float]:
        """Get tolerance around the target in seconds"""
        return self._duration('flexibility_seconds')

    @property
    def greatest_hits_max(self) -> Optional[float]:
        """Get Greatest Hits ceiling in seconds"""
        return self._duration('greatest_hits_max')

    @property
    def deep_cuts_max(self) -> Optional[float]:
        """Get Deep Cuts ceiling in seconds"""
        return self._duration('deep_cuts_max')

    @property
    def minimum_duration(self) -> Optional[float]:
        """Get minimum playlist duration in seconds"""
        return self._duration('minimum_duration')

    @property
    def output_mode(self) -> str:
        return self.get('curation', 'output_mode', 'auto')

    @property
    def grouping_strategy(self) -> str:
        return self.get('curation', 'grouping_strategy', 'album')

    @property
    def track_count(self) -> int:
        """Get tracks per album for Top-N algorithms"""
        return self.get('curation', 'track_count', DEFAULT_TRACK_COUNT)

    @property
    def max_iterations(self) -> int:
        """Get swap-balancing iteration limit"""
        return self.get('curation', 'max_iterations', DEFAULT_MAX_ITERATIONS)

    @property
    def backfill_hits(self) -> bool:
        return bool(self.get('curation', 'backfill_hits', False))

    @property
    def seed(self) -> Optional[int]:
        """Get random seed for the shuffle grouping"""
        return self.get('curation', 'seed')

    @property
    def log_level(self) -> str:
        return str(self.get('logging', 'level', 'INFO')).upper()

    @property
    def log_file(self) -> Optional[str]:
        return self.get('logging', 'file')

    def generation_config(self, overrides: Optional[Dict[str, Any]] = None) -> GenerationConfig:
        """
        Build a GenerationConfig from this file, then apply runtime overrides.

        Args:
            overrides: e.g. CLI flags; keys may be camelCase or snake_case
        """
        values: Dict[str, Any] = {
            'algorithm_id': self.algorithm_id,
            'ranking_id': self.ranking_id,
            'target_seconds': self.target_seconds,
            'flexibility_seconds': self.flexibility_seconds,
            'greatest_hits_max': self.greatest_hits_max,
            'deep_cuts_max': self.deep_cuts_max,
            'minimum_duration': self.minimum_duration,
            'output_mode': self.output_mode,
            'grouping_strategy': self.grouping_strategy,
            'track_count': self.track_count,
            'max_iterations': self.max_iterations,
            'backfill_hits': self.backfill_hits,
            'seed': self.seed,
        }
        return default_generation_config(overrides=values).with_overrides(overrides)
