# -*- coding: utf-8 -*-
"""
Album Curation Engine - Main Application
Ranks album tracks and distributes them into target-duration playlists
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from curation.config_loader import Config
from curation.logging_utils import RunSummary, add_logging_args, configure_logging, resolve_log_level
from curation.playlist.config import GenerationConfig
from curation.playlist.pipeline import generate_playlists
from curation.playlist.playlist_factory import list_algorithms
from curation.playlist.reporter import log_report
from curation.playlist.strategies.base_strategy import GenerationResult

logger = logging.getLogger("main_app")


def load_albums(path: str) -> List[Any]:
    """Read albums from a JSON file: a list, or an object with an "albums" list."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('albums')
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of albums in {path}")
    return data


class CurationApp:
    """Main application orchestrator"""

    def __init__(self, config: Optional[Config] = None, overrides: Optional[Dict[str, Any]] = None):
        self.config = config
        if config is not None:
            self.generation_config = config.generation_config(overrides)
        else:
            self.generation_config = GenerationConfig.from_dict(overrides)
        self.logger = logging.getLogger("main_app")

    def run(self, albums_path: str, output_path: Optional[str] = None) -> GenerationResult:
        cfg: GenerationConfig = self.generation_config
        summary = RunSummary("Curation", self.logger)

        albums = load_albums(albums_path)
        self.logger.info(f"Loaded {len(albums)} albums from {albums_path}")

        result = generate_playlists(albums, cfg)
        log_report(result, target_seconds=cfg.target_seconds, flexibility_seconds=cfg.flexibility_seconds)

        payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        if output_path:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(payload)
            self.logger.info(f"Wrote result to {output_path}")
        else:
            sys.stdout.write(payload + "\n")

        summary.add("algorithm", cfg.algorithm_id)
        summary.add("albums", len(result.ranking_summary))
        summary.add("playlists", len(result.playlists))
        summary.add("tracks", result.track_count)
        summary.add("orphan_tracks", sum(len(p.tracks) for p in result.playlists if p.is_orphan))
        summary.log()
        return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Curate album tracks into target-duration playlists"
    )
    parser.add_argument(
        "--albums",
        type=str,
        metavar="PATH",
        help="JSON file with the albums to curate"
    )
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Optional YAML configuration (curation: section)"
    )
    parser.add_argument(
        "--algorithm",
        type=str,
        help="Distribution algorithm id (see --list-algorithms)"
    )
    parser.add_argument(
        "--ranking",
        choices=["balanced", "bea", "acclaim", "spotify", "popularity", "user"],
        help="Ranking strategy (default: balanced)"
    )
    parser.add_argument(
        "--target-minutes",
        type=float,
        help="Target playlist duration in minutes (default: 45)"
    )
    parser.add_argument(
        "--output",
        type=str,
        metavar="PATH",
        help="Write the JSON result here instead of stdout"
    )
    parser.add_argument(
        "--list-algorithms",
        action="store_true",
        help="List available algorithms and exit"
    )
    add_logging_args(parser)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    config: Optional[Config] = None
    config_error: Optional[Exception] = None
    if args.config:
        try:
            config = Config(args.config)
        except (FileNotFoundError, ValueError) as e:
            config_error = e

    # CLI flags win over the config file's logging section
    configure_logging(
        level=resolve_log_level(args, default=config.log_level if config else 'INFO'),
        log_file=args.log_file or (config.log_file if config else None),
    )

    if config_error is not None:
        logger.error(f"Configuration Error: {config_error}")
        return 1

    if args.list_algorithms:
        for meta in list_algorithms():
            marker = " (recommended)" if meta["isRecommended"] else ""
            print(f"{meta['id']:<20} [{meta['badge']}] {meta['name']}{marker}")
        return 0

    if not args.albums:
        parser.error("--albums is required")

    overrides: Dict[str, Any] = {}
    if args.algorithm:
        overrides["algorithm_id"] = args.algorithm
    if args.ranking:
        overrides["ranking_id"] = args.ranking
    if args.target_minutes:
        overrides["target_seconds"] = args.target_minutes * 60

    try:
        app = CurationApp(config, overrides)
        app.run(args.albums, args.output)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
