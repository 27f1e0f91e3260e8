"""
Unified logging utilities for the curation engine.

Entrypoints should call configure_logging() once at startup. Library modules
only ever use logging.getLogger(__name__).
"""
import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, List, Optional, Union

_logging_configured = False
_HANDLER_TAG = "_curation_handler"
_CONSOLE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(message)s'
_FILE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'


def configure_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    file_level: str = 'DEBUG',
    force: bool = False,
    console: bool = True,
) -> None:
    """
    Install the curation console and file handlers on the root logger.

    Only handlers tagged by a previous call are replaced, so handlers owned
    by a host application survive. Repeat calls are no-ops without force.

    Args:
        level: Console level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file; parent directories are created
        file_level: Level for the file handler
        force: Reconfigure even if already configured
        console: Add a stderr handler (stdout carries the JSON result)

    LOG_LEVEL and LOG_FILE in the environment override level and log_file.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    level = os.getenv('LOG_LEVEL', level).upper()
    if log_file is None:
        log_file = os.getenv('LOG_FILE')

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in root.handlers[:]:
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    handlers: List[logging.Handler] = []
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level, logging.INFO))
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FMT, datefmt='%H:%M:%S'))
        handlers.append(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(getattr(logging, file_level, logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(_FILE_FMT, datefmt='%Y-%m-%d %H:%M:%S'))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)

    _logging_configured = True
    logging.getLogger(__name__).debug(f"Logging configured: level={level}, file={log_file or 'none'}")


@contextmanager
def stage_timer(stage_name: str, logger: Optional[logging.Logger] = None):
    """
    Context manager for timing pipeline stages.

    Logs stage start and completion with timing, both at DEBUG: the engine is
    a library and runs far too quickly for per-stage INFO lines to be useful.

    Usage:
        with stage_timer("Ranking", logger):
            ranked = strategy.rank(album)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    logger.debug(f"{stage_name} starting...")
    start = time.perf_counter()

    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if elapsed < 1:
            logger.debug(f"{stage_name} completed in {elapsed*1000:.0f}ms")
        else:
            logger.debug(f"{stage_name} completed in {elapsed:.1f}s")


def format_count(n: int, singular: str, plural: Optional[str] = None) -> str:
    """
    Format a count with proper singular/plural form.

    Returns:
        Formatted string like "1 track" or "5 tracks"
    """
    if plural is None:
        plural = singular + 's'
    return f"{n:,} {singular if n == 1 else plural}"


def format_duration(seconds: Union[int, float, None]) -> str:
    """Render a playlist duration as minutes and seconds, e.g. "45m07s"."""
    seconds = max(0, int(round(seconds or 0)))
    minutes, sec = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m{sec:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes:02d}m{sec:02d}s"


def truncate_list(items: List[Any], max_items: int = 3, format_fn=str) -> str:
    """
    Format a list for logging, truncating if needed.

    Returns:
        Formatted string like "a1, a2, a3 (+5 more)"
    """
    if not items:
        return "(none)"

    result = ', '.join(format_fn(item) for item in items[:max_items])
    if len(items) > max_items:
        result += f" (+{len(items) - max_items} more)"
    return result


def add_logging_args(parser) -> None:
    """
    Add standard logging CLI arguments to an argparse parser.

    Usage:
        parser = argparse.ArgumentParser()
        add_logging_args(parser)
        args = parser.parse_args()
        configure_logging(level=resolve_log_level(args), log_file=args.log_file)
    """
    group = parser.add_argument_group('logging')
    group.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Set logging level (default: config file, else INFO)'
    )
    group.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging (shortcut for --log-level DEBUG)'
    )
    group.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress most output (shortcut for --log-level WARNING)'
    )
    group.add_argument(
        '--log-file',
        type=str,
        metavar='PATH',
        help='Write logs to file'
    )


def resolve_log_level(args, default: str = 'INFO') -> str:
    """
    Resolve log level from parsed arguments.

    Priority: --debug > --quiet > --log-level > default
    """
    if getattr(args, 'debug', False):
        return 'DEBUG'
    if getattr(args, 'quiet', False):
        return 'WARNING'
    return getattr(args, 'log_level', None) or default


class RunSummary:
    """
    Collect metrics during a run and log a summary at the end.

    Usage:
        summary = RunSummary("Curation")
        summary.add("playlists", 6)
        summary.increment("orphan_tracks", 2)
        summary.log()
    """

    def __init__(self, title: str, logger: Optional[logging.Logger] = None):
        self.title = title
        self.logger = logger or logging.getLogger(__name__)
        self.metrics: dict = {}
        self.timing: Optional[float] = None
        self.start_time = time.perf_counter()

    def add(self, key: str, value: Union[int, float, str]) -> None:
        """Add a metric to the summary."""
        self.metrics[key] = value

    def increment(self, key: str, amount: int = 1) -> None:
        """Increment a counter metric."""
        self.metrics[key] = self.metrics.get(key, 0) + amount

    def set_timing(self, seconds: float) -> None:
        """Set explicit timing (otherwise uses time since init)."""
        self.timing = seconds

    def log(self, level: int = logging.INFO) -> None:
        """Log the summary."""
        elapsed = self.timing if self.timing is not None else (time.perf_counter() - self.start_time)

        self.logger.log(level, "=" * 60)
        self.logger.log(level, f"{self.title.upper()} SUMMARY")

        for key, value in self.metrics.items():
            display_key = key.replace('_', ' ').title()
            if isinstance(value, float):
                self.logger.log(level, f"  {display_key}: {value:.2f}")
            else:
                self.logger.log(level, f"  {display_key}: {value}")

        self.logger.log(level, f"  Total Time: {elapsed:.2f}s")
        self.logger.log(level, "=" * 60)
