"""Tests for logging utilities."""
import argparse
import logging

import pytest

import curation.logging_utils as logging_utils
from curation.logging_utils import (
    RunSummary,
    add_logging_args,
    configure_logging,
    format_count,
    format_duration,
    resolve_log_level,
    stage_timer,
    truncate_list,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging_utils._logging_configured = False


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_installs_tagged_console_handler(self, restore_root_logger):
        configure_logging(level='WARNING', force=True)

        tagged = [h for h in restore_root_logger.handlers if getattr(h, "_curation_handler", False)]
        assert len(tagged) == 1
        assert tagged[0].level == logging.WARNING

    def test_idempotent_without_force(self, restore_root_logger):
        configure_logging(level='INFO', force=True)
        configure_logging(level='DEBUG')

        tagged = [h for h in restore_root_logger.handlers if getattr(h, "_curation_handler", False)]
        assert len(tagged) == 1
        assert tagged[0].level == logging.INFO

    def test_file_handler(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "run.log"
        configure_logging(level='INFO', log_file=str(log_file), force=True, console=False)

        logging.getLogger("test_file").info("Test message")
        for handler in restore_root_logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Test message" in content
        assert "| test_file | test_file_handler:" in content

    def test_force_replaces_only_own_handlers(self, restore_root_logger):
        foreign = logging.NullHandler()
        restore_root_logger.addHandler(foreign)

        configure_logging(level='INFO', force=True)
        configure_logging(level='ERROR', force=True)

        tagged = [h for h in restore_root_logger.handlers if getattr(h, "_curation_handler", False)]
        assert [h.level for h in tagged] == [logging.ERROR]
        assert foreign in restore_root_logger.handlers


class TestStageTimer:
    def test_logs_start_and_completion(self, caplog):
        logger = logging.getLogger("test_stage")
        with caplog.at_level(logging.DEBUG, logger="test_stage"):
            with stage_timer("Ranking", logger):
                pass

        assert "Ranking starting..." in caplog.text
        assert "Ranking completed in" in caplog.text

    def test_logs_completion_on_error(self, caplog):
        logger = logging.getLogger("test_stage")
        with caplog.at_level(logging.DEBUG, logger="test_stage"):
            with pytest.raises(RuntimeError):
                with stage_timer("Broken", logger):
                    raise RuntimeError("boom")

        assert "Broken completed in" in caplog.text


class TestFormatting:
    def test_format_count(self):
        assert format_count(1, "track") == "1 track"
        assert format_count(1200, "track") == "1,200 tracks"
        assert format_count(2, "album", "albums") == "2 albums"

    def test_format_duration(self):
        assert format_duration(2707) == "45m07s"
        assert format_duration(3725) == "1h02m05s"
        assert format_duration(None) == "0m00s"
        assert format_duration(-5) == "0m00s"

    def test_truncate_list(self):
        assert truncate_list([]) == "(none)"
        assert truncate_list(["a", "b"]) == "a, b"
        assert truncate_list(["a", "b", "c", "d", "e"]) == "a, b, c (+2 more)"


class TestLoggingArgs:
    def parse(self, *argv):
        parser = argparse.ArgumentParser()
        add_logging_args(parser)
        return parser.parse_args(list(argv))

    def test_default(self):
        assert resolve_log_level(self.parse()) == "INFO"

    def test_fallback_level_when_no_flag(self):
        assert resolve_log_level(self.parse(), default="DEBUG") == "DEBUG"
        assert resolve_log_level(self.parse("--log-level", "ERROR"), default="DEBUG") == "ERROR"

    def test_debug_beats_quiet(self):
        assert resolve_log_level(self.parse("--debug", "--quiet")) == "DEBUG"

    def test_quiet(self):
        assert resolve_log_level(self.parse("--quiet", "--log-level", "ERROR")) == "WARNING"

    def test_log_file(self):
        assert self.parse("--log-file", "x.log").log_file == "x.log"


class TestRunSummary:
    def test_logs_metrics(self, caplog):
        summary = RunSummary("Curation", logging.getLogger("test_summary"))
        summary.add("playlists", 4)
        summary.increment("orphan_tracks")
        summary.increment("orphan_tracks", 2)
        summary.add("ratio", 0.5)
        summary.set_timing(1.5)

        with caplog.at_level(logging.INFO, logger="test_summary"):
            summary.log()

        assert "CURATION SUMMARY" in caplog.text
        assert "Playlists: 4" in caplog.text
        assert "Orphan Tracks: 3" in caplog.text
        assert "Ratio: 0.50" in caplog.text
        assert "Total Time: 1.50s" in caplog.text
