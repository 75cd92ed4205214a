"""Tests for environment configuration and the CLI logger."""

import logging

import pytest
from sadhana_scoring.config import get_data_dir, get_log_level, get_max_workers
from sadhana_scoring.utils.logger import ScoringLogger


class TestEnvironment:
    def test_data_dir_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SADHANA_DATA_DIR", str(tmp_path))
        assert get_data_dir() == tmp_path.resolve()

    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("SADHANA_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    @pytest.mark.parametrize("raw,expected", [("4", 4), ("0", 1), ("many", 8)])
    def test_max_workers(self, raw, expected, monkeypatch):
        monkeypatch.setenv("SADHANA_MAX_WORKERS", raw)
        assert get_max_workers() == expected


class TestScoringLogger:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_tracks_warnings_and_errors(self):
        log = ScoringLogger(log_level="DEBUG")
        log.warning("Unknown batch", batch="karna")
        log.error("Load failed", exception=ValueError("boom"), member="u1")
        assert log.get_summary() == {"warnings": 1, "errors": 1}
        assert "batch=karna" in log.warnings[0]["message"]
        assert log.errors[0]["exception"] == "boom"

    def test_file_output(self, tmp_path):
        log = ScoringLogger(log_file="run.log", log_dir=tmp_path)
        log.info("Scored week", entries=7)
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "Scored week [entries=7]" in (tmp_path / "run.log").read_text()
