"""Tests for omnitrace/config.py and omnitrace/logging_config.py"""

import json
import logging

import pytest

from omnitrace import ARGS_DIR
from omnitrace.config import OmnitraceConfig, PrivacyConfig, load_and_validate, load_config
from omnitrace.logging_config import setup_logging


class TestOmnitraceConfig:
    def test_defaults(self):
        config = OmnitraceConfig()
        assert config.storage.backend == "sqlite"
        assert config.storage.database_path == "data/omnitrace.db"
        assert config.session.idle_timeout_seconds == 60
        assert config.session.recover_unclosed_sessions is True
        assert config.timeline.cognitive_mode == "focus"
        assert config.heatmap.bin_count == 100
        assert config.omnibrain.intelligence_mode == "explain"
        assert config.omnibrain.context_scope == "today"
        assert config.omnibrain.record_queries is True
        assert config.privacy.private_mode is False

    def test_valid_overrides(self):
        config = OmnitraceConfig(
            storage={"backend": "memory"},
            omnibrain={"intelligence_mode": "coach", "context_scope": "week"},
        )
        assert config.storage.backend == "memory"
        assert config.omnibrain.intelligence_mode == "coach"
        assert config.omnibrain.context_scope == "week"

    def test_extra_keys_allowed(self):
        config = OmnitraceConfig(timeline={"cognitive_mode": "flow", "theme": "dark"})
        assert config.timeline.cognitive_mode == "flow"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"timeline": {"cognitive_mode": "sleepy"}},
            {"heatmap": {"bin_count": 0}},
            {"session": {"idle_timeout_seconds": 0}},
            {"omnibrain": {"context_scope": "month"}},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValueError):
            OmnitraceConfig(**overrides)


class TestLoadConfig:
    def test_shipped_yaml_matches_defaults(self):
        assert load_config(ARGS_DIR) == OmnitraceConfig()

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path) == OmnitraceConfig()

    def test_reads_yaml(self, tmp_path):
        (tmp_path / "omnitrace.yaml").write_text("privacy:\n  private_mode: true\nheatmap:\n  bin_count: 24\n")

        config = load_config(tmp_path)

        assert config.privacy.private_mode is True
        assert config.heatmap.bin_count == 24

    def test_empty_yaml(self, tmp_path):
        (tmp_path / "omnitrace.yaml").write_text("")

        assert load_config(tmp_path) == OmnitraceConfig()

    def test_invalid_yaml_falls_back(self, tmp_path):
        (tmp_path / "omnitrace.yaml").write_text("heatmap:\n  bin_count: -5\n")

        assert load_config(tmp_path).heatmap.bin_count == 100

    def test_explicit_model_class(self, tmp_path):
        (tmp_path / "privacy.yaml").write_text("private_mode: true\n")

        config = load_and_validate("privacy", PrivacyConfig, args_dir=tmp_path)

        assert config.private_mode is True

    def test_unknown_config_name(self):
        with pytest.raises(ValueError):
            load_and_validate("nonexistent")


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_setup_logging_sets_level(self):
        setup_logging("debug", json_output=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_unknown_level_defaults_to_warning(self):
        setup_logging("chatty", json_output=False)

        assert logging.getLogger().level == logging.WARNING

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("OMNITRACE_LOG_LEVEL", "error")

        setup_logging()

        assert logging.getLogger().level == logging.ERROR

    def test_json_lines_on_stderr(self, capsys):
        setup_logging("info", json_output=True)

        logging.getLogger("omnitrace.test").info("store opened")

        captured = capsys.readouterr()
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "store opened"
        assert record["level"] == "info"
        assert record["logger"] == "omnitrace.test"
        assert captured.out == ""
