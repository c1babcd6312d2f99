import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from accounts.enums import ErrorCode, Tier
from shared.logging import configure_structlog, resolve_json_mode, resolve_log_level, serialize_enums, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    configure_structlog()


@pytest.fixture
def _allow_file_logging():
    """Disable the _is_test guard so logging tests can create real file handlers."""
    with patch("shared.logging._is_test", return_value=False):
        yield


class TestSetupLogging:
    def test_configures_stdout_handler(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_skips_file_under_pytest(self, tmp_path):
        assert setup_logging(log_dir=tmp_path / "logs") is None
        assert not (tmp_path / "logs").exists()

    @pytest.mark.usefixtures("_allow_file_logging")
    def test_log_file_has_datetime_in_name(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path / "logs")

        assert log_path is not None
        assert log_path.name == "2025-03-15_10-30-45.log"

    @pytest.mark.usefixtures("_allow_file_logging")
    def test_writes_to_file(self, tmp_path):
        log_path = setup_logging(log_dir=str(tmp_path / "logs"))

        structlog.get_logger("test.writes_to_file").info("redeemed key", code="DEMO-1234-ABCD-5678")

        assert log_path is not None
        assert Path(log_path).parent == tmp_path / "logs"
        assert "DEMO-1234-ABCD-5678" in log_path.read_text()

    @pytest.mark.usefixtures("_allow_file_logging")
    def test_json_mode_writes_json_lines(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path)

        structlog.get_logger("test.json").info("logged in", tier=Tier.ADMIN)

        line = log_path.read_text().strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "logged in"
        assert entry["tier"] == "Admin"

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_custom_log_level(self):
        setup_logging(level=logging.WARNING)

        assert logging.getLogger().level == logging.WARNING


class TestEnvResolution:
    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            resolve_json_mode()

    def test_invalid_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            resolve_log_level()

    def test_level_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert resolve_log_level() == logging.DEBUG


class TestSerializeEnums:
    def test_replaces_enum_values(self):
        event = {"event": "operation rejected", "error": ErrorCode.KEY_ALREADY_USED, "count": 2}

        result = serialize_enums(None, "info", event)

        assert result == {"event": "operation rejected", "error": "key_already_used", "count": 2}
        assert type(result["error"]) is str
