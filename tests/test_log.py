"""
Tests for log.py - line format and the daily log file.
"""

from datetime import datetime
from unittest.mock import patch

import pytest
from hop.utils import log
from hop.utils.time import TZ_PACIFIC


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(log, "BOT_LOG_DIR", None)
    monkeypatch.setattr(log, "BOT_LOG_PREFIX", "bot")
    log.setup_log_paths(tmp_path)
    return tmp_path


class TestLogLine:

    def test_stdout_only_without_setup(self, monkeypatch, capsys):
        monkeypatch.setattr(log, "BOT_LOG_DIR", None)
        log.log_line("hello", "warn")
        assert "- WARN | hello" in capsys.readouterr().out

    def test_file_rolls_over_at_pacific_midnight(self, log_dir):
        days = [
            datetime(2021, 9, 10, 23, 59, tzinfo=TZ_PACIFIC),
            datetime(2021, 9, 11, 0, 1, tzinfo=TZ_PACIFIC),
        ]
        with patch('hop.utils.log.now_pacific', side_effect=days):
            log.log_line("before midnight")
            log.log_line("after midnight")

        assert "before midnight" in (log_dir / "bot-2021-09-10.log").read_text(encoding="utf-8")
        assert "after midnight" in (log_dir / "bot-2021-09-11.log").read_text(encoding="utf-8")
        assert "after midnight" not in (log_dir / "bot-2021-09-10.log").read_text(encoding="utf-8")

    def test_prefix_format(self, log_dir):
        ts = datetime(2021, 9, 10, 5, 0, 7, tzinfo=TZ_PACIFIC)
        with patch('hop.utils.log.now_pacific', return_value=ts):
            log.log_line("x")
        line = (log_dir / "bot-2021-09-10.log").read_text(encoding="utf-8").strip()
        assert line == "2021-09-10 // 05:00:07-07:00 - INFO | x"


class TestCommandLine:

    def test_once_logs_to_file(self, tmp_path, monkeypatch):
        import bot

        class OneCycle:
            def __init__(self, cfg):
                pass

            def run_cycle(self):
                log.log_line("cycle ran")
                return object()

        monkeypatch.setattr(log, "BOT_LOG_DIR", None)
        monkeypatch.setattr(bot, "LOG_DIR", tmp_path)
        monkeypatch.setattr(bot, "load_config", lambda root: {})
        monkeypatch.setattr(bot, "Pipeline", OneCycle)

        assert bot.main(["--once"]) == 0
        files = list(tmp_path.glob("bot-*.log"))
        assert len(files) == 1
        assert "cycle ran" in files[0].read_text(encoding="utf-8")
