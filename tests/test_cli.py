"""
CLI and configuration tests.
"""

import argparse
import logging

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pinormal import cli
from pinormal.config import RunConfig
from pinormal.log import LOGGER_NAME, setup_logging
from pinormal.pipeline import BatchScheduler


class TestRunConfig:
    """Defaults and validation."""

    def test_defaults_are_valid(self):
        config = RunConfig().validate()
        assert config.max_digits is None
        assert config.growth == 2
        assert config.display

    @pytest.mark.parametrize("field,value", [
        ("max_digits", 0),
        ("initial_terms", 0),
        ("max_terms", 1),
        ("growth", 1),
        ("guard_digits", -3),
        ("workers", 0),
        ("history_capacity", 2),
        ("refresh_hz", 0.0),
        ("log_level", "LOUD"),
    ])
    def test_invalid_values(self, field, value):
        config = RunConfig(**{field: value})
        with pytest.raises(ValueError):
            config.validate()

    def test_from_args(self):
        args = cli.build_parser().parse_args(
            ["--max-digits", "1e4", "--workers", "3", "--no-display", "--log-level", "debug"])
        config = RunConfig.from_args(args)
        assert config.max_digits == 10_000
        assert config.workers == 3
        assert config.display is False
        assert config.log_level == "DEBUG"

    def test_to_dict(self):
        assert RunConfig(max_digits=5).to_dict()["max_digits"] == 5


class TestParser:

    def test_no_required_flags(self):
        args = cli.build_parser().parse_args([])
        assert args.max_digits is None
        assert not args.no_display

    def test_count_accepts_underscores(self):
        assert cli._count("1_000") == 1000
        assert cli._count("2e6") == 2_000_000

    def test_count_rejects_garbage(self):
        with pytest.raises(argparse.ArgumentTypeError):
            cli._count("lots")

    def test_count_rejects_infinity(self):
        for value in ("inf", "-inf", "1e999"):
            with pytest.raises(argparse.ArgumentTypeError):
                cli._count(value)

    def test_infinite_max_digits_exits_2(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--max-digits", "inf", "--no-display"])
        assert exc.value.code == 2

    def test_invalid_config_exits_2(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--max-digits", "0"])
        assert exc.value.code == 2


class TestMain:
    """End-to-end runs without the dashboard."""

    def test_headless_run_exits_zero(self, capsys):
        code = cli.main(["--no-display", "--max-digits", "2000",
                         "--initial-terms", "8", "--max-terms", "64"])
        assert code == cli.EXIT_OK
        assert "2,000" in capsys.readouterr().out

    def test_log_file_written(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        code = cli.main(["--no-display", "--max-digits", "500",
                         "--initial-terms", "8", "--log-file", str(log_file)])
        assert code == cli.EXIT_OK
        text = log_file.read_text()
        assert "computation started" in text
        assert "DEBUG" in text

    def test_internal_fault_exits_one(self, monkeypatch):
        def broken_step(self):
            raise ArithmeticError("boom")

        monkeypatch.setattr(BatchScheduler, "step", broken_step)
        assert cli.main(["--no-display"]) == cli.EXIT_FAULT


class TestLogging:

    def test_setup_replaces_handlers(self):
        setup_logging("INFO")
        logger = setup_logging("WARNING")
        assert logger.name == LOGGER_NAME
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING

    def test_child_loggers_propagate(self, tmp_path):
        log_file = tmp_path / "x.log"
        setup_logging("ERROR", str(log_file))
        logging.getLogger("pinormal.engine.digits").debug("hello from the engine")
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()
        assert "hello from the engine" in log_file.read_text()
