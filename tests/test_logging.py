"""Tests for logging setup."""

import logging

import pytest

from collaborator.utils.logging import parse_verbosity, setup_logging, strip_verbosity_flags


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    "args, expected",
    [
        ([], 0),
        (["config.yaml"], 0),
        (["-v"], 1),
        (["config.yaml", "-vv"], 2),
        (["-v", "-vvv"], 3),
    ],
)
def test_parse_verbosity(args, expected):
    assert parse_verbosity(args) == expected


def test_strip_verbosity_flags():
    assert strip_verbosity_flags(["-vv", "custom.yaml"]) == ["custom.yaml"]


@pytest.mark.parametrize("verbosity, level", [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG)])
def test_console_level_follows_verbosity(tmp_path, verbosity, level):
    setup_logging(verbosity=verbosity, log_file=str(tmp_path / "bot.log"))

    console, file_handler = logging.getLogger().handlers
    assert console.level == level
    assert file_handler.level == logging.DEBUG


def test_file_receives_debug_output(tmp_path):
    log_file = tmp_path / "nested" / "bot.log"
    setup_logging(verbosity=0, log_file=str(log_file))

    logging.getLogger("collaborator.test").debug("trace line")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "trace line" in log_file.read_text(encoding="utf-8")


def test_default_log_file_is_timestamped(tmp_path):
    setup_logging(log_dir=str(tmp_path / "logs"))
    files = list((tmp_path / "logs").glob("collaborator_*.log"))
    assert len(files) == 1


def test_noisy_loggers_are_quieted_below_vvv(tmp_path):
    setup_logging(verbosity=2, log_file=str(tmp_path / "bot.log"))
    assert logging.getLogger("httpx").level == logging.WARNING
