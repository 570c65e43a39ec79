"""Tests for logging setup"""

import logging

import pytest

from registration_api.logging_config import QUIET_LOGGERS, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}

    yield

    root.handlers[:] = handlers
    root.setLevel(level)
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)


def test_level_and_format_from_settings(restore_logging):
    setup_logging({"log_level": "debug", "log_format": "%(name)s|%(message)s"})

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert all(h.formatter._fmt == "%(name)s|%(message)s" for h in root.handlers)


def test_info_and_warnings_split_across_streams(restore_logging, capsys):
    setup_logging({"log_level": "INFO"})
    logger = logging.getLogger("registration_api.test")

    logger.info("stored")
    logger.warning("duplicate")

    captured = capsys.readouterr()
    assert "INFO:registration_api.test:stored" in captured.out
    assert "duplicate" not in captured.out
    assert "WARNING:registration_api.test:duplicate" in captured.err


@pytest.mark.parametrize("echo,expected", [(False, logging.WARNING), (True, logging.NOTSET)])
def test_sqlalchemy_quieted_unless_echo(restore_logging, echo, expected):
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    setup_logging({"log_level": "INFO", "database_echo": echo})

    assert all(logging.getLogger(name).level == expected for name in QUIET_LOGGERS)
