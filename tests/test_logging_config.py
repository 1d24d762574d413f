import logging

import pytest

from hollowdeep.logging_config import GENERATION_LOGGER, configure_logging


@pytest.fixture
def generation_logger():
    logger = logging.getLogger(GENERATION_LOGGER)
    saved = logger.level
    yield logger
    logger.setLevel(saved)


def test_generation_logs_stay_quiet_under_debug(monkeypatch, generation_logger):
    monkeypatch.delenv("HD_LOG_LEVEL", raising=False)
    monkeypatch.delenv("HD_GENERATION_LOG_LEVEL", raising=False)
    configure_logging(logging.DEBUG)
    assert generation_logger.level == logging.INFO


def test_generation_level_follows_quieter_root(monkeypatch, generation_logger):
    monkeypatch.delenv("HD_GENERATION_LOG_LEVEL", raising=False)
    monkeypatch.setenv("HD_LOG_LEVEL", "error")
    configure_logging(logging.INFO)
    assert generation_logger.level == logging.ERROR


def test_generation_level_from_argument_and_env(monkeypatch, generation_logger):
    monkeypatch.delenv("HD_GENERATION_LOG_LEVEL", raising=False)
    configure_logging(logging.WARNING, generation_level=logging.DEBUG)
    assert generation_logger.level == logging.DEBUG

    monkeypatch.setenv("HD_GENERATION_LOG_LEVEL", "warning")
    configure_logging(logging.WARNING, generation_level=logging.DEBUG)
    assert generation_logger.level == logging.WARNING
