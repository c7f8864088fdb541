"""Tests for logging setup."""

import logging

import pytest

from utils.logging import setup_logging


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    logging.getLogger("urllib3").setLevel(logging.NOTSET)


def test_string_level(restore_root_level):
    logger = setup_logging(level="debug")
    assert logger.name == "healthscan"
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger().handlers
    # Request chatter stays out of DEBUG output
    assert logging.getLogger("urllib3").level == logging.WARNING
    print("✓ String level test passed")


def test_unknown_level_falls_back_to_info(restore_root_level):
    setup_logging(level="LOUD")
    assert logging.getLogger().level == logging.INFO
    print("✓ Unknown level test passed")
