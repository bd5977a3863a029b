"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest

from aligngen.utils.logging import get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    logger = logging.getLogger("aligngen")
    state = (logger.level, logger.propagate, logger.handlers[:])
    yield logger
    logger.setLevel(state[0])
    logger.propagate = state[1]
    logger.handlers[:] = state[2]


def test_module_loggers_share_the_package_namespace():
    assert get_logger("aligngen.codegen.generate").name == "aligngen.codegen.generate"
    assert get_logger("plugins.custom").name == "aligngen.plugins.custom"
    assert get_logger("aligngen").name == "aligngen"


def test_level_from_environment(monkeypatch, restore_root_logger):
    monkeypatch.setenv("ALIGNGEN_LOG_LEVEL", "debug")

    setup_logging()

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1


def test_repeated_setup_replaces_handler(restore_root_logger):
    setup_logging("INFO")
    setup_logging("ERROR")

    assert restore_root_logger.level == logging.ERROR
    assert len(restore_root_logger.handlers) == 1


def test_unknown_level_falls_back_to_warning(restore_root_logger):
    setup_logging("chatty")

    assert restore_root_logger.level == logging.WARNING
