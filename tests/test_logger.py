"""Tests for the shared logger factory."""
import logging

from core.logger import get_logger, resolve_level


def test_get_logger_does_not_stack_handlers():
    first = get_logger("tests.logger.same")
    count = len(first.handlers)
    second = get_logger("tests.logger.same")
    assert first is second
    assert len(second.handlers) == count
    assert count >= 1


def test_explicit_level_wins():
    assert get_logger("tests.logger.debug", level=logging.DEBUG).level == logging.DEBUG


def test_resolve_level_names():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" warning ") == logging.WARNING
    assert resolve_level("chatty") == logging.INFO
