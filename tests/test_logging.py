"""Tests for console logging setup."""
import logging

import pytest
from rich.logging import RichHandler

from fbaservices.infrastructure import logging as fba_logging


@pytest.fixture
def fresh_root(monkeypatch):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr(fba_logging, "_INITIALIZED", False)
    monkeypatch.setattr(fba_logging, "_JSON_MODE", False)
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_installs_single_console_handler(fresh_root):
    fba_logging.setup_logging(level="debug")
    assert fresh_root.level == logging.DEBUG
    assert len(fresh_root.handlers) == 1
    assert isinstance(fresh_root.handlers[0], RichHandler)
    assert not any(isinstance(h, logging.FileHandler) for h in fresh_root.handlers)


def test_setup_is_idempotent(fresh_root):
    fba_logging.setup_logging()
    handler = fresh_root.handlers[0]
    fba_logging.setup_logging(json_mode=True)
    assert fresh_root.handlers == [handler]
