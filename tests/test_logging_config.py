"""Tests for vnode.logging_config."""

import logging
import logging.handlers
from pathlib import Path

import pytest

from vnode.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_setup_logging_writes_to_file(tmp_path: Path, restore_root_logger) -> None:
    settings = {"logging": {"file": "logs/node.log", "level": "debug"}}
    setup_logging(tmp_path, settings)

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.handlers.RotatingFileHandler)

    logging.getLogger("vnode.test").warning("ping failed: %s", "boom")
    root.handlers[0].flush()
    text = (tmp_path / "logs" / "node.log").read_text(encoding="utf-8")
    assert "[WARNING] vnode.test: ping failed: boom" in text


def test_setup_logging_console_optional(tmp_path: Path, restore_root_logger) -> None:
    setup_logging(tmp_path, {"logging": {"log_to_console": True}})
    kinds = [type(h) for h in restore_root_logger.handlers]
    assert logging.handlers.RotatingFileHandler in kinds
    assert logging.StreamHandler in kinds
    assert (tmp_path / "logs" / "vnode.log").exists()


def test_setup_logging_unknown_level_defaults_to_info(
    tmp_path: Path, restore_root_logger
) -> None:
    setup_logging(tmp_path, {"logging": {"level": "chatty"}})
    assert restore_root_logger.level == logging.INFO
