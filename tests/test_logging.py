"""Tests for designctx logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from designctx.logging import configure_logging, get_logger


def test_extractor_loggers_are_quiet_by_default() -> None:
    root = configure_logging()

    assert root.level == logging.INFO
    assert len(root.handlers) == 1
    assert get_logger("extractors").getEffectiveLevel() == logging.WARNING
    assert get_logger("extractors.styles").getEffectiveLevel() == logging.WARNING
    assert get_logger("analyzers.complexity").getEffectiveLevel() == logging.WARNING
    assert get_logger("orchestrator").getEffectiveLevel() == logging.INFO


def test_verbose_restores_debug_for_extractors() -> None:
    configure_logging()
    configure_logging(verbose=True)

    assert get_logger("extractors.styles").getEffectiveLevel() == logging.DEBUG
    assert get_logger("analyzers").level == logging.NOTSET


def test_repeat_configuration_does_not_stack_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "designctx.log"
    configure_logging(log_file=log_file)
    root = configure_logging(log_file=log_file)

    get_logger("orchestrator").info("context ready")

    assert len(root.handlers) == 2
    for handler in root.handlers:
        handler.flush()
    assert "context ready" in log_file.read_text(encoding="utf-8")
    configure_logging()
