"""Unit tests for circulardeps.cli.logging_setup."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from circulardeps.cli.logging_setup import setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def teardown_method(self) -> None:
        """Clean up the circulardeps logger after each test."""
        logger = logging.getLogger("circulardeps")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_returns_logger(self) -> None:
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "circulardeps"

    def test_default_level_is_info(self) -> None:
        assert setup_logging().level == logging.INFO

    def test_debug_level(self) -> None:
        assert setup_logging(level="DEBUG").level == logging.DEBUG

    def test_case_insensitive_level(self) -> None:
        assert setup_logging(level="warning").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert setup_logging(level="CHATTY").level == logging.INFO

    def test_has_rich_handler(self) -> None:
        logger = setup_logging()
        rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1

    def test_no_file_handler_by_default(self) -> None:
        logger = setup_logging()
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert file_handlers == []

    def test_file_handler_creates_parent_dirs(self, tmp_path: Path) -> None:
        log_file = tmp_path / "subdir" / "deep" / "check.log"
        setup_logging(log_file=log_file)
        assert log_file.parent.exists()

    def test_clears_existing_handlers(self) -> None:
        """Calling setup_logging twice doesn't duplicate handlers."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_custom_console(self) -> None:
        console = Console(stderr=True)
        logger = setup_logging(console=console)
        (handler,) = logger.handlers
        assert handler.console is console

    def test_module_loggers_propagate(self, tmp_path: Path) -> None:
        log_file = tmp_path / "check.log"
        setup_logging(level="DEBUG", log_file=log_file)
        logging.getLogger("circulardeps.graph_ops.cycles").debug("phase two started")
        for handler in logging.getLogger("circulardeps").handlers:
            handler.flush()
        content = log_file.read_text()
        assert "phase two started" in content
        assert "circulardeps.graph_ops.cycles" in content
