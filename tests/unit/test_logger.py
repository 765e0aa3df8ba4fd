"""
Unit tests for logging setup.
"""

import importlib
import logging

import colorlog

import cbmt.utils.logger as logger_module
from cbmt.utils.logger import get_logger, setup_logging


class TestLogger:
    """Tests for subsystem loggers and setup_logging."""

    def test_child_logger_names(self):
        """Subsystem loggers hang off the cbmt root logger."""
        assert get_logger("tree").name == "cbmt.tree"
        assert get_logger("proof").parent is logging.getLogger("cbmt")

    def test_import_installs_no_output(self):
        """Importing the library adds only a NullHandler."""
        root = logging.getLogger("cbmt")
        saved = list(root.handlers)
        for handler in saved:
            root.removeHandler(handler)
        try:
            importlib.reload(logger_module)
            get_logger("tree")

            assert [type(h) for h in root.handlers] == [logging.NullHandler]
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            for handler in saved:
                root.addHandler(handler)

    def test_setup_console_only(self):
        """Default setup installs a single colored console handler."""
        handlers = setup_logging(level=logging.WARNING)
        root = logging.getLogger("cbmt")

        assert root.level == logging.WARNING
        assert root.handlers == handlers
        assert isinstance(handlers[0].formatter, colorlog.ColoredFormatter)

    def test_setup_replaces_handlers(self):
        """Repeated setup does not stack handlers."""
        setup_logging(level=logging.INFO)
        setup_logging(level=logging.INFO)

        assert len(logging.getLogger("cbmt").handlers) == 1

    def test_setup_with_file(self, tmp_path):
        """File logging writes into the given directory."""
        setup_logging(level=logging.DEBUG, log_dir=str(tmp_path / "logs"), log_to_file=True)
        get_logger("test").debug("hello file")
        for handler in logging.getLogger("cbmt").handlers:
            handler.flush()

        log_file = tmp_path / "logs" / "cbmt.log"
        assert log_file.exists()
        assert "hello file" in log_file.read_text()

        # Restore console-only logging for later tests
        setup_logging(level=logging.INFO)
        assert len(logging.getLogger("cbmt").handlers) == 1
