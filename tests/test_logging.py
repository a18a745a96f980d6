import logging
import pytest
from unittest.mock import MagicMock, patch
from rich.console import Console
from rich.logging import RichHandler

from radarmerge.utils.logging import setup_logging, log_memory_usage


def test_setup_logging_defaults():
    logger = setup_logging({})
    assert logger.name == "radarmerge"
    rich_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert rich_handlers[0].level == logging.WARNING


def test_setup_logging_verbose():
    setup_logging({}, verbose=1)
    rich_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
    assert rich_handlers[0].level == logging.INFO

    setup_logging({}, verbose=2)
    rich_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
    assert rich_handlers[0].level == logging.DEBUG


def test_setup_logging_uses_console():
    console = Console()
    with patch("radarmerge.utils.logging.RichHandler") as mock_handler:
        mock_handler.return_value.level = logging.DEBUG
        setup_logging({}, verbose=2, console=console)
        _, kwargs = mock_handler.call_args
        assert kwargs["console"] is console
        assert kwargs["level"] == logging.DEBUG


def test_setup_logging_file(tmp_path):
    log_file = tmp_path / "logs" / "test.log"
    cfg = {"file": str(log_file), "level": "DEBUG"}

    logger = setup_logging(cfg, verbose=0)
    logging.getLogger("radarmerge.manager").debug("Test debug message")

    for h in logging.getLogger().handlers:
        h.flush()

    file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].level == logging.DEBUG
    assert log_file.exists()
    assert "Test debug message" in log_file.read_text()


def test_setup_logging_bad_level_falls_back():
    setup_logging({"level": "chatty", "file": None})
    assert logging.getLogger().handlers


def test_log_memory_usage():
    logger = MagicMock()

    with patch("psutil.Process") as mock_process:
        mock_mem = MagicMock()
        mock_mem.rss = 1024 * 1024 * 10  # 10 MB
        mock_mem.vms = 1024 * 1024 * 20  # 20 MB
        mock_process.return_value.memory_info.return_value = mock_mem

        log_memory_usage(logger, "test_context")

        logger.info.assert_called_once()
        args = logger.info.call_args[0][0]
        assert "Memory Usage [test_context]" in args
        assert "RSS=10.0 MB" in args
        assert "VMS=20.0 MB" in args


def test_log_memory_usage_import_error():
    logger = MagicMock()
    with patch.dict("sys.modules", {"psutil": None}):
        log_memory_usage(logger)
        logger.info.assert_not_called()
        logger.warning.assert_not_called()


def test_log_memory_usage_exception():
    logger = MagicMock()
    with patch("psutil.Process", side_effect=Exception("Boom")):
        log_memory_usage(logger)
        logger.warning.assert_called_once()
