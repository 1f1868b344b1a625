import pytest
import logging
import common.logging
from common.logging import setup_logging, get_logger, get_or_setup_logger


@pytest.fixture(autouse=True)
def reset_logger(monkeypatch):
    """Start every test with an unconfigured module logger."""
    monkeypatch.setattr(common.logging, "logger", None)
    yield
    pickpocket_logger = logging.getLogger(common.logging.LOGGER_NAME)
    for handler in pickpocket_logger.handlers[:]:
        pickpocket_logger.removeHandler(handler)
        handler.close()


class TestLogging:
    """Tests for the logging module."""

    def test_setup_logging_console_only(self):
        """Test that setup_logging configures logging with console output only."""
        setup_logging()
        logger = get_logger()

        assert logger.name == "pickpocket"
        assert logger.level == logging.INFO

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        console_handlers = [h for h in logger.handlers if not isinstance(h, logging.FileHandler)]
        assert len(console_handlers) == 1
        assert len(file_handlers) == 0

    def test_setup_logging_with_file(self, tmp_path):
        """Test that setup_logging also writes to a log file."""
        log_file = tmp_path / "pickpocket.log"
        setup_logging(str(log_file))
        logger = get_logger()

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(log_file)

        logger.info("hello from the test")
        file_handlers[0].flush()
        assert "hello from the test" in log_file.read_text(encoding="utf-8")

    def test_setup_logging_twice_does_not_duplicate_handlers(self):
        """Test that repeated setup replaces the handlers."""
        setup_logging()
        setup_logging()
        assert len(get_logger().handlers) == 1

    def test_get_logger_without_setup(self):
        """Test that get_logger raises a RuntimeError if setup_logging hasn't been called."""
        with pytest.raises(RuntimeError) as excinfo:
            get_logger()
        assert "Logger not initialized" in str(excinfo.value)

    def test_get_or_setup_logger(self):
        """Test that get_or_setup_logger configures logging when needed."""
        logger = get_or_setup_logger()
        assert logger is get_logger()

    def test_setup_logging_invalid_file(self, tmp_path, capsys):
        """Test that setup_logging falls back to the console when the log file cannot be opened."""
        setup_logging(str(tmp_path / "missing" / "pickpocket.log"))

        captured = capsys.readouterr()
        assert "Could not set up logging to file" in captured.out
        assert len(get_logger().handlers) == 1
